from decimal import Decimal
import uuid

import pytest

from conftest import foreign_location
from core.errors import InvalidOperationError, NotFoundError
from db.profile import Profile
from services.setup import (
    add_staff_member,
    assign_staff,
    create_location,
    create_organization,
    create_product,
    get_locations,
    get_products,
    get_staff,
)


def test_create_location_upper_cases_name(run_db, world):
    async def scenario(db):
        loc = await create_location(db, world.org_id, "  kitchen ", "department", parent_id=world.camp_id)
        return loc.name, loc.type, loc.parent_location_id

    name, loc_type, parent = run_db(scenario)
    assert name == "KITCHEN"
    assert loc_type == "department"
    assert parent == world.camp_id


def test_create_location_allows_duplicate_names(run_db, world):
    async def scenario(db):
        await create_location(db, world.org_id, "bar", "department")
        return [loc.name for loc in await get_locations(db, world.org_id)]

    names = run_db(scenario)
    assert names.count("BAR") == 2
    assert names == sorted(names)


@pytest.mark.parametrize("name,loc_type", [("   ", "department"), ("Shop", "warehouse")])
def test_create_location_rejects_bad_input(run_db, world, name, loc_type):
    async def scenario(db):
        await create_location(db, world.org_id, name, loc_type)

    with pytest.raises(InvalidOperationError):
        run_db(scenario)


def test_get_staff_ordered_by_name(run_db, world):
    async def scenario(db):
        return [p.full_name for p in await get_staff(db, world.org_id)]

    assert run_db(scenario) == ["Asha Manager", "Juma Barman"]


def test_create_organization_makes_owner_manager(run_db, world):
    async def scenario(db):
        org = await create_organization(db, "Serengeti Tents", world.outsider_id)
        profile = await db.get(Profile, world.outsider_id)
        return org.id, org.name, profile.organization_id, profile.role

    org_id, name, profile_org, role = run_db(scenario)
    assert name == "Serengeti Tents"
    assert profile_org == org_id
    assert role == "manager"


def test_create_organization_unknown_owner(run_db, world):
    async def scenario(db):
        await create_organization(db, "Ghost Camp", uuid.uuid4())

    with pytest.raises(NotFoundError):
        run_db(scenario)


def test_assign_staff_location_and_role(run_db, world):
    async def scenario(db):
        p = await assign_staff(db, world.org_id, world.staff_id, world.camp_id, role="manager")
        return p.assigned_location_id, p.role

    assert run_db(scenario) == (world.camp_id, "manager")


def test_assign_staff_rejects_foreign_profile_and_location(run_db, world):
    async def foreign_profile(db):
        await assign_staff(db, world.org_id, world.outsider_id, world.bar_id)

    async def other_org_location(db):
        await assign_staff(db, world.other_org_id, world.staff_id, world.bar_id)

    async def bad_role(db):
        await assign_staff(db, world.org_id, world.staff_id, world.bar_id, role="owner")

    with pytest.raises(NotFoundError):
        run_db(foreign_profile)
    with pytest.raises(NotFoundError):
        run_db(other_org_location)
    with pytest.raises(InvalidOperationError):
        run_db(bad_role)


def test_add_staff_member(run_db, world):
    async def scenario(db):
        p = await add_staff_member(db, world.org_id, world.outsider_id)
        return p.organization_id, p.role

    assert run_db(scenario) == (world.org_id, "staff")


def test_add_staff_member_from_other_organization(run_db, world):
    async def scenario(db):
        await add_staff_member(db, world.other_org_id, world.staff_id)

    with pytest.raises(InvalidOperationError):
        run_db(scenario)


def test_create_and_list_products(run_db, world):
    async def scenario(db):
        await create_product(db, world.org_id, "Amarula", "bottle", selling_price=Decimal("45000"),
                             cost_price=Decimal("32000"), category="Spirits")
        return [(p.name, p.cost_price) for p in await get_products(db, world.org_id)]

    products = run_db(scenario)
    assert [name for name, _ in products] == ["Amarula", "Coca-Cola", "Kilimanjaro Lager", "Rice"]
    assert products[0][1] == 32000


def test_create_location_under_another_organizations_parent(run_db, world):
    async def scenario(db):
        lodge_id = await foreign_location(db, world)
        with pytest.raises(NotFoundError):
            await create_location(db, world.org_id, "Annex", "camp_store", parent_id=lodge_id)
        return [loc.name for loc in await get_locations(db, world.org_id)]

    assert "ANNEX" not in run_db(scenario)
