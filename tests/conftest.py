"""
Pytest fixtures for the camp stock test suite.

Every scenario runs with asyncio.run() against its own SQLite file
(sqlite+aiosqlite) built from Base.metadata, so no PostgreSQL is needed.
"""

import asyncio
import os
import uuid
from dataclasses import dataclass
from decimal import Decimal

# Must be set before core.config is imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "camp-stock-test-secret-0123456789abcdef")

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from db.database import Base, load_models
from db.inventory import InventoryStock, Transaction
from db.organization import Location, Organization
from db.product import Product
from db.profile import Profile

load_models()


@dataclass
class World:
    """Ids of the seeded organization (plain values, safe to use after a rollback)."""
    org_id: uuid.UUID
    other_org_id: uuid.UUID
    main_store_id: uuid.UUID
    camp_id: uuid.UUID
    bar_id: uuid.UUID
    beer_id: uuid.UUID
    soda_id: uuid.UUID
    rice_id: uuid.UUID
    manager_id: uuid.UUID
    staff_id: uuid.UUID
    outsider_id: uuid.UUID


async def seed_world(db) -> World:
    w = World(*(uuid.uuid4() for _ in range(11)))

    db.add_all([
        Organization(id=w.org_id, name="Baobab Camps"),
        Organization(id=w.other_org_id, name="Other Lodge"),
    ])
    db.add_all([
        Location(id=w.main_store_id, organization_id=w.org_id, name="MAIN STORE", type="main_store"),
        Location(id=w.camp_id, organization_id=w.org_id, name="RUAHA CAMP", type="camp_store"),
        Location(id=w.bar_id, organization_id=w.org_id, name="BAR", type="department"),
    ])
    db.add_all([
        Product(id=w.beer_id, organization_id=w.org_id, name="Kilimanjaro Lager", unit="bottle",
                selling_price=Decimal("3500"), cost_price=Decimal("2200"), category="Beer"),
        Product(id=w.soda_id, organization_id=w.org_id, name="Coca-Cola", unit="bottle",
                selling_price=Decimal("1500"), cost_price=Decimal("900")),
        Product(id=w.rice_id, organization_id=w.org_id, name="Rice", unit="kg",
                selling_price=Decimal("0"), cost_price=Decimal("2800")),
    ])
    db.add_all([
        InventoryStock(organization_id=w.org_id, product_id=w.beer_id, location_id=w.main_store_id, quantity=Decimal("10")),
        InventoryStock(organization_id=w.org_id, product_id=w.beer_id, location_id=w.bar_id, quantity=Decimal("5")),
        InventoryStock(organization_id=w.org_id, product_id=w.soda_id, location_id=w.bar_id, quantity=Decimal("3")),
        InventoryStock(organization_id=w.org_id, product_id=w.rice_id, location_id=w.main_store_id, quantity=Decimal("20")),
    ])
    db.add_all([
        Profile(id=w.manager_id, email="manager@camp.co.tz", full_name="Asha Manager", role="manager",
                organization_id=w.org_id, assigned_location_id=w.main_store_id),
        Profile(id=w.staff_id, email="barman@camp.co.tz", full_name="Juma Barman", role="staff",
                organization_id=w.org_id, assigned_location_id=w.bar_id),
        Profile(id=w.outsider_id, email="new@camp.co.tz", full_name="Neema New", role="staff"),
    ])
    await db.commit()
    return w


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'campstock.db'}"


@pytest.fixture
def run_db(db_url):
    """Return a runner executing `scenario(session)` in a fresh event loop."""

    def _run(scenario):
        async def _main():
            engine = create_async_engine(db_url, poolclass=NullPool)
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            maker = async_sessionmaker(engine, expire_on_commit=False)
            try:
                async with maker() as session:
                    return await scenario(session)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return _run


@pytest.fixture
def world(run_db) -> World:
    return run_db(seed_world)


async def stock_qty(db, product_id, location_id):
    return await db.scalar(
        select(InventoryStock.quantity).where(
            InventoryStock.product_id == product_id,
            InventoryStock.location_id == location_id,
        )
    )


async def transactions(db, type=None):
    stmt = select(Transaction).order_by(Transaction.created_at.asc())
    if type is not None:
        stmt = stmt.where(Transaction.type == type)
    return list((await db.execute(stmt)).scalars().all())


async def foreign_location(db, world) -> uuid.UUID:
    """A store belonging to the second organization."""
    loc = Location(organization_id=world.other_org_id, name="LODGE STORE", type="main_store")
    db.add(loc)
    await db.commit()
    return loc.id
