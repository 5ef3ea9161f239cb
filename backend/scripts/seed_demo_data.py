"""
Seed a demo organization: a manager account, locations, products and opening stock.

Run locally (after `pip install -e .`):
  python backend/scripts/seed_demo_data.py --email manager@camp.co.tz --password secret123

It uses the same DATABASE_* env vars as the backend (dotenv supported by core.config).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy import select

from core.auth import UserManager
from db.database import async_session_maker, create_db_and_tables
from db.users import User
from services.auth import login, register
from services.inventory import receive_stock
from services.setup import create_location, create_organization, create_product

logger = logging.getLogger("seed_demo_data")


@dataclass(frozen=True)
class SeedProduct:
    name: str
    unit: str
    selling_price: Decimal
    cost_price: Decimal
    category: Optional[str] = None
    opening_stock: Decimal = Decimal("0")


SEED_LOCATIONS = [
    ("Main Store", "main_store"),
    ("Baobab Ruaha Camp", "camp_store"),
    ("Kitchen & Bar", "department"),
]

SEED_PRODUCTS: list[SeedProduct] = [
    SeedProduct("Kilimanjaro Lager 500ml", "bottle", Decimal("3500"), Decimal("2200"), "Beer", Decimal("240")),
    SeedProduct("Konyagi 750ml", "bottle", Decimal("18000"), Decimal("12500"), "Spirits", Decimal("36")),
    SeedProduct("Coca-Cola 350ml", "bottle", Decimal("1500"), Decimal("900"), "Soft drinks", Decimal("120")),
    SeedProduct("Rice", "kg", Decimal("0"), Decimal("2800"), "Dry goods", Decimal("50")),
]


async def main(email: str, password: str, org_name: str) -> None:
    await create_db_and_tables()

    async with async_session_maker() as db:
        user_manager = UserManager(SQLAlchemyUserDatabase(db, User))

        res = await db.execute(select(User).where(User.email == email))
        user = res.scalar_one_or_none()
        if user is None:
            user = await register(user_manager, email, password, "Demo Manager")
            logger.info("registered %s", email)

        org = await create_organization(db, org_name, user.id)

        locations = {}
        for name, loc_type in SEED_LOCATIONS:
            locations[loc_type] = await create_location(db, org.id, name, loc_type)

        main_store = locations["main_store"]
        for p in SEED_PRODUCTS:
            product = await create_product(
                db,
                org.id,
                p.name,
                p.unit,
                selling_price=p.selling_price,
                cost_price=p.cost_price,
                category=p.category,
            )
            if p.opening_stock > 0:
                await receive_stock(db, org.id, product.id, main_store.id, p.opening_stock, user.id)

        session = await login(user_manager, email, password)

    print(f"Seeded organization {org.name} ({org.id})")
    print(f"Bearer token for {email}: {session['access_token']}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--org-name", default="Baobab Camps")
    args = parser.parse_args()
    asyncio.run(main(args.email, args.password, args.org_name))
