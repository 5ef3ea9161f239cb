"""
Inventory reads and stock movements.

Each mutating function runs as one database transaction: the inventory rows it
changes are read with SELECT ... FOR UPDATE, and any failure rolls back every
write made so far.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InsufficientStockError, InvalidOperationError, NotFoundError
from db.inventory import InventoryStock, Transaction
from db.organization import Location
from db.product import Product

logger = logging.getLogger(__name__)


def _as_decimal(x) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x))


async def get_inventory(
    db: AsyncSession,
    organization_id: UUID,
    location_id: Optional[UUID] = None,
) -> List[dict]:
    """
    All inventory rows of an organization with product and location fields.

    - location_id optionally narrows the result to one location (staff view).
    """
    stmt = (
        select(InventoryStock, Product, Location)
        .join(Product, InventoryStock.product_id == Product.id)
        .join(Location, InventoryStock.location_id == Location.id)
        .where(InventoryStock.organization_id == organization_id)
    )
    if location_id:
        stmt = stmt.where(InventoryStock.location_id == location_id)

    res = await db.execute(stmt.order_by(func.lower(Product.name).asc(), Location.name.asc()))
    out = []
    for st, prod, loc in res.all():
        out.append({
            "id": st.id,
            "quantity": float(st.quantity or 0),
            "location_id": st.location_id,
            "product_id": st.product_id,
            "products": {
                "id": prod.id,
                "name": prod.name,
                "cost_price": float(prod.cost_price or 0),
                "selling_price": float(prod.selling_price or 0),
                "category": prod.category,
                "unit": prod.unit,
            },
            "locations": {
                "id": loc.id,
                "name": loc.name,
                "type": loc.type,
            },
        })
    return out


async def org_product(db: AsyncSession, organization_id: UUID, product_id: UUID) -> Product:
    product = await db.get(Product, product_id)
    if product is None or product.organization_id != organization_id:
        raise NotFoundError("Product not found")
    return product


async def org_location(db: AsyncSession, organization_id: UUID, location_id: Optional[UUID]) -> Location:
    loc = await db.get(Location, location_id) if location_id is not None else None
    if loc is None or loc.organization_id != organization_id:
        raise NotFoundError("Location not found")
    return loc


async def locked_stock(db: AsyncSession, product_id: UUID, location_id: UUID) -> Optional[InventoryStock]:
    res = await db.execute(
        select(InventoryStock)
        .where(
            InventoryStock.product_id == product_id,
            InventoryStock.location_id == location_id,
        )
        .with_for_update()
    )
    return res.scalar_one_or_none()


def check_transfer_args(from_location_id: UUID, to_location_id: UUID, quantity: Decimal) -> None:
    if quantity <= 0:
        raise InvalidOperationError("Quantity must be positive")
    if from_location_id == to_location_id:
        raise InvalidOperationError("Source and destination locations must differ")


async def check_available(
    db: AsyncSession,
    product_id: UUID,
    location_id: UUID,
    quantity: Decimal,
    item: str = "transfer",
) -> InventoryStock:
    """Locked source row holding at least `quantity`, else InsufficientStockError naming `item`."""
    stock = await locked_stock(db, product_id, location_id)
    if stock is None:
        raise InsufficientStockError(item, available=0, requested=quantity)
    if stock.quantity < quantity:
        raise InsufficientStockError(item, available=stock.quantity, requested=quantity)
    return stock


async def load_transfer(
    db: AsyncSession,
    organization_id: UUID,
    product_id: UUID,
    from_location_id: Optional[UUID],
    to_location_id: Optional[UUID],
) -> Product:
    """Product of a transfer, once it and both locations are known to belong to the organization."""
    if from_location_id is None or to_location_id is None:
        raise InvalidOperationError("Transfer location no longer exists")
    product = await org_product(db, organization_id, product_id)
    await org_location(db, organization_id, from_location_id)
    await org_location(db, organization_id, to_location_id)
    return product


async def apply_transfer(
    db: AsyncSession,
    *,
    product_id: UUID,
    from_location_id: UUID,
    to_location_id: UUID,
    quantity: Decimal,
    user_id: Optional[UUID],
    organization_id: UUID,
) -> Transaction:
    """Move stock and append the transfer record. Does not commit."""
    product = await load_transfer(db, organization_id, product_id, from_location_id, to_location_id)
    source = await check_available(db, product_id, from_location_id, quantity, product.name)
    source.quantity = source.quantity - quantity

    dest = await locked_stock(db, product_id, to_location_id)
    if dest is not None:
        dest.quantity = dest.quantity + quantity
    else:
        db.add(
            InventoryStock(
                organization_id=organization_id,
                product_id=product_id,
                location_id=to_location_id,
                quantity=quantity,
            )
        )

    txn = Transaction(
        organization_id=organization_id,
        user_id=user_id,
        product_id=product_id,
        from_location_id=from_location_id,
        to_location_id=to_location_id,
        type="transfer",
        quantity=quantity,
        # Transfers are internal movements and carry no value.
        total_value=Decimal("0"),
    )
    db.add(txn)
    await db.flush()
    return txn


async def transfer_stock(
    db: AsyncSession,
    product_id: UUID,
    from_location_id: UUID,
    to_location_id: UUID,
    quantity,
    user_id: Optional[UUID],
    organization_id: UUID,
) -> Transaction:
    """
    Move `quantity` of a product between two locations.

    Decrements the source row, increments (or creates) the destination row and
    appends one 'transfer' transaction with total_value 0, all in one commit.
    """
    qty = _as_decimal(quantity)
    check_transfer_args(from_location_id, to_location_id, qty)

    try:
        txn = await apply_transfer(
            db,
            product_id=product_id,
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            quantity=qty,
            user_id=user_id,
            organization_id=organization_id,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "transferred %s of product %s from %s to %s (transaction %s)",
        qty, product_id, from_location_id, to_location_id, txn.id,
    )
    return txn


async def receive_stock(
    db: AsyncSession,
    organization_id: UUID,
    product_id: UUID,
    location_id: UUID,
    quantity,
    user_id: Optional[UUID],
) -> Transaction:
    """Add delivered stock at a location and record a 'receipt' valued at cost."""
    qty = _as_decimal(quantity)
    if qty <= 0:
        raise InvalidOperationError("Quantity must be positive")

    try:
        product = await org_product(db, organization_id, product_id)
        await org_location(db, organization_id, location_id)

        stock = await locked_stock(db, product_id, location_id)
        if stock is not None:
            stock.quantity = stock.quantity + qty
        else:
            db.add(
                InventoryStock(
                    organization_id=organization_id,
                    product_id=product_id,
                    location_id=location_id,
                    quantity=qty,
                )
            )

        txn = Transaction(
            organization_id=organization_id,
            user_id=user_id,
            product_id=product_id,
            to_location_id=location_id,
            type="receipt",
            quantity=qty,
            total_value=qty * _as_decimal(product.cost_price or 0),
        )
        db.add(txn)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("received %s of product %s at %s", qty, product_id, location_id)
    return txn
