import logging
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import InsufficientStockError, InvalidOperationError, NotFoundError
from db.inventory import Transaction
from db.product import Product
from schemas.sales import SaleItem
from services.inventory import locked_stock, org_location

logger = logging.getLogger(__name__)


async def process_bar_sale(
    db: AsyncSession,
    organization_id: UUID,
    location_id: UUID,
    items: Iterable[SaleItem],
    user_id: Optional[UUID],
) -> Decimal:
    """
    Sell a cart from one location and return the sale total.

    Items are processed in input order. Each one decrements stock and appends a
    'sale' transaction worth price * quantity. The whole cart is one commit: if
    any item is short on stock nothing from the sale is kept.
    """
    items = list(items)
    if not items:
        raise InvalidOperationError("Cart is empty")

    total = Decimal("0")
    profit = Decimal("0")
    try:
        await org_location(db, organization_id, location_id)
        for item in items:
            qty = Decimal(str(item.quantity))
            price = Decimal(str(item.price))
            label = item.name or str(item.product_id)
            if qty <= 0:
                raise InvalidOperationError(f"Quantity for {label} must be positive")

            product = await db.get(Product, item.product_id)
            if product is None or product.organization_id != organization_id:
                raise NotFoundError(f"Product not found: {label}")

            stock = await locked_stock(db, item.product_id, location_id)
            if stock is None or stock.quantity < qty:
                raise InsufficientStockError(
                    label,
                    available=stock.quantity if stock is not None else 0,
                    requested=qty,
                )
            stock.quantity = stock.quantity - qty

            line_total = price * qty
            line_profit = line_total - qty * Decimal(str(product.cost_price or 0))
            db.add(
                Transaction(
                    organization_id=organization_id,
                    user_id=user_id,
                    product_id=item.product_id,
                    from_location_id=location_id,
                    type="sale",
                    quantity=qty,
                    total_value=line_total,
                    profit=line_profit,
                )
            )
            total += line_total
            profit += line_profit

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "sale at location %s: %d item(s), total=%s profit=%s",
        location_id, len(items), total, profit,
    )
    return total
