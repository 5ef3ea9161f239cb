"""
Approval queue for stock transfer requests.

A request is a transaction of type 'pending'. Answering it sets the type to
'approved' or 'rejected'; approving also performs the transfer itself.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from core.errors import ApprovalStateError, InvalidOperationError, NotFoundError
from db.inventory import Transaction
from db.organization import Location
from db.product import Product
from services.inventory import apply_transfer, check_available, check_transfer_args, load_transfer

logger = logging.getLogger(__name__)

PENDING = "pending"
RESPONSES = ("approved", "rejected")


async def request_transfer(
    db: AsyncSession,
    product_id: UUID,
    from_location_id: UUID,
    to_location_id: UUID,
    quantity,
    user_id: Optional[UUID],
    organization_id: UUID,
) -> Transaction:
    """Queue a transfer for approval. Stock is checked but not moved."""
    qty = Decimal(str(quantity))
    check_transfer_args(from_location_id, to_location_id, qty)

    try:
        product = await load_transfer(db, organization_id, product_id, from_location_id, to_location_id)
        await check_available(db, product_id, from_location_id, qty, product.name)
        txn = Transaction(
            organization_id=organization_id,
            user_id=user_id,
            product_id=product_id,
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            type=PENDING,
            quantity=qty,
            total_value=Decimal("0"),
        )
        db.add(txn)
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("transfer request %s queued by %s", txn.id, user_id)
    return txn


async def get_pending_approvals(db: AsyncSession, organization_id: UUID) -> List[dict]:
    """
    Pending requests of an organization, oldest first.

    An empty list means nothing is pending; query failures raise.
    """
    FromLoc = aliased(Location)
    ToLoc = aliased(Location)
    stmt = (
        select(Transaction, Product.name, FromLoc.name, ToLoc.name)
        .join(Product, Transaction.product_id == Product.id)
        .outerjoin(FromLoc, Transaction.from_location_id == FromLoc.id)
        .outerjoin(ToLoc, Transaction.to_location_id == ToLoc.id)
        .where(Transaction.organization_id == organization_id)
        .where(Transaction.type == PENDING)
        .order_by(Transaction.created_at.asc())
    )
    res = await db.execute(stmt)
    out = []
    for txn, product_name, from_name, to_name in res.all():
        out.append({
            "id": txn.id,
            "product_id": txn.product_id,
            "from_location_id": txn.from_location_id,
            "to_location_id": txn.to_location_id,
            "quantity": txn.quantity,
            "requested_by": txn.user_id,
            "created_at": txn.created_at,
            "products": {"name": product_name},
            "from_loc": {"name": from_name},
            "to_loc": {"name": to_name},
        })
    return out


async def respond_to_approval(
    db: AsyncSession,
    transaction_id: UUID,
    status: str,
    user_id: Optional[UUID],
    organization_id: Optional[UUID] = None,
) -> Transaction:
    """Answer a pending request; `organization_id` restricts which requests are visible."""
    if status not in RESPONSES:
        raise InvalidOperationError(f"status must be one of {', '.join(RESPONSES)}")

    try:
        res = await db.execute(
            select(Transaction).where(Transaction.id == transaction_id).with_for_update()
        )
        txn = res.scalar_one_or_none()
        if txn is None or (organization_id and txn.organization_id != organization_id):
            raise NotFoundError("Transfer request not found")
        if txn.type != PENDING:
            raise ApprovalStateError(f"Request already {txn.type}")

        if status == "approved":
            # Locations deleted since the request leave a NULL id behind.
            await apply_transfer(
                db,
                product_id=txn.product_id,
                from_location_id=txn.from_location_id,
                to_location_id=txn.to_location_id,
                quantity=txn.quantity,
                user_id=user_id,
                organization_id=txn.organization_id,
            )

        txn.type = status
        txn.approved_by = user_id
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("transfer request %s %s by %s", transaction_id, status, user_id)
    return txn
