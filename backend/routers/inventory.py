import logging
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_manager, current_profile
from core.errors import StockServiceError, to_http_exception
from db.database import get_async_session
from db.profile import Profile
from schemas.inventory import InventoryTransferCreate, StockReceiptCreate, TransactionOut
from services.inventory import get_inventory, receive_stock, transfer_stock

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[Dict])
async def list_inventory(
    location_id: Optional[UUID] = None,
    profile: Profile = Depends(current_profile),
    db: AsyncSession = Depends(get_async_session),
):
    """
    Stock rows of the caller's organization.

    - managers see every location (optionally filtered by location_id)
    - staff only see their assigned location
    """
    if not profile.is_manager:
        location_id = profile.assigned_location_id
        if location_id is None:
            return []
    return await get_inventory(db, profile.organization_id, location_id)


@router.post("/transfers", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    payload: InventoryTransferCreate,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await transfer_stock(
            db,
            payload.product_id,
            payload.from_location_id,
            payload.to_location_id,
            payload.quantity,
            profile.id,
            profile.organization_id,
        )
    except StockServiceError as e:
        logger.warning("create_transfer rejected: %s", e)
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("create_transfer failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to create transfer: {e}")


@router.post("/receipts", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def create_receipt(
    payload: StockReceiptCreate,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await receive_stock(
            db,
            profile.organization_id,
            payload.product_id,
            payload.location_id,
            payload.quantity,
            profile.id,
        )
    except StockServiceError as e:
        logger.warning("create_receipt rejected: %s", e)
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("create_receipt failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to receive stock: {e}")
