import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_manager, current_profile
from core.errors import StockServiceError, to_http_exception
from db.database import get_async_session
from db.profile import Profile
from schemas.approvals import ApprovalResponse, PendingApprovalOut
from schemas.inventory import InventoryTransferCreate, TransactionOut
from services.approvals import get_pending_approvals, request_transfer, respond_to_approval

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
async def create_transfer_request(
    payload: InventoryTransferCreate,
    profile: Profile = Depends(current_profile),
    db: AsyncSession = Depends(get_async_session),
):
    """Any member may ask for stock to be moved; a manager approves it."""
    try:
        return await request_transfer(
            db,
            payload.product_id,
            payload.from_location_id,
            payload.to_location_id,
            payload.quantity,
            profile.id,
            profile.organization_id,
        )
    except StockServiceError as e:
        logger.warning("create_transfer_request rejected: %s", e)
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("create_transfer_request failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to request transfer: {e}")


@router.get("/pending", response_model=List[PendingApprovalOut])
async def list_pending(
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    return await get_pending_approvals(db, profile.organization_id)


@router.post("/{request_id}/respond", response_model=TransactionOut)
async def respond(
    request_id: UUID,
    payload: ApprovalResponse,
    profile: Profile = Depends(current_manager),
    db: AsyncSession = Depends(get_async_session),
):
    try:
        return await respond_to_approval(
            db, request_id, payload.status, profile.id, organization_id=profile.organization_id
        )
    except StockServiceError as e:
        logger.warning("respond_to_approval rejected: %s", e)
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("respond_to_approval failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to respond: {e}")
