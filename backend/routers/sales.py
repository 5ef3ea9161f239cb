import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_profile
from core.errors import StockServiceError, to_http_exception
from core.formatting import format_currency
from db.database import get_async_session
from db.profile import Profile
from schemas.sales import SaleCreate, SaleOut
from services.sales import process_bar_sale

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
async def create_sale(
    payload: SaleCreate,
    profile: Profile = Depends(current_profile),
    db: AsyncSession = Depends(get_async_session),
):
    """Sell a cart from one location. Nothing is kept if any line is short on stock."""
    if not profile.is_manager and profile.assigned_location_id != payload.location_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")

    try:
        total = await process_bar_sale(
            db, profile.organization_id, payload.location_id, payload.items, profile.id
        )
    except StockServiceError as e:
        logger.warning("create_sale rejected: %s", e)
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("create_sale failed")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to process sale: {e}")

    return {"success": True, "total": float(total), "total_display": format_currency(total)}
