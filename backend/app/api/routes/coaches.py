"""
Coach endpoints. The public listing is cached in Redis.

Writes commit before the cached listing is dropped, so a listing rebuilt in
between cannot put the old rows back for a whole TTL.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.security import require_admin
from app.db.session import get_db
from app.schemas.catalog import CoachCreate, CoachResponse, CoachUpdate
from app.services.cache_service import get_cached_list, set_cached_list, invalidate_catalog_cache
from app.services.catalog_service import (
    create_coach, deactivate_coach, get_coach, list_coaches, update_coach,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/coaches", tags=["Coaches"])


async def _commit_and_invalidate(db: AsyncSession) -> None:
    await db.commit()
    await invalidate_catalog_cache("coaches")


@router.get("", response_model=list[CoachResponse])
async def list_coaches_endpoint(db: AsyncSession = Depends(get_db)):
    cached = await get_cached_list("coaches")
    if cached is not None:
        logger.info("coaches_list_cache_hit")
        return cached

    coaches = await list_coaches(db)
    data = [CoachResponse.model_validate(c).model_dump(mode="json") for c in coaches]
    await set_cached_list("coaches", data)
    return data


@router.get("/{coach_id}", response_model=CoachResponse)
async def get_coach_endpoint(coach_id: int, db: AsyncSession = Depends(get_db)):
    """Deactivated coaches are not shown publicly."""
    return await get_coach(db, coach_id, active_only=True)


@router.post(
    "",
    response_model=CoachResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_coach_endpoint(coach_data: CoachCreate, db: AsyncSession = Depends(get_db)):
    coach = await create_coach(db, coach_data)
    await _commit_and_invalidate(db)
    return coach


@router.put("/{coach_id}", response_model=CoachResponse, dependencies=[Depends(require_admin)])
async def update_coach_endpoint(
    coach_id: int,
    coach_data: CoachUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update; `is_active: true` brings a deactivated coach back."""
    coach = await update_coach(db, coach_id, coach_data)
    await _commit_and_invalidate(db)
    return coach


@router.delete("/{coach_id}", response_model=CoachResponse, dependencies=[Depends(require_admin)])
async def deactivate_coach_endpoint(coach_id: int, db: AsyncSession = Depends(get_db)):
    """Soft delete. Existing bookings are kept; new ones are refused."""
    coach = await deactivate_coach(db, coach_id)
    await _commit_and_invalidate(db)
    return coach
