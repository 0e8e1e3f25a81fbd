"""
Program endpoints. The public listing is cached in Redis; writes commit
before the cached listing is dropped.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.security import require_admin
from app.db.session import get_db
from app.schemas.catalog import ProgramCreate, ProgramResponse, ProgramUpdate
from app.services.cache_service import get_cached_list, set_cached_list, invalidate_catalog_cache
from app.services.catalog_service import (
    create_program, deactivate_program, get_program, list_programs, update_program,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/programs", tags=["Programs"])


async def _commit_and_invalidate(db: AsyncSession) -> None:
    await db.commit()
    await invalidate_catalog_cache("programs")


@router.get("", response_model=list[ProgramResponse])
async def list_programs_endpoint(db: AsyncSession = Depends(get_db)):
    cached = await get_cached_list("programs")
    if cached is not None:
        logger.info("programs_list_cache_hit")
        return cached

    programs = await list_programs(db)
    data = [ProgramResponse.model_validate(p).model_dump(mode="json") for p in programs]
    await set_cached_list("programs", data)
    return data


@router.get("/{program_id}", response_model=ProgramResponse)
async def get_program_endpoint(program_id: int, db: AsyncSession = Depends(get_db)):
    return await get_program(db, program_id, active_only=True)


@router.post(
    "",
    response_model=ProgramResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_program_endpoint(program_data: ProgramCreate, db: AsyncSession = Depends(get_db)):
    program = await create_program(db, program_data)
    await _commit_and_invalidate(db)
    return program


@router.put("/{program_id}", response_model=ProgramResponse, dependencies=[Depends(require_admin)])
async def update_program_endpoint(
    program_id: int,
    program_data: ProgramUpdate,
    db: AsyncSession = Depends(get_db),
):
    program = await update_program(db, program_id, program_data)
    await _commit_and_invalidate(db)
    return program


@router.delete("/{program_id}", response_model=ProgramResponse, dependencies=[Depends(require_admin)])
async def deactivate_program_endpoint(program_id: int, db: AsyncSession = Depends(get_db)):
    """Soft delete. The program leaves the listing and takes no new bookings."""
    program = await deactivate_program(db, program_id)
    await _commit_and_invalidate(db)
    return program
