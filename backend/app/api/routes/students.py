"""
Student endpoints: public enrolment, admin lookup.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import require_admin
from app.db.session import get_db
from app.schemas.catalog import StudentCreate, StudentResponse
from app.services.catalog_service import create_student, get_student, list_students

router = APIRouter(prefix="/students", tags=["Students"])


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student_endpoint(student_data: StudentCreate, db: AsyncSession = Depends(get_db)):
    """Register a student so they can be booked into a program."""
    return await create_student(db, student_data)


@router.get("", response_model=list[StudentResponse], dependencies=[Depends(require_admin)])
async def list_students_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await list_students(db, page, limit)


@router.get("/{student_id}", response_model=StudentResponse, dependencies=[Depends(require_admin)])
async def get_student_endpoint(student_id: int, db: AsyncSession = Depends(get_db)):
    return await get_student(db, student_id)
