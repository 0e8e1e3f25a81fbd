"""
Catalog service: coaches, programs and students referenced by bookings.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.coach import Coach
from app.models.program import Program
from app.models.student import Student
from app.schemas.catalog import CoachCreate, CoachUpdate, ProgramCreate, ProgramUpdate, StudentCreate
from app.core.exceptions import Conflict, NotFound
from app.core.logging import get_logger

logger = get_logger(__name__)


async def create_coach(db: AsyncSession, coach_data: CoachCreate) -> Coach:
    """Create a coach. Raises 409 if the email is already in use."""
    email = coach_data.email.lower()
    existing = await db.execute(select(Coach.id).where(Coach.email == email))
    if existing.scalar_one_or_none() is not None:
        raise Conflict("A coach with this email already exists")

    coach = Coach(**coach_data.model_dump(exclude={"email"}), email=email)
    db.add(coach)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        raise Conflict("A coach with this email already exists") from e
    await db.refresh(coach)

    logger.info("coach_created", coach_id=coach.id, name=coach.name)
    return coach


async def get_coach(db: AsyncSession, coach_id: int, active_only: bool = False) -> Coach:
    coach = await db.get(Coach, coach_id)
    if not coach or (active_only and not coach.is_active):
        raise NotFound("Coach not found")
    return coach


async def update_coach(db: AsyncSession, coach_id: int, coach_data: CoachUpdate) -> Coach:
    """Apply the non-null fields. Raises 409 if the new email belongs to another coach."""
    coach = await get_coach(db, coach_id)
    changes = coach_data.model_dump(exclude_none=True)

    if "email" in changes:
        changes["email"] = changes["email"].lower()
        taken = await db.execute(
            select(Coach.id).where(Coach.email == changes["email"], Coach.id != coach_id)
        )
        if taken.scalar_one_or_none() is not None:
            raise Conflict("A coach with this email already exists")

    for field, value in changes.items():
        setattr(coach, field, value)
    await db.flush()
    await db.refresh(coach)

    logger.info("coach_updated", coach_id=coach.id, fields=sorted(changes))
    return coach


async def deactivate_coach(db: AsyncSession, coach_id: int) -> Coach:
    """Soft delete: the coach leaves the listing and takes no new bookings."""
    coach = await get_coach(db, coach_id)
    coach.is_active = False
    await db.flush()
    await db.refresh(coach)

    logger.info("coach_deactivated", coach_id=coach.id)
    return coach


async def list_coaches(db: AsyncSession, active_only: bool = True) -> list[Coach]:
    query = select(Coach)
    if active_only:
        query = query.where(Coach.is_active.is_(True))
    result = await db.execute(query.order_by(Coach.name.asc()))
    return list(result.scalars().all())


async def create_program(db: AsyncSession, program_data: ProgramCreate) -> Program:
    program = Program(**program_data.model_dump())
    db.add(program)
    await db.flush()
    await db.refresh(program)

    logger.info("program_created", program_id=program.id, title=program.title)
    return program


async def get_program(db: AsyncSession, program_id: int, active_only: bool = False) -> Program:
    program = await db.get(Program, program_id)
    if not program or (active_only and not program.is_active):
        raise NotFound("Program not found")
    return program


async def update_program(db: AsyncSession, program_id: int, program_data: ProgramUpdate) -> Program:
    program = await get_program(db, program_id)
    changes = program_data.model_dump(exclude_none=True)

    for field, value in changes.items():
        setattr(program, field, value)
    await db.flush()
    await db.refresh(program)

    logger.info("program_updated", program_id=program.id, fields=sorted(changes))
    return program


async def deactivate_program(db: AsyncSession, program_id: int) -> Program:
    program = await get_program(db, program_id)
    program.is_active = False
    await db.flush()
    await db.refresh(program)

    logger.info("program_deactivated", program_id=program.id)
    return program


async def list_programs(db: AsyncSession, active_only: bool = True) -> list[Program]:
    query = select(Program)
    if active_only:
        query = query.where(Program.is_active.is_(True))
    result = await db.execute(query.order_by(Program.title.asc()))
    return list(result.scalars().all())


async def create_student(db: AsyncSession, student_data: StudentCreate) -> Student:
    student = Student(**student_data.model_dump())
    db.add(student)
    await db.flush()
    await db.refresh(student)

    logger.info("student_registered", student_id=student.id)
    return student


async def get_student(db: AsyncSession, student_id: int) -> Student:
    student = await db.get(Student, student_id)
    if not student:
        raise NotFound("Student not found")
    return student


async def list_students(
    db: AsyncSession,
    page: int = 1,
    limit: int = 20,
) -> list[Student]:
    result = await db.execute(
        select(Student)
        .order_by(Student.created_at.desc(), Student.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all())
