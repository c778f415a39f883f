"""관리자 특별일 라우터 — 휴일/특별 근무일 API.

Admin Special Day Router — Holidays, custom-hours days and overtime days.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import require_admin
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.schemas.schedule import SpecialDayListResponse, SpecialDayResponse, SpecialDayUpsert
from teacher_attendance.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=SpecialDayListResponse)
async def list_special_days(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    month: str | None = None,
) -> dict:
    """특별일 목록을 조회합니다. ``month``("YYYY-MM")로 월 필터.

    List special days by date, optionally for one month.
    """
    special_days = await schedule_service.list_special_days(db, month)
    return {"data": [schedule_service.build_special_day_response(sd) for sd in special_days]}


@router.post("", response_model=SpecialDayResponse, status_code=201)
async def upsert_special_day(
    data: SpecialDayUpsert,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """특별일을 등록합니다. 같은 날짜의 기존 특별일은 교체됩니다.

    Create or replace the special day for a date.
    """
    special_day = await schedule_service.upsert_special_day(db, data)
    await db.commit()
    return schedule_service.build_special_day_response(special_day)


@router.delete("/{special_day_id}", status_code=204)
async def delete_special_day(
    special_day_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> None:
    """특별일을 삭제합니다 — Delete a special day."""
    await schedule_service.delete_special_day(db, special_day_id)
    await db.commit()
