"""관리자 근태 라우터 — 교사별 근태 이력 조회 API.

Admin Attendance Router — Per-teacher attendance history for the admin
dashboard.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import require_admin
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.schemas.attendance import TeacherHistoryResponse
from teacher_attendance.services.attendance_service import attendance_service
from teacher_attendance.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


def _parse_date(value: str | None, field_name: str) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequestError(f"잘못된 날짜 형식입니다: {field_name} (Invalid {field_name}, expected YYYY-MM-DD)")


@router.get("/teacher/{teacher_id}", response_model=TeacherHistoryResponse)
async def get_teacher_attendance_history(
    teacher_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    start_date: Annotated[str | None, Query()] = None,
    end_date: Annotated[str | None, Query()] = None,
) -> dict:
    """교사별 근태 이력을 조회합니다 (관리자 전용).

    Attendance history of one teacher, newest date first, with per-status
    counts. Without a range the current month (organization timezone) is
    returned.

    Args:
        teacher_id: 교사 UUID (Teacher UUID)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)
        start_date: 조회 시작일 YYYY-MM-DD, 선택 (Range start)
        end_date: 조회 종료일 YYYY-MM-DD, 선택 (Range end)

    Returns:
        dict: 근태 목록, 집계, 교사 정보 (Records, summary, teacher)
    """
    try:
        teacher_uuid: UUID = UUID(teacher_id)
    except ValueError:
        raise BadRequestError("잘못된 교사 ID입니다 (Invalid teacher ID)")

    teacher, start, end, records = await attendance_service.get_teacher_history(
        db,
        teacher_uuid,
        _parse_date(start_date, "start_date"),
        _parse_date(end_date, "end_date"),
    )
    return attendance_service.build_history_response(teacher, start, end, records)
