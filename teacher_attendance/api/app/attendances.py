"""앱 근태 라우터 — 교사 본인의 QR 출퇴근 및 근태 기록 API.

App Attendance Router — QR scan for the authenticated teacher, plus
today's record and attendance history.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import get_current_teacher
from teacher_attendance.database import get_db
from teacher_attendance.models.attendance import QRSessionType
from teacher_attendance.models.user import Teacher
from teacher_attendance.schemas.attendance import (
    AttendanceListResponse,
    AttendanceResponse,
    QRCheckRequest,
    QRCheckResponse,
)
from teacher_attendance.services.attendance_service import attendance_service
from teacher_attendance.services.qr_session_service import qr_session_service

router: APIRouter = APIRouter()


@router.post("/attendance/qr/check", response_model=QRCheckResponse)
async def check_qr(
    data: QRCheckRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    teacher: Annotated[Teacher, Depends(get_current_teacher)],
) -> dict:
    """QR 코드를 스캔하여 출근 또는 퇴근을 기록합니다.

    Scan a QR token to record a check-in or check-out for the session's date.

    Args:
        data: QR 스캔 요청 (Scan request with the token)
        db: 비동기 데이터베이스 세션 (Async database session)
        teacher: 인증된 교사 (Authenticated teacher)

    Returns:
        dict: 처리 메시지와 갱신된 근태 기록 (Message and updated record)
    """
    session, attendance = await qr_session_service.check(db, data.token, teacher)
    await db.commit()

    message: str = (
        "Check-in recorded" if session.type == QRSessionType.CHECK_IN.value else "Check-out recorded"
    )
    return {
        "message": message,
        "date": session.date,
        "type": session.type,
        "attendance": attendance_service.build_response(attendance),
    }


@router.get("/my/attendance", response_model=AttendanceListResponse)
async def list_my_attendance(
    db: Annotated[AsyncSession, Depends(get_db)],
    teacher: Annotated[Teacher, Depends(get_current_teacher)],
    date_from: date | None = None,
    date_to: date | None = None,
) -> dict:
    """내 근태 기록 목록을 조회합니다 (최신 날짜 우선).

    List my attendance records, newest date first.
    """
    attendances = await attendance_service.get_my_attendances(db, teacher, date_from, date_to)
    return {"data": [attendance_service.build_response(a) for a in attendances]}


@router.get("/my/attendance/today", response_model=AttendanceResponse | None)
async def get_my_today_attendance(
    db: Annotated[AsyncSession, Depends(get_db)],
    teacher: Annotated[Teacher, Depends(get_current_teacher)],
) -> dict | None:
    """오늘(조직 시간대 기준) 내 근태 기록 — Today's record, or null."""
    attendance = await attendance_service.get_my_today(db, teacher)
    if attendance is None:
        return None
    return attendance_service.build_response(attendance)
