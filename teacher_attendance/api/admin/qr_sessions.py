"""관리자 QR 세션 라우터 — 출퇴근 QR 세션 생성 및 조회 API.

Admin QR Session Router — Manual and schedule-derived QR session
generation, and the active-session list shown on the display screen.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import require_admin
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.schemas.attendance import (
    ActiveQRSessionListResponse,
    QRAutoGenerateResponse,
    QRGenerateRequest,
    QRSessionResponse,
)
from teacher_attendance.services.qr_session_service import qr_session_service
from teacher_attendance.utils.time_utils import format_hhmm

router: APIRouter = APIRouter()


@router.post("/generate", response_model=QRSessionResponse, status_code=201)
async def generate_qr_session(
    data: QRGenerateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """QR 세션을 수동 생성합니다 (관리자 전용). 같은 날짜·유형의 기존 세션은 비활성화됩니다.

    Generate a QR session (admin only). Active sessions for the same
    date and type are deactivated.

    Args:
        data: 생성 요청 (type, date?, validFrom?, validUntil?)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)

    Returns:
        dict: 생성된 QR 세션 (Created QR session)
    """
    session = await qr_session_service.generate(
        db,
        session_type=data.type,
        target=data.date,
        valid_from=data.valid_from,
        valid_until=data.valid_until,
    )
    await db.commit()
    return qr_session_service.build_session_response(session)


@router.post("/auto-generate", response_model=QRAutoGenerateResponse, status_code=201)
async def auto_generate_qr_sessions(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    target: Annotated[date | None, Query(alias="date")] = None,
) -> dict:
    """유효 스케줄로 출근/퇴근 QR 세션을 함께 생성합니다 (관리자 전용).

    Generate both sessions from the date's effective schedule (admin only).
    404 when no schedule with working hours resolves for the date.
    """
    schedule, sessions = await qr_session_service.auto_generate(db, target)
    await db.commit()
    return {
        "date": schedule.date,
        "schedule": {
            "name": schedule.name,
            "start_time": format_hhmm(schedule.start_time),
            "end_time": format_hhmm(schedule.end_time),
            "source": schedule.source.value,
        },
        "sessions": [qr_session_service.build_session_response(s) for s in sessions],
    }


@router.get("/active", response_model=ActiveQRSessionListResponse)
async def list_active_qr_sessions(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    date_param: Annotated[str | None, Query(alias="date")] = None,
) -> dict:
    """날짜의 활성·미만료 QR 세션을 조회합니다 (관리자 전용).

    List active, non-expired sessions for ``date`` ("today" or YYYY-MM-DD).
    """
    target, sessions = await qr_session_service.list_active(db, date_param)
    return {
        "date": target,
        "data": [qr_session_service.build_session_response(s) for s in sessions],
    }
