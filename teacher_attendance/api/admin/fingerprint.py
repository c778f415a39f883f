"""관리자 지문 로그 라우터 — 지문 장치 로그 일괄 가져오기 API.

Admin Fingerprint Router — Bulk import of fingerprint-device logs.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import require_admin
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.schemas.fingerprint import FingerprintImportRequest, FingerprintImportResponse
from teacher_attendance.services.fingerprint_import_service import fingerprint_import_service
from teacher_attendance.utils.exceptions import BadRequestError

router: APIRouter = APIRouter()


@router.post("/import", response_model=FingerprintImportResponse)
async def import_fingerprint_logs(
    data: FingerprintImportRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """지문 로그를 가져와 근태 기록에 반영합니다 (관리자 전용).

    Import raw fingerprint logs and reconcile attendance (admin only).
    Malformed entries are counted as skipped; 400 when the body carries no
    ``logs`` array or when no default schedule template exists.

    Args:
        data: 원본 로그 목록 (Raw logs)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 관리자 (Authenticated admin)

    Returns:
        dict: 가져오기 결과 (imported, skipped, processed_date_range, samples)
    """
    if not isinstance(data.logs, list):
        raise BadRequestError("logs 배열이 필요합니다 (Invalid request body - logs array required)")
    result = await fingerprint_import_service.import_logs(db, data.logs)
    await db.commit()
    return result.to_response()
