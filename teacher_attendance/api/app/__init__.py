"""앱 API 라우터 패키지 — 교사용 엔드포인트 통합.

App API Router package — Aggregates all teacher-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - attendances: QR 출퇴근 스캔 및 내 근태 (QR scan, my attendance)
"""

from fastapi import APIRouter

from teacher_attendance.api.app.attendances import router as attendance_router

app_router: APIRouter = APIRouter()

# QR 스캔: /attendance/qr/check, 내 근태: /my/attendance 하위
app_router.include_router(attendance_router, tags=["My Attendance"])
