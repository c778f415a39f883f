"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers (Attendance capture):
    - qr_sessions: 출퇴근 QR 세션 생성/조회 (QR session generation & listing)
    - fingerprint: 지문 로그 가져오기 (Fingerprint log import)
    - attendances: 교사별 근태 이력 (Per-teacher attendance history)

Included routers (Schedule settings):
    - work_schedules: 근무 스케줄 템플릿 (Schedule templates)
    - schedule_assignments: 기간 적용 (Date-range assignments)
    - special_days: 휴일/특별 근무일 (Holidays and special working days)
"""

from fastapi import APIRouter

# Attendance capture 라우터 임포트
from teacher_attendance.api.admin.qr_sessions import router as qr_sessions_router
from teacher_attendance.api.admin.fingerprint import router as fingerprint_router
from teacher_attendance.api.admin.attendances import router as attendances_router

# Schedule settings 라우터 임포트
from teacher_attendance.api.admin.work_schedules import router as work_schedules_router
from teacher_attendance.api.admin.schedule_assignments import router as schedule_assignments_router
from teacher_attendance.api.admin.special_days import router as special_days_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 출퇴근 수집 라우터 등록 — Register attendance capture routers
# ---------------------------------------------------------------------------
admin_router.include_router(qr_sessions_router, prefix="/attendance/qr", tags=["QR Sessions"])
admin_router.include_router(fingerprint_router, prefix="/fingerprint", tags=["Fingerprint"])
admin_router.include_router(attendances_router, prefix="/attendance", tags=["Attendance History"])

# ---------------------------------------------------------------------------
# 스케줄 설정 라우터 등록 — Register schedule settings routers
# ---------------------------------------------------------------------------
admin_router.include_router(work_schedules_router, prefix="/settings/work-schedules", tags=["Work Schedules"])
admin_router.include_router(
    schedule_assignments_router,
    prefix="/settings/work-schedule-assignments",
    tags=["Work Schedule Assignments"],
)
admin_router.include_router(special_days_router, prefix="/settings/special-days", tags=["Special Days"])
