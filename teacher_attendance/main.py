"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware and router registration.
Configures logging, CORS, health check, and includes the admin, app
and auth routers.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from teacher_attendance.config import settings
from teacher_attendance.middleware.axiom_logging import AxiomLoggingMiddleware

# 표준 로깅 설정 — stdlib logging for service-level warnings/info
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — 관리자 대시보드/교사 앱 출처 (Admin dashboard and teacher app origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# admin_router: QR 세션, 지문 로그 가져오기, 스케줄 설정 (QR sessions, fingerprint import, schedule settings)
# app_router: QR 스캔, 내 근태 (QR scan, my attendance)
from teacher_attendance.api.admin import admin_router  # noqa: E402
from teacher_attendance.api.app import app_router  # noqa: E402
from teacher_attendance.api.auth import router as auth_router  # noqa: E402

app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(app_router, prefix="/api/v1/app")
app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
