"""공통 인증 라우터 — 로그인, 프로필 조회.

Common Auth Router — Login and profile endpoints.
Shared by both admin and app clients.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import get_current_user
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.schemas.auth import LoginRequest, TokenResponse, UserMeResponse
from teacher_attendance.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 아이디/비밀번호로 액세스 토큰 발급.

    Login endpoint. Issues an access token for valid credentials.
    """
    return await auth_service.login(db, data)


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자 프로필 조회.

    Get the profile of the currently authenticated user.
    """
    return await auth_service.get_me(db, current_user)
