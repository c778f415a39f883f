"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    3. 페이로드의 "sub" 필드로 DB에서 사용자를 조회하고 활성 상태 확인
       (User is fetched by payload "sub" and must be active)

Authorization:
    - require_admin: ADMIN, PRINCIPAL
    - require_teacher: TEACHER (403 otherwise)
    - get_current_teacher: TEACHER with a linked teacher record (404 otherwise)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.database import get_db
from teacher_attendance.models.user import ADMIN_ROLES, Teacher, User, UserRole
from teacher_attendance.repositories.user_repository import teacher_repository, user_repository
from teacher_attendance.utils.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from teacher_attendance.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 401 (auto_error=False, handled below)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Raises:
        UnauthorizedError: 토큰 없음/무효/만료, 사용자 없음/비활성
                           (Missing, invalid or expired token; unknown or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError("인증이 필요합니다 (Authentication required)")
    try:
        payload: dict = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid token type")
        user_id: UUID = UUID(payload["sub"])
    except UnauthorizedError:
        raise
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """관리자(ADMIN/PRINCIPAL) 전용 — Admin-only guard (403 otherwise)."""
    if current_user.role not in ADMIN_ROLES:
        raise ForbiddenError("관리자만 접근할 수 있습니다 (Only ADMIN or PRINCIPAL can access this endpoint)")
    return current_user


async def require_teacher(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """교사 전용 — Teacher-only guard (403 otherwise)."""
    if current_user.role != UserRole.TEACHER.value:
        raise ForbiddenError("교사만 사용할 수 있습니다 (Only teachers can perform this action)")
    return current_user


async def get_current_teacher(
    current_user: Annotated[User, Depends(require_teacher)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Teacher:
    """현재 사용자에 연결된 교사 기록을 반환합니다.

    Return the teacher record linked to the authenticated teacher user.

    Raises:
        NotFoundError: 연결된 교사 기록 없음 (No linked teacher record)
    """
    teacher: Teacher | None = await teacher_repository.get_by_user_id(db, current_user.id)
    if teacher is None:
        raise NotFoundError("교사 정보를 찾을 수 없습니다 (Teacher record not found for this user)")
    return teacher
