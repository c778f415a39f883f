"""인증 서비스 — 로그인 및 현재 사용자 조회 비즈니스 로직.

Auth Service — Username/password login issuing a JWT access token, and the
current-user profile.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.models.user import Teacher, User
from teacher_attendance.repositories.user_repository import teacher_repository, user_repository
from teacher_attendance.schemas.auth import LoginRequest, TeacherSummary, TokenResponse, UserMeResponse
from teacher_attendance.utils.exceptions import UnauthorizedError
from teacher_attendance.utils.jwt import create_access_token
from teacher_attendance.utils.password import verify_password


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스."""

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """로그인 — 아이디/비밀번호를 검증하고 액세스 토큰을 발급합니다.

        Verify credentials and issue an access token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 (Login request)

        Returns:
            TokenResponse: 액세스 토큰 (Access token response)

        Raises:
            UnauthorizedError: 자격 증명 불일치 또는 비활성 계정
                               (Invalid credentials or inactive account)
        """
        user: User | None = await user_repository.get_by_username(db, data.username)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("아이디 또는 비밀번호가 올바르지 않습니다 (Invalid username or password)")
        if not user.is_active:
            raise UnauthorizedError("비활성화된 계정입니다 (Account is inactive)")

        access_token: str = create_access_token({"sub": str(user.id), "role": user.role})
        return TokenResponse(access_token=access_token)

    async def get_me(self, db: AsyncSession, user: User) -> UserMeResponse:
        """현재 사용자 프로필을 조회합니다 — Profile of the authenticated user."""
        teacher: Teacher | None = await teacher_repository.get_by_user_id(db, user.id)
        return UserMeResponse(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            role=user.role,
            teacher=TeacherSummary(id=teacher.id, name=teacher.name, nip=teacher.nip) if teacher else None,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
