"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, token issuance, and current user info.
"""

from uuid import UUID

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Attributes:
        username: 사용자 로그인 아이디 (User login identifier)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str  # 사용자 로그인 아이디 (User login identifier)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Attributes:
        access_token: JWT 액세스 토큰 (Access token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str
    token_type: str = "bearer"


class TeacherSummary(BaseModel):
    """연결된 교사 요약 — Linked teacher summary."""

    id: UUID
    name: str
    nip: str


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Attributes:
        id: 사용자 UUID (User UUID)
        username: 로그인 아이디 (Username)
        full_name: 실명 (Full name)
        role: 역할 (ADMIN / PRINCIPAL / TEACHER)
        teacher: 연결된 교사, 선택 (Linked teacher record, if any)
    """

    id: UUID
    username: str
    full_name: str
    role: str
    teacher: TeacherSummary | None = None
