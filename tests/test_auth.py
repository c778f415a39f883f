"""인증 API 테스트 — 로그인, /me, 역할 가드.

Auth API tests — Login, /me, and the admin/teacher guards.
"""

import jwt
from httpx import AsyncClient

from teacher_attendance.config import settings
from tests.conftest import auth_header

AUTH = "/api/v1/auth"
ADMIN_TEMPLATES = "/api/v1/admin/settings/work-schedules"
MY_ATTENDANCE = "/api/v1/app/my/attendance"


class TestLogin:
    """로그인."""

    async def test_login_success(self, client: AsyncClient, admin_user):
        res = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "admin123!"})
        assert res.status_code == 200
        data = res.json()
        assert data["token_type"] == "bearer"

        payload = jwt.decode(data["access_token"], settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == str(admin_user.id)
        assert payload["role"] == "ADMIN"
        assert payload["type"] == "access"

    async def test_login_wrong_password(self, client: AsyncClient, admin_user):
        res = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "wrong"})
        assert res.status_code == 401

    async def test_login_unknown_user(self, client: AsyncClient):
        res = await client.post(f"{AUTH}/login", json={"username": "nobody", "password": "whatever"})
        assert res.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, db, admin_user):
        admin_user.is_active = False
        await db.flush()
        res = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "admin123!"})
        assert res.status_code == 401

    async def test_token_from_login_works(self, client: AsyncClient, admin_user):
        login = await client.post(f"{AUTH}/login", json={"username": "admin", "password": "admin123!"})
        res = await client.get(ADMIN_TEMPLATES, headers=auth_header(login.json()["access_token"]))
        assert res.status_code == 200


class TestMe:
    """현재 사용자 조회."""

    async def test_me_teacher(self, client: AsyncClient, teacher_token, teacher):
        res = await client.get(f"{AUTH}/me", headers=auth_header(teacher_token))
        assert res.status_code == 200
        data = res.json()
        assert data["username"] == "teacher"
        assert data["role"] == "TEACHER"
        assert data["teacher"] == {"id": str(teacher.id), "name": "Siti Rahmawati", "nip": "198501012010012001"}

    async def test_me_admin_has_no_teacher(self, client: AsyncClient, admin_token):
        res = await client.get(f"{AUTH}/me", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["teacher"] is None

    async def test_me_requires_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me")
        assert res.status_code == 401

    async def test_invalid_token(self, client: AsyncClient):
        res = await client.get(f"{AUTH}/me", headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_inactive_user_token_rejected(self, client: AsyncClient, db, admin_user, admin_token):
        admin_user.is_active = False
        await db.flush()
        res = await client.get(f"{AUTH}/me", headers=auth_header(admin_token))
        assert res.status_code == 401


class TestGuards:
    """역할 가드."""

    async def test_teacher_blocked_from_admin(self, client: AsyncClient, teacher_token):
        res = await client.get(ADMIN_TEMPLATES, headers=auth_header(teacher_token))
        assert res.status_code == 403

    async def test_principal_allowed_on_admin(self, client: AsyncClient, principal_token):
        res = await client.get(ADMIN_TEMPLATES, headers=auth_header(principal_token))
        assert res.status_code == 200

    async def test_admin_blocked_from_teacher_app(self, client: AsyncClient, admin_token):
        res = await client.get(MY_ATTENDANCE, headers=auth_header(admin_token))
        assert res.status_code == 403

    async def test_admin_requires_token(self, client: AsyncClient):
        res = await client.get(ADMIN_TEMPLATES)
        assert res.status_code == 401

    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}
