"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Per-test SQLite file DB (aiosqlite), session, and
httpx client fixtures. Schema is created from ORM metadata for every test,
so tests never share rows.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from teacher_attendance.database import Base, get_db
from teacher_attendance.main import app
from teacher_attendance.models import *  # noqa: F401,F403 — register all models with metadata
from teacher_attendance.models import Teacher, User, UserRole, WorkSchedule
from teacher_attendance.utils.jwt import create_access_token
from teacher_attendance.utils.password import hash_password
from teacher_attendance.utils.time_utils import org_timezone


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 테스트마다 새 SQLite 파일에 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 시각 고정
# ---------------------------------------------------------------------------
def local_dt(year: int, month: int, day: int, hour: int, minute: int, second: int = 0) -> datetime:
    """기관 타임존 기준 aware datetime — Aware datetime in the organization timezone."""
    return datetime(year, month, day, hour, minute, second, tzinfo=org_timezone())


@pytest.fixture
def freeze_now(monkeypatch):
    """서비스가 읽는 현재 시각을 고정합니다.

    Returns a setter: ``freeze_now(instant)`` pins the clock seen by the
    QR session service and the "today" helpers.
    """
    def _freeze(instant: datetime) -> None:
        monkeypatch.setattr("teacher_attendance.services.qr_session_service.now_utc", lambda: instant)
        monkeypatch.setattr("teacher_attendance.utils.time_utils.now_utc", lambda: instant)

    return _freeze


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    user = User(
        username="admin",
        full_name="Test Admin",
        password_hash=hash_password("admin123!"),
        role=UserRole.ADMIN.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def principal_user(db: AsyncSession) -> User:
    """교장 사용자를 생성합니다."""
    user = User(
        username="principal",
        full_name="Test Principal",
        password_hash=hash_password("principal123!"),
        role=UserRole.PRINCIPAL.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def teacher_user(db: AsyncSession) -> User:
    """교사 로그인 계정을 생성합니다."""
    user = User(
        username="teacher",
        full_name="Siti Rahmawati",
        password_hash=hash_password("teacher123!"),
        role=UserRole.TEACHER.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def teacher(db: AsyncSession, teacher_user: User) -> Teacher:
    """로그인 계정에 연결된 교사 기록을 생성합니다."""
    t = Teacher(
        user_id=teacher_user.id,
        name="Siti Rahmawati",
        nip="198501012010012001",
        fingerprint_id="1001",
    )
    db.add(t)
    await db.flush()
    await db.refresh(t)
    return t


@pytest_asyncio.fixture
async def other_teacher(db: AsyncSession) -> Teacher:
    """로그인 계정 없는 두 번째 교사를 생성합니다."""
    t = Teacher(name="Budi Santoso", nip="198703152011011002", fingerprint_id="1002")
    db.add(t)
    await db.flush()
    await db.refresh(t)
    return t


@pytest_asyncio.fixture
async def default_schedule(db: AsyncSession) -> WorkSchedule:
    """기본 템플릿: 07:00-15:00, 지각 허용 10분, 월~금."""
    ws = WorkSchedule(
        name="Jam Sekolah",
        start_time=time(7, 0),
        end_time=time(15, 0),
        late_tolerance_minutes=10,
        working_days=["Mon", "Tue", "Wed", "Thu", "Fri"],
        is_default=True,
    )
    db.add(ws)
    await db.flush()
    await db.refresh(ws)
    return ws


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def principal_token(principal_user) -> str:
    return make_token(principal_user)


@pytest.fixture
def teacher_token(teacher_user, teacher) -> str:
    return make_token(teacher_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
