"""사용자 및 교사 관련 SQLAlchemy ORM 모델 정의.

User and Teacher SQLAlchemy ORM model definitions.
Users carry login credentials and a role; teachers are the people whose
attendance is recorded and may be linked to a login user and to a
fingerprint-device badge.

Tables:
    - users: 사용자 계정 (Login accounts with role)
    - teachers: 교사 (Teachers with staff number and fingerprint badge id)
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import String, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teacher_attendance.database import Base, UTCDateTime, utc_now


class UserRole(str, enum.Enum):
    """사용자 역할 — ADMIN/PRINCIPAL은 관리자, TEACHER는 스캔 사용자.

    User role. ADMIN and PRINCIPAL manage schedules and QR sessions,
    TEACHER scans QR codes.
    """

    ADMIN = "ADMIN"
    PRINCIPAL = "PRINCIPAL"
    TEACHER = "TEACHER"


# 관리자 권한 역할 — Roles allowed on admin endpoints
ADMIN_ROLES: frozenset[str] = frozenset({UserRole.ADMIN.value, UserRole.PRINCIPAL.value})


class User(Base):
    """사용자 모델 — 시스템 로그인 계정.

    User model — System login account.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Login username, globally unique)
        full_name: 실명 (Full display name)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 (ADMIN / PRINCIPAL / TEACHER)
        is_active: 활성 상태 (Active status, soft-delete pattern)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        teacher: 연결된 교사 기록 (Linked teacher record, if any)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디 — Login username
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 실명 — User's full display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — "ADMIN" | "PRINCIPAL" | "TEACHER"
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.TEACHER.value)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    # 관계 — Relationships
    teacher = relationship("Teacher", back_populates="user", uselist=False)


class Teacher(Base):
    """교사 모델 — 근태 기록 대상.

    Teacher model — The subject of attendance records.
    ``fingerprint_id`` is the badge/sensor id the fingerprint device writes
    into its logs; it is how raw device scans are mapped to a teacher.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 로그인 사용자 FK, 선택 (Linked login user, optional)
        name: 교사 이름 (Display name)
        nip: 교직원 번호 (Staff registration number, unique)
        fingerprint_id: 지문 장치 ID, 선택 (Fingerprint device badge id, unique)
        is_active: 활성 상태 (Active status)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "teachers"

    # 교사 고유 식별자 — Teacher unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 사용자 FK — One login account per teacher (SET NULL on user delete)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    # 교사 이름 — Display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 교직원 번호 — Staff number (NIP)
    nip: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    # 지문 장치 ID — Badge id written by the fingerprint device
    fingerprint_id: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
    # 활성 상태 — Whether the teacher is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    # 관계 — Relationships
    user = relationship("User", back_populates="teacher")
