"""근태 관리 관련 SQLAlchemy ORM 모델 정의.

Attendance management SQLAlchemy ORM model definitions.
Includes time-boxed QR sessions for check-in/out, raw fingerprint-device
logs, and the per-teacher daily attendance record.

Tables:
    - qr_sessions: 날짜·유형별 QR 세션 (Time-boxed QR tokens per date and type)
    - fingerprint_logs: 지문 장치 원본 로그 (Append-only raw device scans)
    - attendances: 근태 기록 (One record per teacher per date)
"""

import datetime as dt
import enum
import uuid

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teacher_attendance.database import Base, UTCDateTime, utc_now


class QRSessionType(str, enum.Enum):
    """QR 세션 유형 — QR session purpose."""

    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class FingerprintType(str, enum.Enum):
    """지문 장치 스캔 방향 — Raw scan direction reported by the device."""

    IN = "IN"
    OUT = "OUT"


class AttendanceStatus(str, enum.Enum):
    """근태 상태.

    Attendance status. LEAVE and SICK are only ever written by external
    processes; check-in/out never produce them.
    """

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    LEAVE = "LEAVE"
    SICK = "SICK"


class QRSession(Base):
    """QR 세션 모델 — 출근/퇴근 스캔을 허용하는 시간 제한 토큰.

    QR session model — A time-boxed, single-purpose token authorizing
    check-in or check-out scans for one attendance date.
    When a new session is generated for a (date, type), the previous
    active ones are deactivated first.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        type: 유형 (CHECK_IN / CHECK_OUT)
        token: 추측 불가능한 토큰 (Opaque random token, unique)
        date: 근태 날짜 (Attendance date this session authorizes)
        valid_from: 유효 시작 시각 UTC (Window start instant)
        valid_until: 유효 종료 시각 UTC (Window end instant)
        is_active: 활성 상태 (Deactivated when superseded)
        created_at: 생성 일시 UTC (Creation timestamp)

    Constraints:
        uq_qr_sessions_active_date_type: 날짜+유형별 활성 세션 최대 1개
            (Partial unique index — one active session per date and type)
    """

    __tablename__ = "qr_sessions"

    # QR 세션 고유 식별자 — QR session unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 유형 — "CHECK_IN" | "CHECK_OUT"
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    # 토큰 — 64-char hex token from secrets.token_hex(32)
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    # 근태 날짜 — Attendance date (organization-local calendar date)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # 유효 시작 — Window start (UTC)
    valid_from: Mapped[dt.datetime] = mapped_column(UTCDateTime, nullable=False)
    # 유효 종료 — Window end (UTC)
    valid_until: Mapped[dt.datetime] = mapped_column(UTCDateTime, nullable=False)
    # 활성 상태 — Active flag (false once superseded)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (
        Index(
            "uq_qr_sessions_active_date_type",
            "date",
            "type",
            unique=True,
            postgresql_where=text("is_active = true"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    def is_valid_at(self, instant: dt.datetime) -> bool:
        """유효 구간 포함 여부 — Whether ``instant`` lies in [valid_from, valid_until]."""
        return self.valid_from <= instant <= self.valid_until


class FingerprintLog(Base):
    """지문 장치 원본 로그 모델 — 추가 전용 증거 기록.

    Fingerprint log model — append-only raw evidence from the device.
    Never mutated after insert.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        fingerprint_id: 장치 배지 ID (Device badge/sensor id)
        scanned_at: 스캔 시각 UTC (Scan instant)
        raw_type: 스캔 방향 (IN / OUT)
        created_at: 가져온 일시 UTC (Import timestamp)
    """

    __tablename__ = "fingerprint_logs"

    # 로그 고유 식별자 — Log unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 장치 배지 ID — Badge id written by the device
    fingerprint_id: Mapped[str] = mapped_column(String(64), nullable=False)
    # 스캔 시각 — Scan instant (UTC)
    scanned_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, nullable=False)
    # 스캔 방향 — "IN" | "OUT"
    raw_type: Mapped[str] = mapped_column(String(10), nullable=False)
    # 가져온 일시 — Import timestamp (UTC)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, default=utc_now)

    __table_args__ = (
        Index("ix_fingerprint_logs_fingerprint_scanned", "fingerprint_id", "scanned_at"),
    )


class Attendance(Base):
    """근태 기록 모델 — 교사별 일일 출퇴근 기록.

    Attendance record model — Daily check-in/out record per teacher.
    Exactly one record per teacher per date. Check-in sets the check-in
    time, status and late minutes; check-out only sets the check-out time.

    Status flow: (no record) -> ABSENT placeholder -> PRESENT | LATE
                 (check-out at any point leaves status untouched)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        teacher_id: 교사 FK (Teacher this record belongs to)
        date: 근태 날짜 (Attendance date)
        check_in_time: 출근 시각 UTC (Check-in instant)
        check_out_time: 퇴근 시각 UTC (Check-out instant)
        status: 상태 (PRESENT / LATE / ABSENT / LEAVE / SICK)
        late_minutes: 지각 시간(분) (Minutes past start + tolerance)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_attendance_teacher_date: 동일 교사+날짜 중복 불가
            (One attendance record per teacher per day)
    """

    __tablename__ = "attendances"

    # 근태 고유 식별자 — Attendance unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 교사 FK — Teacher who recorded attendance
    teacher_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    # 근태 날짜 — Attendance date (organization-local calendar date)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    # 출근 시각 — Check-in instant (UTC)
    check_in_time: Mapped[dt.datetime | None] = mapped_column(UTCDateTime, nullable=True)
    # 퇴근 시각 — Check-out instant (UTC)
    check_out_time: Mapped[dt.datetime | None] = mapped_column(UTCDateTime, nullable=True)
    # 상태 — Status, ABSENT until a check-in arrives
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AttendanceStatus.ABSENT.value)
    # 지각 시간(분) — Late minutes (0 unless status is LATE)
    late_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, default=utc_now)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[dt.datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint("teacher_id", "date", name="uq_attendance_teacher_date"),
        Index("ix_attendances_date", "date"),
    )

    # 관계 — Relationships
    teacher = relationship("Teacher")
