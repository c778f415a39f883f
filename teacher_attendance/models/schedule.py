"""근무 스케줄 관련 SQLAlchemy ORM 모델 정의.

Work-schedule SQLAlchemy ORM model definitions.
Schedules are organization-wide: a reusable template, date ranges that
bind a template, and single-date special days that override both.

Tables:
    - work_schedules: 근무 스케줄 템플릿 (Reusable schedule templates, one default)
    - work_schedule_assignments: 기간별 템플릿 적용 (Date-range template bindings)
    - special_days: 특별일 (Holiday / custom hours / overtime overrides per date)
"""

import datetime as dt
import enum
import uuid
from datetime import date, datetime, time

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Index, Integer, String, Text, Time, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teacher_attendance.database import Base, UTCDateTime, utc_now

# 요일 코드 — Weekday codes, index matches date.weekday() (Mon=0)
WEEKDAY_CODES: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class SpecialDayType(str, enum.Enum):
    """특별일 유형.

    Special day type:
        - HOLIDAY: 휴일, 근무 없음 (No work expected)
        - CUSTOM_SCHEDULE: 별도 출퇴근 시각 (Custom start/end times)
        - OVERTIME: 초과 근무일, 비근무 요일에도 허용 (Overtime, allowed on non-working weekdays)
    """

    HOLIDAY = "HOLIDAY"
    CUSTOM_SCHEDULE = "CUSTOM_SCHEDULE"
    OVERTIME = "OVERTIME"


class WorkSchedule(Base):
    """근무 스케줄 템플릿 모델.

    Work schedule template — daily start/end time, late tolerance and the
    weekdays it applies to. Exactly one template may carry ``is_default``;
    it is the fallback for dates without an assignment.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 템플릿 이름 (Template name, unique)
        start_time: 출근 시각 (Local wall-clock start time)
        end_time: 퇴근 시각 (Local wall-clock end time, after start_time)
        late_tolerance_minutes: 지각 허용 시간(분) (Grace period before LATE)
        working_days: 근무 요일 목록 (Weekday codes, e.g. ["Mon", "Tue"])
        is_default: 기본 템플릿 여부 (Whether this is the fallback template)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Constraints:
        uq_work_schedules_single_default: 기본 템플릿은 최대 1개
            (Partial unique index — at most one default)
    """

    __tablename__ = "work_schedules"

    # 템플릿 고유 식별자 — Template unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 템플릿 이름 — Template name
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 출근 시각 — Start time (organization-local wall clock)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    # 퇴근 시각 — End time (organization-local wall clock)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    # 지각 허용 시간(분) — Late tolerance in minutes
    late_tolerance_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 근무 요일 — Working weekday codes
    working_days: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=lambda: list(WEEKDAY_CODES[:5]))
    # 기본 템플릿 여부 — Default (fallback) template flag
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index(
            "uq_work_schedules_single_default",
            "is_default",
            unique=True,
            postgresql_where=text("is_default = true"),
            sqlite_where=text("is_default = 1"),
        ),
    )

    # 관계 — Relationships
    assignments = relationship("WorkScheduleAssignment", back_populates="work_schedule")

    def works_on(self, target: date) -> bool:
        """해당 날짜가 근무 요일인지 확인 — Whether ``target`` falls on a working weekday."""
        return WEEKDAY_CODES[target.weekday()] in (self.working_days or [])


class WorkScheduleAssignment(Base):
    """기간별 스케줄 적용 모델.

    Work schedule assignment — "use this template from start_date to
    end_date (inclusive)". Overlaps are allowed but flagged on creation;
    resolution picks the most recently created assignment.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        work_schedule_id: 템플릿 FK (Referenced template)
        start_date: 시작일 (Inclusive range start)
        end_date: 종료일 (Inclusive range end, >= start_date)
        created_at: 생성 일시 UTC (Creation timestamp, overlap tie-breaker)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "work_schedule_assignments"

    # 적용 고유 식별자 — Assignment unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 템플릿 FK — Referenced template (RESTRICT: 적용 중인 템플릿은 삭제 불가)
    work_schedule_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("work_schedules.id", ondelete="RESTRICT"), nullable=False
    )
    # 시작일 — Inclusive start date
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 종료일 — Inclusive end date
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("ix_work_schedule_assignments_range", "start_date", "end_date"),
    )

    # 관계 — Relationships
    work_schedule = relationship("WorkSchedule", back_populates="assignments")

    def covers(self, target: date) -> bool:
        """기간 포함 여부 — Whether ``target`` lies inside the inclusive range."""
        return self.start_date <= target <= self.end_date


class SpecialDay(Base):
    """특별일 모델 — 하루 단위 스케줄 덮어쓰기.

    Special day — a full override for one calendar date, independent of
    assignments. One special day per date.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        date: 날짜 (Calendar date, unique)
        name: 이름 (Display name, e.g. "Independence Day")
        type: 유형 (HOLIDAY / CUSTOM_SCHEDULE / OVERTIME)
        start_time: 시작 시각, 선택 (Optional custom start time)
        end_time: 종료 시각, 선택 (Optional custom end time)
        is_overtime: 초과 근무 여부 (Overtime flag)
        notes: 메모 (Optional notes)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "special_days"

    # 특별일 고유 식별자 — Special day unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 날짜 — Calendar date (one special day per date)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, unique=True)
    # 이름 — Display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 유형 — "HOLIDAY" | "CUSTOM_SCHEDULE" | "OVERTIME"
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    # 시작 시각 — Optional custom start time
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 종료 시각 — Optional custom end time
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 초과 근무 여부 — Overtime flag
    is_overtime: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # 메모 — Optional notes
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utc_now, onupdate=utc_now)
