"""근무 스케줄 관리 관련 Pydantic 요청/응답 스키마 정의.

Schedule administration Pydantic request/response schema definitions.
Covers templates, date-range assignments and special days. Times travel as
"HH:MM" strings and are validated by the service so the error message can
name the offending field.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


# === 근무 스케줄 템플릿 (Work Schedule) 스키마 ===

class WorkScheduleCreate(BaseModel):
    """근무 스케줄 템플릿 생성 요청 스키마.

    Attributes:
        name: 템플릿 이름 (Unique template name)
        start_time: 출근 시각 "HH:MM" (Start time)
        end_time: 퇴근 시각 "HH:MM", 출근 이후 (End time, after start)
        late_tolerance_minutes: 지각 허용 시간(분) (Grace minutes, >= 0)
        working_days: 근무 요일 (Weekday codes, Mon..Sun)
        is_default: 기본 템플릿 여부 (Make this the default; unsets the previous one)
    """

    name: str = Field(min_length=1, max_length=255)  # 템플릿 이름 (Template name)
    start_time: str  # 출근 시각 "HH:MM" (Start time)
    end_time: str  # 퇴근 시각 "HH:MM" (End time)
    late_tolerance_minutes: int = 0  # 지각 허용 시간 (Late tolerance minutes)
    working_days: list[str] = ["Mon", "Tue", "Wed", "Thu", "Fri"]  # 근무 요일 (Working weekdays)
    is_default: bool = False  # 기본 템플릿 여부 (Default flag)


class WorkScheduleUpdate(BaseModel):
    """근무 스케줄 템플릿 수정 요청 스키마 (부분 업데이트).

    Work schedule template update request schema (partial update).
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_time: str | None = None
    end_time: str | None = None
    late_tolerance_minutes: int | None = None
    working_days: list[str] | None = None
    is_default: bool | None = None


class WorkScheduleResponse(BaseModel):
    """근무 스케줄 템플릿 응답 스키마.

    Attributes:
        assignment_count: 이 템플릿을 사용하는 기간 적용 수 (Assignments referencing it)
    """

    id: UUID
    name: str
    start_time: str
    end_time: str
    late_tolerance_minutes: int
    working_days: list[str]
    is_default: bool
    assignment_count: int = 0
    created_at: datetime
    updated_at: datetime


class WorkScheduleListResponse(BaseModel):
    """근무 스케줄 템플릿 목록 응답 — Default first, then by name."""

    data: list[WorkScheduleResponse]


# === 기간 적용 (Assignment) 스키마 ===

class AssignmentCreate(BaseModel):
    """기간 적용 생성 요청 스키마.

    Attributes:
        work_schedule_id: 적용할 템플릿 UUID (Template to use)
        start_date: 시작일 (Inclusive start)
        end_date: 종료일, 시작일 이후 또는 같음 (Inclusive end, >= start_date)
    """

    work_schedule_id: UUID
    start_date: date
    end_date: date


class AssignmentScheduleSummary(BaseModel):
    """기간 적용에 포함되는 템플릿 요약 — Embedded template summary."""

    id: UUID
    name: str
    start_time: str
    end_time: str


class AssignmentResponse(BaseModel):
    """기간 적용 응답 스키마."""

    id: UUID
    work_schedule_id: UUID
    start_date: date
    end_date: date
    work_schedule: AssignmentScheduleSummary
    created_at: datetime
    updated_at: datetime


class AssignmentCreateResponse(AssignmentResponse):
    """기간 적용 생성 응답 — 겹치는 기존 적용 목록 포함.

    Creation response. Overlaps are allowed; the existing assignments the
    new range overlaps are listed so the operator can review them.
    """

    overlapping_assignments: list[AssignmentResponse] = []


class AssignmentListResponse(BaseModel):
    """기간 적용 목록 응답 — Newest first."""

    data: list[AssignmentResponse]


# === 특별일 (Special Day) 스키마 ===

class SpecialDayUpsert(BaseModel):
    """특별일 등록 요청 스키마 (날짜 기준 업서트).

    Special day upsert request; an existing special day on the same date
    is replaced.

    Attributes:
        date: 날짜 (Calendar date)
        name: 이름 (Display name)
        type: 유형 HOLIDAY / CUSTOM_SCHEDULE / OVERTIME (Type)
        start_time: 시작 시각 "HH:MM", 선택 (Optional custom start)
        end_time: 종료 시각 "HH:MM", 선택 (Optional custom end)
        is_overtime: 초과 근무 여부 (Overtime flag)
        notes: 메모 (Notes)
    """

    date: date
    name: str = Field(min_length=1, max_length=255)
    type: str
    start_time: str | None = None
    end_time: str | None = None
    is_overtime: bool = False
    notes: str | None = None


class SpecialDayResponse(BaseModel):
    """특별일 응답 스키마."""

    id: UUID
    date: date
    name: str
    type: str
    start_time: str | None = None
    end_time: str | None = None
    is_overtime: bool
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class SpecialDayListResponse(BaseModel):
    """특별일 목록 응답 — Sorted by date."""

    data: list[SpecialDayResponse]
