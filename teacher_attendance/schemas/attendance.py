"""근태 및 QR 세션 관련 Pydantic 요청/응답 스키마 정의.

Attendance and QR session Pydantic request/response schema definitions.
These payloads are consumed by the admin dashboard and the teacher app
in camelCase; snake_case input is accepted as well.
"""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 직렬화 기본 모델 — camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === QR 세션 (QR Session) 스키마 ===

class QRGenerateRequest(CamelModel):
    """QR 세션 수동 생성 요청 스키마.

    Attributes:
        type: 유형 "CHECK_IN" | "CHECK_OUT" (validated by the service → 400)
        date: 근태 날짜, 기본값 오늘 (Attendance date, defaults to today)
        valid_from: 유효 시작, 기본값 현재 (Window start, defaults to now)
        valid_until: 유효 종료, 기본값 시작 + 2시간 (Window end, defaults to start + 2h)
    """

    type: str
    date: dt.date | None = None
    valid_from: dt.datetime | None = None
    valid_until: dt.datetime | None = None


class QRSessionResponse(CamelModel):
    """QR 세션 응답 스키마."""

    id: UUID
    type: str
    token: str
    date: dt.date
    valid_from: dt.datetime
    valid_until: dt.datetime
    is_active: bool


class ActiveQRSession(CamelModel):
    """활성 QR 세션 항목 — One entry of the active-session list."""

    id: UUID
    type: str
    token: str
    valid_from: dt.datetime
    valid_until: dt.datetime


class ActiveQRSessionListResponse(CamelModel):
    """활성 QR 세션 목록 응답 — CHECK_IN first."""

    date: dt.date
    data: list[ActiveQRSession]


class AutoGenerateSchedule(CamelModel):
    """자동 생성에 사용된 스케줄 요약 — Schedule the windows were derived from."""

    name: str
    start_time: str
    end_time: str
    source: str


class QRAutoGenerateResponse(CamelModel):
    """QR 세션 자동 생성 응답 — sessions are [CHECK_IN, CHECK_OUT]."""

    date: dt.date
    schedule: AutoGenerateSchedule
    sessions: list[QRSessionResponse]


class QRCheckRequest(CamelModel):
    """QR 스캔 요청 스키마.

    Attributes:
        token: 스캔한 QR 토큰 (Scanned token)
    """

    token: str


# === 근태 기록 (Attendance) 스키마 ===

class AttendanceResponse(CamelModel):
    """근태 기록 응답 스키마.

    Attributes:
        teacher_id: 교사 UUID (Teacher UUID)
        date: 근태 날짜 (Attendance date)
        check_in_time: 출근 시각 UTC (Check-in instant)
        check_out_time: 퇴근 시각 UTC (Check-out instant)
        status: 상태 (PRESENT / LATE / ABSENT / LEAVE / SICK)
        late_minutes: 지각 시간(분) (Late minutes)
    """

    teacher_id: UUID
    date: dt.date
    check_in_time: dt.datetime | None = None
    check_out_time: dt.datetime | None = None
    status: str
    late_minutes: int


class QRCheckResponse(CamelModel):
    """QR 스캔 응답 스키마."""

    message: str
    date: dt.date
    type: str
    attendance: AttendanceResponse


class AttendanceListResponse(CamelModel):
    """근태 기록 목록 응답 — Newest date first."""

    data: list[AttendanceResponse]


# === 관리자 교사별 근태 이력 (Admin per-teacher history) 스키마 ===
# 관리자 화면 형식 그대로 snake_case (Admin view keeps snake_case fields)

class TeacherHistoryRecord(BaseModel):
    """교사별 근태 이력 한 건.

    Attributes:
        date: 근태 날짜 (Attendance date)
        check_in_time: 출근 시각 "HH:MM" 현지 (Local check-in time)
        check_out_time: 퇴근 시각 "HH:MM" 현지 (Local check-out time)
        status: 상태, 소문자 (Status, lowercase)
        is_late: 지각 여부 (late_minutes > 0)
        late_minutes: 지각 시간(분) (Late minutes)
    """

    date: dt.date
    check_in_time: str | None = None
    check_out_time: str | None = None
    status: str
    is_late: bool
    late_minutes: int


class TeacherHistorySummary(BaseModel):
    """상태별 집계 — Record counts per status."""

    total_days: int
    present: int
    late: int
    leave: int
    sick: int
    absent: int


class TeacherBrief(BaseModel):
    """교사 요약 — Teacher identity echoed with the history."""

    id: UUID
    nip: str
    name: str


class TeacherHistoryResponse(BaseModel):
    """교사별 근태 이력 응답 스키마.

    Attributes:
        data: 근태 기록, 최신 날짜 우선 (Records, newest date first)
        summary: 상태별 집계 (Counts per status)
        teacher: 교사 정보 (Teacher identity)
        start_date: 조회 시작일 (Range start, inclusive)
        end_date: 조회 종료일 (Range end, inclusive)
    """

    data: list[TeacherHistoryRecord]
    summary: TeacherHistorySummary
    teacher: TeacherBrief
    start_date: dt.date
    end_date: dt.date
