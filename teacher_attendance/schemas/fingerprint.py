"""지문 로그 가져오기 관련 Pydantic 요청/응답 스키마 정의.

Fingerprint log import Pydantic request/response schema definitions.
Field names are snake_case on the wire, matching the device export format.
The request keeps each log as a raw dict so one malformed entry is
counted as skipped instead of rejecting the whole batch.
"""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FingerprintLogInput(BaseModel):
    """지문 장치 원본 로그 한 건 (개별 검증용).

    One raw device log, validated per record during import.

    Attributes:
        fingerprint_id: 장치 배지 ID (Badge id; numeric ids are accepted as strings)
        scanned_at: 스캔 시각 (ISO datetime; naive values are organization-local)
        raw_type: 스캔 방향 (IN / OUT)
    """

    model_config = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=True)

    fingerprint_id: str = Field(min_length=1)  # 장치 배지 ID (Device badge id)
    scanned_at: datetime  # 스캔 시각 (Scan time)
    raw_type: Literal["IN", "OUT"]  # 스캔 방향 (Scan direction)


class FingerprintImportRequest(BaseModel):
    """지문 로그 가져오기 요청 스키마.

    Attributes:
        logs: 원본 로그 목록 (Raw log entries, validated one by one; anything but an array is a 400)
    """

    logs: Any = None  # 원본 로그 목록 — 라우터에서 배열 여부 검사 (Raw entries; the router checks it is an array)


class DateRange(BaseModel):
    """처리된 날짜 범위 — Processed date range (null when nothing was imported)."""

    start: date | None = None
    end: date | None = None


class FingerprintImportSample(BaseModel):
    """가져오기 결과 샘플 레코드.

    One reconciled teacher-day echoed back for operator feedback.

    Attributes:
        teacher_name: 교사 이름 (Teacher name)
        teacher_nip: 교직원 번호 (Staff number)
        date: 근태 날짜 (Attendance date)
        check_in: 출근 시각 "HH:MM" 현지 (Local check-in time)
        check_out: 퇴근 시각 "HH:MM" 현지 (Local check-out time)
        status: 상태, 소문자 (Status, lowercase)
        late_minutes: 지각 시간(분) (Late minutes)
        schedule_used: 적용된 스케줄 이름 (Name of the schedule applied)
    """

    teacher_name: str
    teacher_nip: str
    date: date
    check_in: str | None = None
    check_out: str | None = None
    status: str
    late_minutes: int
    schedule_used: str


class FingerprintImportResponse(BaseModel):
    """지문 로그 가져오기 응답 스키마.

    Attributes:
        imported: 저장된 원본 로그 수 (Raw logs persisted)
        skipped: 건너뛴 로그 수 (Malformed logs skipped)
        processed_date_range: 처리된 날짜 범위 (Local date range of imported logs)
        samples: 샘플 레코드, 최대 5건 (Up to 5 sample records)
    """

    imported: int
    skipped: int
    processed_date_range: DateRange
    samples: list[FingerprintImportSample]
