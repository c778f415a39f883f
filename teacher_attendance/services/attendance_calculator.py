"""근태 상태 계산 — 출근 시각과 유효 스케줄로 상태와 지각 시간 산출.

Attendance Status Calculator — Classifies a check-in instant against an
effective schedule. Times are compared as whole minutes since midnight in
the organization timezone; seconds are truncated.
"""

from dataclasses import dataclass
from datetime import datetime

from teacher_attendance.models.attendance import AttendanceStatus
from teacher_attendance.services.schedule_resolver import EffectiveSchedule
from teacher_attendance.utils.time_utils import minutes_since_local_midnight, time_to_minutes


@dataclass(frozen=True)
class Classification:
    """출근 판정 결과 — Status and late minutes for one check-in."""

    status: AttendanceStatus
    late_minutes: int


def classify(check_in: datetime | None, schedule: EffectiveSchedule) -> Classification:
    """출근 시각을 분류합니다.

    Classify a check-in against a schedule.

    - 출근 없음 → ABSENT, 0 (No check-in: placeholder)
    - 근무 예정 없음(휴일) → PRESENT, 0 (Holidays are never scored late)
    - 출근 분 ≤ 시작 분 + 허용 → PRESENT, 0 (Inclusive boundary)
    - 그 외 → LATE, 차이(분) (Otherwise LATE by the difference)

    Args:
        check_in: 출근 시각, aware (Check-in instant, or None)
        schedule: 유효 스케줄 (Effective schedule for the attendance date)

    Returns:
        Classification: 상태와 지각 시간 (Status and late minutes)
    """
    if check_in is None:
        return Classification(AttendanceStatus.ABSENT, 0)
    if not schedule.expects_work:
        return Classification(AttendanceStatus.PRESENT, 0)

    deadline: int = time_to_minutes(schedule.start_time) + schedule.late_tolerance_minutes
    arrived: int = minutes_since_local_midnight(check_in)
    if arrived <= deadline:
        return Classification(AttendanceStatus.PRESENT, 0)
    return Classification(AttendanceStatus.LATE, max(arrived - deadline, 0))
