"""근태 상태 계산 및 상태 전이 테스트.

Attendance calculator and state machine tests — Tolerance boundaries in
the organization timezone, holidays, and check-in/check-out transitions.
"""

from datetime import date, time, timedelta, timezone

from teacher_attendance.models.attendance import Attendance, AttendanceStatus
from teacher_attendance.services.attendance_calculator import Classification, classify
from teacher_attendance.services.attendance_service import (
    AttendanceState,
    apply_check_in,
    apply_check_out,
    state_of,
)
from teacher_attendance.services.schedule_resolver import EffectiveSchedule, ScheduleSource
from tests.conftest import local_dt

DAY = date(2026, 10, 19)

SCHOOL_DAY = EffectiveSchedule(
    date=DAY,
    source=ScheduleSource.DEFAULT,
    name="Jam Sekolah",
    start_time=time(7, 0),
    end_time=time(15, 0),
    late_tolerance_minutes=10,
)

HOLIDAY = EffectiveSchedule(
    date=DAY,
    source=ScheduleSource.SPECIAL_DAY,
    name="Libur",
    start_time=None,
    end_time=None,
    late_tolerance_minutes=0,
)


class TestClassify:
    """지각 허용 경계 — 07:00 시작, 허용 10분."""

    def test_before_start_is_present(self):
        assert classify(local_dt(2026, 10, 19, 6, 45), SCHOOL_DAY) == Classification(AttendanceStatus.PRESENT, 0)

    def test_at_deadline_is_present(self):
        """07:10 정각은 허용 (경계 포함)."""
        result = classify(local_dt(2026, 10, 19, 7, 10), SCHOOL_DAY)
        assert result.status == AttendanceStatus.PRESENT
        assert result.late_minutes == 0

    def test_one_minute_after_deadline_is_late(self):
        """07:11 → 지각 1분."""
        result = classify(local_dt(2026, 10, 19, 7, 11), SCHOOL_DAY)
        assert result.status == AttendanceStatus.LATE
        assert result.late_minutes == 1

    def test_seconds_are_truncated(self):
        """07:10:59 → 분 단위 절사로 정상 출근."""
        assert classify(local_dt(2026, 10, 19, 7, 10, 59), SCHOOL_DAY).status == AttendanceStatus.PRESENT

    def test_late_minutes_measured_from_deadline(self):
        """07:25 → 지각 15분 (허용 종료 07:10 기준)."""
        assert classify(local_dt(2026, 10, 19, 7, 25), SCHOOL_DAY).late_minutes == 15

    def test_utc_instant_compared_in_org_timezone(self):
        """UTC 00:05 = 자카르타 07:05 → 정상 출근."""
        instant = local_dt(2026, 10, 19, 7, 5).astimezone(timezone.utc)
        assert instant.hour == 0
        assert classify(instant, SCHOOL_DAY).status == AttendanceStatus.PRESENT

    def test_no_check_in_is_absent(self):
        assert classify(None, SCHOOL_DAY) == Classification(AttendanceStatus.ABSENT, 0)

    def test_holiday_check_in_is_present(self):
        """휴일 출근은 지각 판정 없음."""
        assert classify(local_dt(2026, 10, 19, 11, 0), HOLIDAY) == Classification(AttendanceStatus.PRESENT, 0)


class TestStateMachine:
    """출퇴근 상태 전이."""

    def _placeholder(self) -> Attendance:
        return Attendance(date=DAY, status=AttendanceStatus.ABSENT.value, late_minutes=0)

    def test_no_record_state(self):
        assert state_of(None) == AttendanceState.NO_RECORD

    def test_check_in_from_placeholder(self):
        record = self._placeholder()
        assert state_of(record) == AttendanceState.PLACEHOLDER

        instant = local_dt(2026, 10, 19, 7, 20)
        apply_check_in(record, instant, classify(instant, SCHOOL_DAY))
        assert state_of(record) == AttendanceState.CHECKED_IN
        assert record.status == "LATE"
        assert record.late_minutes == 10

    def test_check_out_keeps_status(self):
        """퇴근은 상태와 지각 시간을 바꾸지 않음."""
        record = self._placeholder()
        check_in = local_dt(2026, 10, 19, 7, 20)
        apply_check_in(record, check_in, classify(check_in, SCHOOL_DAY))
        apply_check_out(record, local_dt(2026, 10, 19, 15, 5))
        assert state_of(record) == AttendanceState.CHECKED_OUT
        assert record.status == "LATE"
        assert record.late_minutes == 10

    def test_check_out_before_check_in(self):
        """퇴근 먼저 → ABSENT 자리표시자에 퇴근 시각, 이후 출근이 상태를 설정."""
        record = self._placeholder()
        check_out = local_dt(2026, 10, 19, 15, 0)
        apply_check_out(record, check_out)
        assert record.status == "ABSENT"
        assert record.check_out_time == check_out

        check_in = local_dt(2026, 10, 19, 6, 55)
        apply_check_in(record, check_in, classify(check_in, SCHOOL_DAY))
        assert record.status == "PRESENT"
        assert record.check_out_time == check_out

    def test_repeat_check_in_overwrites(self):
        """재출근은 출근 시각과 상태를 다시 설정."""
        record = self._placeholder()
        first = local_dt(2026, 10, 19, 6, 50)
        apply_check_in(record, first, classify(first, SCHOOL_DAY))
        second = first + timedelta(minutes=40)
        apply_check_in(record, second, classify(second, SCHOOL_DAY))
        assert record.check_in_time == second
        assert record.status == "LATE"
        assert record.late_minutes == 20

    def test_check_in_overwrites_leave(self):
        """휴가/병가 기록도 출근으로 덮어씀."""
        record = Attendance(date=DAY, status=AttendanceStatus.SICK.value, late_minutes=0)
        instant = local_dt(2026, 10, 19, 7, 0)
        apply_check_in(record, instant, classify(instant, SCHOOL_DAY))
        assert record.status == "PRESENT"
