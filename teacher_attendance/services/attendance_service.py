"""근태 기록 서비스 — 출퇴근 상태 전이 및 교사 본인 조회.

Attendance Service — The attendance record state machine and teacher
self-service reads.

States of one (teacher, date) record:

    NO_RECORD ──check-out──▶ ABSENT placeholder (check_out_time set)
        │                          │
        └──────check-in──────▶ PRESENT | LATE ◀── check-in re-sets status
                                   │
                               check-out sets check_out_time only

Both the QR scan path and fingerprint import go through ``record_events``,
so the two entry points can never disagree on merge semantics.
"""

import calendar
import enum
from collections import Counter
from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.models.attendance import Attendance
from teacher_attendance.models.user import Teacher
from teacher_attendance.repositories.attendance_repository import attendance_repository
from teacher_attendance.repositories.user_repository import teacher_repository
from teacher_attendance.services.attendance_calculator import Classification, classify
from teacher_attendance.services.schedule_resolver import EffectiveSchedule
from teacher_attendance.utils.exceptions import BadRequestError, NotFoundError
from teacher_attendance.utils.time_utils import to_local, today_local


class AttendanceState(str, enum.Enum):
    """근태 기록 상태 — Observable state of one teacher-day record."""

    NO_RECORD = "NO_RECORD"
    PLACEHOLDER = "PLACEHOLDER"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


def state_of(record: Attendance | None) -> AttendanceState:
    """기록의 현재 상태 — Current state of a record."""
    if record is None:
        return AttendanceState.NO_RECORD
    if record.check_in_time is None:
        return AttendanceState.PLACEHOLDER
    if record.check_out_time is None:
        return AttendanceState.CHECKED_IN
    return AttendanceState.CHECKED_OUT


def apply_check_in(record: Attendance, instant: datetime, classification: Classification) -> None:
    """출근 전이 — 출근 시각, 상태, 지각 시간을 설정. 퇴근 시각은 유지.

    Check-in transition: sets check-in time, status and late minutes
    (overwriting a placeholder, LEAVE or SICK); keeps check_out_time.
    """
    record.check_in_time = instant
    record.status = classification.status.value
    record.late_minutes = classification.late_minutes


def apply_check_out(record: Attendance, instant: datetime) -> None:
    """퇴근 전이 — 퇴근 시각만 설정. 상태와 지각 시간은 변경하지 않음.

    Check-out transition: sets check_out_time only.
    """
    record.check_out_time = instant


class AttendanceService:
    """근태 기록 서비스.

    Attendance record service: persists state-machine transitions and
    serves a teacher's own records.
    """

    async def record_events(
        self,
        db: AsyncSession,
        teacher_id: UUID,
        target: date,
        schedule: EffectiveSchedule | None,
        check_in: datetime | None = None,
        check_out: datetime | None = None,
    ) -> Attendance:
        """출근/퇴근 이벤트를 한 교사-날짜 기록에 적용합니다.

        Apply a check-in and/or check-out to the (teacher, date) record.
        The record is created atomically if absent (ABSENT placeholder) and
        then mutated under a row lock.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            teacher_id: 교사 UUID (Teacher UUID)
            target: 근태 날짜 (Attendance date)
            schedule: 유효 스케줄, 출근 시 필수 (Effective schedule; required with check_in)
            check_in: 출근 시각, 선택 (Check-in instant)
            check_out: 퇴근 시각, 선택 (Check-out instant)

        Returns:
            Attendance: 갱신된 근태 기록 (Updated record)
        """
        await attendance_repository.ensure_record(db, teacher_id, target)
        record: Attendance = await attendance_repository.lock_record(db, teacher_id, target)

        if check_in is not None:
            if schedule is None:
                raise ValueError("A schedule is required to classify a check-in")
            apply_check_in(record, check_in, classify(check_in, schedule))
        if check_out is not None:
            apply_check_out(record, check_out)

        await db.flush()
        await db.refresh(record)
        return record

    async def get_my_attendances(
        self,
        db: AsyncSession,
        teacher: Teacher,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Sequence[Attendance]:
        """교사 본인의 근태 기록 목록 — A teacher's own records, newest first."""
        return await attendance_repository.get_teacher_attendances(db, teacher.id, date_from, date_to)

    async def get_my_today(self, db: AsyncSession, teacher: Teacher) -> Attendance | None:
        """교사 본인의 오늘 근태 기록 — Today's record (organization timezone), if any."""
        return await attendance_repository.get_for_teacher(db, teacher.id, today_local())

    async def get_teacher_history(
        self,
        db: AsyncSession,
        teacher_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> tuple[Teacher, date, date, Sequence[Attendance]]:
        """관리자용 교사별 근태 이력을 조회합니다.

        Admin view of one teacher's records within ``[start, end]``.
        Missing bounds default to the first and last day of the current
        month in the organization timezone.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            teacher_id: 교사 UUID (Teacher UUID)
            start: 조회 시작일, 선택 (Range start, inclusive)
            end: 조회 종료일, 선택 (Range end, inclusive)

        Returns:
            tuple: (교사, 시작일, 종료일, 근태 목록) (Teacher, range, records newest first)

        Raises:
            NotFoundError: 교사를 찾을 수 없음 (Teacher not found)
            BadRequestError: 종료일이 시작일보다 앞섬 (End before start)
        """
        teacher: Teacher | None = await teacher_repository.get_by_id(db, teacher_id)
        if teacher is None:
            raise NotFoundError("교사를 찾을 수 없습니다 (Teacher not found)")

        today: date = today_local()
        if start is None:
            start = today.replace(day=1)
        if end is None:
            end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
        if end < start:
            raise BadRequestError("종료일은 시작일 이후여야 합니다 (end_date must not be before start_date)")

        records = await attendance_repository.get_teacher_attendances(db, teacher.id, start, end)
        return teacher, start, end, records

    def build_history_response(
        self,
        teacher: Teacher,
        start: date,
        end: date,
        records: Sequence[Attendance],
    ) -> dict[str, Any]:
        """교사별 이력 응답 — Rows with local HH:MM times plus per-status counts."""
        counts: Counter[str] = Counter(r.status for r in records)
        return {
            "data": [
                {
                    "date": r.date,
                    "check_in_time": to_local(r.check_in_time).strftime("%H:%M") if r.check_in_time else None,
                    "check_out_time": to_local(r.check_out_time).strftime("%H:%M") if r.check_out_time else None,
                    "status": r.status.lower(),
                    "is_late": r.late_minutes > 0,
                    "late_minutes": r.late_minutes,
                }
                for r in records
            ],
            "summary": {
                "total_days": len(records),
                "present": counts["PRESENT"],
                "late": counts["LATE"],
                "leave": counts["LEAVE"],
                "sick": counts["SICK"],
                "absent": counts["ABSENT"],
            },
            "teacher": {"id": teacher.id, "nip": teacher.nip, "name": teacher.name},
            "start_date": start,
            "end_date": end,
        }

    def build_response(self, attendance: Attendance) -> dict[str, Any]:
        """근태 응답 딕셔너리를 구성합니다 — Response dict for one record."""
        return {
            "teacher_id": attendance.teacher_id,
            "date": attendance.date,
            "check_in_time": attendance.check_in_time,
            "check_out_time": attendance.check_out_time,
            "status": attendance.status,
            "late_minutes": attendance.late_minutes,
        }


# 싱글턴 인스턴스 — Singleton instance
attendance_service: AttendanceService = AttendanceService()
