"""근무 스케줄 관리 서비스 — 템플릿, 기간 적용, 특별일 CRUD.

Schedule Administration Service — CRUD for schedule templates, date-range
assignments and special days.

This is the only writer of the "single default template" invariant:
setting ``is_default`` clears the previous default in the same transaction
(unset-then-set), and the last default can be neither un-defaulted nor
deleted.
"""

import logging
from datetime import date, time
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.models.schedule import (
    WEEKDAY_CODES,
    SpecialDay,
    SpecialDayType,
    WorkSchedule,
    WorkScheduleAssignment,
)
from teacher_attendance.repositories.schedule_repository import (
    assignment_repository,
    special_day_repository,
    work_schedule_repository,
)
from teacher_attendance.schemas.schedule import (
    AssignmentCreate,
    SpecialDayUpsert,
    WorkScheduleCreate,
    WorkScheduleUpdate,
)
from teacher_attendance.utils.exceptions import BadRequestError, DuplicateError, NotFoundError
from teacher_attendance.utils.time_utils import format_hhmm, parse_hhmm, today_local

logger = logging.getLogger(__name__)


def _parse_time_field(value: str, field_name: str) -> time:
    try:
        return parse_hhmm(value)
    except ValueError:
        raise BadRequestError(
            f"잘못된 시각 형식입니다: {field_name} (Invalid {field_name} format. Use HH:MM, e.g. 07:00)"
        )


def _validate_working_days(days: list[str]) -> list[str]:
    invalid: list[str] = [d for d in days if d not in WEEKDAY_CODES]
    if invalid:
        raise BadRequestError(
            f"잘못된 근무 요일입니다: {', '.join(invalid)} "
            "(Invalid working days. Use: Mon, Tue, Wed, Thu, Fri, Sat, Sun)"
        )
    # 요일 순서로 정렬, 중복 제거 — canonical weekday order without duplicates
    return [d for d in WEEKDAY_CODES if d in days]


class ScheduleService:
    """근무 스케줄 관리 서비스."""

    # === 근무 스케줄 템플릿 (Work Schedule Templates) ===

    async def list_templates(self, db: AsyncSession) -> list[tuple[WorkSchedule, int]]:
        """템플릿 목록 (기본 우선, 이름순) — Templates with assignment counts."""
        return await work_schedule_repository.get_all_with_counts(db)

    async def get_template(self, db: AsyncSession, schedule_id: UUID) -> WorkSchedule:
        """템플릿 단건 조회 — Fetch one template or raise 404."""
        template: WorkSchedule | None = await work_schedule_repository.get_by_id(db, schedule_id)
        if template is None:
            raise NotFoundError("근무 스케줄을 찾을 수 없습니다 (Schedule template not found)")
        return template

    async def create_template(self, db: AsyncSession, data: WorkScheduleCreate) -> WorkSchedule:
        """템플릿을 생성합니다.

        Create a template. If ``is_default`` is set, the previous default is
        cleared first in the same transaction.

        Raises:
            BadRequestError: 시각/요일/허용 시간 검증 실패 (Validation failure)
            DuplicateError: 이름 중복 (Name already exists)
        """
        name: str = data.name.strip()
        start: time = _parse_time_field(data.start_time, "start_time")
        end: time = _parse_time_field(data.end_time, "end_time")
        if end <= start:
            raise BadRequestError("퇴근 시각은 출근 시각 이후여야 합니다 (End time must be after start time)")
        if data.late_tolerance_minutes < 0:
            raise BadRequestError("지각 허용 시간은 0 이상이어야 합니다 (Late tolerance must be non-negative)")
        working_days: list[str] = _validate_working_days(data.working_days)

        if await work_schedule_repository.get_by_name(db, name) is not None:
            raise DuplicateError("이미 존재하는 템플릿 이름입니다 (Template name already exists)")

        if data.is_default:
            await work_schedule_repository.unset_default(db)

        return await work_schedule_repository.create(
            db,
            {
                "name": name,
                "start_time": start,
                "end_time": end,
                "late_tolerance_minutes": data.late_tolerance_minutes,
                "working_days": working_days,
                "is_default": data.is_default,
            },
        )

    async def update_template(self, db: AsyncSession, schedule_id: UUID, data: WorkScheduleUpdate) -> WorkSchedule:
        """템플릿을 부분 수정합니다.

        Partially update a template. Setting ``is_default=True`` moves the
        default flag here; clearing it on the current default is rejected.

        Raises:
            NotFoundError: 템플릿 없음 (Template not found)
            BadRequestError: 검증 실패 또는 유일한 기본 템플릿 해제 시도
                             (Validation failure, or un-defaulting the sole default)
            DuplicateError: 이름 중복 (Name already exists)
        """
        template: WorkSchedule = await self.get_template(db, schedule_id)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if update_data.get("name") is not None:
            name: str = update_data["name"].strip()
            existing: WorkSchedule | None = await work_schedule_repository.get_by_name(db, name)
            if existing is not None and existing.id != template.id:
                raise DuplicateError("이미 존재하는 템플릿 이름입니다 (Template name already exists)")
            update_data["name"] = name

        start: time = (
            _parse_time_field(update_data["start_time"], "start_time")
            if update_data.get("start_time") is not None
            else template.start_time
        )
        end: time = (
            _parse_time_field(update_data["end_time"], "end_time")
            if update_data.get("end_time") is not None
            else template.end_time
        )
        if end <= start:
            raise BadRequestError("퇴근 시각은 출근 시각 이후여야 합니다 (End time must be after start time)")
        update_data["start_time"] = start
        update_data["end_time"] = end

        if update_data.get("late_tolerance_minutes") is not None and update_data["late_tolerance_minutes"] < 0:
            raise BadRequestError("지각 허용 시간은 0 이상이어야 합니다 (Late tolerance must be non-negative)")
        if update_data.get("working_days") is not None:
            update_data["working_days"] = _validate_working_days(update_data["working_days"])

        # None은 "변경 없음" — explicit nulls leave required columns untouched
        update_data = {k: v for k, v in update_data.items() if v is not None}

        is_default: bool | None = update_data.pop("is_default", None)
        if is_default is False and template.is_default:
            raise BadRequestError(
                "기본 템플릿은 해제할 수 없습니다. 다른 템플릿을 기본으로 지정하세요 "
                "(Cannot unset the default template; make another template the default instead)"
            )
        if is_default and not template.is_default:
            # 해제 먼저 실행 — unset must hit the DB before the new flag is flushed
            await work_schedule_repository.unset_default(db)
            update_data["is_default"] = True

        updated: WorkSchedule | None = await work_schedule_repository.update(db, template.id, update_data)
        return updated

    async def delete_template(self, db: AsyncSession, schedule_id: UUID) -> None:
        """템플릿을 삭제합니다.

        Delete a template that is neither the default nor referenced by any
        assignment.

        Raises:
            NotFoundError: 템플릿 없음 (Template not found)
            DuplicateError: 기간 적용에서 사용 중 (Still referenced by assignments)
            BadRequestError: 기본 템플릿 삭제 시도 (Deleting the default)
        """
        template: WorkSchedule = await self.get_template(db, schedule_id)
        in_use: int = await work_schedule_repository.count_assignments(db, template.id)
        if in_use:
            raise DuplicateError(
                f"기간 적용 {in_use}건에서 사용 중인 템플릿입니다 "
                f"(Cannot delete schedule template: currently used in {in_use} assignment(s))"
            )
        if template.is_default:
            raise BadRequestError(
                "기본 템플릿은 삭제할 수 없습니다 (Cannot delete the default template; set another default first)"
            )
        await work_schedule_repository.delete(db, template.id)

    def build_template_response(self, template: WorkSchedule, assignment_count: int = 0) -> dict[str, Any]:
        """템플릿 응답 딕셔너리 — Response dict for one template."""
        return {
            "id": template.id,
            "name": template.name,
            "start_time": format_hhmm(template.start_time),
            "end_time": format_hhmm(template.end_time),
            "late_tolerance_minutes": template.late_tolerance_minutes,
            "working_days": list(template.working_days or []),
            "is_default": template.is_default,
            "assignment_count": assignment_count,
            "created_at": template.created_at,
            "updated_at": template.updated_at,
        }

    # === 기간 적용 (Assignments) ===

    async def list_assignments(
        self,
        db: AsyncSession,
        work_schedule_id: UUID | None = None,
        active: bool = False,
    ) -> Sequence[WorkScheduleAssignment]:
        """기간 적용 목록. ``active``이면 오늘 이후 종료되는 것만.

        List assignments; with ``active`` only those ending today or later
        (organization timezone).
        """
        return await assignment_repository.get_filtered(
            db,
            work_schedule_id=work_schedule_id,
            active_on=today_local() if active else None,
        )

    async def create_assignment(
        self,
        db: AsyncSession,
        data: AssignmentCreate,
    ) -> tuple[WorkScheduleAssignment, Sequence[WorkScheduleAssignment]]:
        """기간 적용을 생성합니다. 겹침은 허용하되 표시합니다.

        Create an assignment. Overlapping assignments are allowed (the
        newest wins at resolution time) but are returned and logged.

        Returns:
            tuple[WorkScheduleAssignment, Sequence[WorkScheduleAssignment]]:
                (생성된 적용, 겹치는 기존 적용) (Created assignment, overlapping ones)

        Raises:
            BadRequestError: 종료일 < 시작일 (end_date before start_date)
            NotFoundError: 템플릿 없음 (Template not found)
        """
        if data.end_date < data.start_date:
            raise BadRequestError("종료일은 시작일 이후여야 합니다 (end_date must not be before start_date)")
        await self.get_template(db, data.work_schedule_id)

        created: WorkScheduleAssignment = await assignment_repository.create(
            db,
            {
                "work_schedule_id": data.work_schedule_id,
                "start_date": data.start_date,
                "end_date": data.end_date,
            },
        )
        overlapping: Sequence[WorkScheduleAssignment] = await assignment_repository.get_overlapping(
            db, data.start_date, data.end_date, exclude_id=created.id
        )
        if overlapping:
            logger.warning(
                "Assignment %s (%s..%s) overlaps %s",
                created.id, data.start_date, data.end_date,
                ", ".join(f"{a.id} ({a.start_date}..{a.end_date})" for a in overlapping),
            )
        assignment: WorkScheduleAssignment | None = await assignment_repository.get_with_schedule(db, created.id)
        return assignment, overlapping

    async def delete_assignment(self, db: AsyncSession, assignment_id: UUID) -> None:
        """기간 적용을 삭제합니다 — Delete an assignment or raise 404."""
        if not await assignment_repository.delete(db, assignment_id):
            raise NotFoundError("기간 적용을 찾을 수 없습니다 (Assignment not found)")

    def build_assignment_response(self, assignment: WorkScheduleAssignment) -> dict[str, Any]:
        """기간 적용 응답 딕셔너리 — Response dict for one assignment."""
        template: WorkSchedule = assignment.work_schedule
        return {
            "id": assignment.id,
            "work_schedule_id": assignment.work_schedule_id,
            "start_date": assignment.start_date,
            "end_date": assignment.end_date,
            "work_schedule": {
                "id": template.id,
                "name": template.name,
                "start_time": format_hhmm(template.start_time),
                "end_time": format_hhmm(template.end_time),
            },
            "created_at": assignment.created_at,
            "updated_at": assignment.updated_at,
        }

    # === 특별일 (Special Days) ===

    async def list_special_days(self, db: AsyncSession, month: str | None = None) -> Sequence[SpecialDay]:
        """특별일 목록. ``month``("YYYY-MM") 지정 시 해당 월만.

        List special days by date, optionally for one month.

        Raises:
            BadRequestError: 월 형식 오류 (Malformed month)
        """
        if month is None:
            return await special_day_repository.get_all(db, order_by=SpecialDay.date)
        try:
            first: date = date.fromisoformat(f"{month}-01")
        except ValueError:
            raise BadRequestError(f"잘못된 월 형식입니다: {month} (Invalid month format. Use YYYY-MM)")
        next_month: date = date(first.year + 1, 1, 1) if first.month == 12 else date(first.year, first.month + 1, 1)
        return await special_day_repository.get_in_range(db, first, date.fromordinal(next_month.toordinal() - 1))

    async def upsert_special_day(self, db: AsyncSession, data: SpecialDayUpsert) -> SpecialDay:
        """특별일을 날짜 기준으로 등록/교체합니다.

        Create the special day for ``data.date`` or replace the existing one.

        Raises:
            BadRequestError: 유형 또는 시각 검증 실패 (Invalid type or times)
        """
        if data.type not in {t.value for t in SpecialDayType}:
            raise BadRequestError(
                f"잘못된 특별일 유형입니다: {data.type} (Invalid type. Use: HOLIDAY, CUSTOM_SCHEDULE, OVERTIME)"
            )
        start: time | None = _parse_time_field(data.start_time, "start_time") if data.start_time else None
        end: time | None = _parse_time_field(data.end_time, "end_time") if data.end_time else None
        if start is not None and end is not None and end <= start:
            raise BadRequestError("종료 시각은 시작 시각 이후여야 합니다 (End time must be after start time)")

        values: dict[str, Any] = {
            "name": data.name.strip(),
            "type": data.type,
            "start_time": start,
            "end_time": end,
            "is_overtime": data.is_overtime,
            "notes": data.notes or None,
        }
        existing: SpecialDay | None = await special_day_repository.get_by_date(db, data.date)
        if existing is not None:
            return await special_day_repository.update(db, existing.id, values)
        return await special_day_repository.create(db, {"date": data.date, **values})

    async def delete_special_day(self, db: AsyncSession, special_day_id: UUID) -> None:
        """특별일을 삭제합니다 — Delete a special day or raise 404."""
        if not await special_day_repository.delete(db, special_day_id):
            raise NotFoundError("특별일을 찾을 수 없습니다 (Special day not found)")

    def build_special_day_response(self, special_day: SpecialDay) -> dict[str, Any]:
        """특별일 응답 딕셔너리 — Response dict for one special day."""
        return {
            "id": special_day.id,
            "date": special_day.date,
            "name": special_day.name,
            "type": special_day.type,
            "start_time": format_hhmm(special_day.start_time),
            "end_time": format_hhmm(special_day.end_time),
            "is_overtime": special_day.is_overtime,
            "notes": special_day.notes,
            "created_at": special_day.created_at,
            "updated_at": special_day.updated_at,
        }


# 싱글턴 인스턴스 — Singleton instance
schedule_service: ScheduleService = ScheduleService()
