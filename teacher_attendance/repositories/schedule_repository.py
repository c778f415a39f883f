"""근무 스케줄 레포지토리 — 템플릿, 기간 적용, 특별일 DB 쿼리 담당.

Schedule Repository — Database queries for schedule templates, date-range
assignments and special days. The range queries here are what the resolver
snapshot is built from, so a whole import batch costs a fixed number of
round trips regardless of how many logs it carries.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from teacher_attendance.models.schedule import SpecialDay, WorkSchedule, WorkScheduleAssignment
from teacher_attendance.repositories.base import BaseRepository


class WorkScheduleRepository(BaseRepository[WorkSchedule]):
    """근무 스케줄 템플릿 레포지토리.

    Work schedule template repository with default-flag helpers.

    Extends:
        BaseRepository[WorkSchedule]
    """

    def __init__(self) -> None:
        super().__init__(WorkSchedule)

    async def get_default(self, db: AsyncSession) -> WorkSchedule | None:
        """기본 템플릿을 조회합니다 — Fetch the template flagged ``is_default``."""
        result = await db.execute(select(WorkSchedule).where(WorkSchedule.is_default.is_(True)))
        return result.scalar_one_or_none()

    async def get_by_name(self, db: AsyncSession, name: str) -> WorkSchedule | None:
        """이름으로 템플릿을 조회합니다 — Fetch a template by its unique name."""
        result = await db.execute(select(WorkSchedule).where(WorkSchedule.name == name))
        return result.scalar_one_or_none()

    async def get_all_with_counts(self, db: AsyncSession) -> list[tuple[WorkSchedule, int]]:
        """모든 템플릿과 각 템플릿의 기간 적용 개수를 조회합니다.

        List every template with its assignment count, default first, then by name.

        Returns:
            list[tuple[WorkSchedule, int]]: (템플릿, 적용 개수) 목록
                                            (Template and assignment count pairs)
        """
        counts = (
            select(
                WorkScheduleAssignment.work_schedule_id,
                func.count(WorkScheduleAssignment.id).label("cnt"),
            )
            .group_by(WorkScheduleAssignment.work_schedule_id)
            .subquery()
        )
        query: Select = (
            select(WorkSchedule, func.coalesce(counts.c.cnt, 0))
            .outerjoin(counts, counts.c.work_schedule_id == WorkSchedule.id)
            .order_by(WorkSchedule.is_default.desc(), WorkSchedule.name)
        )
        result = await db.execute(query)
        return [(row[0], int(row[1])) for row in result.all()]

    async def count_assignments(self, db: AsyncSession, schedule_id: UUID) -> int:
        """템플릿을 참조하는 기간 적용 수 — Number of assignments referencing a template."""
        query: Select = (
            select(func.count())
            .select_from(WorkScheduleAssignment)
            .where(WorkScheduleAssignment.work_schedule_id == schedule_id)
        )
        return (await db.execute(query)).scalar() or 0

    async def unset_default(self, db: AsyncSession) -> None:
        """현재 기본 템플릿의 기본 플래그를 해제합니다.

        Clear ``is_default`` on every template. Always followed by setting
        the new default in the same transaction.
        """
        await db.execute(
            update(WorkSchedule)
            .where(WorkSchedule.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )


class WorkScheduleAssignmentRepository(BaseRepository[WorkScheduleAssignment]):
    """기간별 스케줄 적용 레포지토리.

    Assignment repository. Every query eager-loads the referenced template
    and orders newest first, which is the overlap tie-break rule.

    Extends:
        BaseRepository[WorkScheduleAssignment]
    """

    def __init__(self) -> None:
        super().__init__(WorkScheduleAssignment)

    def _base_query(self) -> Select:
        return (
            select(WorkScheduleAssignment)
            .options(selectinload(WorkScheduleAssignment.work_schedule))
            .order_by(WorkScheduleAssignment.created_at.desc(), WorkScheduleAssignment.id.desc())
        )

    async def get_with_schedule(self, db: AsyncSession, assignment_id: UUID) -> WorkScheduleAssignment | None:
        """템플릿을 포함하여 단건 조회 — Fetch one assignment with its template loaded."""
        result = await db.execute(self._base_query().where(WorkScheduleAssignment.id == assignment_id))
        return result.scalar_one_or_none()

    async def get_overlapping(
        self,
        db: AsyncSession,
        start: date,
        end: date,
        exclude_id: UUID | None = None,
    ) -> Sequence[WorkScheduleAssignment]:
        """[start, end] 구간과 겹치는 기간 적용을 조회합니다.

        Retrieve every assignment whose inclusive range intersects
        ``[start, end]``, newest first, with templates loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            start: 구간 시작일 (Range start, inclusive)
            end: 구간 종료일 (Range end, inclusive)
            exclude_id: 제외할 적용 ID, 선택 (Assignment to leave out, e.g. the one just created)

        Returns:
            Sequence[WorkScheduleAssignment]: 겹치는 적용 목록 (Overlapping assignments)
        """
        query: Select = self._base_query().where(
            WorkScheduleAssignment.start_date <= end,
            WorkScheduleAssignment.end_date >= start,
        )
        if exclude_id is not None:
            query = query.where(WorkScheduleAssignment.id != exclude_id)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_filtered(
        self,
        db: AsyncSession,
        work_schedule_id: UUID | None = None,
        active_on: date | None = None,
    ) -> Sequence[WorkScheduleAssignment]:
        """필터 조건에 맞는 기간 적용 목록을 조회합니다.

        List assignments, optionally for one template and/or only those not
        yet ended on ``active_on``.
        """
        query: Select = self._base_query()
        if work_schedule_id is not None:
            query = query.where(WorkScheduleAssignment.work_schedule_id == work_schedule_id)
        if active_on is not None:
            query = query.where(WorkScheduleAssignment.end_date >= active_on)
        result = await db.execute(query)
        return result.scalars().all()


class SpecialDayRepository(BaseRepository[SpecialDay]):
    """특별일 레포지토리.

    Special day repository — point lookup by date and range listing.

    Extends:
        BaseRepository[SpecialDay]
    """

    def __init__(self) -> None:
        super().__init__(SpecialDay)

    async def get_by_date(self, db: AsyncSession, target: date) -> SpecialDay | None:
        """날짜로 특별일을 조회합니다 — Fetch the special day for a date, if any."""
        result = await db.execute(select(SpecialDay).where(SpecialDay.date == target))
        return result.scalar_one_or_none()

    async def get_in_range(self, db: AsyncSession, start: date, end: date) -> Sequence[SpecialDay]:
        """[start, end] 구간의 특별일 목록 — Special days within an inclusive range, by date."""
        query: Select = (
            select(SpecialDay)
            .where(SpecialDay.date >= start, SpecialDay.date <= end)
            .order_by(SpecialDay.date)
        )
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instances
work_schedule_repository: WorkScheduleRepository = WorkScheduleRepository()
assignment_repository: WorkScheduleAssignmentRepository = WorkScheduleAssignmentRepository()
special_day_repository: SpecialDayRepository = SpecialDayRepository()
