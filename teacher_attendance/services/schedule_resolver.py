"""스케줄 해석 서비스 — 날짜별 유효 근무 스케줄 결정.

Schedule Resolver — Decides the single effective work schedule for a date.

Resolution is an ordered list of strategies evaluated against an in-memory
``ScheduleSnapshot``; the first strategy that returns a schedule wins:

    1. SpecialDayOverride   — 특별일 (holiday / custom hours / overtime)
    2. DateRangeAssignment  — 기간 적용, 겹치면 최신 생성분 우선
    3. DefaultTemplate      — 기본 템플릿

Strategies 2 and 3 reject dates outside the template's working days with
``NonWorkingDayError``. If nothing applies, ``ScheduleConfigurationError``.
Resolution itself never touches the clock or the database; only
``load_snapshot`` does I/O.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.config import settings
from teacher_attendance.models.schedule import SpecialDay, SpecialDayType, WorkSchedule, WorkScheduleAssignment
from teacher_attendance.repositories.schedule_repository import (
    assignment_repository,
    special_day_repository,
    work_schedule_repository,
)
from teacher_attendance.utils.exceptions import NonWorkingDayError, ScheduleConfigurationError
from teacher_attendance.utils.time_utils import iter_days

logger = logging.getLogger(__name__)


class ScheduleSource(str, enum.Enum):
    """유효 스케줄 출처 — Which layer produced an effective schedule."""

    SPECIAL_DAY = "special_day"
    ASSIGNMENT = "assignment"
    DEFAULT = "default"


@dataclass(frozen=True)
class EffectiveSchedule:
    """특정 날짜에 적용되는 단일 스케줄.

    The one schedule that applies to a concrete date after resolution.
    ``start_time``/``end_time`` are None for holidays (no work expected).
    """

    date: date
    source: ScheduleSource
    name: str
    start_time: time | None
    end_time: time | None
    late_tolerance_minutes: int
    is_overtime: bool = False
    schedule_id: UUID | None = None
    special_day_id: UUID | None = None
    special_day_type: str | None = None

    @property
    def expects_work(self) -> bool:
        """근무 예정 여부 — False for the holiday variant."""
        return self.start_time is not None


@dataclass
class ScheduleSnapshot:
    """해석에 필요한 스케줄 데이터의 읽기 전용 스냅샷.

    Read-only view of the schedule store for a date range.

    Attributes:
        special_days: 날짜 → 특별일 (Special days by date)
        assignments: 기간 적용 목록, 최신 생성순 (Assignments, newest first, templates loaded)
        default_template: 기본 템플릿 (The ``is_default`` template, if any)
    """

    special_days: dict[date, SpecialDay] = field(default_factory=dict)
    assignments: Sequence[WorkScheduleAssignment] = ()
    default_template: WorkSchedule | None = None

    def assignment_for(self, target: date) -> WorkScheduleAssignment | None:
        """날짜를 포함하는 최신 기간 적용 — Newest assignment covering ``target``."""
        for assignment in self.assignments:
            if assignment.covers(target):
                return assignment
        return None

    def regular_template(self, target: date) -> tuple[WorkSchedule, ScheduleSource] | None:
        """특별일을 무시한 정규 템플릿 (요일 검사 없음).

        The template the date would use without special days, ignoring
        working days: the covering assignment's, else the default.
        """
        assignment: WorkScheduleAssignment | None = self.assignment_for(target)
        if assignment is not None:
            return assignment.work_schedule, ScheduleSource.ASSIGNMENT
        if self.default_template is not None:
            return self.default_template, ScheduleSource.DEFAULT
        return None


def _from_template(target: date, template: WorkSchedule, source: ScheduleSource) -> EffectiveSchedule:
    return EffectiveSchedule(
        date=target,
        source=source,
        name=template.name,
        start_time=template.start_time,
        end_time=template.end_time,
        late_tolerance_minutes=template.late_tolerance_minutes,
        schedule_id=template.id,
    )


class ResolutionStrategy:
    """해석 전략 기본 클래스.

    Base class for one layer of the priority chain. ``resolve`` returns
    None to defer to the next strategy, or raises to stop the chain.
    """

    def resolve(self, target: date, snapshot: ScheduleSnapshot) -> EffectiveSchedule | None:
        raise NotImplementedError


class SpecialDayOverride(ResolutionStrategy):
    """특별일 덮어쓰기 전략.

    - HOLIDAY: 근무 없음 (no-work variant)
    - CUSTOM_SCHEDULE: 특별일 시각 사용, 두 시각이 모두 있어야 적용
      (custom times; falls through when either time is missing)
    - OVERTIME: 정규 템플릿 + 초과 근무 표시, 요일 검사 생략
      (regular template flagged overtime; working days are not checked)
    """

    def resolve(self, target: date, snapshot: ScheduleSnapshot) -> EffectiveSchedule | None:
        special_day: SpecialDay | None = snapshot.special_days.get(target)
        if special_day is None:
            return None

        if special_day.type == SpecialDayType.HOLIDAY.value:
            return EffectiveSchedule(
                date=target,
                source=ScheduleSource.SPECIAL_DAY,
                name=special_day.name,
                start_time=None,
                end_time=None,
                late_tolerance_minutes=0,
                is_overtime=False,
                special_day_id=special_day.id,
                special_day_type=special_day.type,
            )

        regular = snapshot.regular_template(target)
        template: WorkSchedule | None = regular[0] if regular is not None else None

        if special_day.type == SpecialDayType.CUSTOM_SCHEDULE.value:
            if special_day.start_time is None or special_day.end_time is None:
                return None
            tolerance: int = (
                template.late_tolerance_minutes
                if template is not None
                else settings.CUSTOM_SCHEDULE_FALLBACK_TOLERANCE_MINUTES
            )
            return EffectiveSchedule(
                date=target,
                source=ScheduleSource.SPECIAL_DAY,
                name=special_day.name,
                start_time=special_day.start_time,
                end_time=special_day.end_time,
                late_tolerance_minutes=tolerance,
                is_overtime=special_day.is_overtime,
                schedule_id=template.id if template is not None else None,
                special_day_id=special_day.id,
                special_day_type=special_day.type,
            )

        if special_day.type == SpecialDayType.OVERTIME.value:
            if template is None:
                # 정규 템플릿 없이 시각이 모두 지정된 초과 근무일만 허용
                if special_day.start_time is None or special_day.end_time is None:
                    raise ScheduleConfigurationError(target)
                tolerance = settings.CUSTOM_SCHEDULE_FALLBACK_TOLERANCE_MINUTES
            else:
                tolerance = template.late_tolerance_minutes
            return EffectiveSchedule(
                date=target,
                source=ScheduleSource.SPECIAL_DAY,
                name=special_day.name,
                start_time=special_day.start_time or template.start_time,
                end_time=special_day.end_time or template.end_time,
                late_tolerance_minutes=tolerance,
                is_overtime=True,
                schedule_id=template.id if template is not None else None,
                special_day_id=special_day.id,
                special_day_type=special_day.type,
            )

        logger.warning("Unknown special day type %r on %s, ignoring", special_day.type, target)
        return None


class DateRangeAssignment(ResolutionStrategy):
    """기간 적용 전략 — 날짜를 포함하는 최신 생성 기간 적용의 템플릿."""

    def resolve(self, target: date, snapshot: ScheduleSnapshot) -> EffectiveSchedule | None:
        assignment: WorkScheduleAssignment | None = snapshot.assignment_for(target)
        if assignment is None:
            return None
        if not assignment.work_schedule.works_on(target):
            raise NonWorkingDayError(target)
        return _from_template(target, assignment.work_schedule, ScheduleSource.ASSIGNMENT)


class DefaultTemplate(ResolutionStrategy):
    """기본 템플릿 전략."""

    def resolve(self, target: date, snapshot: ScheduleSnapshot) -> EffectiveSchedule | None:
        template: WorkSchedule | None = snapshot.default_template
        if template is None:
            return None
        if not template.works_on(target):
            raise NonWorkingDayError(target)
        return _from_template(target, template, ScheduleSource.DEFAULT)


# 우선순위 순서 — Priority order, first non-None result wins
DEFAULT_STRATEGIES: tuple[ResolutionStrategy, ...] = (
    SpecialDayOverride(),
    DateRangeAssignment(),
    DefaultTemplate(),
)


def resolve(
    target: date,
    snapshot: ScheduleSnapshot,
    strategies: Sequence[ResolutionStrategy] = DEFAULT_STRATEGIES,
) -> EffectiveSchedule:
    """날짜의 유효 스케줄을 결정합니다.

    Resolve the effective schedule for ``target`` from a snapshot.

    Args:
        target: 해석할 날짜 (Date to resolve)
        snapshot: 스케줄 스냅샷 (Schedule store snapshot covering ``target``)
        strategies: 우선순위 전략 목록 (Ordered strategies, defaults to the standard chain)

    Returns:
        EffectiveSchedule: 유효 스케줄 (The effective schedule)

    Raises:
        NonWorkingDayError: 템플릿의 근무 요일이 아님 (Benign: no attendance expected)
        ScheduleConfigurationError: 적용 가능한 템플릿 없음 (No assignment and no default)
    """
    for strategy in strategies:
        result: EffectiveSchedule | None = strategy.resolve(target, snapshot)
        if result is not None:
            return result
    raise ScheduleConfigurationError(target)


def build_date_schedule_map(snapshot: ScheduleSnapshot, start: date, end: date) -> dict[date, EffectiveSchedule]:
    """구간 내 각 날짜의 정규 스케줄 맵을 한 번에 만듭니다 (일괄 처리용).

    Build a ``date -> schedule`` map for every day in ``[start, end]`` in
    one pass, using assignments and the default template only. Special
    days and working days are NOT applied on this path; special days found
    in the snapshot are logged so the gap is visible to operators.

    Days with neither an assignment nor a default are left out of the map.

    Args:
        snapshot: 스케줄 스냅샷 (Snapshot loaded for the same range)
        start: 구간 시작일 (Range start, inclusive)
        end: 구간 종료일 (Range end, inclusive)

    Returns:
        dict[date, EffectiveSchedule]: 날짜별 스케줄 (Schedule per day)
    """
    schedule_map: dict[date, EffectiveSchedule] = {}
    for day in iter_days(start, end):
        regular = snapshot.regular_template(day)
        if regular is not None:
            schedule_map[day] = _from_template(day, regular[0], regular[1])

    ignored: list[str] = sorted(d.isoformat() for d in snapshot.special_days if start <= d <= end)
    if ignored:
        logger.warning("Bulk schedule map does not apply special days: %s", ", ".join(ignored))
    return schedule_map


async def load_snapshot(db: AsyncSession, start: date, end: date) -> ScheduleSnapshot:
    """[start, end] 구간의 스케줄 스냅샷을 로드합니다.

    Load everything resolution needs for a date range with three queries:
    special days in range, overlapping assignments with templates, and
    the default template.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        start: 구간 시작일 (Range start, inclusive)
        end: 구간 종료일 (Range end, inclusive)

    Returns:
        ScheduleSnapshot: 스케줄 스냅샷 (Snapshot for the range)
    """
    special_days: Sequence[SpecialDay] = await special_day_repository.get_in_range(db, start, end)
    assignments: Sequence[WorkScheduleAssignment] = await assignment_repository.get_overlapping(db, start, end)
    default_template: WorkSchedule | None = await work_schedule_repository.get_default(db)
    return ScheduleSnapshot(
        special_days={sd.date: sd for sd in special_days},
        assignments=assignments,
        default_template=default_template,
    )


async def resolve_for_date(db: AsyncSession, target: date) -> EffectiveSchedule:
    """DB에서 스냅샷을 읽어 단일 날짜를 해석합니다.

    Convenience wrapper: load a one-day snapshot and resolve it.

    Raises:
        NonWorkingDayError: 비근무일 (Non-working day)
        ScheduleConfigurationError: 설정 누락 (Missing configuration)
    """
    snapshot: ScheduleSnapshot = await load_snapshot(db, target, target)
    return resolve(target, snapshot)
