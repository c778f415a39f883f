"""기관 타임존 기준 시간 변환 유틸리티 모듈.

Organization-timezone time helpers.
Schedule times ("HH:MM") and calendar dates are wall-clock values in
``settings.ORGANIZATION_TIMEZONE``; instants are stored as aware UTC.
Every conversion between the two goes through this module.
"""

from collections.abc import Iterator
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from teacher_attendance.config import settings


def org_timezone() -> ZoneInfo:
    """설정된 기관 타임존 — Configured organization timezone."""
    return ZoneInfo(settings.ORGANIZATION_TIMEZONE)


def now_utc() -> datetime:
    """현재 UTC 시각 — Current aware UTC instant."""
    return datetime.now(timezone.utc)


def to_local(instant: datetime) -> datetime:
    """UTC(또는 aware) 시각을 기관 현지 시각으로 변환합니다.

    Convert an instant to organization-local wall-clock time.
    Naive values are taken as UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(org_timezone())


def local_date(instant: datetime) -> date:
    """시각의 기관 현지 날짜 — Organization-local calendar date of an instant."""
    return to_local(instant).date()


def today_local(now: datetime | None = None) -> date:
    """기관 기준 오늘 날짜 — "Today" in the organization timezone."""
    return local_date(now if now is not None else now_utc())


def as_utc(value: datetime) -> datetime:
    """입력 시각을 aware UTC로 정규화합니다.

    Normalize a client- or device-supplied datetime to aware UTC.
    Naive values carry no offset and are read as organization-local
    wall-clock time.

    Args:
        value: 입력 시각 (Naive local or aware datetime)

    Returns:
        datetime: aware UTC 시각 (Aware UTC instant)
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=org_timezone())
    return value.astimezone(timezone.utc)


def local_to_utc(target: date, wall_clock: time) -> datetime:
    """기관 현지 날짜+시각을 UTC 시각으로 변환 — Local date + wall-clock time as aware UTC."""
    return datetime.combine(target, wall_clock, tzinfo=org_timezone()).astimezone(timezone.utc)


def minutes_since_local_midnight(instant: datetime) -> int:
    """기관 현지 자정 이후 경과 분 (초 단위 절사).

    Whole minutes since organization-local midnight; seconds are truncated.
    """
    local: datetime = to_local(instant)
    return local.hour * 60 + local.minute


def time_to_minutes(value: time) -> int:
    """벽시계 시각의 자정 이후 분 — Minutes since midnight of a wall-clock time."""
    return value.hour * 60 + value.minute


def parse_hhmm(value: str) -> time:
    """"HH:MM" 문자열을 time으로 파싱합니다.

    Parse a strict 24-hour "HH:MM" string.

    Raises:
        ValueError: 형식이 잘못된 경우 (Malformed value)
    """
    parts: list[str] = value.split(":")
    if len(parts) != 2 or not all(len(p) == 2 and p.isdigit() for p in parts):
        raise ValueError(f"Invalid time format: {value!r} (expected HH:MM)")
    return time(int(parts[0]), int(parts[1]))


def format_hhmm(value: time | None) -> str | None:
    """time을 "HH:MM" 문자열로 — Format a wall-clock time as "HH:MM"."""
    if value is None:
        return None
    return value.strftime("%H:%M")


def parse_date_param(value: str | None, now: datetime | None = None) -> date:
    """쿼리 파라미터 날짜를 파싱합니다 — "today" 또는 YYYY-MM-DD.

    Parse a date query parameter. ``None`` and "today" mean today in the
    organization timezone.

    Raises:
        ValueError: 형식이 잘못된 경우 (Malformed date)
    """
    if value is None or value == "today":
        return today_local(now)
    return date.fromisoformat(value)


def iter_days(start: date, end: date) -> Iterator[date]:
    """시작일부터 종료일까지(포함) 하루씩 — Each calendar day in [start, end]."""
    current: date = start
    while current <= end:
        yield current
        current += timedelta(days=1)
