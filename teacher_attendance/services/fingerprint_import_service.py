"""지문 로그 가져오기 서비스 — 원본 스캔 로그를 교사별 일일 근태로 조정.

Fingerprint Import Service — Reconciles a batch of raw device scans into
per-teacher-per-day attendance records.

Steps:
    1. 로그별 검증 및 원본 저장 (Validate each log; persist the survivors raw)
    2. 날짜 범위의 스케줄 맵을 한 번에 구성 (One schedule map for the whole range)
    3. 배지 ID → 교사 일괄 조회 (One bulk teacher lookup)
    4. (교사, 날짜)별 그룹화: 최초 IN, 최종 OUT (Group; earliest IN, latest OUT)
    5. 각 그룹을 스캔 경로와 같은 상태 전이로 반영 (Same transitions as the QR scan path)

Schedule lookups are O(days + assignments) regardless of batch size.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.config import settings
from teacher_attendance.models.attendance import Attendance, FingerprintType
from teacher_attendance.models.user import Teacher
from teacher_attendance.repositories.attendance_repository import fingerprint_log_repository
from teacher_attendance.repositories.user_repository import teacher_repository
from teacher_attendance.schemas.fingerprint import FingerprintLogInput
from teacher_attendance.services.attendance_service import attendance_service
from teacher_attendance.services.schedule_resolver import (
    EffectiveSchedule,
    ScheduleSnapshot,
    build_date_schedule_map,
    load_snapshot,
)
from teacher_attendance.utils.exceptions import BadRequestError
from teacher_attendance.utils.time_utils import as_utc, local_date, to_local

logger = logging.getLogger(__name__)


@dataclass
class _ScanRow:
    """정규화된 스캔 한 건 — One validated scan as an aware UTC instant and its local date."""

    fingerprint_id: str
    scanned_at: datetime
    raw_type: str
    date: date

    def to_log_row(self) -> dict[str, Any]:
        return {"fingerprint_id": self.fingerprint_id, "scanned_at": self.scanned_at, "raw_type": self.raw_type}


@dataclass
class _TeacherDay:
    """(교사, 날짜) 그룹 — Earliest IN and latest OUT seen for one teacher-day."""

    teacher: Teacher
    date: date
    check_in: datetime | None = None
    check_out: datetime | None = None

    def add(self, scanned_at: datetime, raw_type: str) -> None:
        if raw_type == FingerprintType.IN.value:
            if self.check_in is None or scanned_at < self.check_in:
                self.check_in = scanned_at
        elif self.check_out is None or scanned_at > self.check_out:
            self.check_out = scanned_at


@dataclass
class ImportResult:
    """가져오기 결과 — Aggregate counts, local date range and samples."""

    imported: int = 0
    skipped: int = 0
    start: date | None = None
    end: date | None = None
    samples: list[dict[str, Any]] = field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return {
            "imported": self.imported,
            "skipped": self.skipped,
            "processed_date_range": {"start": self.start, "end": self.end},
            "samples": self.samples,
        }


def _hhmm(instant: datetime | None) -> str | None:
    return to_local(instant).strftime("%H:%M") if instant is not None else None


class FingerprintImportService:
    """지문 로그 가져오기 서비스."""

    def validate_logs(self, raw_logs: list[Any]) -> tuple[list[_ScanRow], int]:
        """로그를 한 건씩 검증하고 UTC 시각과 현지 날짜로 정규화합니다.

        Validate each raw entry independently and normalize it to an aware
        UTC instant plus its organization-local date. Entries whose time
        cannot be represented after conversion (e.g. year 1 or year 9999
        near the boundary) are skipped like any other malformed entry.

        Returns:
            tuple[list[_ScanRow], int]: (유효 로그, 건너뛴 수) (Valid scans, skipped count)
        """
        valid: list[_ScanRow] = []
        skipped: int = 0
        for raw in raw_logs:
            try:
                log: FingerprintLogInput = FingerprintLogInput.model_validate(raw)
                scanned_at: datetime = as_utc(log.scanned_at)
                day: date = local_date(scanned_at)
            except (ValidationError, OverflowError, ValueError):
                skipped += 1
                continue
            valid.append(_ScanRow(log.fingerprint_id, scanned_at, log.raw_type, day))
        return valid, skipped

    async def import_logs(self, db: AsyncSession, raw_logs: list[Any]) -> ImportResult:
        """지문 로그 배치를 가져와 근태 기록으로 반영합니다.

        Import a batch of raw device logs and reconcile attendance.

        Malformed entries are skipped and counted, never fatal. Logs whose
        badge id matches no teacher are still persisted and counted as
        imported but do not produce attendance.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            raw_logs: 원본 로그 목록 (Raw entries: fingerprint_id, scanned_at, raw_type)

        Returns:
            ImportResult: 가져오기 결과 (Counts, date range, samples)

        Raises:
            BadRequestError: 기본 스케줄 템플릿 없음 (No default schedule configured)
        """
        rows, skipped = self.validate_logs(raw_logs)
        result = ImportResult(skipped=skipped)
        if not rows:
            logger.info("Fingerprint import: nothing to import, %d skipped", skipped)
            return result

        # 1. 원본 저장 — persist raw evidence (UTC instants)
        await fingerprint_log_repository.add_many(db, [row.to_log_row() for row in rows])
        result.imported = len(rows)
        result.start = min(row.date for row in rows)
        result.end = max(row.date for row in rows)

        # 2. 범위 스케줄 맵 — one snapshot, one map
        snapshot: ScheduleSnapshot = await load_snapshot(db, result.start, result.end)
        if snapshot.default_template is None:
            raise BadRequestError(
                "기본 근무 스케줄이 없습니다 (No work schedule configured. Please create a default schedule first.)"
            )
        schedule_map: dict[date, EffectiveSchedule] = build_date_schedule_map(snapshot, result.start, result.end)

        # 3. 교사 일괄 조회 — one teacher lookup
        teachers: dict[str, Teacher] = await teacher_repository.get_by_fingerprint_ids(
            db, (row.fingerprint_id for row in rows)
        )

        # 4. (교사, 날짜) 그룹화 — first IN / last OUT per teacher-day
        groups: dict[tuple[UUID, date], _TeacherDay] = {}
        unmatched: defaultdict[str, int] = defaultdict(int)
        for row in rows:
            teacher: Teacher | None = teachers.get(row.fingerprint_id)
            if teacher is None:
                unmatched[row.fingerprint_id] += 1
                continue
            key = (teacher.id, row.date)
            if key not in groups:
                groups[key] = _TeacherDay(teacher=teacher, date=row.date)
            groups[key].add(row.scanned_at, row.raw_type)
        if unmatched:
            logger.info("Fingerprint import: no teacher for badge ids %s", sorted(unmatched))

        # 5. 상태 전이 반영 — same transitions as the scan path
        for group in sorted(groups.values(), key=lambda g: (g.date, g.teacher.nip)):
            schedule: EffectiveSchedule = schedule_map[group.date]
            attendance: Attendance = await attendance_service.record_events(
                db,
                group.teacher.id,
                group.date,
                schedule,
                check_in=group.check_in,
                check_out=group.check_out,
            )
            if len(result.samples) < settings.FINGERPRINT_SAMPLE_LIMIT:
                result.samples.append({
                    "teacher_name": group.teacher.name,
                    "teacher_nip": group.teacher.nip,
                    "date": group.date,
                    "check_in": _hhmm(attendance.check_in_time),
                    "check_out": _hhmm(attendance.check_out_time),
                    "status": attendance.status.lower(),
                    "late_minutes": attendance.late_minutes,
                    "schedule_used": schedule.name,
                })

        logger.info(
            "Fingerprint import: %d imported, %d skipped, %d teacher-days, range %s..%s",
            result.imported, result.skipped, len(groups), result.start, result.end,
        )
        return result


# 싱글턴 인스턴스 — Singleton instance
fingerprint_import_service: FingerprintImportService = FingerprintImportService()
