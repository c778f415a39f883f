"""근태 관리 레포지토리 — 근태 기록, QR 세션, 지문 로그 DB 쿼리 담당.

Attendance Repository — Database queries for attendance records, QR sessions
and raw fingerprint logs.

The attendance record is keyed by (teacher_id, date). Writers go through
``ensure_record`` (atomic insert-if-absent) and ``lock_record`` (row-locked
read) so concurrent check-in and check-out for the same teacher-day never
lose a whole write.
"""

import uuid
from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.models.attendance import Attendance, AttendanceStatus, FingerprintLog, QRSession
from teacher_attendance.repositories.base import BaseRepository


class AttendanceRepository(BaseRepository[Attendance]):
    """근태 기록 레포지토리.

    Attendance record repository with the atomic upsert primitives and
    teacher-scoped queries.

    Extends:
        BaseRepository[Attendance]
    """

    def __init__(self) -> None:
        super().__init__(Attendance)

    async def ensure_record(self, db: AsyncSession, teacher_id: UUID, target: date) -> None:
        """근태 기록이 없으면 ABSENT 자리표시자를 생성합니다 (원자적).

        Insert an ABSENT placeholder for (teacher_id, target) unless one
        exists. Uses the backend's ON CONFLICT DO NOTHING so two concurrent
        callers never both insert nor fail on the unique key.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            teacher_id: 교사 UUID (Teacher UUID)
            target: 근태 날짜 (Attendance date)
        """
        dialect: str = db.get_bind().dialect.name
        insert_fn = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = (
            insert_fn(Attendance)
            .values(
                id=uuid.uuid4(),
                teacher_id=teacher_id,
                date=target,
                status=AttendanceStatus.ABSENT.value,
                late_minutes=0,
            )
            .on_conflict_do_nothing(index_elements=["teacher_id", "date"])
        )
        await db.execute(stmt)

    async def lock_record(self, db: AsyncSession, teacher_id: UUID, target: date) -> Attendance:
        """근태 기록을 행 잠금으로 조회합니다.

        Read the record for (teacher_id, target) with SELECT ... FOR UPDATE
        (a no-op on SQLite) and refresh any stale identity-map copy.
        Must be called after ``ensure_record``.

        Returns:
            Attendance: 잠긴 근태 기록 (Locked attendance record)
        """
        query: Select = (
            select(Attendance)
            .where(Attendance.teacher_id == teacher_id, Attendance.date == target)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one()

    async def get_for_teacher(self, db: AsyncSession, teacher_id: UUID, target: date) -> Attendance | None:
        """특정 교사의 특정 날짜 근태 기록 — Record for one teacher-day, if any."""
        result = await db.execute(
            select(Attendance).where(Attendance.teacher_id == teacher_id, Attendance.date == target)
        )
        return result.scalar_one_or_none()

    async def get_teacher_attendances(
        self,
        db: AsyncSession,
        teacher_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> Sequence[Attendance]:
        """교사의 근태 기록 목록을 최신순으로 조회합니다.

        List a teacher's records, newest date first, optionally within a range.
        """
        query: Select = select(Attendance).where(Attendance.teacher_id == teacher_id)
        if date_from is not None:
            query = query.where(Attendance.date >= date_from)
        if date_to is not None:
            query = query.where(Attendance.date <= date_to)
        result = await db.execute(query.order_by(Attendance.date.desc()))
        return result.scalars().all()


class QRSessionRepository(BaseRepository[QRSession]):
    """QR 세션 레포지토리.

    Extends:
        BaseRepository[QRSession]
    """

    def __init__(self) -> None:
        super().__init__(QRSession)

    async def deactivate(self, db: AsyncSession, target: date, session_type: str | None = None) -> int:
        """날짜(및 유형)의 활성 세션을 한 번의 UPDATE로 비활성화합니다.

        Deactivate every active session for ``target`` (optionally only one
        type) in a single UPDATE statement.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            target: 근태 날짜 (Attendance date)
            session_type: 유형 필터, None이면 전체 (Type filter; None for both types)

        Returns:
            int: 비활성화된 세션 수 (Number of sessions deactivated)
        """
        stmt = update(QRSession).where(QRSession.date == target, QRSession.is_active.is_(True))
        if session_type is not None:
            stmt = stmt.where(QRSession.type == session_type)
        result = await db.execute(
            stmt.values(is_active=False).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def get_by_token(self, db: AsyncSession, token: str) -> QRSession | None:
        """토큰으로 세션을 조회합니다 — Fetch a session by its token."""
        result = await db.execute(select(QRSession).where(QRSession.token == token))
        return result.scalar_one_or_none()

    async def get_active(self, db: AsyncSession, target: date, now: datetime) -> Sequence[QRSession]:
        """날짜의 활성·미만료 세션 목록 (CHECK_IN 먼저).

        Active, not-yet-expired sessions for a date, ordered by type so
        CHECK_IN precedes CHECK_OUT.
        """
        query: Select = (
            select(QRSession)
            .where(
                QRSession.date == target,
                QRSession.is_active.is_(True),
                QRSession.valid_until >= now,
            )
            .order_by(QRSession.type, QRSession.valid_from)
        )
        result = await db.execute(query)
        return result.scalars().all()


class FingerprintLogRepository(BaseRepository[FingerprintLog]):
    """지문 로그 레포지토리 — 추가 전용.

    Extends:
        BaseRepository[FingerprintLog]
    """

    def __init__(self) -> None:
        super().__init__(FingerprintLog)

    async def add_many(self, db: AsyncSession, rows: list[dict[str, Any]]) -> list[FingerprintLog]:
        """원본 로그 여러 건을 한 번의 flush로 저장합니다.

        Persist a batch of raw logs with a single flush.
        """
        logs: list[FingerprintLog] = [FingerprintLog(**row) for row in rows]
        db.add_all(logs)
        await db.flush()
        return logs


# 싱글턴 인스턴스 — Singleton instances
attendance_repository: AttendanceRepository = AttendanceRepository()
qr_session_repository: QRSessionRepository = QRSessionRepository()
fingerprint_log_repository: FingerprintLogRepository = FingerprintLogRepository()
