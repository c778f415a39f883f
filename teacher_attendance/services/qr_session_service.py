"""QR 세션 서비스 — 시간 제한 QR 토큰 생성, 조회, 스캔 처리.

QR Session Service — Generates, lists and validates time-boxed QR tokens
for check-in and check-out.

At most one session per (date, type) is active: generation deactivates
the previous ones with a single UPDATE before inserting, and a partial
unique index rejects the loser of two concurrent generations.
"""

import logging
import secrets
from datetime import date, datetime, timedelta
from typing import Any, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.config import settings
from teacher_attendance.models.attendance import Attendance, QRSession, QRSessionType
from teacher_attendance.models.user import Teacher
from teacher_attendance.repositories.attendance_repository import qr_session_repository
from teacher_attendance.services.attendance_service import attendance_service
from teacher_attendance.services.schedule_resolver import EffectiveSchedule, resolve_for_date
from teacher_attendance.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    ExpiredQRTokenError,
    InvalidQRTokenError,
    NotFoundError,
    ScheduleNotResolvedError,
)
from teacher_attendance.utils.time_utils import as_utc, local_to_utc, now_utc, parse_date_param, today_local

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """추측 불가능한 64자 16진수 토큰 — 64 hex chars from 32 random bytes."""
    return secrets.token_hex(32)


class QRSessionService:
    """QR 세션 서비스.

    QR session service handling manual and schedule-derived generation,
    active-session listing, and the teacher scan operation.
    """

    async def _create_session(
        self,
        db: AsyncSession,
        session_type: str,
        target: date,
        valid_from: datetime,
        valid_until: datetime,
    ) -> QRSession:
        try:
            return await qr_session_repository.create(
                db,
                {
                    "type": session_type,
                    "token": generate_token(),
                    "date": target,
                    "valid_from": valid_from,
                    "valid_until": valid_until,
                    "is_active": True,
                },
            )
        except IntegrityError:
            await db.rollback()
            logger.warning("Concurrent QR generation for %s %s lost the race", target, session_type)
            raise DuplicateError(
                "동시에 다른 QR 세션이 생성되었습니다 (Another QR session was generated concurrently)"
            )

    async def generate(
        self,
        db: AsyncSession,
        session_type: str,
        target: date | None = None,
        valid_from: datetime | None = None,
        valid_until: datetime | None = None,
        now: datetime | None = None,
    ) -> QRSession:
        """QR 세션을 생성합니다. 같은 날짜·유형의 기존 활성 세션은 비활성화됩니다.

        Generate a QR session. Active sessions for the same (date, type)
        are deactivated first.

        Defaults: ``target`` = today (organization timezone), ``valid_from``
        = now, ``valid_until`` = ``valid_from`` + QR_DEFAULT_VALIDITY_MINUTES.
        Naive datetimes are organization-local wall-clock times.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            session_type: 유형 "CHECK_IN" | "CHECK_OUT" (Session type)
            target: 근태 날짜, 선택 (Attendance date)
            valid_from: 유효 시작, 선택 (Window start)
            valid_until: 유효 종료, 선택 (Window end)
            now: 기준 현재 시각, 선택 (Reference instant, defaults to the clock)

        Returns:
            QRSession: 생성된 세션 (Created session)

        Raises:
            BadRequestError: 유형이 잘못되었거나 valid_until ≤ valid_from
                             (Invalid type or empty window)
            DuplicateError: 동시 생성 충돌 (Lost a concurrent generation race)
        """
        if session_type not in {t.value for t in QRSessionType}:
            raise BadRequestError(
                f"유효하지 않은 QR 유형입니다: {session_type} (Invalid type. Use: CHECK_IN, CHECK_OUT)"
            )

        now = now or now_utc()
        target = target or today_local(now)
        start: datetime = as_utc(valid_from) if valid_from is not None else now
        end: datetime = (
            as_utc(valid_until)
            if valid_until is not None
            else start + timedelta(minutes=settings.QR_DEFAULT_VALIDITY_MINUTES)
        )
        if end <= start:
            raise BadRequestError("유효 종료 시각은 시작 시각 이후여야 합니다 (validUntil must be after validFrom)")

        deactivated: int = await qr_session_repository.deactivate(db, target, session_type)
        session: QRSession = await self._create_session(db, session_type, target, start, end)
        logger.info(
            "Generated %s QR session for %s (%s - %s), deactivated %d",
            session_type, target, start.isoformat(), end.isoformat(), deactivated,
        )
        return session

    async def auto_generate(
        self,
        db: AsyncSession,
        target: date | None = None,
        now: datetime | None = None,
    ) -> tuple[EffectiveSchedule, list[QRSession]]:
        """유효 스케줄로부터 출근/퇴근 세션을 함께 생성합니다.

        Derive both sessions from the date's effective schedule:
        CHECK_IN around the start time, CHECK_OUT around the end time
        (offsets from settings). All active sessions for the date are
        deactivated first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            target: 근태 날짜, 기본값 오늘 (Attendance date, defaults to today)
            now: 기준 현재 시각, 선택 (Reference instant for "today")

        Returns:
            tuple[EffectiveSchedule, list[QRSession]]: (유효 스케줄, [출근, 퇴근] 세션)
                                                       (Schedule used, [CHECK_IN, CHECK_OUT])

        Raises:
            ScheduleNotResolvedError: 스케줄 해석 실패 (404, no resolvable schedule)
            NotFoundError: 휴일 등 근무 시각 없음 (404, schedule has no working hours)
        """
        target = target or today_local(now)
        schedule: EffectiveSchedule = await resolve_for_date(db, target)
        if not schedule.expects_work:
            raise NotFoundError(
                f"{target.isoformat()} 에는 근무 시간이 없습니다 (No working hours on {target.isoformat()}: {schedule.name})"
            )

        start_at: datetime = local_to_utc(target, schedule.start_time)
        end_at: datetime = local_to_utc(target, schedule.end_time)
        windows: list[tuple[str, datetime, datetime]] = [
            (
                QRSessionType.CHECK_IN.value,
                start_at - timedelta(minutes=settings.QR_CHECK_IN_OPENS_BEFORE_MINUTES),
                start_at + timedelta(minutes=settings.QR_CHECK_IN_CLOSES_AFTER_MINUTES),
            ),
            (
                QRSessionType.CHECK_OUT.value,
                end_at - timedelta(minutes=settings.QR_CHECK_OUT_OPENS_BEFORE_MINUTES),
                end_at + timedelta(minutes=settings.QR_CHECK_OUT_CLOSES_AFTER_MINUTES),
            ),
        ]

        await qr_session_repository.deactivate(db, target)
        sessions: list[QRSession] = []
        for session_type, valid_from, valid_until in windows:
            sessions.append(await self._create_session(db, session_type, target, valid_from, valid_until))

        logger.info("Auto-generated QR sessions for %s from %s schedule %r", target, schedule.source.value, schedule.name)
        return schedule, sessions

    async def list_active(
        self,
        db: AsyncSession,
        date_param: str | None = None,
        now: datetime | None = None,
    ) -> tuple[date, Sequence[QRSession]]:
        """날짜의 활성·미만료 세션 목록을 조회합니다.

        List active, non-expired sessions for a date ("today" or YYYY-MM-DD).

        Raises:
            BadRequestError: 날짜 형식 오류 (Malformed date)
        """
        now = now or now_utc()
        try:
            target: date = parse_date_param(date_param, now)
        except ValueError:
            raise BadRequestError(
                f"잘못된 날짜 형식입니다: {date_param} (Invalid date. Use YYYY-MM-DD or 'today')"
            )
        sessions: Sequence[QRSession] = await qr_session_repository.get_active(db, target, now)
        return target, sessions

    async def check(
        self,
        db: AsyncSession,
        token: str,
        teacher: Teacher,
        now: datetime | None = None,
    ) -> tuple[QRSession, Attendance]:
        """QR 토큰을 검증하고 교사의 출퇴근을 기록합니다 (스캔).

        Validate a scanned token and apply exactly one attendance
        transition for the teacher on the session's date.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            token: 스캔한 토큰 (Scanned token)
            teacher: 스캔한 교사 (Scanning teacher)
            now: 스캔 시각, 선택 (Scan instant, defaults to the clock)

        Returns:
            tuple[QRSession, Attendance]: (세션, 갱신된 근태 기록) (Session and updated record)

        Raises:
            InvalidQRTokenError: 없는 토큰 또는 비활성 (Unknown or inactive token)
            ExpiredQRTokenError: 유효 구간 밖 (Outside the validity window)
            BadRequestError: 해당 날짜의 스케줄 없음 (No schedule for the session date)
        """
        now = now or now_utc()
        session: QRSession | None = await qr_session_repository.get_by_token(db, token)
        if session is None or not session.is_active:
            raise InvalidQRTokenError("유효하지 않은 QR 코드입니다 (Invalid or inactive QR code)")
        if not session.is_valid_at(now):
            raise ExpiredQRTokenError("QR 코드 유효 시간이 아닙니다 (QR code is expired or not yet valid)")

        try:
            schedule: EffectiveSchedule = await resolve_for_date(db, session.date)
        except ScheduleNotResolvedError as exc:
            raise BadRequestError(f"근무 스케줄이 없습니다 (No work schedule: {exc.detail})")

        if session.type == QRSessionType.CHECK_IN.value:
            attendance: Attendance = await attendance_service.record_events(
                db, teacher.id, session.date, schedule, check_in=now
            )
        else:
            attendance = await attendance_service.record_events(
                db, teacher.id, session.date, schedule, check_out=now
            )
        return session, attendance

    def build_session_response(self, session: QRSession) -> dict[str, Any]:
        """QR 세션 응답 딕셔너리를 구성합니다 — Response dict for one session."""
        return {
            "id": session.id,
            "type": session.type,
            "token": session.token,
            "date": session.date,
            "valid_from": session.valid_from,
            "valid_until": session.valid_until,
            "is_active": session.is_active,
        }


# 싱글턴 인스턴스 — Singleton instance
qr_session_service: QRSessionService = QRSessionService()
