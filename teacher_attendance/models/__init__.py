"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 및 교사 (Users and teachers)
    schedule: 근무 스케줄 템플릿, 기간 적용, 특별일 (Schedule templates, assignments, special days)
    attendance: 근태 관리 (QR sessions, fingerprint logs, attendance records)
"""

from teacher_attendance.models.user import User, Teacher, UserRole
from teacher_attendance.models.schedule import WorkSchedule, WorkScheduleAssignment, SpecialDay, SpecialDayType
from teacher_attendance.models.attendance import (
    QRSession,
    QRSessionType,
    FingerprintLog,
    FingerprintType,
    Attendance,
    AttendanceStatus,
)

__all__ = [
    "User", "Teacher", "UserRole",
    "WorkSchedule", "WorkScheduleAssignment", "SpecialDay", "SpecialDayType",
    "QRSession", "QRSessionType", "FingerprintLog", "FingerprintType", "Attendance", "AttendanceStatus",
]
