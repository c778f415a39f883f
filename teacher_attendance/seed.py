"""초기 데이터 시드 스크립트 — 관리자 계정, 기본 근무 스케줄, 샘플 교사 생성.

Seed script — Creates the admin account, the default work schedule
template and a few sample teachers with fingerprint badge ids.
Run this script once to bootstrap the database with required initial data.

Usage:
    python -m teacher_attendance.seed

Creates:
    - 1개 관리자 계정: admin / admin123 (1 ADMIN user)
    - 1개 기본 템플릿: "Jam Sekolah" 07:00-15:00, 지각 허용 10분, 월~금
      (1 default template, 10 min tolerance, Mon-Fri)
    - 3명 교사 + 로그인 계정: teacher1..3 / teacher123 (3 teachers with logins)
"""

import asyncio
from datetime import time

from sqlalchemy import select

from teacher_attendance.database import async_session, engine, Base
from teacher_attendance.models import Teacher, User, UserRole, WorkSchedule
from teacher_attendance.models.schedule import WEEKDAY_CODES
from teacher_attendance.utils.password import hash_password

# (이름, NIP, 지문 ID) — Sample teachers (name, NIP, fingerprint badge id)
_SAMPLE_TEACHERS: list[tuple[str, str, str]] = [
    ("Siti Rahmawati", "198501012010012001", "1001"),
    ("Budi Santoso", "198703152011011002", "1002"),
    ("Dewi Lestari", "199002202014022003", "1003"),
]


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then inserts the admin user,
    default schedule template and sample teachers.

    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if already seeded).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        # 관리자 계정이 있으면 건너뜀 (Skip when the admin account exists)
        result = await db.execute(select(User).where(User.username == "admin"))
        if result.scalar_one_or_none():
            print("Already seeded. Skipping.")
            return

        admin: User = User(
            username="admin",
            full_name="System Admin",
            password_hash=hash_password("admin123"),
            role=UserRole.ADMIN.value,
            is_active=True,
        )
        db.add(admin)

        # 기본 근무 스케줄 — Default template used when nothing more specific applies
        default_schedule: WorkSchedule = WorkSchedule(
            name="Jam Sekolah",
            start_time=time(7, 0),
            end_time=time(15, 0),
            late_tolerance_minutes=10,
            working_days=list(WEEKDAY_CODES[:5]),
            is_default=True,
        )
        db.add(default_schedule)

        for index, (name, nip, fingerprint_id) in enumerate(_SAMPLE_TEACHERS, start=1):
            user: User = User(
                username=f"teacher{index}",
                full_name=name,
                password_hash=hash_password("teacher123"),
                role=UserRole.TEACHER.value,
            )
            db.add(user)
            await db.flush()  # flush로 user.id 생성 (Flush to generate user.id)
            db.add(Teacher(user_id=user.id, name=name, nip=nip, fingerprint_id=fingerprint_id))

        await db.commit()
        print(f"Seeded: admin user=admin/admin123, default schedule={default_schedule.id}, teachers={len(_SAMPLE_TEACHERS)}")


if __name__ == "__main__":
    asyncio.run(seed())
