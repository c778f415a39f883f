"""내 근태 API 테스트 — 교사 본인의 기록 목록과 오늘 기록.

My attendance API tests — A teacher's own history and today's record.
"""

from datetime import date

from httpx import AsyncClient

from teacher_attendance.models import Attendance
from tests.conftest import auth_header, local_dt

MY = "/api/v1/app/my/attendance"


async def _record(db, teacher, day: date, status: str = "PRESENT") -> Attendance:
    record = Attendance(teacher_id=teacher.id, date=day, status=status, late_minutes=0)
    db.add(record)
    await db.flush()
    return record


class TestMyAttendance:
    """내 근태 기록."""

    async def test_list_newest_first(self, client: AsyncClient, db, teacher_token, teacher, other_teacher):
        await _record(db, teacher, date(2026, 10, 15))
        await _record(db, teacher, date(2026, 10, 19), "LATE")
        await _record(db, teacher, date(2026, 10, 16), "SICK")
        await _record(db, other_teacher, date(2026, 10, 19))

        res = await client.get(MY, headers=auth_header(teacher_token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert [r["date"] for r in data] == ["2026-10-19", "2026-10-16", "2026-10-15"]
        assert data[0]["status"] == "LATE"
        assert all(r["teacherId"] == str(teacher.id) for r in data)

    async def test_list_date_range(self, client: AsyncClient, db, teacher_token, teacher):
        for day in (13, 14, 15, 16):
            await _record(db, teacher, date(2026, 10, day))
        res = await client.get(f"{MY}?date_from=2026-10-14&date_to=2026-10-15", headers=auth_header(teacher_token))
        assert [r["date"] for r in res.json()["data"]] == ["2026-10-15", "2026-10-14"]

    async def test_today(self, client: AsyncClient, db, teacher_token, teacher, freeze_now):
        """오늘은 기관 타임존 기준 — 10/18 18:00Z = 10/19 01:00 WIB."""
        freeze_now(local_dt(2026, 10, 19, 1, 0))
        await _record(db, teacher, date(2026, 10, 19), "LATE")

        res = await client.get(f"{MY}/today", headers=auth_header(teacher_token))
        assert res.status_code == 200
        assert res.json()["date"] == "2026-10-19"
        assert res.json()["status"] == "LATE"

    async def test_today_none(self, client: AsyncClient, teacher_token, freeze_now):
        freeze_now(local_dt(2026, 10, 19, 8, 0))
        res = await client.get(f"{MY}/today", headers=auth_header(teacher_token))
        assert res.status_code == 200
        assert res.json() is None
