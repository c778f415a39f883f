"""지문 로그 가져오기 API 테스트.

Fingerprint import API tests — Grouping (earliest IN, latest OUT),
per-record skips, unmatched badges, idempotent re-import, the month
boundary of an assignment, and the missing-default error.
"""

from datetime import date, time

from httpx import AsyncClient
from sqlalchemy import func, select

from teacher_attendance.models import Attendance, FingerprintLog, WorkSchedule, WorkScheduleAssignment
from tests.conftest import auth_header

IMPORT = "/api/v1/admin/fingerprint/import"


def _log(fingerprint_id, scanned_at: str, raw_type: str) -> dict:
    return {"fingerprint_id": fingerprint_id, "scanned_at": scanned_at, "raw_type": raw_type}


class TestFingerprintImport:
    """지문 로그 가져오기."""

    async def test_import_groups_first_in_last_out(
        self, client: AsyncClient, db, admin_token, teacher, default_schedule,
    ):
        """같은 날 여러 스캔 → 최초 IN, 최종 OUT."""
        logs = [
            _log("1001", "2026-10-19T07:15:00", "IN"),
            _log("1001", "2026-10-19T07:05:00", "IN"),
            _log("1001", "2026-10-19T14:00:00", "OUT"),
            _log("1001", "2026-10-19T15:02:00", "OUT"),
        ]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.status_code == 200, res.text
        data = res.json()
        assert data["imported"] == 4
        assert data["skipped"] == 0
        assert data["processed_date_range"] == {"start": "2026-10-19", "end": "2026-10-19"}
        assert data["samples"] == [{
            "teacher_name": "Siti Rahmawati",
            "teacher_nip": "198501012010012001",
            "date": "2026-10-19",
            "check_in": "07:05",
            "check_out": "15:02",
            "status": "present",
            "late_minutes": 0,
            "schedule_used": "Jam Sekolah",
        }]

        attendance = (await db.execute(select(Attendance))).scalar_one()
        assert attendance.teacher_id == teacher.id
        assert attendance.status == "PRESENT"

    async def test_import_late(self, client: AsyncClient, admin_token, teacher, default_schedule):
        logs = [_log("1001", "2026-10-19T07:25:00", "IN")]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        sample = res.json()["samples"][0]
        assert sample["status"] == "late"
        assert sample["late_minutes"] == 15
        assert sample["check_out"] is None

    async def test_aware_timestamps(self, client: AsyncClient, admin_token, teacher, default_schedule):
        """UTC 시각도 기관 타임존 날짜로 그룹화 — 00:05Z = 07:05 WIB."""
        logs = [_log("1001", "2026-10-19T00:05:00Z", "IN")]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        sample = res.json()["samples"][0]
        assert sample["date"] == "2026-10-19"
        assert sample["check_in"] == "07:05"
        assert sample["status"] == "present"

    async def test_malformed_logs_are_skipped(self, client: AsyncClient, db, admin_token, teacher, default_schedule):
        """잘못된 로그는 건너뛰고 개수만 집계."""
        logs = [
            _log("1001", "2026-10-19T07:00:00", "IN"),
            _log("1001", "not-a-date", "IN"),
            _log("1001", "2026-10-19T07:00:00", "BREAK"),
            {"fingerprint_id": "1001", "raw_type": "IN"},
            _log("", "2026-10-19T07:00:00", "IN"),
            "garbage",
        ]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["imported"] == 1
        assert res.json()["skipped"] == 5

        stored = (await db.execute(select(func.count()).select_from(FingerprintLog))).scalar_one()
        assert stored == 1

    async def test_unrepresentable_timestamps_are_skipped(
        self, client: AsyncClient, db, admin_token, teacher, default_schedule,
    ):
        """변환 범위를 벗어나는 시각은 건너뛰고 나머지는 정상 처리."""
        logs = [
            _log("1001", "0001-01-01T00:00:00", "IN"),
            _log("1001", "9999-12-31T23:59:00Z", "OUT"),
            _log("1001", "2026-10-19T07:05:00", "IN"),
        ]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.status_code == 200, res.text
        data = res.json()
        assert data["imported"] == 1
        assert data["skipped"] == 2
        assert data["processed_date_range"] == {"start": "2026-10-19", "end": "2026-10-19"}
        assert data["samples"][0]["check_in"] == "07:05"
        assert (await db.execute(select(func.count()).select_from(FingerprintLog))).scalar_one() == 1

    async def test_logs_array_required(self, client: AsyncClient, admin_token):
        """logs 배열이 없거나 배열이 아니면 400."""
        for body in ({}, {"logs": "1001,IN"}, {"logs": None}, {"logs": {"fingerprint_id": "1001"}}):
            res = await client.post(IMPORT, json=body, headers=auth_header(admin_token))
            assert res.status_code == 400, body

    async def test_numeric_badge_ids_accepted(self, client: AsyncClient, admin_token, teacher, default_schedule):
        logs = [_log(1001, "2026-10-19T07:00:00", "IN")]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.json()["imported"] == 1
        assert len(res.json()["samples"]) == 1

    async def test_unmatched_badge_is_stored_without_attendance(
        self, client: AsyncClient, db, admin_token, teacher, default_schedule,
    ):
        """등록되지 않은 배지 ID는 원본만 저장."""
        logs = [_log("9999", "2026-10-19T07:00:00", "IN")]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.json()["imported"] == 1
        assert res.json()["samples"] == []
        assert (await db.execute(select(func.count()).select_from(Attendance))).scalar_one() == 0
        assert (await db.execute(select(func.count()).select_from(FingerprintLog))).scalar_one() == 1

    async def test_reimport_is_idempotent(self, client: AsyncClient, db, admin_token, teacher, default_schedule):
        """같은 배치를 다시 가져와도 근태 결과는 동일."""
        logs = [
            _log("1001", "2026-10-19T07:20:00", "IN"),
            _log("1001", "2026-10-19T15:00:00", "OUT"),
        ]
        first = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        second = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert first.json()["samples"] == second.json()["samples"]

        rows = (await db.execute(select(Attendance))).scalars().all()
        assert len(rows) == 1
        assert rows[0].status == "LATE"
        assert rows[0].late_minutes == 10

    async def test_out_only_keeps_existing_status(self, client: AsyncClient, db, admin_token, teacher, default_schedule):
        """OUT만 있는 배치는 기존 상태를 바꾸지 않음."""
        await client.post(IMPORT, json={"logs": [_log("1001", "2026-10-19T07:30:00", "IN")]}, headers=auth_header(admin_token))
        res = await client.post(IMPORT, json={"logs": [_log("1001", "2026-10-19T15:00:00", "OUT")]}, headers=auth_header(admin_token))
        sample = res.json()["samples"][0]
        assert sample["status"] == "late"
        assert sample["check_in"] == "07:30"
        assert sample["check_out"] == "15:00"

    async def test_multiple_teachers_and_days(
        self, client: AsyncClient, db, admin_token, teacher, other_teacher, default_schedule,
    ):
        """샘플은 날짜, NIP 순."""
        logs = [
            _log("1002", "2026-10-20T07:00:00", "IN"),
            _log("1001", "2026-10-20T07:00:00", "IN"),
            _log("1002", "2026-10-19T07:00:00", "IN"),
        ]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        data = res.json()
        assert data["processed_date_range"] == {"start": "2026-10-19", "end": "2026-10-20"}
        assert [(s["date"], s["teacher_name"]) for s in data["samples"]] == [
            ("2026-10-19", "Budi Santoso"),
            ("2026-10-20", "Siti Rahmawati"),
            ("2026-10-20", "Budi Santoso"),
        ]
        assert (await db.execute(select(func.count()).select_from(Attendance))).scalar_one() == 3

    async def test_month_boundary_uses_assignment_then_default(
        self, client: AsyncClient, db, admin_token, teacher, default_schedule,
    ):
        """10월 기간 적용 → 10/30은 적용 템플릿, 11/2는 기본 템플릿."""
        ramadan = WorkSchedule(
            name="Jadwal Oktober",
            start_time=time(8, 0),
            end_time=time(13, 0),
            late_tolerance_minutes=5,
            working_days=["Mon", "Tue", "Wed", "Thu", "Fri"],
            is_default=False,
        )
        db.add(ramadan)
        await db.flush()
        db.add(WorkScheduleAssignment(work_schedule_id=ramadan.id, start_date=date(2026, 10, 1), end_date=date(2026, 10, 31)))
        await db.flush()

        logs = [
            _log("1001", "2026-10-30T07:55:00", "IN"),
            _log("1001", "2026-11-02T07:55:00", "IN"),
        ]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        samples = res.json()["samples"]
        assert [(s["date"], s["schedule_used"], s["status"]) for s in samples] == [
            ("2026-10-30", "Jadwal Oktober", "present"),
            ("2026-11-02", "Jam Sekolah", "late"),
        ]
        assert samples[1]["late_minutes"] == 45

    async def test_sample_limit(self, client: AsyncClient, admin_token, teacher, default_schedule):
        logs = [_log("1001", f"2026-10-{day:02d}T07:00:00", "IN") for day in range(5, 12)]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.json()["imported"] == 7
        assert len(res.json()["samples"]) == 5

    async def test_no_default_schedule_400(self, client: AsyncClient, admin_token, teacher):
        logs = [_log("1001", "2026-10-19T07:00:00", "IN")]
        res = await client.post(IMPORT, json={"logs": logs}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_empty_batch(self, client: AsyncClient, admin_token):
        """빈 배치 — 기본 템플릿 없이도 0건 처리."""
        res = await client.post(IMPORT, json={"logs": []}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json() == {
            "imported": 0,
            "skipped": 0,
            "processed_date_range": {"start": None, "end": None},
            "samples": [],
        }

    async def test_import_requires_admin(self, client: AsyncClient, teacher_token):
        res = await client.post(IMPORT, json={"logs": []}, headers=auth_header(teacher_token))
        assert res.status_code == 403
