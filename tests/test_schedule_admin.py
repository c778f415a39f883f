"""근무 스케줄 관리 API 테스트 — 템플릿, 기간 적용, 특별일.

Schedule administration API tests — Template CRUD and the single-default
invariant, assignment overlap flagging, and special-day upsert by date.
"""

import uuid
from datetime import date, datetime, time, timezone

from httpx import AsyncClient

from teacher_attendance.models import WorkSchedule, WorkScheduleAssignment
from teacher_attendance.services.schedule_resolver import load_snapshot, resolve
from tests.conftest import auth_header

TEMPLATES = "/api/v1/admin/settings/work-schedules"
ASSIGNMENTS = "/api/v1/admin/settings/work-schedule-assignments"
SPECIAL_DAYS = "/api/v1/admin/settings/special-days"


async def _create_template(client: AsyncClient, token: str, name: str, **extra) -> dict:
    body = {"name": name, "start_time": "07:00", "end_time": "15:00", "late_tolerance_minutes": 10, **extra}
    res = await client.post(TEMPLATES, json=body, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()


class TestWorkSchedules:
    """근무 스케줄 템플릿."""

    async def test_create_and_list(self, client: AsyncClient, admin_token):
        created = await _create_template(client, admin_token, "Jam Sekolah", is_default=True)
        assert created["start_time"] == "07:00"
        assert created["working_days"] == ["Mon", "Tue", "Wed", "Thu", "Fri"]
        assert created["is_default"] is True
        assert created["assignment_count"] == 0

        await _create_template(client, admin_token, "Anak Ujian")
        res = await client.get(TEMPLATES, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert [t["name"] for t in res.json()["data"]] == ["Jam Sekolah", "Anak Ujian"]

    async def test_working_days_normalized(self, client: AsyncClient, admin_token):
        """요일은 월~일 순서로 정렬, 중복 제거."""
        created = await _create_template(client, admin_token, "Sabtu", working_days=["Sat", "Mon", "Sat"])
        assert created["working_days"] == ["Mon", "Sat"]

    async def test_new_default_unsets_previous(self, client: AsyncClient, admin_token):
        """새 기본 템플릿 지정 시 기존 기본은 해제 — 기본은 항상 하나."""
        await _create_template(client, admin_token, "Lama", is_default=True)
        await _create_template(client, admin_token, "Baru", is_default=True)

        res = await client.get(TEMPLATES, headers=auth_header(admin_token))
        defaults = [t["name"] for t in res.json()["data"] if t["is_default"]]
        assert defaults == ["Baru"]

    async def test_update_moves_default(self, client: AsyncClient, admin_token):
        await _create_template(client, admin_token, "Lama", is_default=True)
        other = await _create_template(client, admin_token, "Baru")

        res = await client.put(f"{TEMPLATES}/{other['id']}", json={"is_default": True}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["is_default"] is True

        res = await client.get(TEMPLATES, headers=auth_header(admin_token))
        assert [t["name"] for t in res.json()["data"] if t["is_default"]] == ["Baru"]

    async def test_cannot_unset_default(self, client: AsyncClient, admin_token):
        created = await _create_template(client, admin_token, "Jam Sekolah", is_default=True)
        res = await client.put(f"{TEMPLATES}/{created['id']}", json={"is_default": False}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_partial_update(self, client: AsyncClient, admin_token):
        created = await _create_template(client, admin_token, "Jam Sekolah")
        res = await client.put(
            f"{TEMPLATES}/{created['id']}",
            json={"start_time": "06:45", "late_tolerance_minutes": 5},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["start_time"] == "06:45"
        assert data["end_time"] == "15:00"
        assert data["late_tolerance_minutes"] == 5
        assert data["name"] == "Jam Sekolah"

    async def test_validation_errors(self, client: AsyncClient, admin_token):
        """시각 형식, 시각 순서, 음수 허용 시간, 잘못된 요일 → 400."""
        cases = [
            {"start_time": "7:00"},
            {"start_time": "25:00"},
            {"start_time": "15:00", "end_time": "07:00"},
            {"late_tolerance_minutes": -1},
            {"working_days": ["Monday"]},
        ]
        for override in cases:
            body = {"name": "X", "start_time": "07:00", "end_time": "15:00", **override}
            res = await client.post(TEMPLATES, json=body, headers=auth_header(admin_token))
            assert res.status_code == 400, override

    async def test_duplicate_name(self, client: AsyncClient, admin_token):
        await _create_template(client, admin_token, "Jam Sekolah")
        res = await client.post(
            TEMPLATES,
            json={"name": "Jam Sekolah", "start_time": "07:00", "end_time": "15:00"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 409

    async def test_delete(self, client: AsyncClient, admin_token):
        created = await _create_template(client, admin_token, "Sementara")
        res = await client.delete(f"{TEMPLATES}/{created['id']}", headers=auth_header(admin_token))
        assert res.status_code == 204
        res = await client.delete(f"{TEMPLATES}/{created['id']}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_delete_default_rejected(self, client: AsyncClient, admin_token):
        created = await _create_template(client, admin_token, "Jam Sekolah", is_default=True)
        res = await client.delete(f"{TEMPLATES}/{created['id']}", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_delete_in_use_rejected(self, client: AsyncClient, admin_token):
        created = await _create_template(client, admin_token, "Ujian")
        await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": created["id"], "start_date": "2026-11-02", "end_date": "2026-11-06"},
            headers=auth_header(admin_token),
        )
        res = await client.delete(f"{TEMPLATES}/{created['id']}", headers=auth_header(admin_token))
        assert res.status_code == 409

        res = await client.get(TEMPLATES, headers=auth_header(admin_token))
        assert res.json()["data"][0]["assignment_count"] == 1

    async def test_requires_admin(self, client: AsyncClient, teacher_token):
        res = await client.get(TEMPLATES, headers=auth_header(teacher_token))
        assert res.status_code == 403


class TestAssignments:
    """기간 적용."""

    async def test_create_and_list(self, client: AsyncClient, admin_token):
        template = await _create_template(client, admin_token, "Ujian")
        res = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": template["id"], "start_date": "2026-11-02", "end_date": "2026-11-06"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["work_schedule"]["name"] == "Ujian"
        assert data["overlapping_assignments"] == []

        res = await client.get(ASSIGNMENTS, headers=auth_header(admin_token))
        assert len(res.json()["data"]) == 1

        res = await client.get(f"{ASSIGNMENTS}?workScheduleId={template['id']}", headers=auth_header(admin_token))
        assert len(res.json()["data"]) == 1

    async def test_single_day_range_allowed(self, client: AsyncClient, admin_token):
        template = await _create_template(client, admin_token, "Ujian")
        res = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": template["id"], "start_date": "2026-11-02", "end_date": "2026-11-02"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201

    async def test_overlap_is_flagged(self, client: AsyncClient, admin_token):
        """겹치는 기간 적용도 생성되지만 응답에 표시."""
        template = await _create_template(client, admin_token, "Ujian")
        first = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": template["id"], "start_date": "2026-11-02", "end_date": "2026-11-06"},
            headers=auth_header(admin_token),
        )
        res = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": template["id"], "start_date": "2026-11-06", "end_date": "2026-11-13"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 201
        assert [a["id"] for a in res.json()["overlapping_assignments"]] == [first.json()["id"]]

    async def test_end_before_start(self, client: AsyncClient, admin_token):
        template = await _create_template(client, admin_token, "Ujian")
        res = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": template["id"], "start_date": "2026-11-06", "end_date": "2026-11-02"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_unknown_template(self, client: AsyncClient, admin_token):
        res = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": "00000000-0000-0000-0000-000000000000", "start_date": "2026-11-02", "end_date": "2026-11-06"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 404

    async def test_equal_created_at_resolves_by_id(self, db):
        """생성 시각이 같으면 ID 역순 — 겹치는 적용의 선택이 항상 같음."""
        stamp = datetime(2026, 10, 1, tzinfo=timezone.utc)
        assignments = []
        for name in ("Ujian A", "Ujian B", "Ujian C"):
            template = WorkSchedule(
                name=name,
                start_time=time(8, 0),
                end_time=time(12, 0),
                late_tolerance_minutes=0,
                working_days=["Mon", "Tue", "Wed", "Thu", "Fri"],
                is_default=False,
            )
            db.add(template)
            await db.flush()
            assignment = WorkScheduleAssignment(
                id=uuid.uuid4(),
                work_schedule_id=template.id,
                start_date=date(2026, 10, 19),
                end_date=date(2026, 10, 23),
                created_at=stamp,
            )
            db.add(assignment)
            assignments.append((assignment, name))
        await db.flush()

        expected_id, expected_name = max(((a.id, name) for a, name in assignments), key=lambda pair: pair[0])
        snapshot = await load_snapshot(db, date(2026, 10, 19), date(2026, 10, 19))
        assert snapshot.assignments[0].id == expected_id
        assert resolve(date(2026, 10, 19), snapshot).name == expected_name

    async def test_delete(self, client: AsyncClient, admin_token):
        template = await _create_template(client, admin_token, "Ujian")
        created = await client.post(
            ASSIGNMENTS,
            json={"work_schedule_id": template["id"], "start_date": "2026-11-02", "end_date": "2026-11-06"},
            headers=auth_header(admin_token),
        )
        res = await client.delete(f"{ASSIGNMENTS}/{created.json()['id']}", headers=auth_header(admin_token))
        assert res.status_code == 204
        res = await client.get(ASSIGNMENTS, headers=auth_header(admin_token))
        assert res.json()["data"] == []


class TestSpecialDays:
    """특별일."""

    async def test_upsert_replaces_by_date(self, client: AsyncClient, admin_token):
        """같은 날짜로 다시 등록하면 교체."""
        first = await client.post(
            SPECIAL_DAYS,
            json={"date": "2026-12-25", "name": "Natal", "type": "HOLIDAY"},
            headers=auth_header(admin_token),
        )
        assert first.status_code == 201
        second = await client.post(
            SPECIAL_DAYS,
            json={"date": "2026-12-25", "name": "Rapat", "type": "CUSTOM_SCHEDULE", "start_time": "09:00", "end_time": "12:00"},
            headers=auth_header(admin_token),
        )
        assert second.status_code == 201
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["type"] == "CUSTOM_SCHEDULE"
        assert second.json()["start_time"] == "09:00"

        res = await client.get(SPECIAL_DAYS, headers=auth_header(admin_token))
        assert len(res.json()["data"]) == 1

    async def test_month_filter(self, client: AsyncClient, admin_token):
        for day, name in [("2026-11-30", "A"), ("2026-12-01", "B"), ("2026-12-31", "C"), ("2027-01-01", "D")]:
            await client.post(SPECIAL_DAYS, json={"date": day, "name": name, "type": "HOLIDAY"}, headers=auth_header(admin_token))

        res = await client.get(f"{SPECIAL_DAYS}?month=2026-12", headers=auth_header(admin_token))
        assert [d["name"] for d in res.json()["data"]] == ["B", "C"]

        res = await client.get(f"{SPECIAL_DAYS}?month=December", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_invalid_type_and_times(self, client: AsyncClient, admin_token):
        res = await client.post(SPECIAL_DAYS, json={"date": "2026-12-25", "name": "X", "type": "PARTY"}, headers=auth_header(admin_token))
        assert res.status_code == 400
        res = await client.post(
            SPECIAL_DAYS,
            json={"date": "2026-12-25", "name": "X", "type": "OVERTIME", "start_time": "12:00", "end_time": "08:00"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_delete(self, client: AsyncClient, admin_token):
        created = await client.post(
            SPECIAL_DAYS, json={"date": "2026-12-25", "name": "Natal", "type": "HOLIDAY"}, headers=auth_header(admin_token),
        )
        res = await client.delete(f"{SPECIAL_DAYS}/{created.json()['id']}", headers=auth_header(admin_token))
        assert res.status_code == 204
        res = await client.delete(f"{SPECIAL_DAYS}/{created.json()['id']}", headers=auth_header(admin_token))
        assert res.status_code == 404
