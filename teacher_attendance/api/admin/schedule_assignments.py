"""관리자 기간 적용 라우터 — 근무 스케줄 기간 적용 API.

Admin Assignment Router — Date-range template assignments.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import require_admin
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.schemas.schedule import AssignmentCreate, AssignmentCreateResponse, AssignmentListResponse
from teacher_attendance.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=AssignmentListResponse)
async def list_assignments(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    work_schedule_id: Annotated[UUID | None, Query(alias="workScheduleId")] = None,
    active: bool = False,
) -> dict:
    """기간 적용 목록을 조회합니다.

    List assignments, newest first; ``active=true`` keeps those ending
    today or later.
    """
    assignments = await schedule_service.list_assignments(db, work_schedule_id, active)
    return {"data": [schedule_service.build_assignment_response(a) for a in assignments]}


@router.post("", response_model=AssignmentCreateResponse, status_code=201)
async def create_assignment(
    data: AssignmentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """기간 적용을 생성합니다. 겹치는 기존 적용은 응답에 표시됩니다.

    Create an assignment. Overlaps are allowed and listed in
    ``overlapping_assignments``.
    """
    assignment, overlapping = await schedule_service.create_assignment(db, data)
    await db.commit()
    return {
        **schedule_service.build_assignment_response(assignment),
        "overlapping_assignments": [schedule_service.build_assignment_response(a) for a in overlapping],
    }


@router.delete("/{assignment_id}", status_code=204)
async def delete_assignment(
    assignment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> None:
    """기간 적용을 삭제합니다 — Delete an assignment."""
    await schedule_service.delete_assignment(db, assignment_id)
    await db.commit()
