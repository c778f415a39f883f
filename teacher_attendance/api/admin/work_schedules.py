"""관리자 근무 스케줄 템플릿 라우터 — 템플릿 CRUD API.

Admin Work Schedule Router — CRUD for schedule templates.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from teacher_attendance.api.deps import require_admin
from teacher_attendance.database import get_db
from teacher_attendance.models.user import User
from teacher_attendance.repositories.schedule_repository import work_schedule_repository
from teacher_attendance.schemas.schedule import (
    WorkScheduleCreate,
    WorkScheduleListResponse,
    WorkScheduleResponse,
    WorkScheduleUpdate,
)
from teacher_attendance.services.schedule_service import schedule_service

router: APIRouter = APIRouter()


@router.get("", response_model=WorkScheduleListResponse)
async def list_work_schedules(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """템플릿 목록을 조회합니다 (기본 우선, 이름순).

    List templates, default first, then by name, with assignment counts.
    """
    rows = await schedule_service.list_templates(db)
    return {"data": [schedule_service.build_template_response(t, count) for t, count in rows]}


@router.post("", response_model=WorkScheduleResponse, status_code=201)
async def create_work_schedule(
    data: WorkScheduleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """템플릿을 생성합니다. 기본으로 지정하면 기존 기본은 해제됩니다.

    Create a template; ``is_default`` moves the default flag to it.
    """
    template = await schedule_service.create_template(db, data)
    await db.commit()
    return schedule_service.build_template_response(template)


@router.put("/{schedule_id}", response_model=WorkScheduleResponse)
async def update_work_schedule(
    schedule_id: UUID,
    data: WorkScheduleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """템플릿을 부분 수정합니다.

    Partially update a template.
    """
    template = await schedule_service.update_template(db, schedule_id, data)
    count: int = await work_schedule_repository.count_assignments(db, template.id)
    await db.commit()
    return schedule_service.build_template_response(template, count)


@router.delete("/{schedule_id}", status_code=204)
async def delete_work_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> None:
    """템플릿을 삭제합니다. 사용 중이거나 기본 템플릿이면 거부됩니다.

    Delete a template that is neither in use nor the default.
    """
    await schedule_service.delete_template(db, schedule_id)
    await db.commit()
