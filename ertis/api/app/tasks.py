"""앱 업무 라우터 — 직원에게 배정된 요청 처리.

App Task Router — Requests assigned to the calling employee.
Start/complete are shortcuts over the generic status change.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import require_employee
from ertis.database import get_db
from ertis.models.request import RequestStatus
from ertis.schemas.auth import Actor
from ertis.schemas.common import PaginatedResponse
from ertis.schemas.request import RequestComplete, RequestResponse, RequestStatusChange
from ertis.services.request_service import request_service
from ertis.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_my_tasks(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_employee)],
    status: RequestStatus | None = Query(None),
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """내게 배정된 요청 목록."""
    if actor.employee_id is None:
        raise NotFoundError("직원 프로필이 없습니다 (No employee profile for this account)")
    requests, total = await request_service.list_assigned(
        db, actor.employee_id, actor, status, page, per_page
    )
    items = await request_service.build_responses(db, requests, actor)
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/{request_id}", response_model=RequestResponse)
async def get_my_task(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_employee)],
) -> dict:
    request = await request_service.get_request(db, request_id, actor)
    return await request_service.build_response(db, request, actor)


@router.patch("/{request_id}/start", response_model=RequestResponse)
async def start_task(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_employee)],
) -> dict:
    """작업 시작 — assigned → in_progress."""
    request = await request_service.change_status(
        db, request_id, RequestStatusChange(status=RequestStatus.IN_PROGRESS), actor
    )
    await db.commit()
    return await request_service.build_response(db, request, actor)


@router.patch("/{request_id}/complete", response_model=RequestResponse)
async def complete_task(
    request_id: UUID,
    data: RequestComplete,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_employee)],
) -> dict:
    """작업 완료 — in_progress → completed, 완료 메모/사진 첨부 가능."""
    request = await request_service.change_status(
        db,
        request_id,
        RequestStatusChange(
            status=RequestStatus.COMPLETED,
            completion_note=data.completion_note,
            completion_photo_url=data.completion_photo_url,
        ),
        actor,
    )
    await db.commit()
    return await request_service.build_response(db, request, actor)


@router.patch("/{request_id}/status", response_model=RequestResponse)
async def change_task_status(
    request_id: UUID,
    data: RequestStatusChange,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_employee)],
) -> dict:
    """상태 변경 — 직원에게 허용된 전이만 가능."""
    request = await request_service.change_status(db, request_id, data, actor)
    await db.commit()
    return await request_service.build_response(db, request, actor)
