"""관리자 민원 요청 라우터 — 요청 조회, 배정, 상태 변경, 종료, 삭제.

Admin Request Router — List, inspect, assign, transition, close and
delete citizen requests. Admin only.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import require_admin
from ertis.database import get_db
from ertis.models.request import RequestPriority, RequestStatus
from ertis.schemas.auth import Actor
from ertis.schemas.common import MessageResponse, PaginatedResponse
from ertis.schemas.request import (
    RequestAssign,
    RequestClose,
    RequestFilter,
    RequestResponse,
    RequestStatusChange,
)
from ertis.services.assignment_service import assignment_service
from ertis.services.request_service import request_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
    status: RequestStatus | None = Query(None),
    priority: RequestPriority | None = Query(None),
    category: str | None = Query(None),
    assignee_id: UUID | None = Query(None),
    reporter_id: UUID | None = Query(None),
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """요청 목록 조회 (상태, 우선순위, 카테고리, 담당자, 신고자 필터)."""
    filters = RequestFilter(
        status=status,
        priority=priority,
        category=category,
        assignee_id=assignee_id,
        reporter_id=reporter_id,
    )
    requests, total = await request_service.list_requests(db, filters, actor, page, per_page)
    items = await request_service.build_responses(db, requests, actor)
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    request = await request_service.get_request(db, request_id, actor)
    return await request_service.build_response(db, request, actor)


@router.patch("/{request_id}/assign", response_model=RequestResponse)
async def assign_request(
    request_id: UUID,
    data: RequestAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """대기 중 요청을 직원에게 배정합니다.

    Assign a pending request to the chosen employee.

    Args:
        request_id: 요청 UUID (Request UUID)
        data: 배정할 직원 (Employee to assign)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 관리자 (Admin actor)

    Returns:
        dict: 배정된 요청 (Assigned request)
    """
    request = await assignment_service.assign(db, request_id, data.employee_id, actor)
    await db.commit()
    return await request_service.build_response(db, request, actor)


@router.patch("/{request_id}/status", response_model=RequestResponse)
async def change_request_status(
    request_id: UUID,
    data: RequestStatusChange,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """요청 상태 변경. pending → in_progress는 employee_id 필요."""
    request = await request_service.change_status(db, request_id, data, actor)
    await db.commit()
    return await request_service.build_response(db, request, actor)


@router.patch("/{request_id}/close", response_model=RequestResponse)
async def close_request(
    request_id: UUID,
    data: RequestClose,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """요청 종료. 사유는 완료 메모로 저장."""
    request = await request_service.close_request(db, request_id, data.reason, actor)
    await db.commit()
    return await request_service.build_response(db, request, actor)


@router.delete("/{request_id}", response_model=MessageResponse)
async def delete_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """요청 영구 삭제 (되돌릴 수 없음)."""
    await request_service.delete_request(db, request_id, actor)
    await db.commit()
    return {"message": "요청이 삭제되었습니다 (Request deleted)"}
