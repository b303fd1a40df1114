"""앱 민원 요청 라우터 — 내 요청 생성 및 조회.

App Request Router — Create and track my own requests.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import get_actor
from ertis.database import get_db
from ertis.schemas.auth import Actor
from ertis.schemas.common import PaginatedResponse
from ertis.schemas.request import RequestCreate, RequestResponse
from ertis.services.request_service import request_service

router: APIRouter = APIRouter()


@router.post("", response_model=RequestResponse, status_code=201)
async def create_request(
    data: RequestCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """민원 요청 생성. 상태는 항상 pending.

    Submit a new request. Status always starts as pending.
    """
    request = await request_service.create_request(db, data, actor)
    await db.commit()
    return await request_service.build_response(db, request, actor)


@router.get("", response_model=PaginatedResponse)
async def list_my_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """내가 신고한 요청 목록."""
    requests, total = await request_service.list_my_requests(db, actor, page, per_page)
    items = await request_service.build_responses(db, requests, actor)
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/{request_id}", response_model=RequestResponse)
async def get_my_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """요청 상세 조회."""
    request = await request_service.get_request(db, request_id, actor)
    return await request_service.build_response(db, request, actor)
