"""관리자 통계 라우터 — 대시보드 집계 API.

Admin Statistics Router — Dashboard aggregation endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import require_admin
from ertis.database import get_db
from ertis.schemas.auth import Actor
from ertis.schemas.common import RequestsByPriority, StatisticsOverview
from ertis.services.statistics_service import statistics_service

router: APIRouter = APIRouter()


@router.get("/overview", response_model=StatisticsOverview)
async def get_overview(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """전체 요약 — 상태별 요청 수, 직원 수, 사용자 수."""
    return await statistics_service.get_overview(db)


@router.get("/requests/priority", response_model=RequestsByPriority)
async def get_requests_by_priority(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    return await statistics_service.get_requests_by_priority(db)
