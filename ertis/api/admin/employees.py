"""관리자 직원 라우터 — 직원 목록, 생성, 가용성, 통계.

Admin Employee Router — Employee listing, profile creation,
availability toggle and per-employee statistics.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import require_admin
from ertis.database import get_db
from ertis.schemas.auth import Actor
from ertis.schemas.common import PaginatedResponse
from ertis.schemas.employee import (
    EmployeeAvailabilityUpdate,
    EmployeeCreate,
    EmployeeResponse,
    EmployeeStatistics,
)
from ertis.services.employee_service import employee_service
from ertis.services.statistics_service import statistics_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_employees(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
    specialization: str | None = Query(None),
    is_available: bool | None = Query(None),
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """직원 목록 — 평점 높은 순, 업무량 적은 순."""
    employees, total = await employee_service.list_employees(
        db, specialization, is_available, page, per_page
    )
    items = [employee_service.build_response(e) for e in employees]
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    data: EmployeeCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """기존 사용자에게 직원 프로필 생성."""
    employee = await employee_service.create_employee(db, data)
    await db.commit()
    return employee_service.build_response(employee)


@router.patch("/{employee_id}/availability", response_model=EmployeeResponse)
async def update_availability(
    employee_id: UUID,
    data: EmployeeAvailabilityUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    employee = await employee_service.set_availability(db, employee_id, data.is_available)
    await db.commit()
    return employee_service.build_response(employee)


@router.get("/{employee_id}/statistics", response_model=EmployeeStatistics)
async def get_employee_statistics(
    employee_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_admin)],
) -> dict:
    """직원 실적 통계."""
    return await statistics_service.get_employee_statistics(db, employee_id)
