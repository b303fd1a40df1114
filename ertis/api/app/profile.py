"""앱 프로필 라우터 — 내 정보, 내 직원 프로필.

App Profile Router — Current user info and own employee profile.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import get_current_user, require_employee
from ertis.database import get_db
from ertis.models.user import User
from ertis.schemas.auth import Actor, UserResponse
from ertis.schemas.employee import EmployeeResponse
from ertis.services.auth_service import auth_service
from ertis.services.employee_service import employee_service

router: APIRouter = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """내 정보 조회 — Current user profile."""
    return auth_service.build_user_response(current_user)


@router.get("/my/employee-profile", response_model=EmployeeResponse)
async def get_my_employee_profile(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_employee)],
) -> dict:
    """내 직원 프로필 조회 (업무량, 완료 건수, 평점).

    Own employee profile with workload, completed count and rating.
    """
    employee = await employee_service.get_my_profile(db, actor)
    return employee_service.build_response(employee)
