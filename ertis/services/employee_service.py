"""현장 직원 서비스 — 직원 프로필 생성, 조회, 가용성 관리.

Employee Service — Employee profile creation, listing and availability.
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.employee import Employee
from ertis.models.user import User, UserRole
from ertis.repositories.employee_repository import employee_repository
from ertis.repositories.user_repository import user_repository
from ertis.schemas.auth import Actor
from ertis.schemas.employee import EmployeeCreate
from ertis.utils.exceptions import BadRequestError, DuplicateError, NotFoundError

logger = logging.getLogger(__name__)


class EmployeeService:

    def build_response(self, employee: Employee) -> dict:
        """직원 응답 딕셔너리 — ``employee.user`` must be loaded."""
        return {
            "id": str(employee.id),
            "user_id": str(employee.user_id),
            "full_name": employee.user.full_name if employee.user is not None else "",
            "specialization": employee.specialization,
            "average_rating": employee.average_rating,
            "total_completed": employee.total_completed,
            "active_tasks": employee.active_tasks,
            "is_available": employee.is_available,
        }

    async def get_employee(
        self,
        db: AsyncSession,
        employee_id: UUID,
    ) -> Employee:
        employee = await employee_repository.get_with_user(db, employee_id)
        if employee is None:
            raise NotFoundError("직원을 찾을 수 없습니다 (Employee not found)")
        return employee

    async def list_employees(
        self,
        db: AsyncSession,
        specialization: str | None = None,
        is_available: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Employee], int]:
        return await employee_repository.list_employees(
            db, specialization, is_available, page, per_page
        )

    async def create_employee(
        self,
        db: AsyncSession,
        data: EmployeeCreate,
    ) -> Employee:
        """기존 사용자에게 직원 프로필을 부여합니다.

        Create an employee profile for an existing user and switch the
        user's role to employee.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 직원 생성 데이터 (Employee creation payload)

        Returns:
            Employee: 생성된 직원 (Created employee, user loaded)

        Raises:
            BadRequestError: 잘못된 사용자 ID 또는 관리자 계정 (Malformed user id or admin account)
            NotFoundError: 사용자가 없을 때 (Unknown user)
            DuplicateError: 이미 직원 프로필이 있을 때 (Profile already exists)
        """
        try:
            user_id = UUID(data.user_id)
        except ValueError:
            raise BadRequestError("잘못된 사용자 ID입니다 (Invalid user id)")

        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다 (User not found)")
        if await employee_repository.exists(db, {"user_id": user_id}):
            raise DuplicateError("이미 직원 프로필이 있습니다 (Employee profile already exists)")
        if user.role not in (UserRole.CITIZEN.value, UserRole.EMPLOYEE.value):
            raise BadRequestError(
                "시민 또는 직원 계정만 직원으로 등록할 수 있습니다 (Only citizen or employee accounts can become employees)"
            )

        if user.role == UserRole.CITIZEN.value:
            user.role = UserRole.EMPLOYEE.value
        employee: Employee = await employee_repository.create(
            db,
            {
                "user_id": user_id,
                "specialization": data.specialization,
                "is_available": data.is_available,
            },
        )
        logger.info("Employee profile %s created for user %s", employee.id, user_id)
        return await self.get_employee(db, employee.id)

    async def set_availability(
        self,
        db: AsyncSession,
        employee_id: UUID,
        is_available: bool,
    ) -> Employee:
        employee = await self.get_employee(db, employee_id)
        employee.is_available = is_available
        await db.flush()
        return employee

    async def get_my_profile(
        self,
        db: AsyncSession,
        actor: Actor,
    ) -> Employee:
        if actor.employee_id is None:
            raise NotFoundError("직원 프로필이 없습니다 (No employee profile for this account)")
        return await self.get_employee(db, actor.employee_id)


# 싱글턴 인스턴스 — Singleton instance
employee_service: EmployeeService = EmployeeService()
