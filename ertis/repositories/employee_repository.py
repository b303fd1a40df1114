"""현장 직원 레포지토리 — 직원 조회 및 업무량 집계 담당.

Employee Repository — Employee lookups and workload bookkeeping.
Workload counters are changed with single UPDATE statements so that
concurrent assignments to the same employee never lose an increment.
"""

from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ertis.models.employee import Employee
from ertis.models.user import User
from ertis.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    """직원 레포지토리.

    Employee repository with listing and atomic counter updates.

    Extends:
        BaseRepository[Employee]
    """

    def __init__(self) -> None:
        super().__init__(Employee)

    async def get_with_user(
        self,
        db: AsyncSession,
        employee_id: UUID,
    ) -> Employee | None:
        """사용자 정보와 함께 직원을 조회합니다 — Load an employee with its user."""
        result = await db.execute(
            select(Employee)
            .options(selectinload(Employee.user))
            .where(Employee.id == employee_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_user_id(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Employee | None:
        result = await db.execute(
            select(Employee).options(selectinload(Employee.user)).where(Employee.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_employees(
        self,
        db: AsyncSession,
        specialization: str | None = None,
        is_available: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Employee], int]:
        """직원 목록을 조회합니다 — 평점 높은 순, 업무량 적은 순.

        List employees, best rated first, then least loaded.
        Ordering only helps the admin pick from a short list; the
        dispatcher never chooses an employee on its own.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            specialization: 전문 분야 필터 (Optional specialization filter)
            is_available: 배정 가능 여부 필터 (Optional availability filter)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Employee], int]: (직원 목록, 전체 개수)
        """
        query: Select = (
            select(Employee)
            .options(selectinload(Employee.user))
            .order_by(Employee.average_rating.desc(), Employee.active_tasks.asc())
            .execution_options(populate_existing=True)
        )
        if specialization:
            query = query.where(Employee.specialization == specialization)
        if is_available is not None:
            query = query.where(Employee.is_available.is_(is_available))
        return await self.get_paginated(db, query, page, per_page)

    async def adjust_workload(
        self,
        db: AsyncSession,
        employee_id: UUID,
        delta: int,
    ) -> None:
        """업무량을 원자적으로 증감합니다. 0 미만으로 내려가지 않습니다.

        Atomically add ``delta`` to the employee's active task counter.
        Decrements never drive the counter below zero.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            employee_id: 직원 UUID (Employee UUID)
            delta: 증감량 (+1 / -1)
        """
        if delta == 0:
            return
        stmt = update(Employee).where(Employee.id == employee_id)
        if delta < 0:
            stmt = stmt.where(Employee.active_tasks >= -delta)
        await db.execute(
            stmt.values(active_tasks=Employee.active_tasks + delta, updated_at=datetime.now(timezone.utc))
        )

    async def adjust_completed(
        self,
        db: AsyncSession,
        employee_id: UUID,
        delta: int,
    ) -> None:
        """완료 건수를 원자적으로 증감합니다 — Atomically adjust total_completed."""
        if delta == 0:
            return
        stmt = update(Employee).where(Employee.id == employee_id)
        if delta < 0:
            stmt = stmt.where(Employee.total_completed >= -delta)
        await db.execute(
            stmt.values(total_completed=Employee.total_completed + delta, updated_at=datetime.now(timezone.utc))
        )

    async def get_names(
        self,
        db: AsyncSession,
        employee_ids: set[UUID],
    ) -> dict[UUID, str]:
        """직원 표시 이름을 한 번에 조회합니다 — Batch employee display names."""
        if not employee_ids:
            return {}
        result = await db.execute(
            select(Employee.id, User.last_name, User.first_name)
            .join(User, User.id == Employee.user_id)
            .where(Employee.id.in_(employee_ids))
        )
        return {row.id: f"{row.last_name} {row.first_name}".strip() for row in result.all()}

    async def count_all(
        self,
        db: AsyncSession,
        only_available: bool = False,
    ) -> int:
        query: Select = select(func.count()).select_from(Employee)
        if only_available:
            query = query.where(Employee.is_available.is_(True))
        return (await db.execute(query)).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
employee_repository: EmployeeRepository = EmployeeRepository()
