"""민원 요청 레포지토리.

Service request repository — Handles requests table queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.request import ServiceRequest
from ertis.repositories.base import BaseRepository
from ertis.schemas.request import RequestFilter


class RequestRepository(BaseRepository[ServiceRequest]):

    def __init__(self) -> None:
        super().__init__(ServiceRequest)

    async def get_filtered(
        self,
        db: AsyncSession,
        filters: RequestFilter,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ServiceRequest], int]:
        query: Select = select(ServiceRequest).order_by(ServiceRequest.created_at.desc())
        if filters.status is not None:
            query = query.where(ServiceRequest.status == filters.status.value)
        if filters.priority is not None:
            query = query.where(ServiceRequest.priority == filters.priority.value)
        if filters.category:
            query = query.where(ServiceRequest.category == filters.category)
        if filters.assignee_id is not None:
            query = query.where(ServiceRequest.assignee_id == filters.assignee_id)
        if filters.reporter_id is not None:
            query = query.where(ServiceRequest.reporter_id == filters.reporter_id)
        return await self.get_paginated(db, query, page, per_page)

    async def get_by_reporter(
        self,
        db: AsyncSession,
        reporter_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ServiceRequest], int]:
        query: Select = (
            select(ServiceRequest)
            .where(ServiceRequest.reporter_id == reporter_id)
            .order_by(ServiceRequest.created_at.desc())
        )
        return await self.get_paginated(db, query, page, per_page)

    async def get_by_assignee(
        self,
        db: AsyncSession,
        employee_id: UUID,
        status: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ServiceRequest], int]:
        query: Select = (
            select(ServiceRequest)
            .where(ServiceRequest.assignee_id == employee_id)
            .order_by(ServiceRequest.updated_at.desc())
        )
        if status:
            query = query.where(ServiceRequest.status == status)
        return await self.get_paginated(db, query, page, per_page)

    async def count_by_column(
        self,
        db: AsyncSession,
        column_name: str,
        assignee_id: UUID | None = None,
    ) -> dict[str, int]:
        """컬럼 값별 요청 수 — Request counts grouped by status or priority."""
        column = getattr(ServiceRequest, column_name)
        query: Select = select(column, func.count(ServiceRequest.id)).group_by(column)
        if assignee_id is not None:
            query = query.where(ServiceRequest.assignee_id == assignee_id)
        result = await db.execute(query)
        return {value: count for value, count in result.all()}


request_repository: RequestRepository = RequestRepository()
