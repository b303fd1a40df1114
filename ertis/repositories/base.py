"""공통 레포지토리 — 단건 조회, 페이지 조회, 생성, 존재 확인.

Common repository base shared by the request, employee, user and
notification repositories. Repositories flush but never commit; the
router owning the session commits once the whole operation succeeded.
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """모델 하나에 묶인 레포지토리.

    Repository bound to one mapped model class.

    Attributes:
        model: 대상 ORM 모델 (Mapped model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> ModelType | None:
        """기본 키로 조회 — Load one row by primary key, or None."""
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """정렬된 쿼리를 페이지 단위로 실행합니다.

        Run ``query`` for one page and count all rows it matches.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 필터와 정렬이 적용된 SELECT (Filtered, ordered SELECT)
            page: 1부터 시작하는 페이지 번호 (1-based page number)
            per_page: 페이지 크기 (Page size)

        Returns:
            tuple[Sequence[ModelType], int]: (현재 페이지 항목, 전체 개수)
        """
        total: int = (
            await db.execute(select(func.count()).select_from(query.order_by(None).subquery()))
        ).scalar() or 0
        page = max(page, 1)
        result = await db.execute(query.offset((page - 1) * per_page).limit(per_page))
        return result.scalars().all(), total

    async def create(
        self,
        db: AsyncSession,
        values: dict[str, Any],
    ) -> ModelType:
        """행을 추가하고 flush 후 DB 기본값까지 읽어 반환합니다.

        Insert a row, flush it and reload server-side defaults
        (``version`` on requests, timestamps).
        """
        record: ModelType = self.model(**values)
        db.add(record)
        await db.flush()
        await db.refresh(record)
        return record

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """동등 조건에 맞는 행이 하나라도 있는지 — Any row matching all equality filters."""
        query: Select = select(self.model.id)
        for column_name, value in filters.items():
            query = query.where(getattr(self.model, column_name) == value)
        result = await db.execute(query.limit(1))
        return result.first() is not None
