"""사용자 레포지토리 — 사용자 조회 쿼리.

User Repository — Lookup queries for user accounts.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.user import User
from ertis.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다 (대소문자 무시).

        Retrieve a user by email, case-insensitively.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 로그인 이메일 (Login email)

        Returns:
            User | None: 사용자 또는 None (User or None)
        """
        query: Select = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_names(
        self,
        db: AsyncSession,
        user_ids: set[UUID],
    ) -> dict[UUID, str]:
        """여러 사용자의 표시 이름을 한 번에 조회합니다 — Batch display name lookup."""
        if not user_ids:
            return {}
        result = await db.execute(select(User).where(User.id.in_(user_ids)))
        users: Sequence[User] = result.scalars().all()
        return {user.id: user.full_name for user in users}

    async def count_all(self, db: AsyncSession) -> int:
        return (await db.execute(select(func.count()).select_from(User))).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
