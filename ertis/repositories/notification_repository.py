"""알림 레포지토리 — 사용자 알림함 쿼리.

Notification Repository — Per-user inbox queries and the single insert
used by the notification emitter.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.notification import Notification
from ertis.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):

    def __init__(self) -> None:
        super().__init__(Notification)

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """수신자의 알림을 최신순으로 — A recipient's notifications, newest first."""
        query: Select = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        )
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        return await self.get_paginated(db, query, page, per_page)

    async def get_unread_count(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return result.scalar() or 0

    async def _set_read(self, db: AsyncSession, *conditions: Any) -> int:
        """조건에 맞는 안 읽은 알림을 읽음 처리하고 변경 건수를 반환."""
        result = await db.execute(
            update(Notification)
            .where(Notification.is_read.is_(False), *conditions)
            .values(is_read=True)
        )
        await db.flush()
        return result.rowcount

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
    ) -> bool:
        """본인 알림 하나를 읽음 처리합니다.

        Mark one of the user's notifications as read. Returns False when the
        id is unknown or belongs to another user; marking an already read
        notification again still returns True.
        """
        owned = await self.exists(db, {"id": notification_id, "user_id": user_id})
        if owned:
            await self._set_read(db, Notification.id == notification_id)
        return owned

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        return await self._set_read(db, Notification.user_id == user_id)

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: str = "info",
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> Notification:
        """알림 한 건 추가 — Insert one unread notification.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 수신자 (Recipient user)
            title: 제목 (Title)
            message: 본문 (Message)
            notification_type: info | warning | success | error
            reference_type: 딥링크 대상 유형, 예: "request" (Deep-link entity type)
            reference_id: 딥링크 대상 ID (Deep-link entity id)
        """
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=notification_type,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        db.add(notification)
        await db.flush()
        return notification


notification_repository: NotificationRepository = NotificationRepository()
