"""알림 서비스 — 알림함 조회와 상태 전이 알림 발송.

Notification Service — Inbox operations and the notification emitter used
by the request lifecycle. Emission is best-effort: a failed insert is
logged and never rolls back the transition that triggered it.
"""

import logging
from typing import NamedTuple, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.notification import Notification
from ertis.models.request import RequestStatus
from ertis.repositories.notification_repository import notification_repository

logger = logging.getLogger(__name__)


class RequestEvent(NamedTuple):
    """요청 이벤트 — A creation, transition or assignment of a request.

    Attributes:
        request_id: 요청 UUID (Request UUID)
        reporter_id: 신고자 UUID, 기본 수신자 (Reporter, always notified)
        old_status: 이전 상태, 생성 시 None (Previous status, None on creation)
        new_status: 새 상태 (New status)
        employee_user_id: 배정된 직원의 사용자 UUID (Assigned employee's user, notified on assignment)
    """

    request_id: UUID
    reporter_id: UUID
    old_status: str | None
    new_status: str
    employee_user_id: UUID | None = None


# 새 상태별 신고자 알림 — (title, message, type) sent to the reporter per new status
REPORTER_MESSAGES: dict[str, tuple[str, str, str]] = {
    RequestStatus.ASSIGNED.value: (
        "Request assigned",
        "A field employee has been assigned to your request.",
        "info",
    ),
    RequestStatus.IN_PROGRESS.value: (
        "Work started",
        "Work on your request is in progress.",
        "info",
    ),
    RequestStatus.COMPLETED.value: (
        "Request completed",
        "Your request has been resolved.",
        "success",
    ),
    RequestStatus.CLOSED.value: (
        "Request closed",
        "Your request has been closed.",
        "warning",
    ),
}


def _reporter_message(event: RequestEvent) -> tuple[str, str, str]:
    if event.old_status is None:
        return ("Request received", "Your request has been received and queued for review.", "info")
    if event.new_status == RequestStatus.PENDING.value:
        if event.old_status == RequestStatus.CLOSED.value:
            return ("Request reopened", "Your request has been reopened.", "info")
        return ("Request returned to queue", "Your request is waiting for a new assignment.", "warning")
    if event.old_status == RequestStatus.COMPLETED.value:
        return ("Request reopened", "Additional work on your request has been scheduled.", "warning")
    return REPORTER_MESSAGES[event.new_status]


class NotificationService:
    """알림 서비스.

    Notification service providing the user inbox and the
    fire-and-forget emitter for request events.
    """

    # --- 알림함 (Inbox) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        return await notification_repository.get_user_notifications(
            db, user_id, unread_only, page, per_page
        )

    async def get_unread_count(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        return await notification_repository.get_unread_count(db, user_id)

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
    ) -> bool:
        return await notification_repository.mark_read(db, notification_id, user_id)

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        return await notification_repository.mark_all_read(db, user_id)

    # --- 발송 (Emission) ---

    async def emit(
        self,
        db: AsyncSession,
        event: RequestEvent,
    ) -> int:
        """요청 이벤트에 대한 알림을 생성합니다.

        Create notifications for a request event: always for the reporter,
        and for the assigned employee when the request gets an assignee.
        Each insert runs in its own SAVEPOINT; failures are logged and
        swallowed so the caller's transition stays intact.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            event: 요청 이벤트 (Request event)

        Returns:
            int: 생성된 알림 수 (Number of notifications created)
        """
        title, message, notification_type = _reporter_message(event)
        outgoing: list[tuple[UUID, str, str, str]] = [
            (event.reporter_id, title, message, notification_type),
        ]
        if event.employee_user_id is not None:
            outgoing.append((
                event.employee_user_id,
                "New task assigned",
                "A citizen request has been assigned to you.",
                "info",
            ))

        created = 0
        for user_id, title, message, notification_type in outgoing:
            try:
                async with db.begin_nested():
                    await notification_repository.create_notification(
                        db,
                        user_id=user_id,
                        title=title,
                        message=message,
                        notification_type=notification_type,
                        reference_type="request",
                        reference_id=event.request_id,
                    )
                created += 1
            except SQLAlchemyError:
                logger.exception(
                    "Failed to emit notification for request %s (%s -> %s) to user %s",
                    event.request_id,
                    event.old_status,
                    event.new_status,
                    user_id,
                )
        return created


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
