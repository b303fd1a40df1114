"""앱 알림 라우터 — 내 알림함.

App Notification Router — My notification inbox.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.api.deps import get_current_user
from ertis.database import get_db
from ertis.models.user import User
from ertis.schemas.common import MessageResponse, NotificationResponse, PaginatedResponse
from ertis.services.notification_service import notification_service
from ertis.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    unread_only: bool = False,
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """내 알림 목록을 조회합니다.

    List my notifications, newest first.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)
        unread_only: 읽지 않은 알림만 (Only unread notifications)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 알림 목록 (Paginated notification list)
    """
    notifications, total = await notification_service.list_notifications(
        db,
        user_id=current_user.id,
        unread_only=unread_only,
        page=page,
        per_page=per_page,
    )

    items: list[NotificationResponse] = [
        NotificationResponse(
            id=str(n.id),
            title=n.title,
            message=n.message,
            type=n.type,
            reference_type=n.reference_type,
            reference_id=str(n.reference_id) if n.reference_id else None,
            is_read=n.is_read,
            created_at=n.created_at,
        )
        for n in notifications
    ]

    return {
        "items": items,
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/unread-count")
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    count: int = await notification_service.get_unread_count(db, user_id=current_user.id)
    return {"unread_count": count}


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """모든 읽지 않은 알림을 읽음 처리합니다."""
    count: int = await notification_service.mark_all_read(db, user_id=current_user.id)
    await db.commit()
    return {"message": f"{count}개의 알림이 읽음 처리되었습니다 ({count} notifications marked as read)"}


@router.patch("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """단일 알림을 읽음 처리합니다. 본인 알림만 가능."""
    success: bool = await notification_service.mark_read(
        db,
        notification_id=notification_id,
        user_id=current_user.id,
    )
    if not success:
        raise NotFoundError("알림을 찾을 수 없습니다 (Notification not found)")
    await db.commit()
    return {"message": "알림이 읽음 처리되었습니다 (Notification marked as read)"}
