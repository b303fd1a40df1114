"""알림 관련 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definitions.
Each notification can reference the entity that triggered it via
reference_type and reference_id.

Tables:
    - notifications: 사용자 알림 (User notifications with polymorphic references)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ertis.database import Base


class Notification(Base):
    """알림 모델 — 사용자에게 전달되는 시스템 알림.

    Notification model — System notifications delivered to users.

    Notification Types (type 필드 값):
        - "info": 접수/배정 등 일반 안내 (Received, assigned, started)
        - "success": 완료 안내 (Work completed)
        - "warning": 종료/반려 안내 (Closed or returned to the queue)
        - "error": 처리 실패 안내 (Reserved for delivery problems)

    Reference Types (reference_type 필드 값):
        - "request": ServiceRequest 참조 (Links to requests table)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 수신자 FK (Recipient user foreign key)
        title: 알림 제목 (Short title)
        message: 알림 메시지 (Human-readable notification message)
        type: 알림 유형 (Notification type, see above)
        reference_type: 참조 엔티티 유형 (Referenced entity table name)
        reference_id: 참조 엔티티 ID (Referenced entity UUID)
        is_read: 읽음 여부 (Whether the user has read this notification)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "notifications"

    # 알림 고유 식별자 — Notification unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 수신자 FK — Target user who receives this notification
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    # 알림 제목 — Short title shown in the inbox
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    # 알림 메시지 — Human-readable message displayed to the user
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    # 알림 유형 — info | warning | success | error
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="info")
    # 참조 엔티티 유형 — Polymorphic reference: entity table name
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 참조 엔티티 ID — Polymorphic reference: UUID of the source entity
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    # 읽음 여부 — False=미읽음, True=읽음 (Unread by default)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    # 생성 일시 — Notification creation timestamp (UTC, immutable)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_notifications_user_id", "user_id"),
    )
