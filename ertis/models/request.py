"""민원 요청 SQLAlchemy ORM 모델 정의.

Service request SQLAlchemy ORM model definitions.
A request is a citizen-submitted municipal problem report (utility, road,
sanitation...) tracked from submission to resolution.

Tables:
    - requests: 민원 요청 (Citizen problem reports with lifecycle status)
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Float, Integer, Text, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ertis.database import Base


class RequestStatus(str, enum.Enum):
    """요청 상태 — Lifecycle status of a request."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CLOSED = "closed"


class RequestPriority(str, enum.Enum):
    """요청 우선순위 — Priority derived at creation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# 담당자가 반드시 있어야 하는 상태 — Statuses that require a bound assignee
ASSIGNEE_REQUIRED_STATUSES: frozenset[str] = frozenset({
    RequestStatus.ASSIGNED.value,
    RequestStatus.IN_PROGRESS.value,
    RequestStatus.COMPLETED.value,
})

# 직원 업무량에 포함되는 상태 — Statuses counted in an employee's workload
ACTIVE_STATUSES: frozenset[str] = frozenset({
    RequestStatus.ASSIGNED.value,
    RequestStatus.IN_PROGRESS.value,
})


class ServiceRequest(Base):
    """민원 요청 모델 — 시민이 제출한 문제 신고.

    Service request model — A problem reported by a citizen.
    Citizen-supplied content (description, address, coordinates, photo) is
    immutable after creation. ``status`` and ``assignee_id`` change only
    through the lifecycle engine and the assignment dispatcher.

    ``version`` is the optimistic concurrency counter: every UPDATE is issued
    as ``WHERE id = :id AND version = :seen`` and a lost race surfaces as
    ``StaleDataError`` on flush.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        reporter_id: 신고자 FK (Reporting citizen, immutable)
        category: 분류 (Category key, may be back-filled by the classifier)
        problem_type: 문제 유형 (Problem type label)
        description: 상세 설명 (Citizen description)
        address: 주소 (Address text)
        latitude: 위도 (Latitude, optional)
        longitude: 경도 (Longitude, optional)
        photo_url: 사진 URL (Citizen photo, optional)
        status: 상태 (pending | assigned | in_progress | completed | closed)
        priority: 우선순위 (low | medium | high)
        assignee_id: 담당 직원 FK (Bound employee, nullable)
        ai_analysis: 자동 분석 요약 (Classifier analysis text, optional)
        completion_note: 완료 메모 (Set on completed/closed)
        completion_photo_url: 완료 사진 URL (Set on completed/closed)
        completed_at: 완료 일시 (Stamped when the request reaches completed)
        version: 낙관적 잠금 버전 (Optimistic lock version)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Refreshed on every mutation)
    """

    __tablename__ = "requests"

    # 요청 고유 식별자 — Request unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 신고자 FK — Reporting citizen
    reporter_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    problem_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    # 상태 — pending → assigned → in_progress → completed (closed: admin 종료)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=RequestStatus.PENDING.value)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default=RequestPriority.MEDIUM.value)
    # 담당 직원 FK — 배정 디스패처만 설정 (Set only by the assignment dispatcher)
    assignee_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("employees.id", ondelete="RESTRICT"), nullable=True)
    ai_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    completion_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    completion_photo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 낙관적 잠금 버전 — Optimistic lock counter (mapper version_id_col)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_requests_status", "status"),
        Index("ix_requests_reporter_id", "reporter_id"),
        Index("ix_requests_assignee_id", "assignee_id"),
    )

    __mapper_args__ = {"version_id_col": version}
