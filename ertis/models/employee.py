"""현장 직원 SQLAlchemy ORM 모델 정의.

Field employee SQLAlchemy ORM model definition.
An employee profile extends a user account with the data the assignment
dispatcher needs: specialization, availability and workload counters.

Tables:
    - employees: 현장 직원 프로필 (Field worker profiles)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, CheckConstraint, DateTime, Float, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ertis.database import Base


class Employee(Base):
    """현장 직원 모델 — 요청을 배정받아 처리하는 직원.

    Employee model — Field worker who receives and resolves requests.
    ``active_tasks`` and ``total_completed`` are maintained by the
    assignment dispatcher; ``average_rating`` belongs to the rating
    subsystem and is only read here.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 계정 FK (Owning user account, one profile per user)
        specialization: 전문 분야 (Specialization, usually a category key)
        average_rating: 평균 평점 (Average citizen rating, 0 when unrated)
        total_completed: 완료 건수 (Number of completed requests)
        active_tasks: 진행 중 업무 수 (Workload: assigned + in_progress requests)
        is_available: 배정 가능 여부 (Availability flag shown to admins)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "employees"

    # 직원 고유 식별자 — Employee unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사용자 FK — Owning user account (CASCADE: 사용자 삭제 시 프로필도 삭제)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    # 전문 분야 — e.g. "electricity", "water", "roads"
    specialization: Mapped[str] = mapped_column(String(50), nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, default=0.0)
    total_completed: Mapped[int] = mapped_column(Integer, default=0)
    # 업무량 — Count of bound requests in assigned/in_progress
    active_tasks: Mapped[int] = mapped_column(Integer, default=0)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("active_tasks >= 0", name="ck_employees_active_tasks_non_negative"),
    )

    # 관계 — Relationships
    user = relationship("User", back_populates="employee")
