"""사용자 관련 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definitions.
Every account carries exactly one role — citizen, employee or admin —
which drives the transitions the account may request.

Tables:
    - users: 사용자 계정 (User accounts with a single role)
"""

import enum
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ertis.database import Base


class UserRole(str, enum.Enum):
    """사용자 역할 — Actor role used by the lifecycle engine."""

    CITIZEN = "citizen"
    EMPLOYEE = "employee"
    ADMIN = "admin"


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is globally unique and used as the login identifier.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 로그인 이메일 (Login email, unique)
        username: 표시용 아이디 (Display username)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        middle_name: 부칭 (Middle name / patronymic, optional)
        phone: 연락처 (Contact phone number)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 (citizen | employee | admin)
        is_active: 활성 상태 (Active status)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        employee: 현장 직원 프로필 (Field worker profile, employees only)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 이메일 — Login email (전역 고유, globally unique)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 표시용 아이디 — Display username
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — citizen | employee | admin
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.CITIZEN.value)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    employee = relationship("Employee", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        """성 + 이름 표시 — "Last First" display name."""
        return f"{self.last_name} {self.first_name}".strip()
