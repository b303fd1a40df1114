"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자 계정 및 역할 (User accounts and roles)
    employee: 현장 직원 프로필 (Field employee profiles)
    request: 민원 요청 및 상태 (Service requests and lifecycle statuses)
    notification: 알림 (User notifications)
"""

from ertis.models.user import User, UserRole
from ertis.models.employee import Employee
from ertis.models.request import RequestPriority, RequestStatus, ServiceRequest
from ertis.models.notification import Notification

__all__ = [
    "User", "UserRole",
    "Employee",
    "ServiceRequest", "RequestStatus", "RequestPriority",
    "Notification",
]
