"""민원 요청 Pydantic 스키마.

Service request request/response schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ertis.models.request import RequestPriority, RequestStatus


class RequestCreate(BaseModel):
    """요청 생성 스키마 — 시민이 제출하는 신고 내용.

    Request creation payload submitted by a citizen.
    Status is always forced to pending; priority is derived on the server.
    """

    category: str | None = None  # electricity, water, roads, garbage, cleaning, landscaping
    problem_type: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1, max_length=500)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    photo_url: str | None = None


class RequestAssign(BaseModel):
    employee_id: UUID


class RequestStatusChange(BaseModel):
    """상태 변경 스키마.

    Status change payload. ``completion_note`` / ``completion_photo_url`` are
    kept only on transitions into completed or closed. ``employee_id`` is
    required when an admin starts a pending request directly.
    """

    status: RequestStatus
    completion_note: str | None = None
    completion_photo_url: str | None = None
    employee_id: UUID | None = None


class RequestComplete(BaseModel):
    completion_note: str | None = None
    completion_photo_url: str | None = None


class RequestClose(BaseModel):
    reason: str | None = None


class RequestFilter(BaseModel):
    """목록 필터 — List filter for admin request listing."""

    status: RequestStatus | None = None
    priority: RequestPriority | None = None
    category: str | None = None
    assignee_id: UUID | None = None
    reporter_id: UUID | None = None


class RequestResponse(BaseModel):
    """요청 응답 스키마.

    Request response schema. ``available_actions`` lists the target statuses
    the calling actor may request right now.
    """

    id: str
    reporter_id: str
    reporter_name: str | None = None
    category: str | None
    problem_type: str
    description: str
    address: str
    latitude: float | None
    longitude: float | None
    photo_url: str | None
    status: str
    priority: str
    assignee_id: str | None
    assignee_name: str | None = None
    ai_analysis: str | None
    completion_note: str | None
    completion_photo_url: str | None
    completed_at: datetime | None
    version: int
    available_actions: list[str] = []
    created_at: datetime
    updated_at: datetime
