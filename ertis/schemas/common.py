"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions.
Includes schemas for notifications, the category catalog, statistics,
pagination, and generic messages.
"""

from datetime import datetime
from typing import Any
from pydantic import BaseModel


# === 알림 (Notification) 스키마 ===

class NotificationResponse(BaseModel):
    """알림 응답 스키마.

    Notification response schema.
    Uses reference_type + reference_id for deep-linking to the request
    in the client app.

    Attributes:
        id: 알림 UUID (Notification unique identifier)
        title: 알림 제목 (Short title)
        message: 알림 메시지 (Human-readable message)
        type: 알림 유형 (info | warning | success | error)
        reference_type: 참조 엔티티 유형 (Source entity type, nullable)
        reference_id: 참조 엔티티 UUID (Source entity UUID, nullable)
        is_read: 읽음 여부 (Read status flag)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str  # 알림 UUID 문자열 (Notification UUID as string)
    title: str  # 알림 제목 (Display title)
    message: str  # 알림 메시지 (Display message)
    type: str  # 알림 유형 — "info"|"warning"|"success"|"error"
    reference_type: str | None  # 참조 엔티티 유형 — 딥링크용 (Entity type for deep-linking)
    reference_id: str | None  # 참조 엔티티 UUID — 딥링크용 (Entity UUID for deep-linking)
    is_read: bool  # 읽음 여부 (Read flag)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)


# === 분류 (Category) 스키마 ===

class ProblemTypeResponse(BaseModel):
    id: str
    label: str


class CategoryResponse(BaseModel):
    """분류 카탈로그 항목 — Category catalog entry with its problem types."""

    id: str
    name: str
    problems: list[ProblemTypeResponse]


# === 통계 (Statistics) 스키마 ===

class StatisticsOverview(BaseModel):
    """전체 통계 요약 — Admin dashboard overview counters."""

    total_requests: int
    pending_requests: int
    assigned_requests: int
    in_progress_requests: int
    completed_requests: int
    closed_requests: int
    total_employees: int
    available_employees: int
    total_users: int


class RequestsByPriority(BaseModel):
    high: int
    medium: int
    low: int


# === 공통 (Common) 스키마 ===

class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Paginated response wrapper schema.
    Wraps a list of items with pagination metadata.

    Attributes:
        items: 항목 목록 (List of result items)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
    """

    items: list[Any]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations
    (delete operations, mark-as-read, and similar actions).

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)
