"""알림 테스트 — 상태 전이 알림 발송과 알림함 API.

Notification tests — Emission on request events, best-effort failure
handling, and the inbox endpoints.
"""

import logging
import uuid

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.employee import Employee
from ertis.models.notification import Notification
from ertis.models.request import RequestStatus, ServiceRequest
from ertis.models.user import User
from ertis.repositories.notification_repository import notification_repository
from ertis.schemas.auth import Actor
from ertis.schemas.request import RequestCreate, RequestStatusChange
from ertis.services.assignment_service import assignment_service
from ertis.services.notification_service import RequestEvent, notification_service
from ertis.services.request_service import request_service
from tests.conftest import auth_header

APP_NOTIFY_URL = "/api/v1/app/my/notifications"


async def _titles(db: AsyncSession, user_id: uuid.UUID) -> list[str]:
    items, _ = await notification_repository.get_user_notifications(db, user_id, per_page=100)
    return sorted(n.title for n in items)


def _payload() -> RequestCreate:
    return RequestCreate(
        problem_type="no_light",
        description="Street lamp is out on the corner",
        address="Dostyk Ave 5",
    )


class TestEmission:
    """요청 이벤트별 알림 생성."""

    async def test_create_notifies_reporter(self, db: AsyncSession, citizen_actor: Actor):
        request = await request_service.create_request(db, _payload(), citizen_actor)
        items, total = await notification_repository.get_user_notifications(db, citizen_actor.user_id)
        assert total == 1
        assert items[0].title == "Request received"
        assert items[0].reference_type == "request"
        assert items[0].reference_id == request.id
        assert items[0].is_read is False

    async def test_assign_notifies_reporter_and_employee(
        self,
        db: AsyncSession,
        citizen_actor: Actor,
        admin_actor: Actor,
        employee: Employee,
    ):
        request = await request_service.create_request(db, _payload(), citizen_actor)
        await assignment_service.assign(db, request.id, employee.id, admin_actor)

        assert await _titles(db, citizen_actor.user_id) == ["Request assigned", "Request received"]
        assert await _titles(db, employee.user_id) == ["New task assigned"]

    async def test_lifecycle_titles(
        self,
        db: AsyncSession,
        citizen_actor: Actor,
        admin_actor: Actor,
        employee_actor: Actor,
        employee: Employee,
    ):
        request = await request_service.create_request(db, _payload(), citizen_actor)
        await assignment_service.assign(db, request.id, employee.id, admin_actor)
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.IN_PROGRESS), employee_actor
        )
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.COMPLETED), employee_actor
        )
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.IN_PROGRESS), admin_actor
        )
        await request_service.close_request(db, request.id, "Resolved by another crew", admin_actor)
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.PENDING), admin_actor
        )

        assert await _titles(db, citizen_actor.user_id) == sorted([
            "Request received",
            "Request assigned",
            "Work started",
            "Request completed",
            "Request reopened",
            "Request closed",
            "Request reopened",
        ])

    async def test_unassign_notifies_return_to_queue(
        self,
        db: AsyncSession,
        citizen_actor: Actor,
        admin_actor: Actor,
        employee: Employee,
    ):
        request = await request_service.create_request(db, _payload(), citizen_actor)
        await assignment_service.assign(db, request.id, employee.id, admin_actor)
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.PENDING), admin_actor
        )
        assert "Request returned to queue" in await _titles(db, citizen_actor.user_id)

    async def test_start_pending_notifies_bound_employee(
        self,
        db: AsyncSession,
        pending_request: ServiceRequest,
        admin_actor: Actor,
        employee: Employee,
    ):
        await request_service.change_status(
            db,
            pending_request.id,
            RequestStatusChange(status=RequestStatus.IN_PROGRESS, employee_id=employee.id),
            admin_actor,
        )
        assert await _titles(db, employee.user_id) == ["New task assigned"]
        assert await _titles(db, pending_request.reporter_id) == ["Work started"]

    async def test_emit_returns_created_count(self, db: AsyncSession, pending_request: ServiceRequest, employee: Employee):
        created = await notification_service.emit(
            db,
            RequestEvent(
                request_id=pending_request.id,
                reporter_id=pending_request.reporter_id,
                old_status=RequestStatus.PENDING.value,
                new_status=RequestStatus.ASSIGNED.value,
                employee_user_id=employee.user_id,
            ),
        )
        assert created == 2


class TestBestEffort:
    """알림 실패는 전이를 되돌리지 않음."""

    async def test_failed_insert_keeps_transition(
        self,
        db: AsyncSession,
        pending_request: ServiceRequest,
        admin_actor: Actor,
        employee: Employee,
        monkeypatch,
        caplog,
    ):
        async def boom(*args, **kwargs):
            raise SQLAlchemyError("notifications table unavailable")

        monkeypatch.setattr(notification_repository, "create_notification", boom)

        with caplog.at_level(logging.ERROR, logger="ertis.services.notification_service"):
            request = await assignment_service.assign(db, pending_request.id, employee.id, admin_actor)
        await db.commit()

        assert request.status == RequestStatus.ASSIGNED.value
        await db.refresh(request)
        assert request.status == RequestStatus.ASSIGNED.value
        assert request.assignee_id == employee.id
        await db.refresh(employee)
        assert employee.active_tasks == 1

        assert "Failed to emit notification" in caplog.text
        monkeypatch.undo()
        assert await _titles(db, pending_request.reporter_id) == []

    async def test_emit_counts_only_successes(
        self, db: AsyncSession, pending_request: ServiceRequest, monkeypatch
    ):
        async def boom(*args, **kwargs):
            raise SQLAlchemyError("boom")

        monkeypatch.setattr(notification_repository, "create_notification", boom)
        created = await notification_service.emit(
            db,
            RequestEvent(
                request_id=pending_request.id,
                reporter_id=pending_request.reporter_id,
                old_status=None,
                new_status=RequestStatus.PENDING.value,
            ),
        )
        assert created == 0


@pytest_asyncio.fixture
async def inbox(db: AsyncSession, citizen_user: User) -> list[Notification]:
    """시민 알림 3건 생성."""
    notifications = []
    for i in range(3):
        notifications.append(
            await notification_repository.create_notification(
                db,
                user_id=citizen_user.id,
                title=f"Notice {i}",
                message=f"Test notification {i}",
            )
        )
    return notifications


class TestInboxApi:
    """알림함 API."""

    async def test_list(self, client: AsyncClient, citizen_token: str, inbox):
        response = await client.get(APP_NOTIFY_URL, headers=auth_header(citizen_token))
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert {item["title"] for item in data["items"]} == {"Notice 0", "Notice 1", "Notice 2"}
        assert set(data["items"][0]) == {
            "id", "title", "message", "type", "reference_type", "reference_id", "is_read", "created_at",
        }
        assert data["items"][0]["is_read"] is False

    async def test_unread_count_and_mark_read(self, client: AsyncClient, citizen_token: str, inbox):
        headers = auth_header(citizen_token)
        response = await client.get(f"{APP_NOTIFY_URL}/unread-count", headers=headers)
        assert response.json() == {"unread_count": 3}

        response = await client.patch(f"{APP_NOTIFY_URL}/{inbox[0].id}/read", headers=headers)
        assert response.status_code == 200

        response = await client.get(f"{APP_NOTIFY_URL}/unread-count", headers=headers)
        assert response.json() == {"unread_count": 2}

        response = await client.get(f"{APP_NOTIFY_URL}?unread_only=true", headers=headers)
        assert response.json()["total"] == 2

    async def test_mark_all_read(self, client: AsyncClient, citizen_token: str, inbox):
        headers = auth_header(citizen_token)
        response = await client.patch(f"{APP_NOTIFY_URL}/read-all", headers=headers)
        assert response.status_code == 200

        response = await client.get(f"{APP_NOTIFY_URL}/unread-count", headers=headers)
        assert response.json() == {"unread_count": 0}

    async def test_cannot_read_someone_elses(self, client: AsyncClient, admin_token: str, inbox):
        response = await client.patch(
            f"{APP_NOTIFY_URL}/{inbox[0].id}/read", headers=auth_header(admin_token)
        )
        assert response.status_code == 404

    async def test_unknown_notification(self, client: AsyncClient, citizen_token: str):
        response = await client.patch(
            f"{APP_NOTIFY_URL}/{uuid.uuid4()}/read", headers=auth_header(citizen_token)
        )
        assert response.status_code == 404

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get(APP_NOTIFY_URL)
        assert response.status_code == 401
