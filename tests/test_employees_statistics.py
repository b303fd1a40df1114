"""직원 관리 및 통계 API 테스트.

Employee management and statistics API tests.
"""

import uuid

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.employee import Employee
from ertis.models.request import RequestStatus
from ertis.models.user import UserRole
from ertis.schemas.auth import Actor
from ertis.schemas.request import RequestCreate, RequestStatusChange
from ertis.services.assignment_service import assignment_service
from ertis.services.request_service import request_service
from tests.conftest import auth_header, make_request, make_token, make_user

EMPLOYEES_URL = "/api/v1/admin/employees"
STATS_URL = "/api/v1/admin/statistics"


class TestEmployeeAdmin:
    """직원 목록, 생성, 가용성."""

    async def test_create_profile_promotes_citizen(
        self, client: AsyncClient, db: AsyncSession, admin_token: str
    ):
        user = await make_user(db, "plumber@test.com", UserRole.CITIZEN, "Erlan")
        response = await client.post(
            EMPLOYEES_URL,
            json={"user_id": str(user.id), "specialization": "water"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["full_name"] == "User Erlan"
        assert data["active_tasks"] == 0
        assert data["is_available"] is True

        await db.refresh(user)
        assert user.role == UserRole.EMPLOYEE.value

    async def test_create_duplicate_profile(
        self, client: AsyncClient, employee: Employee, admin_token: str
    ):
        response = await client.post(
            EMPLOYEES_URL,
            json={"user_id": str(employee.user_id), "specialization": "roads"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 409

    async def test_create_for_admin_rejected(
        self, client: AsyncClient, db: AsyncSession, admin_user, admin_token: str
    ):
        """관리자 계정은 직원 프로필을 가질 수 없음."""
        response = await client.post(
            EMPLOYEES_URL,
            json={"user_id": str(admin_user.id), "specialization": "roads"},
            headers=auth_header(admin_token),
        )
        assert response.status_code == 400

        response = await client.get(EMPLOYEES_URL, headers=auth_header(admin_token))
        assert response.json()["total"] == 0

    async def test_create_for_unknown_or_malformed_user(self, client: AsyncClient, admin_token: str):
        headers = auth_header(admin_token)
        response = await client.post(
            EMPLOYEES_URL, json={"user_id": str(uuid.uuid4()), "specialization": "roads"}, headers=headers
        )
        assert response.status_code == 404
        response = await client.post(
            EMPLOYEES_URL, json={"user_id": "not-a-uuid", "specialization": "roads"}, headers=headers
        )
        assert response.status_code == 400

    async def test_list_and_filter(
        self,
        client: AsyncClient,
        employee: Employee,
        other_employee: Employee,
        admin_token: str,
    ):
        headers = auth_header(admin_token)
        response = await client.get(EMPLOYEES_URL, headers=headers)
        assert response.json()["total"] == 2

        response = await client.get(f"{EMPLOYEES_URL}?specialization=water", headers=headers)
        items = response.json()["items"]
        assert [item["id"] for item in items] == [str(other_employee.id)]

    async def test_list_orders_by_rating_then_workload(
        self,
        client: AsyncClient,
        db: AsyncSession,
        employee: Employee,
        other_employee: Employee,
        admin_token: str,
    ):
        employee.average_rating = 4.9
        other_employee.average_rating = 3.1
        await db.flush()

        response = await client.get(EMPLOYEES_URL, headers=auth_header(admin_token))
        ids = [item["id"] for item in response.json()["items"]]
        assert ids == [str(employee.id), str(other_employee.id)]

    async def test_availability_toggle(self, client: AsyncClient, employee: Employee, admin_token: str):
        headers = auth_header(admin_token)
        response = await client.patch(
            f"{EMPLOYEES_URL}/{employee.id}/availability", json={"is_available": False}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["is_available"] is False

        response = await client.get(f"{EMPLOYEES_URL}?is_available=false", headers=headers)
        assert response.json()["total"] == 1

    async def test_employee_cannot_manage_employees(self, client: AsyncClient, employee_token: str):
        response = await client.get(EMPLOYEES_URL, headers=auth_header(employee_token))
        assert response.status_code == 403

    async def test_profile_without_employee_record(self, client: AsyncClient, db: AsyncSession):
        """직원 역할이지만 프로필이 없는 계정."""
        user = await make_user(db, "noprofile@test.com", UserRole.EMPLOYEE)
        response = await client.get("/api/v1/app/my/employee-profile", headers=auth_header(make_token(user)))
        assert response.status_code == 404


class TestStatistics:
    """대시보드 통계."""

    async def test_overview_and_priority(
        self,
        client: AsyncClient,
        db: AsyncSession,
        citizen_user,
        employee: Employee,
        admin_token: str,
    ):
        await make_request(db, citizen_user)
        await make_request(db, citizen_user, RequestStatus.ASSIGNED, employee.id)
        closed = await make_request(db, citizen_user, RequestStatus.CLOSED)
        closed.priority = "low"
        await db.flush()
        headers = auth_header(admin_token)

        response = await client.get(f"{STATS_URL}/overview", headers=headers)
        assert response.status_code == 200
        overview = response.json()
        assert overview["total_requests"] == 3
        assert overview["pending_requests"] == 1
        assert overview["assigned_requests"] == 1
        assert overview["closed_requests"] == 1
        assert overview["completed_requests"] == 0
        assert overview["total_employees"] == 1
        assert overview["available_employees"] == 1
        assert overview["total_users"] == 3

        response = await client.get(f"{STATS_URL}/requests/priority", headers=headers)
        assert response.json() == {"high": 2, "medium": 0, "low": 1}

    async def test_employee_statistics(
        self,
        client: AsyncClient,
        db: AsyncSession,
        citizen_actor: Actor,
        admin_actor: Actor,
        employee_actor: Actor,
        employee: Employee,
        admin_token: str,
    ):
        payload = RequestCreate(problem_type="pothole", description="Hole", address="Satpaev 1")
        for _ in range(2):
            request = await request_service.create_request(db, payload, citizen_actor)
            await assignment_service.assign(db, request.id, employee.id, admin_actor)
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.IN_PROGRESS), employee_actor
        )
        await request_service.change_status(
            db, request.id, RequestStatusChange(status=RequestStatus.COMPLETED), employee_actor
        )
        await db.commit()

        response = await client.get(f"{EMPLOYEES_URL}/{employee.id}/statistics", headers=auth_header(admin_token))
        assert response.status_code == 200
        stats = response.json()
        assert stats["total_assigned"] == 1
        assert stats["total_in_progress"] == 0
        assert stats["total_completed"] == 1
        assert stats["completion_rate"] == 50.0
        assert stats["average_completion_hours"] is not None
        assert stats["rating"] is None

    async def test_unknown_employee_statistics(self, client: AsyncClient, admin_token: str):
        response = await client.get(f"{EMPLOYEES_URL}/{uuid.uuid4()}/statistics", headers=auth_header(admin_token))
        assert response.status_code == 404

    async def test_statistics_admin_only(self, client: AsyncClient, citizen_token: str):
        response = await client.get(f"{STATS_URL}/overview", headers=auth_header(citizen_token))
        assert response.status_code == 403
