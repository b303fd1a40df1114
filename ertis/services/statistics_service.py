"""통계 서비스 — 관리자 대시보드 집계.

Statistics Service — Aggregations for the admin dashboard: request counts
per status and priority, and per-employee performance.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.request import RequestPriority, RequestStatus, ServiceRequest
from ertis.repositories.employee_repository import employee_repository
from ertis.repositories.request_repository import request_repository
from ertis.repositories.user_repository import user_repository
from ertis.utils.exceptions import NotFoundError


class StatisticsService:
    """통계 서비스.

    Aggregation service for admin statistics views.
    """

    async def get_overview(self, db: AsyncSession) -> dict:
        """상태별 요청 수와 직원/사용자 수 집계."""
        by_status: dict[str, int] = await request_repository.count_by_column(db, "status")
        return {
            "total_requests": sum(by_status.values()),
            "pending_requests": by_status.get(RequestStatus.PENDING.value, 0),
            "assigned_requests": by_status.get(RequestStatus.ASSIGNED.value, 0),
            "in_progress_requests": by_status.get(RequestStatus.IN_PROGRESS.value, 0),
            "completed_requests": by_status.get(RequestStatus.COMPLETED.value, 0),
            "closed_requests": by_status.get(RequestStatus.CLOSED.value, 0),
            "total_employees": await employee_repository.count_all(db),
            "available_employees": await employee_repository.count_all(db, only_available=True),
            "total_users": await user_repository.count_all(db),
        }

    async def get_requests_by_priority(self, db: AsyncSession) -> dict:
        by_priority: dict[str, int] = await request_repository.count_by_column(db, "priority")
        return {p.value: by_priority.get(p.value, 0) for p in RequestPriority}

    async def get_employee_statistics(
        self,
        db: AsyncSession,
        employee_id: UUID,
    ) -> dict:
        """직원별 실적 통계.

        Per-employee statistics.

        - completion_rate: 담당 요청 중 완료 비율 % (share of bound requests that are completed)
        - average_completion_hours: 접수부터 완료까지 평균 시간 (mean hours from creation to completion)

        Raises:
            NotFoundError: 직원이 없을 때 (Unknown employee)
        """
        employee = await employee_repository.get_with_user(db, employee_id)
        if employee is None:
            raise NotFoundError("직원을 찾을 수 없습니다 (Employee not found)")

        by_status: dict[str, int] = await request_repository.count_by_column(
            db, "status", assignee_id=employee_id
        )
        bound_total = sum(by_status.values())
        completed_now = by_status.get(RequestStatus.COMPLETED.value, 0)
        completion_rate = round(completed_now / bound_total * 100, 1) if bound_total > 0 else None

        result = await db.execute(
            select(ServiceRequest.created_at, ServiceRequest.completed_at).where(
                ServiceRequest.assignee_id == employee_id,
                ServiceRequest.completed_at.is_not(None),
            )
        )
        durations: list[float] = [
            (completed_at - created_at).total_seconds() / 3600
            for created_at, completed_at in result.all()
        ]
        average_hours = round(sum(durations) / len(durations), 1) if durations else None

        return {
            "employee_id": str(employee.id),
            "total_assigned": by_status.get(RequestStatus.ASSIGNED.value, 0),
            "total_in_progress": by_status.get(RequestStatus.IN_PROGRESS.value, 0),
            "total_completed": employee.total_completed,
            "rating": employee.average_rating if employee.average_rating else None,
            "completion_rate": completion_rate,
            "average_completion_hours": average_hours,
        }


# 싱글턴 인스턴스 — Singleton instance
statistics_service: StatisticsService = StatisticsService()
