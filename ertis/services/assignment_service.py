"""배정 디스패처 — 대기 중 요청을 직원에게 배정하고 업무량을 관리.

Assignment Dispatcher — Binds pending requests to employees chosen by an
admin and keeps employee workload counters in step with request status.

Workload is the number of requests bound to an employee whose status is
assigned or in_progress. Every operation applies the difference between
the new and the old state, so the counter always matches that definition.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.employee import Employee
from ertis.models.request import ACTIVE_STATUSES, RequestStatus, ServiceRequest
from ertis.models.user import UserRole
from ertis.repositories.employee_repository import employee_repository
from ertis.repositories.request_repository import request_repository
from ertis.schemas.auth import Actor
from ertis.services.lifecycle import flush_request
from ertis.services.notification_service import RequestEvent, notification_service
from ertis.utils.exceptions import ForbiddenError, InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)


class AssignmentService:
    """배정 디스패처 서비스.

    Assignment dispatcher. Employee selection is always an explicit admin
    input; this service never picks an employee on its own.
    """

    async def get_employee_or_404(
        self,
        db: AsyncSession,
        employee_id: UUID,
    ) -> Employee:
        employee: Employee | None = await employee_repository.get_by_id(db, employee_id)
        if employee is None:
            raise NotFoundError("직원을 찾을 수 없습니다 (Employee not found)")
        return employee

    async def assign(
        self,
        db: AsyncSession,
        request_id: UUID,
        employee_id: UUID,
        actor: Actor,
    ) -> ServiceRequest:
        """대기 중 요청을 직원에게 배정합니다.

        Bind a pending request to an employee and move it to assigned.
        Re-assignment is not supported: return the request to pending first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            request_id: 요청 UUID (Request UUID)
            employee_id: 배정할 직원 UUID (Employee chosen by the admin)
            actor: 호출한 행위자 (Calling actor)

        Returns:
            ServiceRequest: 배정된 요청 (Assigned request)

        Raises:
            ForbiddenError: 관리자가 아닐 때 (Actor is not an admin)
            NotFoundError: 요청 또는 직원이 없을 때 (Unknown request or employee)
            InvalidStateError: 요청이 대기 상태가 아닐 때 (Request is not pending)
            ConflictError: 동시 변경 경쟁에서 패배 (Lost a concurrent race)
        """
        if actor.role != UserRole.ADMIN:
            raise ForbiddenError("관리자만 요청을 배정할 수 있습니다 (Only admins can assign requests)")

        request: ServiceRequest | None = await request_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("요청을 찾을 수 없습니다 (Request not found)")
        if request.status != RequestStatus.PENDING.value:
            raise InvalidStateError(
                f"대기 중인 요청만 배정할 수 있습니다 (Only pending requests can be assigned, current: {request.status})"
            )
        employee: Employee = await self.get_employee_or_404(db, employee_id)

        old_status: str = request.status
        request.status = RequestStatus.ASSIGNED.value
        request.assignee_id = employee.id
        request.updated_at = datetime.now(timezone.utc)
        await flush_request(db, request)

        await self.apply_workload(db, old_status, request.status, None, employee.id)
        logger.info("Request %s assigned to employee %s", request.id, employee.id)

        await notification_service.emit(
            db,
            RequestEvent(
                request_id=request.id,
                reporter_id=request.reporter_id,
                old_status=old_status,
                new_status=request.status,
                employee_user_id=employee.user_id,
            ),
        )
        return request

    async def apply_workload(
        self,
        db: AsyncSession,
        old_status: str,
        new_status: str,
        old_assignee_id: UUID | None,
        new_assignee_id: UUID | None,
    ) -> None:
        """상태 변화에 맞춰 직원 업무량/완료 건수를 조정합니다.

        Adjust employee counters for a state change.

        - 같은 담당자 — same assignee: apply active(new) - active(old)
        - 담당자 변경 — assignee changed: release the old one if it was
          active, charge the new one if the new status is active
        - 완료 진입/이탈 — entering or leaving completed moves total_completed

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            old_status: 이전 상태 (Status before the change)
            new_status: 새 상태 (Status after the change)
            old_assignee_id: 이전 담당자 (Assignee before the change)
            new_assignee_id: 새 담당자 (Assignee after the change)
        """
        was_active = old_status in ACTIVE_STATUSES
        is_active = new_status in ACTIVE_STATUSES

        if old_assignee_id is not None and old_assignee_id == new_assignee_id:
            await employee_repository.adjust_workload(db, old_assignee_id, int(is_active) - int(was_active))
        else:
            if old_assignee_id is not None and was_active:
                await employee_repository.adjust_workload(db, old_assignee_id, -1)
            if new_assignee_id is not None and is_active:
                await employee_repository.adjust_workload(db, new_assignee_id, 1)

        completed = RequestStatus.COMPLETED.value
        if new_status == completed and old_status != completed and new_assignee_id is not None:
            await employee_repository.adjust_completed(db, new_assignee_id, 1)
        elif old_status == completed and new_status != completed and old_assignee_id is not None:
            await employee_repository.adjust_completed(db, old_assignee_id, -1)

    async def release(
        self,
        db: AsyncSession,
        request: ServiceRequest,
    ) -> None:
        """삭제되는 요청의 업무량을 해제합니다 — Release workload held by a request being removed."""
        if request.assignee_id is not None and request.status in ACTIVE_STATUSES:
            await employee_repository.adjust_workload(db, request.assignee_id, -1)


# 싱글턴 인스턴스 — Singleton instance
assignment_service: AssignmentService = AssignmentService()
