"""민원 요청 서비스 — 요청 생성, 조회, 상태 전이, 삭제.

Service request service — Creation, visibility-scoped reads, status
transitions and admin deletion of citizen requests.

Every mutating call receives the authenticated ``Actor`` explicitly, runs
all checks before touching the request, and writes the change with a
version check (see ``lifecycle.flush_request``). Routers commit.
"""

import logging
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.request import ASSIGNEE_REQUIRED_STATUSES, RequestStatus, ServiceRequest
from ertis.models.user import UserRole
from ertis.repositories.employee_repository import employee_repository
from ertis.repositories.request_repository import request_repository
from ertis.repositories.user_repository import user_repository
from ertis.schemas.auth import Actor
from ertis.schemas.request import RequestCreate, RequestFilter, RequestStatusChange
from ertis.services.assignment_service import assignment_service
from ertis.services.classification import get_classifier
from ertis.services.classification.catalog import base_priority, is_known_category
from ertis.services.lifecycle import available_actions, check_transition, flush_request
from ertis.services.notification_service import RequestEvent, notification_service
from ertis.utils.exceptions import BadRequestError, ForbiddenError, InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

_COMPLETION_STATUSES: frozenset[str] = frozenset({
    RequestStatus.COMPLETED.value,
    RequestStatus.CLOSED.value,
})


class RequestService:

    # --- 응답 (Response) ---

    def _serialize(
        self,
        request: ServiceRequest,
        actor: Actor,
        reporter_name: str | None,
        assignee_name: str | None,
    ) -> dict:
        return {
            "id": str(request.id),
            "reporter_id": str(request.reporter_id),
            "reporter_name": reporter_name,
            "category": request.category,
            "problem_type": request.problem_type,
            "description": request.description,
            "address": request.address,
            "latitude": request.latitude,
            "longitude": request.longitude,
            "photo_url": request.photo_url,
            "status": request.status,
            "priority": request.priority,
            "assignee_id": str(request.assignee_id) if request.assignee_id else None,
            "assignee_name": assignee_name,
            "ai_analysis": request.ai_analysis,
            "completion_note": request.completion_note,
            "completion_photo_url": request.completion_photo_url,
            "completed_at": request.completed_at,
            "version": request.version,
            "available_actions": available_actions(request, actor),
            "created_at": request.created_at,
            "updated_at": request.updated_at,
        }

    async def build_responses(
        self,
        db: AsyncSession,
        requests: Sequence[ServiceRequest],
        actor: Actor,
    ) -> list[dict]:
        """요청 목록 응답 — Serialize requests with reporter/assignee names in two queries."""
        reporter_names = await user_repository.get_names(db, {r.reporter_id for r in requests})
        assignee_names = await employee_repository.get_names(
            db, {r.assignee_id for r in requests if r.assignee_id is not None}
        )
        return [
            self._serialize(
                r,
                actor,
                reporter_names.get(r.reporter_id),
                assignee_names.get(r.assignee_id) if r.assignee_id else None,
            )
            for r in requests
        ]

    async def build_response(
        self,
        db: AsyncSession,
        request: ServiceRequest,
        actor: Actor,
    ) -> dict:
        return (await self.build_responses(db, [request], actor))[0]

    # --- 조회 (Read) ---

    async def _get_or_404(self, db: AsyncSession, request_id: UUID) -> ServiceRequest:
        request: ServiceRequest | None = await request_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("요청을 찾을 수 없습니다 (Request not found)")
        return request

    async def get_request(
        self,
        db: AsyncSession,
        request_id: UUID,
        actor: Actor,
    ) -> ServiceRequest:
        """요청 상세 조회 — 관리자, 신고자, 담당 직원만 가능.

        Load a request visible to the actor: admins see everything,
        reporters see their own, employees see requests bound to them.

        Raises:
            NotFoundError: 요청이 없을 때 (Unknown request)
            ForbiddenError: 조회 권한이 없을 때 (Not visible to the actor)
        """
        request = await self._get_or_404(db, request_id)
        if actor.role == UserRole.ADMIN or request.reporter_id == actor.user_id:
            return request
        if actor.role == UserRole.EMPLOYEE and actor.employee_id is not None and request.assignee_id == actor.employee_id:
            return request
        raise ForbiddenError("이 요청을 조회할 권한이 없습니다 (Not allowed to view this request)")

    async def list_requests(
        self,
        db: AsyncSession,
        filters: RequestFilter,
        actor: Actor,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ServiceRequest], int]:
        if actor.role != UserRole.ADMIN:
            raise ForbiddenError("관리자만 전체 요청을 조회할 수 있습니다 (Only admins can list all requests)")
        return await request_repository.get_filtered(db, filters, page, per_page)

    async def list_my_requests(
        self,
        db: AsyncSession,
        actor: Actor,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ServiceRequest], int]:
        return await request_repository.get_by_reporter(db, actor.user_id, page, per_page)

    async def list_assigned(
        self,
        db: AsyncSession,
        employee_id: UUID,
        actor: Actor,
        status: RequestStatus | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ServiceRequest], int]:
        """직원에게 배정된 요청 목록 — Requests bound to an employee.

        Employees may only list their own queue; admins may list anyone's.
        """
        if actor.role != UserRole.ADMIN and actor.employee_id != employee_id:
            raise ForbiddenError("본인의 업무만 조회할 수 있습니다 (You can only list your own tasks)")
        return await request_repository.get_by_assignee(
            db, employee_id, status.value if status else None, page, per_page
        )

    # --- 생성 (Create) ---

    async def create_request(
        self,
        db: AsyncSession,
        data: RequestCreate,
        actor: Actor,
    ) -> ServiceRequest:
        """새 민원 요청을 생성합니다.

        Create a request owned by the calling user. Status is always
        pending and priority is derived from the problem type; the
        classifier may fill a missing category and override the priority.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 요청 생성 데이터 (Creation payload)
            actor: 신고자 (Reporting actor)

        Returns:
            ServiceRequest: 생성된 요청 (Created request)

        Raises:
            BadRequestError: 알 수 없는 카테고리 (Unknown category key)
        """
        if data.category is not None and not is_known_category(data.category):
            raise BadRequestError(f"알 수 없는 카테고리입니다 (Unknown category: {data.category})")

        category: str | None = data.category
        priority: str = base_priority(data.problem_type).value
        ai_analysis: str | None = None

        classifier = get_classifier()
        if classifier is not None:
            try:
                result = await classifier.classify(data.description, data.problem_type, data.photo_url)
            except Exception:
                logger.exception("Classifier %s failed, keeping creation defaults", classifier.name)
            else:
                if category is None and result.category is not None:
                    category = result.category
                if result.priority is not None:
                    priority = result.priority.value
                ai_analysis = result.analysis

        request: ServiceRequest = await request_repository.create(
            db,
            {
                "reporter_id": actor.user_id,
                "category": category,
                "problem_type": data.problem_type,
                "description": data.description,
                "address": data.address,
                "latitude": data.latitude,
                "longitude": data.longitude,
                "photo_url": data.photo_url,
                "status": RequestStatus.PENDING.value,
                "priority": priority,
                "ai_analysis": ai_analysis,
            },
        )
        logger.info("Request %s created by %s (%s, %s)", request.id, actor.user_id, category, priority)

        await notification_service.emit(
            db,
            RequestEvent(
                request_id=request.id,
                reporter_id=request.reporter_id,
                old_status=None,
                new_status=request.status,
            ),
        )
        return request

    # --- 상태 전이 (Transition) ---

    async def change_status(
        self,
        db: AsyncSession,
        request_id: UUID,
        data: RequestStatusChange,
        actor: Actor,
    ) -> ServiceRequest:
        """요청 상태를 변경합니다.

        Validate and apply a status change, then adjust workload and emit
        notifications. Nothing is written unless every check passes.

        - pending 복귀 — returning to pending clears the assignee
        - 관리자 pending → in_progress — requires ``employee_id`` and binds it
        - completed/closed 진입 — keeps the completion note and photo if given
        - completed 진입 — stamps ``completed_at``

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            request_id: 요청 UUID (Request UUID)
            data: 목표 상태 및 완료 정보 (Target status and completion fields)
            actor: 호출한 행위자 (Calling actor)

        Returns:
            ServiceRequest: 변경된 요청 (Updated request)

        Raises:
            NotFoundError: 요청 또는 직원이 없을 때 (Unknown request or employee)
            ForbiddenError: 역할/소유권 위반 (Role or ownership violation)
            IllegalTransitionError: 허용되지 않는 전이 (Not a legal transition)
            InvalidStateError: 직원 없이 바로 작업 시작 (Start without an employee)
            ConflictError: 동시 변경 경쟁에서 패배 (Lost a concurrent race)
        """
        request = await self._get_or_404(db, request_id)
        target: RequestStatus = data.status
        check_transition(request, target, actor)

        old_status: str = request.status
        old_assignee_id: UUID | None = request.assignee_id
        new_assignee_id: UUID | None = old_assignee_id
        employee_user_id: UUID | None = None

        if (
            old_status == RequestStatus.PENDING.value
            and target == RequestStatus.IN_PROGRESS
            and data.employee_id is not None
        ):
            employee = await assignment_service.get_employee_or_404(db, data.employee_id)
            new_assignee_id = employee.id
            employee_user_id = employee.user_id
        elif target == RequestStatus.PENDING:
            new_assignee_id = None

        if target.value in ASSIGNEE_REQUIRED_STATUSES and new_assignee_id is None:
            raise InvalidStateError(
                "작업을 바로 시작하려면 직원을 지정해야 합니다 (employee_id is required to start a pending request)"
            )

        now = datetime.now(timezone.utc)
        request.status = target.value
        request.assignee_id = new_assignee_id
        request.updated_at = now
        if target.value in _COMPLETION_STATUSES:
            if data.completion_note is not None:
                request.completion_note = data.completion_note
            if data.completion_photo_url is not None:
                request.completion_photo_url = data.completion_photo_url
        if target == RequestStatus.COMPLETED:
            request.completed_at = now
        elif old_status == RequestStatus.COMPLETED.value:
            request.completed_at = None

        await flush_request(db, request)
        await assignment_service.apply_workload(
            db, old_status, request.status, old_assignee_id, new_assignee_id
        )
        logger.info(
            "Request %s moved %s -> %s by %s %s",
            request.id, old_status, request.status, actor.role.value, actor.user_id,
        )

        await notification_service.emit(
            db,
            RequestEvent(
                request_id=request.id,
                reporter_id=request.reporter_id,
                old_status=old_status,
                new_status=request.status,
                employee_user_id=employee_user_id,
            ),
        )
        return request

    async def close_request(
        self,
        db: AsyncSession,
        request_id: UUID,
        reason: str | None,
        actor: Actor,
    ) -> ServiceRequest:
        """요청 종료 — Close a request; the reason is kept as the completion note."""
        return await self.change_status(
            db,
            request_id,
            RequestStatusChange(status=RequestStatus.CLOSED, completion_note=reason),
            actor,
        )

    # --- 삭제 (Delete) ---

    async def delete_request(
        self,
        db: AsyncSession,
        request_id: UUID,
        actor: Actor,
    ) -> None:
        """요청을 영구 삭제합니다. 관리자 전용, 되돌릴 수 없습니다.

        Permanently delete a request (admin only, irreversible). Workload
        held by an active request is released first.
        """
        if actor.role != UserRole.ADMIN:
            raise ForbiddenError("관리자만 요청을 삭제할 수 있습니다 (Only admins can delete requests)")
        request = await self._get_or_404(db, request_id)
        await db.delete(request)
        await flush_request(db, request)
        await assignment_service.release(db, request)
        logger.info("Request %s deleted by admin %s", request_id, actor.user_id)


request_service: RequestService = RequestService()
