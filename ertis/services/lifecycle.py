"""요청 상태 전이 엔진 — 역할 기반 전이 규칙의 단일 기준.

Request lifecycle engine — The single authority on which status changes
are legal and who may request them.

Transition table (from → to: allowed roles):
    pending     → assigned      admin (assignment dispatcher only)
    pending     → in_progress   admin (binds an employee in the same step)
    pending     → closed        admin
    assigned    → in_progress   employee (assignee), admin
    assigned    → pending       admin
    assigned    → closed        admin
    in_progress → completed     employee (assignee), admin
    in_progress → closed        admin
    completed   → in_progress   admin
    closed      → pending       admin

Check order (all checks run before any mutation):
    1. 시민의 상태 변경 — citizen mutation → Forbidden
    2. 담당자가 아닌 직원 — employee who is not the assignee → Forbidden
    3. 표에 없는 전이 — edge missing from the table → IllegalTransition
    4. 허용되지 않은 역할 — role not allowed on the edge → Forbidden
    5. 디스패처 전용 전이 — dispatcher-only edge → IllegalTransition
"""

import logging
from typing import NamedTuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from ertis.models.request import RequestStatus, ServiceRequest
from ertis.models.user import UserRole
from ertis.schemas.auth import Actor
from ertis.utils.exceptions import ConflictError, ForbiddenError, IllegalTransitionError

logger = logging.getLogger(__name__)

_ADMIN = frozenset({UserRole.ADMIN})
_ASSIGNEE_OR_ADMIN = frozenset({UserRole.EMPLOYEE, UserRole.ADMIN})


class TransitionRule(NamedTuple):
    """전이 규칙 — Roles allowed on an edge and whether only the dispatcher may apply it."""

    roles: frozenset[UserRole]
    dispatcher_only: bool = False


TRANSITIONS: dict[tuple[RequestStatus, RequestStatus], TransitionRule] = {
    (RequestStatus.PENDING, RequestStatus.ASSIGNED): TransitionRule(_ADMIN, dispatcher_only=True),
    (RequestStatus.PENDING, RequestStatus.IN_PROGRESS): TransitionRule(_ADMIN),
    (RequestStatus.PENDING, RequestStatus.CLOSED): TransitionRule(_ADMIN),
    (RequestStatus.ASSIGNED, RequestStatus.IN_PROGRESS): TransitionRule(_ASSIGNEE_OR_ADMIN),
    (RequestStatus.ASSIGNED, RequestStatus.PENDING): TransitionRule(_ADMIN),
    (RequestStatus.ASSIGNED, RequestStatus.CLOSED): TransitionRule(_ADMIN),
    (RequestStatus.IN_PROGRESS, RequestStatus.COMPLETED): TransitionRule(_ASSIGNEE_OR_ADMIN),
    (RequestStatus.IN_PROGRESS, RequestStatus.CLOSED): TransitionRule(_ADMIN),
    (RequestStatus.COMPLETED, RequestStatus.IN_PROGRESS): TransitionRule(_ADMIN),
    (RequestStatus.CLOSED, RequestStatus.PENDING): TransitionRule(_ADMIN),
}


def check_actor_can_mutate(request: ServiceRequest, actor: Actor) -> None:
    """역할/소유권 검사 — Reject citizens and employees acting on someone else's request."""
    if actor.role == UserRole.CITIZEN:
        raise ForbiddenError("시민은 요청 상태를 변경할 수 없습니다 (Citizens cannot change request status)")
    if actor.role == UserRole.EMPLOYEE and (
        actor.employee_id is None or request.assignee_id != actor.employee_id
    ):
        raise ForbiddenError("본인에게 배정된 요청이 아닙니다 (Request is not assigned to you)")


def check_transition(
    request: ServiceRequest,
    target: RequestStatus,
    actor: Actor,
) -> TransitionRule:
    """상태 전이가 허용되는지 검사합니다.

    Validate that ``actor`` may move ``request`` to ``target``.
    Raises before anything is mutated.

    Args:
        request: 대상 요청 (Request in its current state)
        target: 목표 상태 (Requested status)
        actor: 요청한 행위자 (Calling actor)

    Returns:
        TransitionRule: 적용될 전이 규칙 (Matching rule)

    Raises:
        ForbiddenError: 역할/소유권 위반 (Role or ownership violation)
        IllegalTransitionError: 표에 없거나 디스패처 전용 전이 (Not an edge, or dispatcher-only)
    """
    check_actor_can_mutate(request, actor)

    current = RequestStatus(request.status)
    rule = TRANSITIONS.get((current, target))
    if rule is None:
        raise IllegalTransitionError(
            f"허용되지 않는 상태 전이입니다 (Illegal transition: {current.value} -> {target.value})"
        )
    if actor.role not in rule.roles:
        raise ForbiddenError(
            f"이 전이를 수행할 권한이 없습니다 ({actor.role.value} cannot move {current.value} -> {target.value})"
        )
    if rule.dispatcher_only:
        raise IllegalTransitionError(
            "배정은 배정 API로만 가능합니다 (Use the assign operation to assign a request)"
        )
    return rule


def available_actions(request: ServiceRequest, actor: Actor) -> list[str]:
    """행위자가 지금 요청할 수 있는 목표 상태 목록.

    Target statuses the actor may currently pass to a status change.
    Dispatcher-only edges are excluded; they go through assignment.
    """
    if actor.role == UserRole.CITIZEN:
        return []
    if actor.role == UserRole.EMPLOYEE and (
        actor.employee_id is None or request.assignee_id != actor.employee_id
    ):
        return []
    current = RequestStatus(request.status)
    return [
        target.value
        for (source, target), rule in TRANSITIONS.items()
        if source == current and actor.role in rule.roles and not rule.dispatcher_only
    ]


async def flush_request(db: AsyncSession, request: ServiceRequest) -> None:
    """버전 검사와 함께 요청 변경을 DB에 반영합니다.

    Flush pending changes to the request. The UPDATE carries the version
    the caller read; if another session changed the row first, nothing
    matches, the unit of work is rolled back and ``ConflictError`` raised.
    """
    request_id = request.id
    try:
        await db.flush()
    except StaleDataError:
        await db.rollback()
        logger.warning("Lost concurrent update on request %s", request_id)
        raise ConflictError(
            "요청이 다른 사용자에 의해 변경되었습니다 (Request was modified concurrently, reload and retry)"
        )
