"""상태 전이 엔진 단위 테스트.

Lifecycle engine unit tests — Every (current, target) pair for every actor
kind, checked against an explicit copy of the transition table. No database
is needed: the engine only inspects the request in memory.
"""

import itertools
import uuid

import pytest

from ertis.models.request import RequestStatus, ServiceRequest
from ertis.models.user import UserRole
from ertis.schemas.auth import Actor
from ertis.services.lifecycle import TRANSITIONS, available_actions, check_transition
from ertis.utils.exceptions import ForbiddenError, IllegalTransitionError

P, A, I, C, X = (
    RequestStatus.PENDING,
    RequestStatus.ASSIGNED,
    RequestStatus.IN_PROGRESS,
    RequestStatus.COMPLETED,
    RequestStatus.CLOSED,
)

# 기대 전이표 — Expected edges and who may use them through a status change
ADMIN_EDGES = {(P, I), (P, X), (A, I), (A, P), (A, X), (I, C), (I, X), (C, I), (X, P)}
ASSIGNEE_EDGES = {(A, I), (I, C)}
DISPATCHER_EDGES = {(P, A)}

ASSIGNEE_ID = uuid.uuid4()
OTHER_EMPLOYEE_ID = uuid.uuid4()

ACTORS = {
    "admin": Actor(user_id=uuid.uuid4(), role=UserRole.ADMIN),
    "assignee": Actor(user_id=uuid.uuid4(), role=UserRole.EMPLOYEE, employee_id=ASSIGNEE_ID),
    "other_employee": Actor(user_id=uuid.uuid4(), role=UserRole.EMPLOYEE, employee_id=OTHER_EMPLOYEE_ID),
    "citizen": Actor(user_id=uuid.uuid4(), role=UserRole.CITIZEN),
}

ALL_PAIRS = list(itertools.product(RequestStatus, RequestStatus))


def _request(status: RequestStatus) -> ServiceRequest:
    return ServiceRequest(
        reporter_id=uuid.uuid4(),
        problem_type="pothole",
        description="d",
        address="a",
        status=status.value,
        assignee_id=ASSIGNEE_ID,
    )


def _expected(actor_name: str, current: RequestStatus, target: RequestStatus) -> type[Exception] | None:
    if actor_name in ("citizen", "other_employee"):
        return ForbiddenError
    edge = (current, target)
    if edge not in ADMIN_EDGES | DISPATCHER_EDGES:
        return IllegalTransitionError
    if edge in DISPATCHER_EDGES:
        return IllegalTransitionError if actor_name == "admin" else ForbiddenError
    if actor_name == "assignee" and edge not in ASSIGNEE_EDGES:
        return ForbiddenError
    return None


def test_table_matches_documented_edges():
    """전이표가 문서화된 10개 간선과 정확히 일치."""
    assert set(TRANSITIONS) == ADMIN_EDGES | DISPATCHER_EDGES
    assert len(TRANSITIONS) == 10


@pytest.mark.parametrize("actor_name", list(ACTORS))
@pytest.mark.parametrize(("current", "target"), ALL_PAIRS, ids=[f"{c.value}->{t.value}" for c, t in ALL_PAIRS])
def test_every_pair_for_every_actor(actor_name, current, target):
    """모든 상태 쌍 × 모든 행위자 조합 검사."""
    request = _request(current)
    expected = _expected(actor_name, current, target)

    if expected is None:
        rule = check_transition(request, target, ACTORS[actor_name])
        assert ACTORS[actor_name].role in rule.roles
    else:
        with pytest.raises(expected):
            check_transition(request, target, ACTORS[actor_name])

    # 검사는 요청을 변경하지 않음
    assert request.status == current.value
    assert request.assignee_id == ASSIGNEE_ID


@pytest.mark.parametrize("status", list(RequestStatus))
def test_same_status_is_illegal_for_admin(status):
    with pytest.raises(IllegalTransitionError):
        check_transition(_request(status), status, ACTORS["admin"])


def test_employee_without_profile_is_forbidden():
    actor = Actor(user_id=uuid.uuid4(), role=UserRole.EMPLOYEE, employee_id=None)
    request = _request(A)
    request.assignee_id = None
    with pytest.raises(ForbiddenError):
        check_transition(request, I, actor)


def test_error_status_codes():
    """오류 종류별 HTTP 상태 코드."""
    with pytest.raises(IllegalTransitionError) as illegal:
        check_transition(_request(P), C, ACTORS["admin"])
    assert illegal.value.status_code == 400

    with pytest.raises(ForbiddenError) as forbidden:
        check_transition(_request(A), I, ACTORS["citizen"])
    assert forbidden.value.status_code == 403


class TestAvailableActions:
    """행위자별 가능한 동작 목록."""

    def test_admin_on_pending_excludes_dispatcher_edge(self):
        actions = available_actions(_request(P), ACTORS["admin"])
        assert sorted(actions) == ["closed", "in_progress"]

    def test_admin_on_assigned(self):
        actions = available_actions(_request(A), ACTORS["admin"])
        assert sorted(actions) == ["closed", "in_progress", "pending"]

    def test_assignee_on_in_progress(self):
        assert available_actions(_request(I), ACTORS["assignee"]) == ["completed"]

    def test_assignee_on_completed_has_nothing(self):
        assert available_actions(_request(C), ACTORS["assignee"]) == []

    def test_other_employee_and_citizen_have_nothing(self):
        for name in ("other_employee", "citizen"):
            for status in RequestStatus:
                assert available_actions(_request(status), ACTORS[name]) == []

    @pytest.mark.parametrize("actor_name", ["admin", "assignee"])
    @pytest.mark.parametrize("status", list(RequestStatus))
    def test_actions_agree_with_check(self, actor_name, status):
        """available_actions의 모든 항목은 check_transition을 통과."""
        request = _request(status)
        actor = ACTORS[actor_name]
        allowed = set(available_actions(request, actor))
        for target in RequestStatus:
            if target.value in allowed:
                check_transition(request, target, actor)
            else:
                with pytest.raises((ForbiddenError, IllegalTransitionError)):
                    check_transition(request, target, actor)
