"""현장 직원 Pydantic 스키마.

Employee request/response schemas.
"""

from pydantic import BaseModel, Field


class EmployeeCreate(BaseModel):
    """직원 프로필 생성 스키마.

    Creates an employee profile for an existing user account.
    The user's role is switched to employee.

    Attributes:
        user_id: 대상 사용자 UUID (Existing user account)
        specialization: 전문 분야 (Specialization, usually a category key)
        is_available: 배정 가능 여부 (Initial availability)
    """

    user_id: str
    specialization: str = Field(..., min_length=1, max_length=50)
    is_available: bool = True


class EmployeeAvailabilityUpdate(BaseModel):
    is_available: bool


class EmployeeResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    specialization: str
    average_rating: float
    total_completed: int
    active_tasks: int
    is_available: bool


class EmployeeStatistics(BaseModel):
    """직원 실적 통계 — Per-employee performance statistics."""

    employee_id: str
    total_assigned: int  # 현재 배정되어 있는 요청 수 (assigned)
    total_in_progress: int
    total_completed: int
    rating: float | None
    completion_rate: float | None  # 완료 / 배정된 전체 요청 비율 (%)
    average_completion_hours: float | None
