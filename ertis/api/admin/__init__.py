"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - requests: 요청 관리, 배정, 상태 전이 (Request management, assignment, transitions)
    - employees: 직원 관리 (Employee management)
    - statistics: 대시보드 통계 (Dashboard statistics)
"""

from fastapi import APIRouter

from ertis.api.admin.employees import router as employees_router
from ertis.api.admin.requests import router as requests_router
from ertis.api.admin.statistics import router as statistics_router

admin_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 요청 수명주기 — Request lifecycle
# ---------------------------------------------------------------------------
admin_router.include_router(requests_router, prefix="/requests", tags=["Admin Requests"])

# ---------------------------------------------------------------------------
# 직원 및 통계 — Employees and statistics
# ---------------------------------------------------------------------------
admin_router.include_router(employees_router, prefix="/employees", tags=["Admin Employees"])
admin_router.include_router(statistics_router, prefix="/statistics", tags=["Admin Statistics"])
