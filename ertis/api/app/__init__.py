"""앱 API 라우터 패키지 — 시민/직원용 엔드포인트 통합.

App API Router package — Aggregates all citizen- and employee-facing
endpoints into a single router for inclusion in the FastAPI application.

Included routers:
    - auth: 회원가입, 로그인 (Registration and login)
    - profile: 내 정보, 내 직원 프로필 (Me and my employee profile)
    - categories: 분류 카탈로그 (Category catalog)
    - requests: 내 요청 (My requests)
    - tasks: 내 업무 (Requests assigned to me)
    - notifications: 내 알림 (My notifications)
"""

from fastapi import APIRouter

from ertis.api.app.auth import router as auth_router
from ertis.api.app.categories import router as categories_router
from ertis.api.app.notifications import router as notifications_router
from ertis.api.app.profile import router as profile_router
from ertis.api.app.requests import router as requests_router
from ertis.api.app.tasks import router as tasks_router

app_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 인증/프로필 — Auth and profile
# ---------------------------------------------------------------------------
app_router.include_router(auth_router, prefix="/auth", tags=["App Auth"])
# 프로필: /me, /my/employee-profile
app_router.include_router(profile_router, tags=["App Profile"])
app_router.include_router(categories_router, prefix="/categories", tags=["Categories"])

# ---------------------------------------------------------------------------
# 요청/업무 — Requests and tasks
# ---------------------------------------------------------------------------
app_router.include_router(requests_router, prefix="/my/requests", tags=["My Requests"])
app_router.include_router(tasks_router, prefix="/my/tasks", tags=["My Tasks"])

# ---------------------------------------------------------------------------
# 알림 — Notifications
# ---------------------------------------------------------------------------
app_router.include_router(notifications_router, prefix="/my/notifications", tags=["My Notifications"])
