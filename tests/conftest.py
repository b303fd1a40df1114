"""테스트 인프라 — 테스트 DB, 세션, httpx 클라이언트, 사용자/직원 픽스처.

Test infrastructure — Test database, session, httpx client, and user /
employee fixtures. The database comes from ``TEST_DATABASE_URL`` and
defaults to a local SQLite file through aiosqlite. Schema is created once
from metadata; rows are deleted after each test.
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path
from uuid import UUID

TEST_DATABASE_URL: str = os.environ.get(
    "TEST_DATABASE_URL", "sqlite+aiosqlite:///./test_ertis.db"
)
# 앱 엔진도 테스트 DB를 가리키도록 설정 — Point the app engine at the test DB before import
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ertis.database import Base, get_db  # noqa: E402
from ertis.main import app  # noqa: E402
from ertis.models import *  # noqa: F401,F403,E402 — register all models with metadata
from ertis.models.employee import Employee  # noqa: E402
from ertis.models.request import RequestStatus, ServiceRequest  # noqa: E402
from ertis.models.user import User, UserRole  # noqa: E402
from ertis.schemas.auth import Actor  # noqa: E402
from ertis.utils.jwt import create_access_token  # noqa: E402
from ertis.utils.password import hash_password  # noqa: E402

_schema_created = False


# ---------------------------------------------------------------------------
# Session-scoped: SQLite 파일 초기화
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session", autouse=True)
def fresh_sqlite_file():
    """SQLite 사용 시 이전 실행의 DB 파일을 지웁니다."""
    path: Path | None = None
    if TEST_DATABASE_URL.startswith("sqlite") and ":///" in TEST_DATABASE_URL:
        path = Path(TEST_DATABASE_URL.split(":///", 1)[1])
        path.unlink(missing_ok=True)
    yield
    if path is not None:
        path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 첫 호출 시 스키마를 생성합니다."""
    global _schema_created
    eng = create_async_engine(TEST_DATABASE_URL, echo=False)

    if not _schema_created:
        async with eng.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        _schema_created = True

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with session_factory() as session:
        yield session
        # 커밋되지 않은 변경 처리
        try:
            await session.commit()
        except Exception:
            await session.rollback()

    # 테스트 후 모든 데이터 정리
    async with session_factory() as cleanup:
        for table in reversed(Base.metadata.sorted_tables):
            await cleanup.execute(table.delete())
        await cleanup.commit()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def make_user(db: AsyncSession, email: str, role: UserRole, first_name: str = "Test") -> User:
    user = User(
        email=email,
        username=email.split("@")[0],
        first_name=first_name,
        last_name="User",
        phone="+77001234567",
        password_hash=hash_password("secret123"),
        role=role.value,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def make_employee(db: AsyncSession, user: User, specialization: str = "roads") -> Employee:
    employee = Employee(user_id=user.id, specialization=specialization)
    db.add(employee)
    await db.flush()
    await db.refresh(employee)
    return employee


async def make_request(
    db: AsyncSession,
    reporter: User,
    status: RequestStatus = RequestStatus.PENDING,
    assignee_id: UUID | None = None,
    problem_type: str = "pothole",
) -> ServiceRequest:
    """요청을 원하는 상태로 직접 생성합니다 (업무량 집계 없음)."""
    request = ServiceRequest(
        reporter_id=reporter.id,
        category="roads",
        problem_type=problem_type,
        description="Deep pothole near the bus stop",
        address="Abay Ave 10, Almaty",
        latitude=43.238,
        longitude=76.945,
        status=status.value,
        priority="high",
        assignee_id=assignee_id,
    )
    db.add(request)
    await db.flush()
    await db.refresh(request)
    return request


@pytest_asyncio.fixture
async def citizen_user(db: AsyncSession) -> User:
    """시민 사용자를 생성합니다."""
    return await make_user(db, "citizen@test.com", UserRole.CITIZEN, "Aigerim")


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await make_user(db, "admin@test.com", UserRole.ADMIN, "Admin")


@pytest_asyncio.fixture
async def employee_user(db: AsyncSession) -> User:
    """직원 사용자를 생성합니다."""
    return await make_user(db, "worker42@test.com", UserRole.EMPLOYEE, "Nurlan")


@pytest_asyncio.fixture
async def employee(db: AsyncSession, employee_user: User) -> Employee:
    """직원 프로필(담당자 역할)을 생성합니다."""
    return await make_employee(db, employee_user)


@pytest_asyncio.fixture
async def other_employee(db: AsyncSession) -> Employee:
    """담당자가 아닌 두 번째 직원을 생성합니다."""
    user = await make_user(db, "worker7@test.com", UserRole.EMPLOYEE, "Dana")
    return await make_employee(db, user, specialization="water")


@pytest_asyncio.fixture
async def pending_request(db: AsyncSession, citizen_user: User) -> ServiceRequest:
    return await make_request(db, citizen_user)


@pytest.fixture
def citizen_actor(citizen_user: User) -> Actor:
    return Actor(user_id=citizen_user.id, role=UserRole.CITIZEN)


@pytest.fixture
def admin_actor(admin_user: User) -> Actor:
    return Actor(user_id=admin_user.id, role=UserRole.ADMIN)


@pytest.fixture
def employee_actor(employee_user: User, employee: Employee) -> Actor:
    return Actor(user_id=employee_user.id, role=UserRole.EMPLOYEE, employee_id=employee.id)


@pytest.fixture
def other_employee_actor(other_employee: Employee) -> Actor:
    return Actor(user_id=other_employee.user_id, role=UserRole.EMPLOYEE, employee_id=other_employee.id)


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def citizen_token(citizen_user: User) -> str:
    return make_token(citizen_user)


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return make_token(admin_user)


@pytest.fixture
def employee_token(employee_user: User, employee: Employee) -> str:
    return make_token(employee_user)


@pytest.fixture
def other_employee_token(other_employee: Employee) -> str:
    return create_access_token({"sub": str(other_employee.user_id), "role": UserRole.EMPLOYEE.value})


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
