"""인증 서비스 — 시민 회원가입, 로그인, 행위자 컨텍스트 생성.

Auth Service — Citizen registration, login, and resolution of the
per-call actor context handed to the request services.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ertis.models.user import User, UserRole
from ertis.repositories.employee_repository import employee_repository
from ertis.repositories.user_repository import user_repository
from ertis.schemas.auth import Actor, AuthResponse, LoginRequest, RegisterRequest, UserResponse
from ertis.utils.exceptions import DuplicateError, UnauthorizedError
from ertis.utils.jwt import create_access_token
from ertis.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def build_user_response(self, user: User) -> UserResponse:
        return UserResponse(
            id=str(user.id),
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            middle_name=user.middle_name,
            phone=user.phone,
            role=user.role,
            is_active=user.is_active,
        )

    def _issue_token(self, user: User) -> AuthResponse:
        """액세스 토큰을 발급합니다 — Issue an access token with the user profile."""
        access_token: str = create_access_token({"sub": str(user.id), "role": user.role})
        return AuthResponse(access_token=access_token, user=self.build_user_response(user))

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> AuthResponse:
        """시민 계정을 생성합니다.

        Register a citizen account. Self-registration never grants the
        employee or admin role.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 데이터 (Registration payload)

        Returns:
            AuthResponse: 토큰과 사용자 정보 (Token and user profile)

        Raises:
            DuplicateError: 이미 사용 중인 이메일 (Email already registered)
        """
        email: str = data.email.strip().lower()
        if await user_repository.get_by_email(db, email) is not None:
            raise DuplicateError("이미 사용 중인 이메일입니다 (Email already registered)")

        user: User = await user_repository.create(
            db,
            {
                "email": email,
                "username": data.username,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "middle_name": data.middle_name,
                "phone": data.phone,
                "password_hash": hash_password(data.password),
                "role": UserRole.CITIZEN.value,
            },
        )
        logger.info("Citizen account registered: %s", user.id)
        return self._issue_token(user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> AuthResponse:
        """이메일/비밀번호 로그인.

        Authenticate by email and password.

        Raises:
            UnauthorizedError: 자격 증명 불일치 또는 비활성 계정 (Bad credentials or inactive account)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("이메일 또는 비밀번호가 올바르지 않습니다 (Invalid email or password)")
        if not user.is_active:
            raise UnauthorizedError("비활성화된 계정입니다 (Account is disabled)")
        return self._issue_token(user)

    async def resolve_actor(
        self,
        db: AsyncSession,
        user: User,
    ) -> Actor:
        """인증된 사용자로부터 행위자 컨텍스트를 만듭니다.

        Build the actor context for an authenticated user. Employees get
        their employee profile id, used for assignee ownership checks.
        """
        role = UserRole(user.role)
        employee_id = None
        if role == UserRole.EMPLOYEE:
            employee = await employee_repository.get_by_user_id(db, user.id)
            employee_id = employee.id if employee is not None else None
        return Actor(user_id=user.id, role=role, employee_id=employee_id)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
