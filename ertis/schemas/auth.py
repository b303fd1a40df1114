"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, citizen registration, current user info, and the
per-call actor context handed to the lifecycle services.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from ertis.models.user import UserRole


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema (email + password).

    Attributes:
        email: 로그인 이메일 (Login email)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str  # 로그인 이메일 (Login email)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class RegisterRequest(BaseModel):
    """시민 회원가입 요청 스키마.

    Citizen self-registration request schema.
    Self-registered accounts always get the citizen role.

    Attributes:
        email: 이메일 (Login email, unique)
        password: 비밀번호 (Plain text, will be bcrypt-hashed on server)
        username: 표시용 아이디 (Display username)
        first_name: 이름 (First name)
        last_name: 성 (Last name)
        middle_name: 부칭 (Middle name, optional)
        phone: 연락처 (Contact phone)
    """

    email: str
    password: str = Field(..., min_length=6)  # 최소 6자 (At least 6 characters)
    username: str
    first_name: str
    last_name: str
    middle_name: str | None = None
    phone: str = ""


class UserResponse(BaseModel):
    """사용자 정보 응답 스키마.

    User info response schema used by /me and the login response.
    """

    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    middle_name: str | None
    phone: str
    role: str  # citizen | employee | admin
    is_active: bool


class AuthResponse(BaseModel):
    """로그인/회원가입 응답 스키마.

    Login / registration response: bearer token plus the user profile.
    """

    access_token: str  # JWT 액세스 토큰 (Access token)
    token_type: str = "bearer"  # 토큰 유형 — 항상 "bearer" (Token type for Authorization header)
    user: UserResponse


class Actor(BaseModel):
    """작업 수행자 컨텍스트 — 호출마다 서비스에 전달되는 인증된 행위자.

    Authenticated actor context passed explicitly to every lifecycle call.
    ``employee_id`` is resolved only for employees and is the id compared
    against a request's ``assignee_id`` for ownership checks.

    Attributes:
        user_id: 사용자 UUID (User identifier)
        role: 역할 (citizen | employee | admin)
        employee_id: 직원 프로필 UUID (Employee profile id, employees only)
    """

    model_config = {"frozen": True}

    user_id: UUID
    role: UserRole
    employee_id: UUID | None = None
