"""FastAPI 의존성 주입 모듈 — 인증, 역할 검사, 행위자 컨텍스트.

FastAPI dependency injection module — Authentication, role checks and the
per-call actor context.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    3. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
    4. 사용자 활성 상태를 확인 (User active status is verified)
    5. get_actor가 역할과 직원 프로필로 Actor를 생성
       (get_actor builds the Actor from role and employee profile)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.database import get_db
from ertis.models.user import User, UserRole
from ertis.repositories.user_repository import user_repository
from ertis.schemas.auth import Actor
from ertis.services.auth_service import auth_service
from ertis.utils.exceptions import ForbiddenError, UnauthorizedError
from ertis.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — 헤더 누락은 직접 401로 처리
# (Extracts the bearer token; a missing header is reported as 401 below)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode the bearer JWT and return the authenticated, active user.

    Raises:
        UnauthorizedError: 토큰 누락/무효/만료, 사용자 없음/비활성
                           (Missing, invalid or expired token; unknown or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError("인증이 필요합니다 (Authentication required)")
    try:
        payload: dict = decode_token(credentials.credentials)
        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid token type")
        user_id = UUID(payload["sub"])
    except UnauthorizedError:
        raise
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


async def get_actor(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Actor:
    """현재 사용자의 행위자 컨텍스트 — Actor context for the current user."""
    return await auth_service.resolve_actor(db, current_user)


def require_role(*roles: UserRole) -> Callable[..., Awaitable[Actor]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory returning the actor when its role is one of
    ``roles`` and raising 403 otherwise.

    Args:
        roles: 허용되는 역할들 (Allowed roles)

    Returns:
        FastAPI 의존성 함수 — Actor 반환 또는 403 발생
        (FastAPI dependency that returns the Actor or raises 403)
    """
    async def _check(
        actor: Annotated[Actor, Depends(get_actor)],
    ) -> Actor:
        if actor.role not in roles:
            raise ForbiddenError("Insufficient permissions")
        return actor
    return _check


# 편의 의존성 — Pre-configured role dependencies
require_admin = require_role(UserRole.ADMIN)
require_employee = require_role(UserRole.EMPLOYEE)
