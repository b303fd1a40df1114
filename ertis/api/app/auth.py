"""앱 인증 라우터 — 시민 회원가입, 로그인.

App Auth Router — Citizen registration and login endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ertis.database import get_db
from ertis.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from ertis.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """시민 회원가입 — 시민(citizen) 계정 생성.

    Citizen registration. Returns an access token for the new account.
    """
    result: AuthResponse = await auth_service.register(db, data)
    await db.commit()
    return result


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthResponse:
    """로그인 — 모든 역할 허용.

    Login endpoint for citizens, employees and admins.
    """
    return await auth_service.login(db, data)
