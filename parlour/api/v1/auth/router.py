from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.auth.dependencies import get_current_user
from parlour.auth.rbac import require_super_admin
from parlour.auth.schemas import (
    CurrentUser,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from parlour.auth.services import login_user, register_user
from parlour.core.exceptions import ServiceError
from parlour.db.session import get_db

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=http_status.HTTP_200_OK,
)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    try:
        return await login_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.post("/login-oauth")
async def login_oauth(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    payload = LoginRequest(
        email=form_data.username.strip(),
        password=form_data.password,
    )
    try:
        result = await login_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return {
        "access_token": result.access_token,
        "token_type": "bearer",
    }


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=http_status.HTTP_201_CREATED,
    dependencies=[Depends(require_super_admin)],
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> RegisterResponse:
    try:
        return await register_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    current_user: CurrentUser = Depends(get_current_user),
) -> ProfileResponse:
    return ProfileResponse(
        user=UserInfo(
            id=current_user.id,
            email=current_user.email,
            name=current_user.name,
            role=current_user.role,
        )
    )
