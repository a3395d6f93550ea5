import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parlour.auth.models import User
from parlour.auth.schemas import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from parlour.auth.security import create_access_token, hash_password, verify_password
from parlour.core.exceptions import AuthenticationError, ConflictError, StorageFailureError

logger = logging.getLogger(__name__)


def _user_info(user: User) -> UserInfo:
    return UserInfo(id=user.id, email=user.email, name=user.name, role=user.role)


async def find_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == email.strip().lower()))
    return result.scalar_one_or_none()


async def find_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
    return await db.get(User, user_id)


async def verify_credentials(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """Return the user when email and password match, otherwise None."""
    user = await find_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    user = await verify_credentials(db, payload.email, payload.password)
    if not user:
        raise AuthenticationError("Invalid credentials")

    issued_at = datetime.now(timezone.utc)
    access_token = create_access_token(
        subject={
            "sub": str(user.id),
            "role": user.role,
            "email": user.email,
        }
    )
    logger.info("User %s logged in", user.email)
    return LoginResponse(
        access_token=access_token,
        user=_user_info(user),
        issued_at=issued_at,
    )


async def register_user(db: AsyncSession, payload: RegisterRequest) -> RegisterResponse:
    email = payload.email.strip().lower()
    if await find_user_by_email(db, email):
        raise ConflictError("User already exists")

    user = User(
        email=email,
        name=payload.name.strip(),
        password_hash=hash_password(payload.password),
        role=payload.role.value,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError("User already exists") from e
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to create user %s", email)
        raise StorageFailureError() from e
    await db.refresh(user)
    return RegisterResponse(user=_user_info(user))
