"""FastAPI authentication dependencies for route protection."""

import uuid
from collections.abc import Awaitable, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.auth.jwt import decode_token
from staykasa.database import get_db
from staykasa.models.user import User

# Strict bearer, raises 403 automatically if no token provided
_bearer_scheme = HTTPBearer()


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the Bearer token, then return the authenticated user.

    Raises:
        HTTPException 401: If the token is invalid, expired, wrong type, or user not found.
    """
    try:
        payload = decode_token(credentials.credentials)
    except JWTError:
        raise _credentials_exception() from None

    # Only accept access tokens, not refresh tokens
    if payload.get("type") != "access":
        raise _credentials_exception("Invalid token type")

    sub: str | None = payload.get("sub")
    if sub is None:
        raise _credentials_exception()

    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise _credentials_exception() from None

    user = await db.get(User, user_id)
    if user is None:
        raise _credentials_exception()

    if not user.is_active:
        raise _credentials_exception("User account is inactive")

    return user


async def get_current_active_user(
    user: User = Depends(get_current_user),
) -> User:
    """Return the current user only if their account is active.

    Raises:
        HTTPException 403: If the user account is inactive or banned.
    """
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return user


def require_role(*roles: str) -> Callable[..., Awaitable[User]]:
    """Build a dependency that admits only users with one of ``roles``.

    Usage::

        @router.get("/host/bookings")
        async def host_bookings(user: User = Depends(require_role("host", "admin"))):
            ...
    """

    async def _dependency(user: User = Depends(get_current_active_user)) -> User:
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{' or '.join(r.capitalize() for r in roles)} access required",
            )
        return user

    return _dependency
