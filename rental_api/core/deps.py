from typing import AsyncGenerator, Iterable, Optional, Union

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rental_api.core.database import async_session_maker
from rental_api.core.exceptions import AuthenticationError, AuthorizationError
from rental_api.core.security import decode_access_token
from rental_api.models.enums import Role
from rental_api.models.user import User


bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def _resolve_user(
    db: AsyncSession,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[User]:
    """Return the user named by a valid bearer token, or None."""
    if credentials is None or not credentials.credentials:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    return await db.get(User, user_id)


def has_role(user: Optional[User], allowed_roles: Iterable[Union[Role, str]]) -> bool:
    """Flat set-membership check; roles do not inherit from each other."""
    if user is None:
        return False
    allowed = {Role(role).value for role in allowed_roles}
    return user.role in allowed


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """Authenticated user for self-service routes. No or bad token gives 401."""
    user = await _resolve_user(db, credentials)
    if user is None:
        raise AuthenticationError("Unauthorized: Please log in to continue")
    if not user.is_active:
        raise AuthorizationError("Account is inactive. Please contact support.")
    return user


def require_roles(*roles: Role):
    """
    Build a dependency that admits only users holding one of `roles`.

    Admin surfaces answer 403 both for missing sessions and for wrong roles,
    so this never raises 401.
    """
    async def role_gate(
        db: AsyncSession = Depends(get_db),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> User:
        user = await _resolve_user(db, credentials)
        if not has_role(user, roles) or not user.is_active:
            raise AuthorizationError("Unauthorized: Access Denied")
        return user

    return role_gate


get_current_staff_user = require_roles(Role.admin, Role.owner)
