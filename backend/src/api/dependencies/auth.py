"""
Authentication Dependencies

FastAPI dependencies for user authentication and authorization.

Tokens are issued elsewhere; this side only verifies them. The payload's
`user_id` is the authenticated user id.

Dependency Hierarchy:
=====================
    get_current_user_token()  ← Extract and validate JWT from header
           │
           ├──► get_current_user()     ← {"user_id": int} from the payload
           │          │
           │          ▼
           │    get_current_account()  ← User row; unknown or suspended rejected
           │          │
           │          ▼
           │    get_admin_account()    ← is_administrator() must hold
           │
           └──► get_optional_user_id() ← None for anonymous requests

Type Aliases:
=============
    CurrentUser     - Token payload as dict
    CurrentAccount  - Active User row
    AdminAccount    - Active administrator User row
    OptionalUserId  - User id or None

Usage:
======
    @router.post("/items/{item_id}/like")
    async def like_item(item_id: int, current_user: CurrentUser):
        ...

    @router.patch("/admin/items/{item_id}/status")
    async def set_status(item_id: int, admin: AdminAccount):
        ...
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.database import get_db
from src.config.settings import settings
from src.shared.core.exceptions import AuthenticationError, AuthorizationError
from src.shared.core.logging import log_context
from src.shared.models.user import User
from src.shared.repositories.user_repository import UserRepository
from src.shared.utils.permissions import is_administrator
from src.shared.utils.security import SecurityUtils


# Missing headers are reported as AuthenticationError (401), not FastAPI's 403
security = HTTPBearer(auto_error=False)


def _decode(credentials: HTTPAuthorizationCredentials) -> dict:
    try:
        return SecurityUtils.decode_access_token(
            credentials.credentials,
            settings.SECRET_KEY,
            settings.JWT_ALGORITHM,
        )
    except ValueError as e:
        raise AuthenticationError(str(e)) from e


def _user_id(payload: dict) -> int:
    try:
        return int(payload["user_id"])
    except (KeyError, TypeError, ValueError) as e:
        raise AuthenticationError("Invalid token payload") from e


async def get_current_user_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> dict:
    """
    Extract and validate JWT token from Authorization header.

    Raises:
        AuthenticationError: If token is missing or invalid
    """
    if not credentials:
        raise AuthenticationError("Authorization header required")
    return _decode(credentials)


async def get_current_user(
    token: Annotated[dict, Depends(get_current_user_token)],
) -> dict:
    """
    Get current authenticated user from token.

    Returns:
        {"user_id": int}
    """
    user_id = _user_id(token)
    log_context(user_id=user_id)
    return {"user_id": user_id}


async def get_current_account(
    current_user: Annotated[dict, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Load the account behind the token.

    Raises:
        AuthenticationError: No such user
        AuthorizationError: Account suspended
    """
    user = await UserRepository(db).get(current_user["user_id"])
    if user is None:
        raise AuthenticationError("Unknown user")
    if user.is_suspended:
        raise AuthorizationError("Account suspended")
    return user


async def get_admin_account(
    user: Annotated[User, Depends(get_current_account)],
) -> User:
    if not is_administrator(user):
        raise AuthorizationError("Administrator access required")
    return user


async def get_optional_user_id(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)] = None,
) -> Optional[int]:
    """User id for signed-in requests, None for anonymous ones. A bad token is still an error."""
    if not credentials:
        return None
    return _user_id(_decode(credentials))


# ═══════════════════════════════════════════════════════════════════════════════
# TYPE ALIASES
# ═══════════════════════════════════════════════════════════════════════════════

CurrentUser = Annotated[dict, Depends(get_current_user)]
CurrentAccount = Annotated[User, Depends(get_current_account)]
AdminAccount = Annotated[User, Depends(get_admin_account)]
OptionalUserId = Annotated[Optional[int], Depends(get_optional_user_id)]
