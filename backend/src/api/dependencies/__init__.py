"""
API Dependencies

FastAPI dependencies for injection into route handlers.

Dependencies:
=============
- Database: get_db(), DbSession
- Authentication: CurrentUser, CurrentAccount, AdminAccount, OptionalUserId
- Services: get_*_service() functions
- Pagination: get_pagination()

Type Aliases:
=============
Type aliases provide cleaner route signatures:

    # Instead of this:
    async def handler(
        db: AsyncSession = Depends(get_db),
        user: User = Depends(get_admin_account)
    ):

    # Write this:
    async def handler(db: DbSession, admin: AdminAccount):

Usage:
======
    from src.api.dependencies import CurrentAccount

    @router.post("/images")
    async def upload_image(user: CurrentAccount, ...):
        ...
"""

from src.api.dependencies.database import (
    get_db,
    DbSession,
)
from src.api.dependencies.auth import (
    get_current_user,
    get_current_user_token,
    get_current_account,
    get_admin_account,
    get_optional_user_id,
    CurrentUser,
    CurrentAccount,
    AdminAccount,
    OptionalUserId,
)
from src.api.dependencies.pagination import get_pagination

__all__ = [
    # Database
    "get_db",
    "DbSession",
    # Authentication
    "get_current_user",
    "get_current_user_token",
    "get_current_account",
    "get_admin_account",
    "get_optional_user_id",
    "CurrentUser",
    "CurrentAccount",
    "AdminAccount",
    "OptionalUserId",
    # Pagination
    "get_pagination",
]
