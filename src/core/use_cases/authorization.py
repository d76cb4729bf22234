"""
Caller checks shared by the verification use cases.
"""

from src.core.entities.profile import UserAccount
from src.core.errors import NotFound, PermissionDenied, Unauthenticated
from src.core.interfaces.verification_store import IUnitOfWork


def require_caller(caller_id: str | None) -> str:
    if not caller_id:
        raise Unauthenticated()
    return caller_id


def require_user(uow: IUnitOfWork, user_id: str) -> UserAccount:
    user = uow.users.get(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def require_admin(uow: IUnitOfWork, caller_id: str | None) -> UserAccount:
    """Unknown callers and non-admins get the same PermissionDenied."""
    require_caller(caller_id)
    admin = uow.users.get(caller_id)
    if admin is None or not admin.is_admin:
        raise PermissionDenied()
    return admin
