"""Caller identity dependencies.

Authentication happens upstream (API gateway or auth proxy). The gateway
forwards the verified identity as ``X-User-Id`` and ``X-User-Role`` headers;
this module only turns them into a `CurrentUser` and enforces roles.
"""

from typing import Optional

from fastapi import Depends, Header
from pydantic import BaseModel

from core.exceptions import ForbiddenError, UnauthorizedError

ROLES = ("user", "admin")


class CurrentUser(BaseModel):
    """Identity of the caller as provided by the auth layer."""

    id: int
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    x_user_role: Optional[str] = Header("user", alias="X-User-Role"),
) -> CurrentUser:
    """Resolve the caller from gateway headers.

    Raises:
        UnauthorizedError: If the id header is missing or not a positive integer.
        ForbiddenError: If the role is not a known role.
    """
    if not x_user_id:
        raise UnauthorizedError("No user identity provided")
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise UnauthorizedError("Invalid user identity")
    if user_id <= 0:
        raise UnauthorizedError("Invalid user identity")

    role = (x_user_role or "user").lower()
    if role not in ROLES:
        raise ForbiddenError(f"Role '{role}' is not authorized")
    return CurrentUser(id=user_id, role=role)


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Dependency that only lets admins through."""
    if not user.is_admin:
        raise ForbiddenError("Admin role required")
    return user


def ensure_owner_or_admin(user: CurrentUser, owner_id: Optional[int], resource: str) -> None:
    """Raise ForbiddenError unless `user` owns the resource or is an admin."""
    if owner_id != user.id and not user.is_admin:
        raise ForbiddenError(f"You do not have permission to modify this {resource.lower()}", resource=resource)
