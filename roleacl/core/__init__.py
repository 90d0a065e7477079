"""Access control engine core."""

from .acl import Acl
from .exceptions import AclError, RoleNotFoundError
from .models import ALL_PRIVILEGES, Condition, Decision, PrivilegeRule

__all__ = [
    "Acl",
    "AclError",
    "RoleNotFoundError",
    "ALL_PRIVILEGES",
    "Condition",
    "Decision",
    "PrivilegeRule",
]
