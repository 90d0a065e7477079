"""
Hierarchical role-based access control.

Roles inherit from any number of parent roles. Each role carries allowed
and denied privileges, optionally guarded by condition callbacks, and
``Acl.is_allowed`` resolves a privilege through the hierarchy.
"""

from roleacl.core import (
    ALL_PRIVILEGES,
    Acl,
    AclError,
    Condition,
    Decision,
    PrivilegeRule,
    RoleNotFoundError,
)

__version__ = "0.1.0"

__all__ = [
    "Acl",
    "AclError",
    "RoleNotFoundError",
    "ALL_PRIVILEGES",
    "Condition",
    "Decision",
    "PrivilegeRule",
]
