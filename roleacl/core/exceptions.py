"""Exceptions raised by the access control engine."""

from typing import Hashable


class AclError(Exception):
    """Base class for access control errors."""


class RoleNotFoundError(AclError):
    """Raised when a mutation references a role that has not been added."""

    def __init__(self, role: Hashable):
        self.role = role
        super().__init__(f"Role '{role}' does not exist.")
