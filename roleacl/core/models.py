"""
Core data types for the access control engine.

Privilege rules, the wildcard privilege and the tri-state resolution
result shared by the role graph and the resolver.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Optional

# Reserved privilege identifier meaning "every privilege not otherwise listed"
ALL_PRIVILEGES = "*"

# Condition callbacks receive (role, privilege, context) and return a bool
Condition = Callable[[Hashable, str, Any], bool]


class Decision(Enum):
    """Outcome of resolving a privilege for a single role."""
    ALLOW = "allow"
    DENY = "deny"
    UNKNOWN = "unknown"

    @classmethod
    def from_bool(cls, granted: bool) -> "Decision":
        """Map a boolean outcome onto ALLOW or DENY."""
        return cls.ALLOW if granted else cls.DENY

    @property
    def is_known(self) -> bool:
        return self is not Decision.UNKNOWN


@dataclass
class PrivilegeRule:
    """A privilege (or the wildcard) with an optional guarding condition."""
    privilege: str
    condition: Optional[Condition] = None

    @property
    def is_wildcard(self) -> bool:
        return self.privilege == ALL_PRIVILEGES

    def evaluate(self, role: Hashable, context: Any = None) -> bool:
        """Run the condition for this rule; a missing condition always holds."""
        if self.condition is None:
            return True
        return bool(self.condition(role, self.privilege, context))
