"""
Hierarchical access control list.

This module provides the access control engine:
- Role graph with multiple inheritance (ordered parent lists)
- Allowed and denied privilege stores per role
- Wildcard rules covering every privilege not listed explicitly
- Optional condition callbacks evaluated at check time
- Resolution of a privilege through the role hierarchy

Resolution order for a role:
1. Exact allowed rule
2. Wildcard allowed rule
3. Exact denied rule
4. Wildcard denied rule

Setting a named rule removes the opposite store's wildcard rule, and
setting a wildcard rule empties the opposite store.
5. Parents, in the order they were added (first known answer wins)

An instance is not thread safe. Guard it with a lock when it is shared
between threads.
"""

import logging
from collections import deque
from typing import Any, Dict, Hashable, Iterator, List, Optional

from roleacl.config import EngineConfig
from roleacl.config.logging import StructuredLogger
from roleacl.core.exceptions import RoleNotFoundError
from roleacl.core.models import ALL_PRIVILEGES, Condition, Decision, PrivilegeRule
from roleacl.utils.helpers import as_list, describe_condition, is_wildcard, unique

logger = logging.getLogger(__name__)
audit_logger = StructuredLogger(__name__)


class Acl:
    """Role graph plus allowed/denied privilege stores."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        # role -> ordered parent roles
        self._parents: Dict[Hashable, List[Hashable]] = {}
        # role -> privilege (or ALL_PRIVILEGES) -> rule
        self._allowed: Dict[Hashable, Dict[str, PrivilegeRule]] = {}
        self._denied: Dict[Hashable, Dict[str, PrivilegeRule]] = {}

    def __contains__(self, role: Hashable) -> bool:
        return self.exists(role)

    def __len__(self) -> int:
        return len(self._parents)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.roles())

    def __repr__(self) -> str:
        return f"<Acl roles={len(self._parents)}>"

    # Role graph

    def add_role(self, role: Hashable, parents: Any = None) -> "Acl":
        """
        Add a role, or add parents to an existing role.

        Args:
            role: Identifier of the role
            parents: A parent role or an iterable of parent roles. Every
                parent must have been added already.

        Returns:
            This instance, for chaining

        Raises:
            RoleNotFoundError: If a parent does not exist. A new role is
                not created in that case. For an existing role, parents are
                added one at a time, so parents listed before the missing
                one stay attached.
        """
        parent_list = as_list(parents)

        if role not in self._parents:
            for parent in parent_list:
                self._require_role(parent)

            self._parents[role] = unique(p for p in parent_list if p != role)
            self._allowed[role] = {}
            self._denied[role] = {}
            self._log_mutation("add_role", role, parents=[str(p) for p in self._parents[role]])
            return self

        added = []
        for parent in parent_list:
            self._require_role(parent)
            if parent != role and parent not in self._parents[role]:
                self._parents[role].append(parent)
                added.append(parent)

        if added:
            self._log_mutation("add_parents", role, parents=[str(p) for p in added])
        return self

    def exists(self, role: Hashable) -> bool:
        """Check whether a role has been added."""
        try:
            return role in self._parents
        except TypeError:
            # Unhashable identifiers can never name a role
            return False

    def roles(self) -> List[Hashable]:
        """List all roles in the order they were added."""
        return list(self._parents.keys())

    def parents(self, role: Hashable) -> List[Hashable]:
        """Get the direct parents of a role, in resolution order."""
        self._require_role(role)
        return list(self._parents[role])

    def ancestors(self, role: Hashable) -> List[Hashable]:
        """Get every role reachable from a role through parent edges, nearest first."""
        if not self.exists(role):
            return []

        result = []
        seen = {role}
        queue = deque(self._parents[role])
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            result.append(current)
            queue.extend(self._parents[current])
        return result

    def belongs_to(self, child: Hashable, parent: Hashable) -> bool:
        """
        Check whether a role is, or inherits from, another role.

        A role belongs to itself. Unknown child roles belong to nothing.
        """
        if not self.exists(child):
            return False

        if child == parent:
            return True

        return parent in self.ancestors(child)

    # Privilege stores

    def allow(self, role: Hashable, privileges: Any = None,
              condition: Optional[Condition] = None) -> "Acl":
        """
        Allow privileges for a role.

        Args:
            role: Role to allow the privileges for
            privileges: A privilege, an iterable of privileges, or None (or
                ALL_PRIVILEGES) to allow every privilege. Allowing every
                privilege removes all denied privileges of the role, and
                allowing named privileges removes its deny-everything rule.
            condition: Optional callback ``(role, privilege, context) -> bool``.
                The privilege is only allowed when it returns True.

        Returns:
            This instance, for chaining

        Raises:
            RoleNotFoundError: If the role does not exist
        """
        return self._set_rules("allow", role, privileges, condition,
                               target=self._allowed, opposite=self._denied)

    def deny(self, role: Hashable, privileges: Any = None,
             condition: Optional[Condition] = None) -> "Acl":
        """
        Deny privileges for a role.

        Mirror of :meth:`allow`. The condition must return True for the
        privilege to be denied; when it returns False the privilege is
        allowed instead.
        """
        return self._set_rules("deny", role, privileges, condition,
                               target=self._denied, opposite=self._allowed)

    def allowed_privileges(self, role: Hashable) -> List[str]:
        """List the privileges with an allowed rule on a role."""
        self._require_role(role)
        return list(self._allowed[role].keys())

    def denied_privileges(self, role: Hashable) -> List[str]:
        """List the privileges with a denied rule on a role."""
        self._require_role(role)
        return list(self._denied[role].keys())

    def _set_rules(self, action: str, role: Hashable, privileges: Any,
                   condition: Optional[Condition],
                   target: Dict[Hashable, Dict[str, PrivilegeRule]],
                   opposite: Dict[Hashable, Dict[str, PrivilegeRule]]) -> "Acl":
        self._require_role(role)

        if is_wildcard(privileges):
            names = [ALL_PRIVILEGES]
        else:
            names = unique(as_list(privileges))

        for privilege in names:
            target[role][privilege] = PrivilegeRule(privilege, condition)
            if privilege == ALL_PRIVILEGES:
                opposite[role].clear()
            else:
                opposite[role].pop(privilege, None)
                # A named rule supersedes the opposite wildcard
                opposite[role].pop(ALL_PRIVILEGES, None)

        if names:
            self._log_mutation(action, role, privileges=names,
                               condition=describe_condition(condition))
        return self

    # Resolution

    def is_allowed(self, role: Hashable, privilege: str, context: Any = None) -> bool:
        """
        Check whether a role may exercise a privilege.

        Args:
            role: Role to check
            privilege: Privilege to check
            context: Opaque value handed to condition callbacks

        Returns:
            True only when resolution ends in an allow. Unknown roles and
            privileges no role decides on are not allowed.
        """
        decision = self.resolve(role, privilege, context)
        granted = decision is Decision.ALLOW

        if self.config.audit_decisions:
            audit_logger.log_decision(role, privilege, granted, decision.value)
        return granted

    def resolve(self, role: Hashable, privilege: str, context: Any = None) -> Decision:
        """
        Resolve a privilege for a role through the hierarchy.

        The role's own rules are consulted first. Parents are only searched
        when the role has no rule for the privilege and no wildcard rule,
        depth first and in parent order. A role reached a second time during
        the same check contributes nothing, so cyclic graphs terminate.

        Returns:
            Decision.ALLOW, Decision.DENY, or Decision.UNKNOWN when no role
            on the way decides.
        """
        if not self.exists(role):
            return Decision.UNKNOWN

        try:
            hash(privilege)
        except TypeError:
            # Unhashable identifiers can never name a privilege
            return Decision.UNKNOWN

        visited = set()
        stack = [role]
        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)

            decision = self._resolve_direct(current, privilege, context)
            if decision.is_known:
                return decision

            stack.extend(reversed(self._parents[current]))

        return Decision.UNKNOWN

    def _resolve_direct(self, role: Hashable, privilege: str, context: Any) -> Decision:
        """Resolve a privilege using only the rules set on the role itself."""
        allowed = self._allowed[role]
        denied = self._denied[role]

        if privilege in allowed:
            return Decision.from_bool(allowed[privilege].evaluate(role, context))
        if ALL_PRIVILEGES in allowed:
            return Decision.from_bool(allowed[ALL_PRIVILEGES].evaluate(role, context))
        if privilege in denied:
            return Decision.from_bool(not denied[privilege].evaluate(role, context))
        if ALL_PRIVILEGES in denied:
            return Decision.from_bool(not denied[ALL_PRIVILEGES].evaluate(role, context))
        return Decision.UNKNOWN

    # Merging and introspection

    def merge(self, other: "Acl") -> "Acl":
        """
        Merge the roles and rules of another access control list into this one.

        Roles are added first (with their parents), then allowed rules, then
        denied rules, each in the order ``other`` holds them. Rules from
        ``other`` override this instance's rules for the same
        role and privilege.

        Returns:
            This instance, for chaining
        """
        if not isinstance(other, Acl):
            raise TypeError(f"Cannot merge {type(other).__name__} into Acl")

        graph = [(role, list(parents)) for role, parents in other._parents.items()]
        allowed = [(role, list(rules.values())) for role, rules in other._allowed.items()]
        denied = [(role, list(rules.values())) for role, rules in other._denied.items()]

        # Parents may have been attached after the child was created
        for role, _ in graph:
            self.add_role(role)
        for role, parents in graph:
            self.add_role(role, parents)

        for role, rules in allowed:
            for rule in rules:
                self.allow(role, rule.privilege, rule.condition)

        for role, rules in denied:
            for rule in rules:
                self.deny(role, rule.privilege, rule.condition)

        logger.debug(f"Merged {len(graph)} roles into {self!r}")
        return self

    def hierarchy(self) -> Dict[Hashable, Dict[str, List[Any]]]:
        """Get a snapshot of every role with its parents and privileges."""
        return {
            role: {
                "parents": list(parents),
                "allowed": list(self._allowed[role].keys()),
                "denied": list(self._denied[role].keys()),
            }
            for role, parents in self._parents.items()
        }

    # Internal helpers

    def _require_role(self, role: Hashable) -> None:
        if not self.exists(role):
            raise RoleNotFoundError(role)

    def _log_mutation(self, action: str, role: Hashable, **fields) -> None:
        if self.config.log_mutations:
            audit_logger.log_mutation(action, role, **fields)
