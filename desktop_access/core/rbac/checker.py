"""Permission checking for desktop access control.

Evaluates actions against the aggregated rules of a principal and
checks coarse API grants.
"""

from typing import Iterable, List, Optional

from .grants import Grant
from .roles import Role, aggregate_role_grants, aggregate_rules
from .rules import Action, Rule
from .vocabulary import CONCRETE_RESOURCES, Resource, ResourceLike, VerbLike


class PermissionChecker:
    """Checks actions and grants for a principal bound to a set of roles."""

    def __init__(self, rules: Iterable[Rule], grants: int = 0):
        """
        Initialize with the principal's aggregated rules and grants.

        Args:
            rules: Union of the rules from every bound role
            grants: Union of the grants from every bound role
        """
        self.rules = list(rules)
        self.grants = Grant(grants)

    @classmethod
    def from_roles(cls, roles: Iterable[Role], skip_empty: bool = True) -> "PermissionChecker":
        """Build a checker from the roles bound to a principal."""
        roles = list(roles)
        return cls(aggregate_rules(roles, skip_empty=skip_empty), aggregate_role_grants(roles))

    def is_allowed(self, action: Action) -> bool:
        """Check if any rule authorizes the action."""
        return any(rule.authorizes(action) for rule in self.rules)

    def can(
        self,
        verb: VerbLike,
        resource_type: ResourceLike,
        name: Optional[str] = None,
        namespace: Optional[str] = None,
    ) -> bool:
        """Shorthand for ``is_allowed`` with the action given as arguments."""
        return self.is_allowed(Action(verb, resource_type, name, namespace))

    def has_grant(self, grant: int) -> bool:
        """Check if any bit of the grant is held."""
        return self.grants.has(grant)

    def has_all_grants(self, grant: int) -> bool:
        """Check if every bit of the grant is held."""
        return self.grants.has_all(grant)

    def filter_allowed(
        self,
        verb: VerbLike,
        resource_type: ResourceLike,
        names: Iterable[str],
        namespace: Optional[str] = None,
    ) -> List[str]:
        """Keep the resource names the action is allowed on, in input order."""
        return [
            name for name in names
            if self.can(verb, resource_type, name, namespace)
        ]

    def get_accessible_resources(self, verb: VerbLike) -> List[Resource]:
        """Get the resource types the verb is allowed on for some name."""
        return [
            resource for resource in CONCRETE_RESOURCES
            if self.can(verb, resource)
        ]
