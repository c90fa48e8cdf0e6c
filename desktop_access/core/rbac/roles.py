"""Role definitions for desktop access control.

A role bundles fine-grained rules with coarse API grants. Principals are
bound to one or more roles, and their effective permissions are the union
of everything those roles allow.

Defines 2 default roles:
1. Admin - Full access to every resource in every namespace
2. Launch Templates - Read and launch templates in the default namespace
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .grants import Grant, aggregate_grants
from .rules import Rule, dedupe_rules, rule_lists_equal
from .vocabulary import NAMESPACE_ALL, Resource, Verb


@dataclass
class Role:
    """A named set of rules and grants."""
    name: str
    rules: List[Rule] = field(default_factory=list)
    grants: Grant = Grant(0)
    description: str = ""

    def rules_equal(self, other: "Role") -> bool:
        """Check if both roles hold the same rules, ignoring order."""
        return rule_lists_equal(self.rules, other.rules)

    def to_dict(self) -> Dict[str, Any]:
        """Convert role to dictionary for serialization."""
        data: Dict[str, Any] = {
            "name": self.name,
            "rules": [rule.to_dict() for rule in self.rules],
            "grants": self.grants.names(),
        }
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Role":
        """
        Create role from dictionary.

        Missing rules become an empty list and missing grants an empty mask.

        Raises:
            ValueError: If the role is malformed, has no name or lists an
                unknown grant
        """
        if not isinstance(data, dict):
            raise ValueError(f"Role must be a mapping, got {type(data).__name__}")
        name = data.get("name")
        if not name:
            raise ValueError("Role definition is missing a name")
        rules = data.get("rules") or []
        grants = data.get("grants") or []
        if not isinstance(rules, list):
            raise ValueError(f"Role {name}: rules must be a list")
        if not isinstance(grants, list):
            raise ValueError(f"Role {name}: grants must be a list")
        return cls(
            name=str(name),
            rules=[Rule.from_dict(r) for r in rules],
            grants=Grant.from_names(grants),
            description=data.get("description") or "",
        )


def aggregate_rules(roles: Iterable[Role], skip_empty: bool = True) -> List[Rule]:
    """
    Union the rules of several roles.

    Rules deep-equal to an earlier rule are dropped. Empty rules authorize
    nothing and are dropped too unless ``skip_empty`` is False.
    """
    rules: List[Rule] = []
    for role in roles:
        for rule in role.rules:
            if skip_empty and rule.is_empty():
                continue
            rules.append(rule)
    return dedupe_rules(rules)


def aggregate_role_grants(roles: Iterable[Role]) -> Grant:
    """Combine the grants of several roles."""
    return aggregate_grants(role.grants for role in roles)


ADMIN_ROLE = Role(
    name="desktop-admin",
    description="Full access to all resources in all namespaces",
    rules=[
        Rule(
            verbs=[Verb.ALL],
            resources=[Resource.ALL],
            resource_patterns=[".*"],
            namespaces=[NAMESPACE_ALL],
        ),
    ],
    grants=Grant.ALL,
)

LAUNCH_TEMPLATES_ROLE = Role(
    name="desktop-launch-templates",
    description="Can view and launch templates in the default namespace",
    rules=[
        Rule(
            verbs=[Verb.READ, Verb.LAUNCH],
            resources=[Resource.TEMPLATES],
            resource_patterns=[".*"],
            namespaces=["default"],
        ),
    ],
    grants=Grant.READ_TEMPLATES | Grant.LAUNCH_TEMPLATES,
)

# Default roles configuration
DEFAULT_ROLES: Dict[str, Role] = {
    "admin": ADMIN_ROLE,
    "launch_templates": LAUNCH_TEMPLATES_ROLE,
}


def get_default_role(role_key: str) -> Role:
    """Get a default role by key."""
    role = DEFAULT_ROLES.get(role_key)
    if not role:
        raise ValueError(f"Unknown default role: {role_key}")
    return role


def get_all_default_roles() -> Dict[str, Role]:
    """Get all default role definitions."""
    return DEFAULT_ROLES.copy()


def find_role(roles: Iterable[Role], name: str) -> Optional[Role]:
    """Find a role by name."""
    for role in roles:
        if role.name == name:
            return role
    return None
