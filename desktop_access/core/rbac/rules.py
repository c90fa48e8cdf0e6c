"""Access rule definitions for desktop access control.

A rule combines four independent dimensions: verbs, resource types,
resource name patterns and namespaces. Roles are collections of rules,
and a principal is authorized for an action when any rule bound to it
authorizes that action.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from desktop_access.common.logger import get_logger
from .vocabulary import (
    NAMESPACE_ALL,
    Resource,
    ResourceLike,
    Verb,
    VerbLike,
    parse_resource,
    parse_verb,
    to_string,
)

logger = get_logger("rbac.rules")


@dataclass(frozen=True)
class Action:
    """
    A requested action.

    The resource name and namespace are optional. The namespace is only
    evaluated for namespaced actions (launching templates).
    """
    verb: VerbLike
    resource_type: ResourceLike
    resource_name: Optional[str] = None
    namespace: Optional[str] = None

    def is_namespaced(self) -> bool:
        """Check if this action is scoped to a namespace."""
        return (
            to_string(self.verb) == Verb.LAUNCH.value
            and to_string(self.resource_type) == Resource.TEMPLATES.value
        )

    def __str__(self) -> str:
        target = to_string(self.resource_type)
        if self.resource_name is not None:
            target = f"{target}/{self.resource_name}"
        if self.namespace is not None and self.is_namespaced():
            target = f"{self.namespace}/{target}"
        return f"{to_string(self.verb)} {target}"


@dataclass(frozen=True)
class Rule:
    """
    A single access rule.

    Every field is a collection. Verbs and resources must match for a rule
    to apply; resource patterns and namespaces only narrow it when present.
    """
    verbs: Tuple[VerbLike, ...] = ()
    resources: Tuple[ResourceLike, ...] = ()
    resource_patterns: Tuple[str, ...] = ()
    namespaces: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any iterable except a bare string, store tuples
        for name in ("verbs", "resources", "resource_patterns", "namespaces"):
            if isinstance(getattr(self, name), str):
                raise TypeError(f"Rule field {name} must be a collection, not a string")
        object.__setattr__(self, "verbs", tuple(self.verbs))
        object.__setattr__(self, "resources", tuple(self.resources))
        object.__setattr__(self, "resource_patterns", tuple(self.resource_patterns))
        object.__setattr__(self, "namespaces", tuple(self.namespaces))

    def is_empty(self) -> bool:
        """Check if all four fields are empty."""
        return (
            len(self.verbs) == 0
            and len(self.resources) == 0
            and len(self.resource_patterns) == 0
            and len(self.namespaces) == 0
        )

    def has_verb(self, verb: VerbLike) -> bool:
        """Check if this rule contains the verb or the verb wildcard."""
        wanted = to_string(verb)
        for item in self.verbs:
            value = to_string(item)
            if value == Verb.ALL.value or value == wanted:
                return True
        return False

    def has_resource_type(self, resource: ResourceLike) -> bool:
        """Check if this rule contains the resource type or the resource wildcard."""
        wanted = to_string(resource)
        for item in self.resources:
            value = to_string(item)
            if value == Resource.ALL.value or value == wanted:
                return True
        return False

    def has_namespace(self, namespace: str) -> bool:
        """Check if this rule contains the namespace or the namespace wildcard."""
        for item in self.namespaces:
            if item == NAMESPACE_ALL or item == namespace:
                return True
        return False

    def matches_resource_name(self, name: str) -> bool:
        """
        Check if any resource pattern matches the given name.

        Patterns are tried in order. A pattern that does not compile is
        skipped. Returns False when no pattern matches, including when
        there are no patterns at all. Patterns use Python `re` syntax and
        are searched, not anchored.
        """
        for pattern in self.resource_patterns:
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                logger.debug(f"Skipping invalid resource pattern {pattern!r}: {e}")
                continue
            if compiled.search(name):
                return True
        return False

    def authorizes(self, action: Action) -> bool:
        """
        Check if this rule alone authorizes the action.

        Verbs and resource types are mandatory. Patterns are only checked
        when a name is supplied and the rule has patterns; namespaces only
        when the action is namespaced, a namespace is supplied and the rule
        lists namespaces.
        """
        if not self.has_verb(action.verb):
            return False
        if not self.has_resource_type(action.resource_type):
            return False
        if action.resource_name is not None and self.resource_patterns:
            if not self.matches_resource_name(action.resource_name):
                return False
        if action.namespace is not None and action.is_namespaced() and self.namespaces:
            if not self.has_namespace(action.namespace):
                return False
        return True

    def deep_equal(self, other: "Rule") -> bool:
        """
        Check if the other rule has exactly the same values.

        Each field is compared as a sorted list of strings. Duplicates are
        significant and patterns are compared as written.
        """
        return (
            _sorted_strings(self.resources) == _sorted_strings(other.resources)
            and _sorted_strings(self.verbs) == _sorted_strings(other.verbs)
            and _sorted_strings(self.resource_patterns) == _sorted_strings(other.resource_patterns)
            and _sorted_strings(self.namespaces) == _sorted_strings(other.namespaces)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert rule to dictionary for serialization. Empty fields are omitted."""
        data: Dict[str, Any] = {}
        if self.verbs:
            data["verbs"] = [to_string(v) for v in self.verbs]
        if self.resources:
            data["resources"] = [to_string(r) for r in self.resources]
        if self.resource_patterns:
            data["resourcePatterns"] = list(self.resource_patterns)
        if self.namespaces:
            data["namespaces"] = list(self.namespaces)
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Rule":
        """
        Create rule from dictionary. Missing or null fields become empty.

        Raises:
            ValueError: If the rule is not a mapping or a field is not a list
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Rule must be a mapping, got {type(data).__name__}")
        return cls(
            verbs=[parse_verb(str(v)) for v in _get_list(data, "verbs")],
            resources=[parse_resource(str(r)) for r in _get_list(data, "resources")],
            resource_patterns=[str(p) for p in _get_patterns(data)],
            namespaces=[str(ns) for ns in _get_list(data, "namespaces")],
        )


def _get_list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Rule field {key} must be a list, got {type(value).__name__}")
    return value


def _get_patterns(data: Dict[str, Any]) -> List[Any]:
    # Both the wire name and the Python name are accepted
    if data.get("resourcePatterns") is not None:
        return _get_list(data, "resourcePatterns")
    return _get_list(data, "resource_patterns")


def _sorted_strings(values: Iterable[Any]) -> List[str]:
    return sorted(to_string(v) for v in values)


def dedupe_rules(rules: Iterable[Rule]) -> List[Rule]:
    """Drop rules that are deep-equal to an earlier rule, keeping order."""
    unique: List[Rule] = []
    for rule in rules:
        if any(rule.deep_equal(seen) for seen in unique):
            continue
        unique.append(rule)
    return unique


def rule_lists_equal(these: List[Rule], those: List[Rule]) -> bool:
    """
    Check if two rule lists hold the same rules in any order.

    Each rule must pair with a distinct deep-equal rule on the other side,
    so repeated rules are significant.
    """
    if len(these) != len(those):
        return False
    remaining = list(those)
    for rule in these:
        for i, candidate in enumerate(remaining):
            if rule.deep_equal(candidate):
                del remaining[i]
                break
        else:
            return False
    return True
