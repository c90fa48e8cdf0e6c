"""Vocabulary for desktop access rules.

Defines the verbs and resource types a rule can refer to. Each dimension
has a wildcard member (``"*"``) that is compared like any other value.

Verb string format examples:
  - read
  - launch
  - *
"""

from enum import Enum
from typing import Union


class Verb(str, Enum):
    """Actions a rule may permit."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    USE = "use"           # Only meaningful for service accounts
    LAUNCH = "launch"     # Launch a desktop session from a template
    ALL = "*"


class Resource(str, Enum):
    """Resource types a rule may refer to."""

    USERS = "users"
    ROLES = "roles"
    TEMPLATES = "templates"
    # Using a service account means assuming that identity in a desktop session
    SERVICE_ACCOUNTS = "serviceaccounts"
    ALL = "*"


# Matches every namespace
NAMESPACE_ALL = "*"

VerbLike = Union[Verb, str]
ResourceLike = Union[Resource, str]


def to_string(value: Union[Enum, str]) -> str:
    """Return the raw string for an enum member or plain string."""
    if isinstance(value, Enum):
        return value.value
    return value


def parse_verb(value: str) -> VerbLike:
    """Coerce a configured verb to a ``Verb``, keeping unknown strings as-is."""
    if value in _VERB_VALUES:
        return Verb(value)
    return value


def parse_resource(value: str) -> ResourceLike:
    """Coerce a configured resource to a ``Resource``, keeping unknown strings as-is."""
    if value in _RESOURCE_VALUES:
        return Resource(value)
    return value


def is_known_verb(value: VerbLike) -> bool:
    return to_string(value) in _VERB_VALUES


def is_known_resource(value: ResourceLike) -> bool:
    return to_string(value) in _RESOURCE_VALUES


_VERB_VALUES = frozenset(v.value for v in Verb)
_RESOURCE_VALUES = frozenset(r.value for r in Resource)

# Concrete resource types, excluding the wildcard
CONCRETE_RESOURCES = tuple(r for r in Resource if r is not Resource.ALL)
