"""RBAC module for desktop access control.

This module defines the rule model, grants, role definitions, and access
control utilities.
"""

from .vocabulary import Verb, Resource, NAMESPACE_ALL
from .rules import Action, Rule
from .grants import Grant, GRANT_NAMES
from .roles import Role, DEFAULT_ROLES
from .checker import PermissionChecker

__all__ = [
    "Action",
    "DEFAULT_ROLES",
    "GRANT_NAMES",
    "Grant",
    "NAMESPACE_ALL",
    "PermissionChecker",
    "Resource",
    "Role",
    "Rule",
    "Verb",
]
