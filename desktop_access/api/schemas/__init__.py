from .rbac import (
    AccessDecision,
    ActionRequest,
    CurrentUser,
    GrantsResponse,
    RoleResponse,
    RoleValidationResponse,
    RuleSchema,
)

__all__ = [
    "AccessDecision",
    "ActionRequest",
    "CurrentUser",
    "GrantsResponse",
    "RoleResponse",
    "RoleValidationResponse",
    "RuleSchema",
]
