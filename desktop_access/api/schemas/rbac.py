"""Schemas for the desktop access API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from desktop_access.core.rbac import Role, Rule
from desktop_access.core.rbac.vocabulary import to_string


class CurrentUser(BaseModel):
    """An authenticated principal and the names of its bound roles."""
    model_config = ConfigDict(from_attributes=True)

    name: str
    roles: List[str] = Field(default_factory=list)


class RuleSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    verbs: List[str] = Field(default_factory=list)
    resources: List[str] = Field(default_factory=list)
    resource_patterns: List[str] = Field(default_factory=list, alias="resourcePatterns")
    namespaces: List[str] = Field(default_factory=list)

    @classmethod
    def from_rule(cls, rule: Rule) -> "RuleSchema":
        return cls(
            verbs=[to_string(v) for v in rule.verbs],
            resources=[to_string(r) for r in rule.resources],
            resource_patterns=list(rule.resource_patterns),
            namespaces=list(rule.namespaces),
        )


class RoleResponse(BaseModel):
    name: str
    description: str = ""
    rules: List[RuleSchema] = Field(default_factory=list)
    grants: List[str] = Field(default_factory=list)

    @classmethod
    def from_role(cls, role: Role) -> "RoleResponse":
        return cls(
            name=role.name,
            description=role.description,
            rules=[RuleSchema.from_rule(r) for r in role.rules],
            grants=role.grants.names(),
        )


class RoleValidationResponse(BaseModel):
    name: str
    valid: bool
    problems: List[str] = Field(default_factory=list)


class ActionRequest(BaseModel):
    """An action to check, e.g. launch templates/ubuntu in namespace default."""
    verb: str = Field(..., min_length=1)
    resource: str = Field(..., min_length=1)
    name: Optional[str] = None
    namespace: Optional[str] = None


class AccessDecision(BaseModel):
    allowed: bool


class GrantsResponse(BaseModel):
    user: str
    grants: List[str]
