"""Role API endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from desktop_access.api.deps import (
    ActionDependency,
    GrantDependency,
    RoleStore,
    get_role_store,
)
from desktop_access.api.schemas import RoleResponse, RoleValidationResponse
from desktop_access.core.rbac import Grant, PermissionChecker, Resource, Role, Verb
from desktop_access.core.rbac.validation import validate_role

router = APIRouter(prefix="/roles", tags=["roles"])

read_role = ActionDependency(Verb.READ, Resource.ROLES, name_param="name")


def _get_role_or_404(store: RoleStore, name: str) -> Role:
    role = store.get(name)
    if not role:
        raise HTTPException(status_code=404, detail="Role not found")
    return role


@router.get("", response_model=List[RoleResponse])
async def list_roles(
    store: RoleStore = Depends(get_role_store),
    checker: PermissionChecker = Depends(GrantDependency(Grant.READ_ROLES)),
):
    """List the roles the current user may read."""
    roles = store.list_roles()
    readable = set(checker.filter_allowed(Verb.READ, Resource.ROLES, [r.name for r in roles]))
    return [RoleResponse.from_role(r) for r in roles if r.name in readable]


@router.get(
    "/{name}",
    response_model=RoleResponse,
    dependencies=[Depends(read_role)],
)
async def get_role(
    name: str,
    store: RoleStore = Depends(get_role_store),
):
    """Get a single role."""
    return RoleResponse.from_role(_get_role_or_404(store, name))


@router.get(
    "/{name}/validate",
    response_model=RoleValidationResponse,
    dependencies=[Depends(read_role)],
)
async def validate_role_definition(
    name: str,
    store: RoleStore = Depends(get_role_store),
):
    """Report rule problems that would silently never match."""
    problems = validate_role(_get_role_or_404(store, name))
    return RoleValidationResponse(name=name, valid=not problems, problems=problems)
