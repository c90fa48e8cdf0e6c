"""Access check API endpoints."""

from fastapi import APIRouter, Depends

from desktop_access.api.deps import get_current_user, get_permission_checker
from desktop_access.api.schemas import (
    AccessDecision,
    ActionRequest,
    CurrentUser,
    GrantsResponse,
)
from desktop_access.core.rbac import Action, PermissionChecker
from desktop_access.core.rbac.vocabulary import parse_resource, parse_verb

router = APIRouter(prefix="/access", tags=["access"])


@router.get("/grants", response_model=GrantsResponse)
async def get_my_grants(
    current_user: CurrentUser = Depends(get_current_user),
    checker: PermissionChecker = Depends(get_permission_checker),
):
    """List the grants held by the current user."""
    return GrantsResponse(user=current_user.name, grants=checker.grants.names())


@router.post("/check", response_model=AccessDecision)
async def check_access(
    action_request: ActionRequest,
    checker: PermissionChecker = Depends(get_permission_checker),
):
    """Check whether the current user may perform an action."""
    action = Action(
        verb=parse_verb(action_request.verb),
        resource_type=parse_resource(action_request.resource),
        resource_name=action_request.name,
        namespace=action_request.namespace,
    )
    return AccessDecision(allowed=checker.is_allowed(action))
