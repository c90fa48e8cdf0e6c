from typing import Dict, Iterable, List, Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import ValidationError

from desktop_access.api.schemas import CurrentUser
from desktop_access.common.logger import get_logger
from desktop_access.core.rbac import Grant, PermissionChecker, Role
from desktop_access.core.rbac.vocabulary import ResourceLike, VerbLike, to_string

logger = get_logger("api.deps")


class RoleStore:
    """In-memory lookup of roles by name."""

    def __init__(self, roles: Iterable[Role]):
        self._roles: Dict[str, Role] = {role.name: role for role in roles}

    def get(self, name: str) -> Optional[Role]:
        return self._roles.get(name)

    def list_roles(self) -> List[Role]:
        return sorted(self._roles.values(), key=lambda r: r.name)

    def resolve(self, names: Iterable[str]) -> List[Role]:
        """Look up bound role names, skipping names that no longer exist."""
        roles = []
        for name in names:
            role = self._roles.get(name)
            if role is None:
                logger.warning(f"Bound role not found: {name}")
                continue
            roles.append(role)
        return roles


def get_role_store(request: Request) -> RoleStore:
    """Role store dependency."""
    return request.app.state.role_store


def get_current_user(request: Request) -> CurrentUser:
    """Get the principal set on the request by the authentication layer.

    The authentication layer may store a ``CurrentUser``, a mapping or any
    object with ``name`` and ``roles`` attributes.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication required",
    )
    user = getattr(request.state, "user", None)
    if user is None:
        raise credentials_exception from None
    try:
        return CurrentUser.model_validate(user)
    except ValidationError:
        logger.warning("Rejected malformed principal on request state")
        raise credentials_exception from None


def get_permission_checker(
    request: Request,
    current_user: CurrentUser = Depends(get_current_user),
    store: RoleStore = Depends(get_role_store),
) -> PermissionChecker:
    """Aggregate the rules and grants of every role bound to the current user."""
    roles = store.resolve(current_user.roles)
    skip_empty = request.app.state.settings.skip_empty_rules
    return PermissionChecker.from_roles(roles, skip_empty=skip_empty)


class GrantDependency:
    """
    FastAPI dependency requiring a coarse API grant.

    Usage:
        @router.get("/roles", dependencies=[Depends(GrantDependency(Grant.READ_ROLES))])
        async def list_roles():
            ...
    """

    def __init__(self, grant: Grant):
        self.grant = grant

    def __call__(
        self,
        current_user: CurrentUser = Depends(get_current_user),
        checker: PermissionChecker = Depends(get_permission_checker),
    ) -> PermissionChecker:
        if not checker.has_grant(self.grant):
            name = ", ".join(self.grant.names())
            logger.info(f"Denied {current_user.name}: missing {name} grant")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"User does not have {name} grant",
            )
        return checker


class ActionDependency:
    """
    FastAPI dependency requiring a rule that authorizes an action.

    The resource name and namespace are read from path parameters when
    their parameter names are given.

    Usage:
        @router.get("/roles/{name}", dependencies=[
            Depends(ActionDependency(Verb.READ, Resource.ROLES, name_param="name"))
        ])
        async def get_role(name: str):
            ...
    """

    def __init__(
        self,
        verb: VerbLike,
        resource_type: ResourceLike,
        name_param: Optional[str] = None,
        namespace_param: Optional[str] = None,
    ):
        self.verb = verb
        self.resource_type = resource_type
        self.name_param = name_param
        self.namespace_param = namespace_param

    def __call__(
        self,
        request: Request,
        current_user: CurrentUser = Depends(get_current_user),
        checker: PermissionChecker = Depends(get_permission_checker),
    ) -> PermissionChecker:
        name = request.path_params.get(self.name_param) if self.name_param else None
        namespace = (
            request.path_params.get(self.namespace_param) if self.namespace_param else None
        )
        if not checker.can(self.verb, self.resource_type, name, namespace):
            logger.info(
                f"Denied {current_user.name}: "
                f"{to_string(self.verb)} {to_string(self.resource_type)} {name or ''}".rstrip()
            )
            # No rule details are returned to the caller
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return checker
