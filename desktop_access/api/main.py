from typing import Iterable, Optional

from fastapi import FastAPI

from desktop_access import __version__
from desktop_access.api.deps import RoleStore
from desktop_access.api.routers import access, roles
from desktop_access.common.config import load_roles
from desktop_access.common.logger import configure_logging, get_logger
from desktop_access.core.config import Settings, get_settings
from desktop_access.core.rbac import DEFAULT_ROLES, Role
from desktop_access.core.rbac.validation import validate_role

logger = get_logger("api")


def create_app(
    role_definitions: Optional[Iterable[Role]] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API application.

    Roles come from ``role_definitions`` when given, otherwise from the
    configured roles file, otherwise the built-in defaults.
    """
    settings = settings or get_settings()
    configure_logging(
        level=settings.log_level,
        log_dir=settings.log_dir,
        log_to_file=settings.log_to_file,
    )

    if role_definitions is None:
        if settings.roles_file:
            role_definitions = load_roles(settings.roles_file)
        else:
            role_definitions = DEFAULT_ROLES.values()
    role_definitions = list(role_definitions)

    for role in role_definitions:
        for problem in validate_role(role):
            logger.warning(problem)

    app = FastAPI(
        title=settings.app_name,
        description="Desktop access control API",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.role_store = RoleStore(role_definitions)

    app.include_router(access.router, prefix="/api")
    app.include_router(roles.router, prefix="/api")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    return app
