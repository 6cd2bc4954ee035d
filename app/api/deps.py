"""FastAPI dependencies shared by the endpoint modules."""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.schemas.auth import AuthorizedProfile, IdentityClaim
from app.schemas.user import ADMIN_ROLES, Role
from app.services import identity_service
from app.services.authorization import AuthorizationGate, build_gate
from app.services.query_service import ListParams, parse_list_params

bearer_scheme = HTTPBearer(auto_error=False)


async def verify_auth_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> IdentityClaim:
    """Identity only: verifies the bearer token and returns its claim, no role check."""
    token = credentials.credentials if credentials else None
    return identity_service.verify_token(token)


def get_authorization_gate(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizationGate:
    return build_gate(db, always_verify_in_store=settings.ALWAYS_VERIFY_ROLE_IN_STORE)


def require_roles(*roles: str):
    """Build a dependency that lets through callers holding one of ``roles``."""

    async def dependency(
        claim: Annotated[IdentityClaim, Depends(verify_auth_token)],
        gate: Annotated[AuthorizationGate, Depends(get_authorization_gate)],
    ) -> AuthorizedProfile:
        return await gate.authorize(claim, roles)

    return dependency


get_current_admin = require_roles(*sorted(ADMIN_ROLES))
get_current_superadmin = require_roles(Role.superadmin.value)


def list_params(
    page: str | None = Query(None, description="Page number, defaults to 1"),
    limit: str | None = Query(None, description="Items per page, defaults to 25"),
    search: str | None = Query(None, description="Case-insensitive substring search"),
    status: str | None = Query(None, description="Exact status filter"),
    role: str | None = Query(None, description="Role filter, comma separated"),
) -> ListParams:
    return parse_list_params(page=page, limit=limit, search=search, status=status, role=role)


CurrentClaim = Annotated[IdentityClaim, Depends(verify_auth_token)]
CurrentAdmin = Annotated[AuthorizedProfile, Depends(get_current_admin)]
CurrentSuperadmin = Annotated[AuthorizedProfile, Depends(get_current_superadmin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
ListQuery = Annotated[ListParams, Depends(list_params)]
