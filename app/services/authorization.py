"""
Role resolution for admin-only endpoints.

Resolvers are tried in priority order; the first one that produces a profile
wins. The claim resolver trusts an admin role embedded in the token and skips
the profile store. Its answer can be stale: after a demotion the old token
still carries the admin role until it expires, unless the new role was pushed
into the claim store and the caller signed in again. Set
``ALWAYS_VERIFY_ROLE_IN_STORE`` to drop the claim resolver entirely.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthorizationError, InsufficientPermissionsError
from app.schemas.auth import AuthorizedProfile, IdentityClaim
from app.schemas.user import ADMIN_ROLES
from app.services import user_profile_service

logger = logging.getLogger(__name__)


class RoleResolver(Protocol):
    async def resolve(self, claim: IdentityClaim) -> AuthorizedProfile | None:
        """Return a profile view, or None to defer to the next resolver."""
        ...


class ClaimRoleResolver:
    """Fast path: trusts an admin role already present in the token claims."""

    def __init__(self, trusted_roles: Iterable[str] = ADMIN_ROLES):
        self.trusted_roles = frozenset(trusted_roles)

    async def resolve(self, claim: IdentityClaim) -> AuthorizedProfile | None:
        if claim.role not in self.trusted_roles:
            return None
        return AuthorizedProfile(
            uid=claim.uid,
            email=claim.email,
            fb_name=claim.fb_name or "N/A",
            status=claim.status or "approved",
            role=claim.role,
            source="claims",
        )


class StoreRoleResolver:
    """Slow path: reads the caller's profile from the database."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, claim: IdentityClaim) -> AuthorizedProfile | None:
        profile = await user_profile_service.get_profile_by_uid(self.db, claim.uid)
        if profile is None:
            raise AuthorizationError("Forbidden: profile not found")
        return AuthorizedProfile(
            uid=profile.uid,
            email=profile.email,
            fb_name=profile.fb_name or "N/A",
            status=profile.status,
            role=profile.role,
            source="store",
        )


class AuthorizationGate:
    def __init__(self, resolvers: Sequence[RoleResolver]):
        if not resolvers:
            raise ValueError("At least one role resolver is required")
        self.resolvers = list(resolvers)

    async def resolve(self, claim: IdentityClaim) -> AuthorizedProfile:
        for resolver in self.resolvers:
            profile = await resolver.resolve(claim)
            if profile is not None:
                return profile
        raise AuthorizationError("Forbidden: profile not found")

    async def authorize(
        self,
        claim: IdentityClaim,
        required_roles: Iterable[str],
    ) -> AuthorizedProfile:
        required = frozenset(required_roles)
        profile = await self.resolve(claim)
        if profile.role not in required:
            logger.warning(
                "Denied %s: role %r not in %s (source=%s)",
                claim.uid,
                profile.role,
                sorted(required),
                profile.source,
            )
            raise InsufficientPermissionsError()
        return profile


def build_gate(db: AsyncSession, always_verify_in_store: bool = False) -> AuthorizationGate:
    resolvers: list[RoleResolver] = []
    if not always_verify_in_store:
        resolvers.append(ClaimRoleResolver())
    resolvers.append(StoreRoleResolver(db))
    return AuthorizationGate(resolvers)
