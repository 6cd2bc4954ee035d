import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AccountNotApprovedError,
    AuthorizationError,
    IdentityAccountNotFoundError,
    InsufficientPermissionsError,
    NotFoundError,
    ValidationError,
)
from app.models.user_profile import UserProfile
from app.schemas.auth import AuthorizedProfile
from app.schemas.user import ADMIN_ROLES, ProfileStatus, Role, UserProfileCreate
from app.services import identity_service

logger = logging.getLogger(__name__)

BLOCKED_STATUS_MESSAGES = {
    ProfileStatus.pending.value: "Your account is pending approval by an administrator.",
    ProfileStatus.rejected.value: "Your account has been rejected. Please contact support.",
}


async def get_profile_by_uid(db: AsyncSession, uid: str) -> UserProfile | None:
    result = await db.execute(select(UserProfile).where(UserProfile.uid == uid))
    return result.scalar_one_or_none()


async def get_profile_or_404(db: AsyncSession, uid: str) -> UserProfile:
    profile = await get_profile_by_uid(db, uid)
    if profile is None:
        raise NotFoundError("User profile not found.")
    return profile


async def register_profile(
    db: AsyncSession, data: UserProfileCreate
) -> tuple[UserProfile, bool]:
    """
    Create a profile for ``data.uid`` unless one exists.
    Returns (profile, created).
    """
    existing = await get_profile_by_uid(db, data.uid)
    if existing:
        return existing, False

    profile = UserProfile(
        uid=data.uid,
        email=data.email,
        fb_name=data.fb_name,
        status=ProfileStatus.pending.value,
        role=Role.user.value,
    )
    db.add(profile)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same uid
        await db.rollback()
        existing = await get_profile_by_uid(db, data.uid)
        if existing is None:
            raise
        return existing, False
    await db.refresh(profile)
    logger.info("Registered profile %s", profile.uid)
    return profile, True


async def get_visible_profile(db: AsyncSession, uid: str) -> UserProfile:
    """Fetch a profile, refusing pending or rejected accounts."""
    profile = await get_profile_or_404(db, uid)
    message = BLOCKED_STATUS_MESSAGES.get(profile.status)
    if message:
        raise AccountNotApprovedError(message)
    return profile


async def update_status(
    db: AsyncSession, uid: str, new_status: str
) -> tuple[UserProfile, bool]:
    """Returns (profile, changed)."""
    if new_status not in {s.value for s in ProfileStatus}:
        raise ValidationError(
            "Invalid status. Must be one of: approved, pending, rejected.",
            field="status",
        )

    profile = await get_profile_or_404(db, uid)
    if profile.status == new_status:
        return profile, False

    profile.status = new_status
    await _sync_claims(db, uid, {"status": new_status}, required=False)
    await db.commit()
    await db.refresh(profile)
    logger.info("Profile %s status set to %s", uid, new_status)
    return profile, True


async def update_role(
    db: AsyncSession, actor: AuthorizedProfile, uid: str, new_role: str
) -> tuple[UserProfile, bool]:
    """
    Change a profile's role and push it into the identity claims.

    Both writes share one transaction; if the claim update fails nothing is
    committed.
    """
    if new_role not in {r.value for r in Role}:
        raise ValidationError(
            "Invalid role. Must be one of: user, admin, superadmin.",
            field="role",
        )
    if actor.uid == uid and new_role != Role.superadmin.value:
        raise ValidationError("A superadmin cannot demote their own account.", field="role")

    profile = await get_profile_or_404(db, uid)
    if profile.role == new_role:
        return profile, False

    profile.role = new_role
    await _sync_claims(db, uid, {"role": new_role}, required=True)
    await db.commit()
    await db.refresh(profile)
    logger.info("Profile %s role set to %s by %s", uid, new_role, actor.uid)
    return profile, True


async def delete_profile(db: AsyncSession, actor: AuthorizedProfile, uid: str) -> None:
    if actor.uid == uid:
        raise AuthorizationError("You cannot delete your own account.")

    profile = await get_profile_or_404(db, uid)
    if actor.role != Role.superadmin.value and profile.role in ADMIN_ROLES:
        raise InsufficientPermissionsError(
            "Forbidden: admins cannot delete other admin or superadmin accounts."
        )

    # Identity account first; any failure other than "absent" aborts before the profile goes
    try:
        await identity_service.delete_account(db, uid, commit=False)
    except IdentityAccountNotFoundError:
        logger.warning("Identity account %s already absent, deleting profile only", uid)

    await db.delete(profile)
    await db.commit()
    logger.info("Profile %s deleted by %s", uid, actor.uid)


async def _sync_claims(db: AsyncSession, uid: str, claims: dict, required: bool) -> None:
    try:
        await identity_service.set_custom_claims(db, uid, claims, commit=False)
    except IdentityAccountNotFoundError:
        if required:
            raise
        logger.warning("No identity account for %s, claims %s not synced", uid, sorted(claims))
