from typing import Any

from fastapi import APIRouter, Response, status

from app.api.deps import CurrentAdmin, CurrentSuperadmin, DbSession, ListQuery
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.user import (
    UserProfileCreate,
    UserProfileMutationResponse,
    UserProfileResponse,
    UserRoleUpdate,
    UserStatusUpdate,
)
from app.services import user_profile_service
from app.services.query_service import USER_PROFILES, fetch_paginated

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserProfileResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(
    profile_data: UserProfileCreate,
    response: Response,
    db: DbSession,
) -> UserProfileResponse:
    """
    Register a profile for an identity uid.

    Registering an existing uid returns the stored profile with 200 instead of
    creating a duplicate.
    """
    profile, created = await user_profile_service.register_profile(db, profile_data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return UserProfileResponse.model_validate(profile)


@router.get("", response_model=PaginatedResponse[UserProfileResponse])
async def list_users(
    admin: CurrentAdmin,
    db: DbSession,
    params: ListQuery,
) -> dict[str, Any]:
    """List profiles with optional status/role filters and search (admin only)."""
    page = await fetch_paginated(db, USER_PROFILES, {}, params)
    return page.to_envelope(UserProfileResponse.model_validate)


@router.get("/{uid}", response_model=UserProfileResponse)
async def get_user(uid: str, db: DbSession) -> UserProfileResponse:
    """Fetch a profile. Pending and rejected accounts get 403 with an explanation."""
    profile = await user_profile_service.get_visible_profile(db, uid)
    return UserProfileResponse.model_validate(profile)


@router.patch("/{uid}/status", response_model=UserProfileMutationResponse)
async def update_user_status(
    uid: str,
    body: UserStatusUpdate,
    admin: CurrentAdmin,
    db: DbSession,
) -> UserProfileMutationResponse:
    profile, changed = await user_profile_service.update_status(db, uid, body.status)
    if not changed:
        message = f"User status is already '{profile.status}'. No changes made."
    else:
        message = f"User status updated to '{profile.status}'."
    return UserProfileMutationResponse(
        message=message,
        data=UserProfileResponse.model_validate(profile),
    )


@router.patch("/{uid}/role", response_model=UserProfileMutationResponse)
async def update_user_role(
    uid: str,
    body: UserRoleUpdate,
    superadmin: CurrentSuperadmin,
    db: DbSession,
) -> UserProfileMutationResponse:
    """Change a user's role (superadmin only). The new role is pushed into identity claims."""
    profile, changed = await user_profile_service.update_role(db, superadmin, uid, body.role)
    if not changed:
        message = f"User role is already '{profile.role}'. No changes made."
    else:
        message = f"User role updated to '{profile.role}'."
    return UserProfileMutationResponse(
        message=message,
        data=UserProfileResponse.model_validate(profile),
    )


@router.delete("/{uid}", response_model=MessageResponse)
async def delete_user(
    uid: str,
    admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    await user_profile_service.delete_profile(db, admin, uid)
    return MessageResponse(message="User deleted successfully.")
