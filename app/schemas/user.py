from datetime import datetime
from enum import Enum

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class ProfileStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Role(str, Enum):
    user = "user"
    admin = "admin"
    superadmin = "superadmin"


ADMIN_ROLES = frozenset({Role.admin.value, Role.superadmin.value})


class UserProfileCreate(CamelModel):
    uid: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    fb_name: str | None = None


class UserProfileResponse(CamelModel):
    uid: str
    email: str
    fb_name: str | None
    status: str
    role: str
    registration_date: datetime


class UserStatusUpdate(CamelModel):
    status: str


class UserRoleUpdate(CamelModel):
    role: str


class UserProfileMutationResponse(CamelModel):
    message: str
    data: UserProfileResponse | None = None
