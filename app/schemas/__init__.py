from app.schemas.auth import (
    AuthorizedProfile,
    IdentityClaim,
    SignupRequest,
    SignupResponse,
    Token,
)
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.report import (
    BulkAction,
    BulkActionRequest,
    BulkActionResponse,
    ReportCreate,
    ReportResponse,
    ReportStatus,
    ReportSubmitResponse,
)
from app.schemas.user import (
    ADMIN_ROLES,
    ProfileStatus,
    Role,
    UserProfileCreate,
    UserProfileMutationResponse,
    UserProfileResponse,
    UserRoleUpdate,
    UserStatusUpdate,
)

__all__ = [
    "AuthorizedProfile",
    "IdentityClaim",
    "SignupRequest",
    "SignupResponse",
    "Token",
    "MessageResponse",
    "PaginatedResponse",
    "BulkAction",
    "BulkActionRequest",
    "BulkActionResponse",
    "ReportCreate",
    "ReportResponse",
    "ReportStatus",
    "ReportSubmitResponse",
    "ADMIN_ROLES",
    "ProfileStatus",
    "Role",
    "UserProfileCreate",
    "UserProfileMutationResponse",
    "UserProfileResponse",
    "UserRoleUpdate",
    "UserStatusUpdate",
]
