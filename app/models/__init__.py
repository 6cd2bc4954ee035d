from app.models.identity_account import IdentityAccount
from app.models.report import Report
from app.models.user_profile import UserProfile

__all__ = [
    "IdentityAccount",
    "Report",
    "UserProfile",
]
