from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import CamelModel


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    fb_name: str | None = None


class SignupResponse(CamelModel):
    uid: str
    email: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class IdentityClaim(CamelModel):
    """Verified attributes of the caller, as carried by the bearer token."""

    uid: str
    email: str | None = None
    role: str | None = None
    status: str | None = None
    fb_name: str | None = None

    @classmethod
    def from_token_payload(cls, payload: dict[str, Any]) -> "IdentityClaim":
        return cls(
            uid=payload["sub"],
            email=payload.get("email"),
            role=payload.get("role"),
            status=payload.get("status"),
            fb_name=payload.get("fbName"),
        )


class AuthorizedProfile(CamelModel):
    """Profile view the authorization gate resolved for the caller."""

    uid: str
    email: str | None = None
    fb_name: str = "N/A"
    status: str = "approved"
    role: str
    source: Literal["claims", "store"]
