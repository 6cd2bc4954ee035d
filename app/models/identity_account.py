import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _new_uid() -> str:
    return uuid.uuid4().hex


class IdentityAccount(Base):
    """Sign-in account held by the identity provider, separate from the profile store."""

    __tablename__ = "identity_accounts"

    uid: Mapped[str] = mapped_column(
        String(128),
        primary_key=True,
        default=_new_uid,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    # Embedded into every issued token: role, status, fbName
    custom_claims: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
    )
    disabled: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
