import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # The reported person
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    facebook_link: Mapped[str] = mapped_column(String(2048), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Status: suspended, banned
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    # Reporter uid, not enforced against user_profiles
    reporter_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    reporter_name: Mapped[str] = mapped_column(String(255), nullable=False)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )

    # Set while the report sits in the trash
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    deleted_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None
