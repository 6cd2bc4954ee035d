import re
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import field_validator, model_validator

from app.schemas.common import CamelModel

PHONE_PATTERN = re.compile(r"^[+]?[0-9\s()-]*$")

URL_PATTERN = re.compile(
    r"^(https?://(?:www\.|(?!www))[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
    r"|www\.[a-zA-Z0-9][a-zA-Z0-9-]+[a-zA-Z0-9]\.[^\s]{2,}"
    r"|https?://[a-zA-Z0-9]+\.[^\s]{2,}"
    r"|[a-zA-Z0-9]+\.[^\s]{2,})$",
    re.IGNORECASE,
)

REQUIRED_REPORT_FIELDS = (
    "name",
    "facebookLink",
    "phone",
    "status",
    "reason",
    "reporterId",
    "reporterName",
)


class ReportStatus(str, Enum):
    suspended = "suspended"
    banned = "banned"


class BulkAction(str, Enum):
    restore = "restore"
    permanent_delete = "permanent_delete"


class ReportCreate(CamelModel):
    name: str
    facebook_link: str
    phone: str
    status: str
    reason: str
    reporter_id: str
    reporter_name: str

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object.")
        # Accept snake_case keys as well since populate_by_name is on
        missing = [
            field
            for field in REQUIRED_REPORT_FIELDS
            if not data.get(field) and not data.get(_snake(field))
        ]
        if missing:
            raise ValueError(
                "All required fields (" + ", ".join(REQUIRED_REPORT_FIELDS) + ") are required."
            )
        return data

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        if not PHONE_PATTERN.match(value):
            raise ValueError(
                "Invalid phone number format. Please use only digits, +, -, (, ) or spaces."
            )
        return value

    @field_validator("facebook_link")
    @classmethod
    def check_link(cls, value: str) -> str:
        if not URL_PATTERN.match(value):
            raise ValueError("Invalid Facebook link format. Must be a valid URL.")
        return value

    @field_validator("status")
    @classmethod
    def check_status(cls, value: str) -> str:
        if value not in {s.value for s in ReportStatus}:
            raise ValueError("Invalid status provided.")
        return value


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class ReportResponse(CamelModel):
    id: UUID
    name: str
    facebook_link: str
    phone: str
    status: str
    reason: str
    reporter_id: str
    reporter_name: str
    timestamp: datetime
    deleted_at: datetime | None = None
    deleted_by: str | None = None


class ReportSubmitResponse(CamelModel):
    message: str
    inserted_id: UUID
    data: ReportResponse


class BulkActionRequest(CamelModel):
    # Kept loose so malformed entries can be dropped instead of failing the batch
    ids: list[Any] = []
    action: str

    @field_validator("action")
    @classmethod
    def check_action(cls, value: str) -> str:
        if value not in {a.value for a in BulkAction}:
            raise ValueError("Invalid action. Must be 'restore' or 'permanent_delete'.")
        return value


class BulkActionResponse(CamelModel):
    message: str
    action: str
    requested_count: int
    valid_count: int
    affected_count: int
