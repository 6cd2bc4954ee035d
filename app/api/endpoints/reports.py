from typing import Any

from fastapi import APIRouter, status

from app.api.deps import CurrentAdmin, CurrentClaim, DbSession, ListQuery
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.report import (
    ReportCreate,
    ReportResponse,
    ReportStatus,
    ReportSubmitResponse,
)
from app.services import report_service
from app.services.query_service import REPORTS, ListParams, fetch_paginated

router = APIRouter(prefix="", tags=["reports"])


async def list_active_reports(
    db, base_filter: dict[str, Any], params: ListParams
) -> dict[str, Any]:
    params.include_deleted = False
    page = await fetch_paginated(db, REPORTS, base_filter, params)
    return page.to_envelope(ReportResponse.model_validate)


@router.post(
    "/userReports",
    response_model=ReportSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    response_model_exclude_none=True,
)
async def submit_report(report_data: ReportCreate, db: DbSession) -> ReportSubmitResponse:
    """Submit a moderation report about a user. No authentication required."""
    report = await report_service.create_report(db, report_data)
    return ReportSubmitResponse(
        message="User report submitted successfully!",
        inserted_id=report.id,
        data=ReportResponse.model_validate(report),
    )


@router.get(
    "/userReports",
    response_model=PaginatedResponse[ReportResponse],
    response_model_exclude_none=True,
)
async def list_user_reports(db: DbSession, params: ListQuery) -> dict[str, Any]:
    return await list_active_reports(db, {}, params)


@router.get(
    "/allUserReports",
    response_model=PaginatedResponse[ReportResponse],
    response_model_exclude_none=True,
)
async def list_all_user_reports(db: DbSession, params: ListQuery) -> dict[str, Any]:
    return await list_active_reports(db, {}, params)


@router.get(
    "/suspendedUsers",
    response_model=PaginatedResponse[ReportResponse],
    response_model_exclude_none=True,
)
async def list_suspended_users(db: DbSession, params: ListQuery) -> dict[str, Any]:
    return await list_active_reports(db, {"status": ReportStatus.suspended.value}, params)


@router.get(
    "/bannedUsers",
    response_model=PaginatedResponse[ReportResponse],
    response_model_exclude_none=True,
)
async def list_banned_users(db: DbSession, params: ListQuery) -> dict[str, Any]:
    return await list_active_reports(db, {"status": ReportStatus.banned.value}, params)


@router.delete("/userReports/{report_id}", response_model=MessageResponse)
async def trash_own_report(
    report_id: str,
    claim: CurrentClaim,
    db: DbSession,
) -> MessageResponse:
    """Move a report to the trash. Only its reporter, with the plain user role, may do this."""
    parsed_id = report_service.parse_report_id(report_id)
    _, changed = await report_service.trash_report(db, claim, parsed_id)
    if not changed:
        return MessageResponse(message="Report is already in trash. No changes made.")
    return MessageResponse(message="User report moved to trash successfully.")


@router.delete("/admin/userReports/{report_id}", response_model=MessageResponse)
async def admin_delete_report(
    report_id: str,
    admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    """Permanently delete a report whether or not it is in the trash (admin only)."""
    parsed_id = report_service.parse_report_id(report_id)
    await report_service.delete_report_permanently(db, parsed_id)
    return MessageResponse(message="User report permanently deleted.")
