from typing import Any

from fastapi import APIRouter

from app.api.deps import CurrentAdmin, DbSession, ListQuery
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.report import BulkAction, BulkActionRequest, BulkActionResponse, ReportResponse
from app.services import report_service
from app.services.query_service import REPORTS, fetch_paginated

router = APIRouter(prefix="/trashedReports", tags=["trash"])


@router.get(
    "",
    response_model=PaginatedResponse[ReportResponse],
    response_model_exclude_none=True,
)
async def list_trashed_reports(
    admin: CurrentAdmin,
    db: DbSession,
    params: ListQuery,
) -> dict[str, Any]:
    """List reports currently in the trash (admin only)."""
    params.include_deleted = True
    page = await fetch_paginated(db, REPORTS, {}, params)
    return page.to_envelope(ReportResponse.model_validate)


@router.patch("/{report_id}/restore", response_model=MessageResponse)
async def restore_report(
    report_id: str,
    admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    parsed_id = report_service.parse_report_id(report_id)
    changed = await report_service.restore_report(db, parsed_id)
    if not changed:
        return MessageResponse(message="Report not found in trash. No changes made.")
    return MessageResponse(message="Report restored successfully.")


@router.delete("/{report_id}/permanent", response_model=MessageResponse)
async def purge_report(
    report_id: str,
    admin: CurrentAdmin,
    db: DbSession,
) -> MessageResponse:
    parsed_id = report_service.parse_report_id(report_id)
    await report_service.purge_trashed_report(db, parsed_id)
    return MessageResponse(message="Report permanently deleted from trash.")


@router.post("/bulk-action", response_model=BulkActionResponse)
async def bulk_action(
    body: BulkActionRequest,
    admin: CurrentAdmin,
    db: DbSession,
) -> BulkActionResponse:
    """
    Restore or permanently delete many trashed reports at once (admin only).

    Malformed ids are dropped from the batch; the request only fails when
    none of the ids are usable.
    """
    valid_count, affected = await report_service.bulk_action(db, body.ids, body.action)

    if body.action == BulkAction.restore.value:
        message = f"{affected} report(s) restored."
    else:
        message = f"{affected} report(s) permanently deleted."

    return BulkActionResponse(
        message=message,
        action=body.action,
        requested_count=len(body.ids),
        valid_count=valid_count,
        affected_count=affected,
    )
