import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    InvalidFormatError,
    NotFoundError,
    ValidationError,
)
from app.models.report import Report
from app.schemas.auth import IdentityClaim
from app.schemas.report import BulkAction, ReportCreate
from app.schemas.user import Role
from app.services import user_profile_service

logger = logging.getLogger(__name__)


def parse_report_id(raw: str) -> UUID:
    try:
        return UUID(str(raw))
    except (TypeError, ValueError):
        raise InvalidFormatError("Invalid ID format.", field="id")


def parse_report_ids(raw_ids: Iterable[object]) -> list[UUID]:
    """Keep the well-formed ids, logging and dropping the rest."""
    valid: list[UUID] = []
    for raw in raw_ids:
        if not isinstance(raw, str):
            logger.warning("Dropping non-string report id from batch: %r", raw)
            continue
        try:
            report_id = UUID(raw)
        except ValueError:
            logger.warning("Dropping malformed report id from batch: %r", raw)
            continue
        if report_id not in valid:
            valid.append(report_id)
    return valid


async def get_report(db: AsyncSession, report_id: UUID) -> Report | None:
    result = await db.execute(select(Report).where(Report.id == report_id))
    return result.scalar_one_or_none()


async def create_report(db: AsyncSession, data: ReportCreate) -> Report:
    report = Report(
        name=data.name,
        facebook_link=data.facebook_link,
        phone=data.phone,
        status=data.status,
        reason=data.reason,
        reporter_id=data.reporter_id,
        reporter_name=data.reporter_name,
        timestamp=datetime.now(timezone.utc),
    )
    db.add(report)
    await db.commit()
    await db.refresh(report)
    logger.info("Report %s submitted by %s", report.id, report.reporter_id)
    return report


async def trash_report(
    db: AsyncSession, claim: IdentityClaim, report_id: UUID
) -> tuple[Report, bool]:
    """
    Move a report to the trash on behalf of its reporter.
    Only callers whose profile role is exactly ``user`` may do this.
    Returns (report, changed).
    """
    profile = await user_profile_service.get_profile_by_uid(db, claim.uid)
    if profile is None:
        raise AuthorizationError("Forbidden: profile not found")
    if profile.role != Role.user.value:
        raise AuthorizationError("Forbidden: only regular users can move their reports to trash.")

    report = await get_report(db, report_id)
    if report is None:
        raise NotFoundError("User report not found.")
    if report.reporter_id != claim.uid:
        raise AuthorizationError("Forbidden: you can only delete reports you submitted.")

    if report.is_trashed:
        return report, False

    report.deleted_at = datetime.now(timezone.utc)
    report.deleted_by = claim.uid
    await db.commit()
    await db.refresh(report)
    logger.info("Report %s moved to trash by %s", report_id, claim.uid)
    return report, True


async def delete_report_permanently(db: AsyncSession, report_id: UUID) -> None:
    """Admin delete that ignores the trash state."""
    result = await db.execute(delete(Report).where(Report.id == report_id))
    if result.rowcount == 0:
        raise NotFoundError("User report not found.")
    await db.commit()
    logger.info("Report %s permanently deleted", report_id)


async def restore_report(db: AsyncSession, report_id: UUID) -> bool:
    """
    Clear the trash markers. Only trashed reports match, so a concurrent or
    repeated restore updates nothing. Returns whether a row changed.
    """
    result = await db.execute(
        update(Report)
        .where(Report.id == report_id, Report.deleted_at.is_not(None))
        .values(deleted_at=None, deleted_by=None)
    )
    if result.rowcount == 0:
        if await get_report(db, report_id) is None:
            raise NotFoundError("User report not found.")
        return False
    await db.commit()
    logger.info("Report %s restored from trash", report_id)
    return True


async def purge_trashed_report(db: AsyncSession, report_id: UUID) -> None:
    result = await db.execute(
        delete(Report).where(Report.id == report_id, Report.deleted_at.is_not(None))
    )
    if result.rowcount == 0:
        raise NotFoundError("Report not found in trash.")
    await db.commit()
    logger.info("Report %s purged from trash", report_id)


async def bulk_action(
    db: AsyncSession, raw_ids: list[object], action: str
) -> tuple[int, int]:
    """
    Apply ``action`` to every trashed report in the batch with one statement.
    Returns (valid_id_count, affected_count).
    """
    report_ids = parse_report_ids(raw_ids)
    if not report_ids:
        raise ValidationError("No valid report IDs provided.", field="ids")

    in_trash = (Report.id.in_(report_ids), Report.deleted_at.is_not(None))
    if action == BulkAction.restore.value:
        statement = update(Report).where(*in_trash).values(deleted_at=None, deleted_by=None)
    elif action == BulkAction.permanent_delete.value:
        statement = delete(Report).where(*in_trash)
    else:
        raise ValidationError("Invalid action. Must be 'restore' or 'permanent_delete'.")

    result = await db.execute(statement)
    await db.commit()
    logger.info(
        "Bulk %s affected %d of %d reports", action, result.rowcount, len(report_ids)
    )
    return len(report_ids), result.rowcount
