"""
Audit Log Service Layer

Recording of audited actions (used by other modules) and the
platform-admin read API over the log.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ResourceNotFoundError
from app.core.pagination import PageRequest, PaginatedResponse, build_page_meta, resolve_sort
from app.modules.audit_logs import repository
from app.modules.audit_logs.models import AuditLog
from app.modules.audit_logs.schemas import AuditLogFilters, AuditLogResponse
from app.modules.schools.guard import require_platform_admin

logger = logging.getLogger(__name__)


async def record(
    db: AsyncSession,
    user_id: str | None,
    action: str,
    resource_type: str,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AuditLog | None:
    """
    Record an audited action.

    Best effort: the action being audited has already been committed, so a
    failure to write the log is logged and does not fail the request. Only
    the savepoint holding the entry is rolled back.

    Returns:
        The created entry, or None if it could not be written
    """
    try:
        return await repository.create(
            db,
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to write audit log {action} on {resource_type}/{resource_id}: {e}")
        return None


async def list_audit_logs(
    db: AsyncSession,
    caller_id: str,
    filters: AuditLogFilters,
    page: PageRequest,
) -> PaginatedResponse[AuditLogResponse]:
    """
    Get a page of audit logs for platform administrators.

    Args:
        db: Database session
        caller_id: Authenticated user id
        filters: Optional user/action/resource/date filters
        page: Paging and sorting request

    Returns:
        PaginatedResponse of audit log entries

    Raises:
        ResourceNotFoundError: Caller account does not exist
        AccessForbiddenError: Caller is not a platform administrator
    """
    await require_platform_admin(db, caller_id)

    directive = page.to_directive()
    order = resolve_sort(
        page.sort_by, page.sort_order, repository.SORT_COLUMNS, repository.DEFAULT_SORT_FIELD
    )

    logger.info(
        f"Listing audit logs: caller={caller_id}, filters={filters.model_dump(exclude_none=True)}, "
        f"page={directive.page}, limit={directive.limit}, order={order}"
    )

    entries, total = await repository.list_logs(db, filters, directive, order)

    logger.info(f"Found {total} audit logs, returning {len(entries)}")

    return PaginatedResponse[AuditLogResponse](
        data=[AuditLogResponse.model_validate(entry) for entry in entries],
        pagination=build_page_meta(total, directive.page, directive.limit),
    )


async def get_audit_log(db: AsyncSession, caller_id: str, log_id: str) -> AuditLogResponse:
    """
    Get a single audit log entry.

    Raises:
        ResourceNotFoundError: Caller or entry does not exist
        AccessForbiddenError: Caller is not a platform administrator
    """
    await require_platform_admin(db, caller_id)

    entry = await repository.get_by_id(db, log_id)
    if entry is None:
        logger.warning(f"Audit log not found: {log_id}")
        raise ResourceNotFoundError("Audit log not found")

    return AuditLogResponse.model_validate(entry)
