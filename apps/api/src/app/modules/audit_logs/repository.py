"""
Audit Log Repository

Database operations for audit log entries.
"""

from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.pagination import PageDirective, SortOrder, order_by_clauses, paginate
from app.modules.audit_logs.models import AuditLog
from app.modules.audit_logs.schemas import AuditLogFilters
from app.modules.shared import normalize_uuid

# Fields clients may sort by, mapped to their columns
SORT_COLUMNS = {
    "created_at": AuditLog.created_at,
    "action": AuditLog.action,
    "resource_type": AuditLog.resource_type,
}
DEFAULT_SORT_FIELD = "created_at"


async def create(
    db: AsyncSession,
    *,
    user_id: str | None,
    action: str,
    resource_type: str,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AuditLog:
    """
    Create a new audit log entry.

    The insert runs in a savepoint, so a failed write leaves the rest of the
    session (and objects already loaded in it) untouched.
    """
    entry = AuditLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details,
    )

    async with db.begin_nested():
        db.add(entry)
    await db.commit()
    await db.refresh(entry)

    return entry


async def get_by_id(db: AsyncSession, log_id: str) -> AuditLog | None:
    """Get an audit log entry by ID."""
    log_id_str = normalize_uuid(log_id)
    if log_id_str is None:
        return None
    return await db.get(AuditLog, log_id_str)


def build_list_query(filters: AuditLogFilters) -> Select:
    """Build the filtered (unordered, unpaged) audit log query."""
    query = select(AuditLog)

    if filters.user_id:
        query = query.where(AuditLog.user_id == str(filters.user_id))

    if filters.action:
        query = query.where(AuditLog.action == filters.action)

    if filters.resource_type:
        query = query.where(AuditLog.resource_type == filters.resource_type)

    if filters.date_from:
        query = query.where(AuditLog.created_at >= filters.date_from)

    if filters.date_to:
        query = query.where(AuditLog.created_at <= filters.date_to)

    return query


async def list_logs(
    db: AsyncSession,
    filters: AuditLogFilters,
    directive: PageDirective,
    order: dict[str, SortOrder],
) -> tuple[list[AuditLog], int]:
    """
    Get one page of audit logs matching the filters.

    Returns:
        Tuple of (entries on the page, total count matching filters)
    """
    return await paginate(
        db,
        build_list_query(filters),
        directive,
        order_by_clauses(order, SORT_COLUMNS),
    )
