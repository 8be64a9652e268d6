"""
Audit Logs Router

Read-only API over the audit log for platform administrators.

Endpoints:
- GET /audit-logs - List audit log entries (filtered, paginated)
- GET /audit-logs/{id} - Get a single audit log entry

Security:
- Requires a valid access token
- Caller must hold the super admin or system admin global role
- List requests are rate limited per caller
"""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.pagination import PageRequest, PaginatedResponse, page_query
from app.core.rate_limit import list_rate_limit
from app.core.responses import ApiResponse
from app.modules.audit_logs import service
from app.modules.audit_logs.schemas import AuditLogFilters, AuditLogResponse

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[PaginatedResponse[AuditLogResponse]],
    summary="List Audit Logs",
    description="""
List audit log entries, newest first by default.

**Filters:** `userId`, `action`, `resourceType`, `dateFrom`, `dateTo`

**Sorting:** `sortBy` one of `created_at`, `action`, `resource_type`;
unknown fields fall back to `created_at`.

**Paging:** `page` (default 1) and `limit` (default 10, max 100).
Malformed values are defaulted, never rejected.
""",
    responses={
        403: {"description": "Caller is not a platform administrator"},
        404: {"description": "Caller account not found"},
        429: {"description": "Rate limit exceeded"},
    },
    dependencies=[Depends(list_rate_limit)],
)
async def list_audit_logs(
    user_id: UUID | None = Query(None, alias="userId"),
    action: str | None = Query(None, max_length=100),
    resource_type: str | None = Query(None, alias="resourceType", max_length=100),
    date_from: datetime | None = Query(None, alias="dateFrom"),
    date_to: datetime | None = Query(None, alias="dateTo"),
    page: PageRequest = Depends(page_query),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PaginatedResponse[AuditLogResponse]]:
    filters = AuditLogFilters(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        date_from=date_from,
        date_to=date_to,
    )
    result = await service.list_audit_logs(db, current_user.id, filters, page)
    return ApiResponse.ok(result, "Audit logs retrieved successfully")


@router.get(
    "/{log_id}",
    response_model=ApiResponse[AuditLogResponse],
    summary="Get Audit Log",
    responses={
        403: {"description": "Caller is not a platform administrator"},
        404: {"description": "Caller account or audit log not found"},
    },
)
async def get_audit_log(
    log_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[AuditLogResponse]:
    """Get a single audit log entry by ID."""
    entry = await service.get_audit_log(db, current_user.id, str(log_id))
    return ApiResponse.ok(entry, "Audit log retrieved successfully")
