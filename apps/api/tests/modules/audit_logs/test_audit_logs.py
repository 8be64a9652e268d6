"""
Unit and API tests for the audit log module.

These tests cover:
- Best-effort recording of audited actions
- Platform-admin only listing with filters, paging and sorting
- Single entry lookup
- The HTTP boundary for both endpoints
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import AccessForbiddenError, ResourceNotFoundError
from app.core.pagination import PageDirective, PageRequest
from app.modules.audit_logs.models import AuditLog
from app.modules.audit_logs.repository import build_list_query
from app.modules.audit_logs.schemas import AuditLogFilters
from app.modules.audit_logs.service import get_audit_log, list_audit_logs, record

SERVICE = "app.modules.audit_logs.service"


@pytest.fixture
def sample_audit_log(caller_id):
    """Create a sample audit log entry."""
    entry = MagicMock(spec=AuditLog)
    entry.id = str(uuid4())
    entry.user_id = caller_id
    entry.action = "student.status_updated"
    entry.resource_type = "student"
    entry.resource_id = str(uuid4())
    entry.details = {"previous_status": "active", "status": "graduated"}
    entry.created_at = datetime(2026, 3, 2, 8, 30, tzinfo=UTC)
    entry.user = None
    return entry


class TestRecord:
    """Tests for record."""

    @pytest.mark.asyncio
    async def test_writes_entry(self, mock_db, caller_id):
        entry = await record(
            mock_db,
            caller_id,
            "student.status_updated",
            "student",
            resource_id="abc",
            details={"status": "inactive"},
        )

        added = mock_db.add.call_args.args[0]
        assert isinstance(added, AuditLog)
        assert added.user_id == caller_id
        assert added.action == "student.status_updated"
        assert added.details == {"status": "inactive"}
        mock_db.begin_nested.assert_called_once()
        mock_db.commit.assert_awaited_once()
        assert entry is added

    @pytest.mark.asyncio
    async def test_database_failure_is_not_raised(self, mock_db, caller_id):
        mock_db.commit = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("down")))

        entry = await record(mock_db, caller_id, "student.status_updated", "student")

        assert entry is None
        mock_db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_insert_only_rolls_back_savepoint(self, mock_db, caller_id):
        """A failed insert is confined to its savepoint; the session is not rolled back."""
        savepoint = MagicMock()
        savepoint.__aexit__ = AsyncMock(
            side_effect=OperationalError("INSERT", {}, Exception("no such table"))
        )
        mock_db.begin_nested = MagicMock(return_value=savepoint)

        entry = await record(mock_db, caller_id, "student.status_updated", "student")

        assert entry is None
        savepoint.__aexit__.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
        mock_db.rollback.assert_not_awaited()


class TestListAuditLogs:
    """Tests for list_audit_logs."""

    @pytest.mark.asyncio
    async def test_admin_gets_page(self, mock_db, caller_id, sample_audit_log):
        filters = AuditLogFilters(action="student.status_updated")

        with (
            patch(f"{SERVICE}.require_platform_admin", AsyncMock()) as mock_guard,
            patch(
                f"{SERVICE}.repository.list_logs",
                AsyncMock(return_value=([sample_audit_log], 1)),
            ) as mock_list,
        ):
            result = await list_audit_logs(
                mock_db, caller_id, filters, PageRequest.from_raw("1", "1000", "action", "asc")
            )

        mock_guard.assert_awaited_once_with(mock_db, caller_id)
        args = mock_list.await_args.args
        assert args[1] is filters
        assert args[2] == PageDirective(page=1, limit=100, skip=0, take=100)
        assert args[3] == {"action": "asc"}
        assert result.data[0].action == "student.status_updated"
        assert result.pagination.total_records == 1
        assert result.pagination.total_pages == 1

    @pytest.mark.asyncio
    async def test_unknown_sort_field_uses_created_at(self, mock_db, caller_id):
        with (
            patch(f"{SERVICE}.require_platform_admin", AsyncMock()),
            patch(f"{SERVICE}.repository.list_logs", AsyncMock(return_value=([], 0))) as mock_list,
        ):
            await list_audit_logs(
                mock_db, caller_id, AuditLogFilters(), PageRequest(sort_by="details")
            )

        assert mock_list.await_args.args[3] == {"created_at": "desc"}

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, mock_db, caller_id):
        with (
            patch(
                f"{SERVICE}.require_platform_admin",
                AsyncMock(side_effect=AccessForbiddenError("Admin access required")),
            ),
            patch(f"{SERVICE}.repository.list_logs", AsyncMock()) as mock_list,
        ):
            with pytest.raises(AccessForbiddenError):
                await list_audit_logs(mock_db, caller_id, AuditLogFilters(), PageRequest())

        mock_list.assert_not_called()


class TestGetAuditLog:
    """Tests for get_audit_log."""

    @pytest.mark.asyncio
    async def test_found(self, mock_db, caller_id, sample_audit_log):
        with (
            patch(f"{SERVICE}.require_platform_admin", AsyncMock()),
            patch(f"{SERVICE}.repository.get_by_id", AsyncMock(return_value=sample_audit_log)),
        ):
            result = await get_audit_log(mock_db, caller_id, sample_audit_log.id)

        assert str(result.id) == sample_audit_log.id
        assert result.details["status"] == "graduated"

    @pytest.mark.asyncio
    async def test_missing(self, mock_db, caller_id):
        with (
            patch(f"{SERVICE}.require_platform_admin", AsyncMock()),
            patch(f"{SERVICE}.repository.get_by_id", AsyncMock(return_value=None)),
        ):
            with pytest.raises(ResourceNotFoundError) as exc_info:
                await get_audit_log(mock_db, caller_id, str(uuid4()))

        assert exc_info.value.message == "Audit log not found"


class TestBuildListQuery:
    """Tests for the filtered audit log query."""

    def test_no_filters(self):
        assert "WHERE" not in str(build_list_query(AuditLogFilters()))

    def test_all_filters(self):
        filters = AuditLogFilters(
            user_id=uuid4(),
            action="student.status_updated",
            resource_type="student",
            date_from=datetime(2026, 1, 1, tzinfo=UTC),
            date_to=datetime(2026, 2, 1, tzinfo=UTC),
        )

        sql = str(build_list_query(filters))

        assert "audit_logs.user_id =" in sql
        assert "audit_logs.action =" in sql
        assert "audit_logs.resource_type =" in sql
        assert "audit_logs.created_at >=" in sql
        assert "audit_logs.created_at <=" in sql


class TestAuditLogEndpoints:
    """Tests for GET /audit-logs and GET /audit-logs/{id}."""

    def test_list(self, client, sample_audit_log):
        with (
            patch(f"{SERVICE}.require_platform_admin", AsyncMock()),
            patch(
                f"{SERVICE}.repository.list_logs",
                AsyncMock(return_value=([sample_audit_log], 1)),
            ) as mock_list,
        ):
            response = client.get(
                "/api/v1/audit-logs",
                params={"action": "student.status_updated", "resourceType": "student"},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["data"]["data"][0]["resource_type"] == "student"
        assert body["data"]["pagination"]["totalRecords"] == 1

        filters = mock_list.await_args.args[1]
        assert filters.action == "student.status_updated"
        assert filters.resource_type == "student"

    def test_list_forbidden(self, client):
        with patch(
            f"{SERVICE}.require_platform_admin",
            AsyncMock(side_effect=AccessForbiddenError("Admin access required")),
        ):
            response = client.get("/api/v1/audit-logs")

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"

    def test_get_missing(self, client):
        with (
            patch(f"{SERVICE}.require_platform_admin", AsyncMock()),
            patch(f"{SERVICE}.repository.get_by_id", AsyncMock(return_value=None)),
        ):
            response = client.get(f"/api/v1/audit-logs/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"
