"""
Audit Log Schemas

Pydantic schemas for audit log queries and responses.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class AuditLogFilters(BaseModel):
    """Optional filters for GET /audit-logs."""

    user_id: UUID | None = Field(None, description="Only actions by this user")
    action: str | None = Field(None, max_length=100, description="Exact action name")
    resource_type: str | None = Field(None, max_length=100, description="Exact resource type")
    date_from: datetime | None = Field(None, description="Created at or after")
    date_to: datetime | None = Field(None, description="Created at or before")


class AuditLogUser(BaseModel):
    """Summary of the user who performed the action."""

    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    email: str


class AuditLogResponse(BaseModel):
    """A single audit log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID | None = None
    action: str
    resource_type: str
    resource_id: str | None = None
    details: dict[str, Any] | None = None
    created_at: datetime
    user: AuditLogUser | None = None
