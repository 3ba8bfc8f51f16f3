# =============================================================================
# core/models/activity.py - Activity Log Schemas
# =============================================================================
# Entries of the activity_logs table. Admin actions, logins and public
# contact submissions are recorded here and shown in the admin log viewer.
# =============================================================================

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field


class LogContext(str, Enum):
    """Where an action originated."""
    PUBLIC = "public"
    ADMIN = "admin"
    SYSTEM = "system"


class ActivityLogEntry(BaseModel):
    """
    A new activity log row.

    Example:
        {
            "action": "blog_post_updated",
            "context": "admin",
            "user_email": "owner@ds-capture.de",
            "entity_type": "blog_post",
            "entity_id": "42",
            "metadata": {"slug": "hochzeit-in-den-alpen"}
        }
    """

    action: str = Field(..., min_length=1)
    description: str | None = None
    context: LogContext = LogContext.ADMIN
    user_id: str | None = None
    user_email: str | None = None
    entity_type: str | None = None
    entity_id: str | None = None
    metadata: dict[str, Any] | None = None

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(mode="json")
        row["context"] = self.context.value
        return row


class ActivityLogRecord(BaseModel):
    """A stored activity log row as shown in the log viewer."""

    id: str | int
    created_at: datetime
    action: str
    description: str | None = None
    context: LogContext | None = None
    user_id: str | None = None
    user_email: str | None = None
    entity_type: str | None = None
    entity_id: str | int | None = None
    metadata: Any = None

    @computed_field
    @property
    def metadata_text(self) -> str:
        """Pretty-printed metadata, also used for full-text filtering."""
        if self.metadata is None:
            return ""
        return json.dumps(self.metadata, indent=2, ensure_ascii=False)

    def search_haystack(self) -> str:
        parts = [
            self.action,
            self.description or "",
            self.user_email or "",
            self.user_id or "",
            self.entity_type or "",
            str(self.entity_id) if self.entity_id is not None else "",
            self.metadata_text,
        ]
        return "\n".join(parts).lower()


class ActivityLogList(BaseModel):
    logs: list[ActivityLogRecord] = Field(default_factory=list)
    total: int = 0
