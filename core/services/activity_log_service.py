# =============================================================================
# core/services/activity_log_service.py - Activity Log
# =============================================================================
# Writes and reads the activity_logs table.
#
# Writing never raises: an audit entry that cannot be stored must not turn a
# successful content change into an error response.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from app.config import settings
from core.models.activity import ActivityLogEntry, ActivityLogRecord, LogContext
from core.models.common import Actor

logger = logging.getLogger(__name__)

TABLE = "activity_logs"
COLUMNS = "id, created_at, action, description, context, user_id, user_email, entity_type, entity_id, metadata"


class ActivityLogService:
    """Service for recording and browsing user actions."""

    @staticmethod
    def log_action(
        action: str,
        actor: Actor | None = None,
        context: LogContext = LogContext.ADMIN,
        description: str | None = None,
        entity_type: str | None = None,
        entity_id: str | int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Record an action.

        Args:
            action: Machine-readable action name, e.g. "blog_post_updated"
            actor: Who did it (None for anonymous visitors)
            context: public, admin or system
            description: Human-readable summary
            entity_type: Kind of record affected, e.g. "blog_post"
            entity_id: Id or slug of the affected record
            metadata: Extra JSON details
        """
        entry = ActivityLogEntry(
            action=action,
            description=description,
            context=context,
            user_id=actor.id if actor else None,
            user_email=actor.email if actor else None,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            metadata=metadata,
        )

        try:
            client = SupabaseClient.get_client()
            client.table(TABLE).insert(entry.to_row()).execute()
            logger.debug(f"Activity logged: {action}")
        except Exception as e:
            logger.warning(f"Failed to write activity log '{action}': {e}")

    @staticmethod
    def list_logs(
        context: LogContext | None = None,
        query: str | None = None,
        limit: int | None = None,
    ) -> list[ActivityLogRecord]:
        """
        Fetch the newest log entries, optionally filtered.

        Filtering happens after the fetch, over at most ACTIVITY_LOG_LIMIT
        entries, the same window the log viewer shows.
        """
        client = SupabaseClient.get_client()
        limit = min(limit or settings.ACTIVITY_LOG_LIMIT, settings.ACTIVITY_LOG_LIMIT)

        rows = SupabaseClient.execute(
            client.table(TABLE)
            .select(COLUMNS)
            .order("created_at", desc=True)
            .limit(limit),
            "list activity logs",
        )

        logs = [ActivityLogRecord(**row) for row in rows]
        return ActivityLogService.filter_logs(logs, context, query)

    @staticmethod
    def filter_logs(
        logs: list[ActivityLogRecord],
        context: LogContext | None = None,
        query: str | None = None,
    ) -> list[ActivityLogRecord]:
        """
        Filter by context, then by case-insensitive substring search over
        action, description, user, entity and metadata.
        """
        needle = (query or "").strip().lower()
        result = []

        for log in logs:
            if context is not None and log.context != context:
                continue
            if needle and needle not in log.search_haystack():
                continue
            result.append(log)

        return result
