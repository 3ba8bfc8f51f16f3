# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the Supabase clients used by the service layer.
# It implements the singleton pattern to reuse a single client connection:
# - service client (service_role key) for table and storage operations
# - auth client (anon key) for password sign-in and password reset mails
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   rows = client.table("posts").select("*").execute().data
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from app.exceptions import DatabaseError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matched
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase client setup.

    Carries a code and a suggestion so startup failures point at the
    misconfigured setting.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_not_found_error(error: Exception | str) -> bool:
    """Check whether a Supabase error means "no rows matched"."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Holder for the shared Supabase clients.

    All methods are class methods for easy access without instantiation.
    Services call get_client() and build queries with the fluent API.
    """

    _instance: Client | None = None
    _auth_instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def get_auth_client(cls) -> Client:
        """
        Get or create the anon-key client used for Supabase Auth calls.

        Kept separate from the service client so a password sign-in never
        replaces the service_role session used for table access.
        """
        if cls._auth_instance is None:
            try:
                cls._auth_instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_ANON_KEY
                )
                logger.info("Supabase auth client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase auth client: {e}",
                    code="AUTH_CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_ANON_KEY in your .env file"
                )
        return cls._auth_instance

    # -------------------------------------------------------------------------
    # Query Execution
    # -------------------------------------------------------------------------

    @classmethod
    def execute(cls, query: Any, operation: str) -> list[dict[str, Any]]:
        """
        Execute a built query and return its rows.

        Args:
            query: A postgrest request builder (select/insert/update/...)
            operation: Short description for logs and errors

        Returns:
            List of row dicts (empty when nothing matched)

        Raises:
            DatabaseError: If the request fails

        Example:
            rows = SupabaseClient.execute(
                client.table("posts").select("*").eq("status", "published"),
                "list published posts",
            )
        """
        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Supabase query failed ({operation}): {e}")
            raise DatabaseError(operation, str(e))

        data = response.data if response is not None else None
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return data

    @classmethod
    def execute_one(cls, query: Any, operation: str) -> dict[str, Any] | None:
        """
        Execute a query expected to match at most one row.

        Works with .single() (PGRST116 becomes None) and .maybe_single().
        """
        try:
            rows = cls.execute(query, operation)
        except DatabaseError as e:
            if is_not_found_error(e.details.get("error", "")):
                return None
            raise
        return rows[0] if rows else None

    @classmethod
    def reset(cls) -> None:
        """Drop cached clients (used by tests and after config changes)."""
        cls._instance = None
        cls._auth_instance = None
