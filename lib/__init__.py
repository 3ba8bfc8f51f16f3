# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client singletons and query execution
# - utils.py: Slugs, upload file names, text and date helpers
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found_error
from lib.utils import build_upload_path, create_slug, subtract_months

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    "is_not_found_error",
    # Utils
    "build_upload_path",
    "create_slug",
    "subtract_months",
]
