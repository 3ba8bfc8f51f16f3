# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the DS_Capture API:
# - conftest.py: in-memory Supabase fixtures and test clients
# - test_<service>.py: unit tests per service in core/services
# - test_api.py: requests through the FastAPI app
#
# Run tests with: pytest
# =============================================================================
