# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the DropBuddy API:
# - test_config_sections.py: section defaults, lenient merge, validation
# - test_config_loader.py: layered loading and precedence
# - test_response.py: response envelope and error taxonomy
# - test_logging.py: formatters, handlers, log cleanup
# - test_infrastructure.py: database pool, cache client, startup
# - test_api.py: HTTP endpoints through TestClient
#
# Run tests with: pytest
# =============================================================================
