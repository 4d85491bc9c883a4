# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check, root greeting and favicon endpoints
# - v1.py: Versioned API, mounted under /v1
# - not_found.py: Catch-all 404 page
#
# Each router is mounted in main.py. Submodules are imported directly
# (app.routers.health) so that importing app.exceptions stays cycle-free.
# =============================================================================
