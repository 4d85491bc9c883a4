# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Cached access to the resolved configuration
# - exceptions.py: Error taxonomy and envelope conversion
# - middleware/: Request id, request logging, unhandled errors
# - routers/: Health, root, v1 and 404 endpoints
# - auth/: User registration
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to services and the core/ package.
# =============================================================================
