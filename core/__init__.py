# =============================================================================
# core/ - Core Building Blocks
# =============================================================================
# This package contains the pieces the HTTP layer is assembled from:
# - config/: layered configuration (defaults, file, environment)
# - response.py: uniform API response envelope
# - logging.py: log formatting, request-id context, log cleanup
# - state.py: shared application state handed to request handlers
#
# Routes and middleware live in app/, not here.
# =============================================================================
