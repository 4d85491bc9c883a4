# =============================================================================
# lib/ - Infrastructure Clients
# =============================================================================
# - database.py: SQLAlchemy engine and connection pool
# - cache.py: optional Redis client
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.cache import create_cache_client
from lib.database import check_connection, create_db_engine

__all__ = [
    "check_connection",
    "create_cache_client",
    "create_db_engine",
]
