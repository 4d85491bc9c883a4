# =============================================================================
# app/auth/service.py - Authentication Business Logic
# =============================================================================
# Separates HTTP concerns from database/business logic. Registration is a
# stub for now: it validates the name and echoes it back without writing
# a user row.
# =============================================================================

import logging

from sqlalchemy.engine import Engine

from app.exceptions import InputValidationError
from core.state import AppState

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 64


class AuthService:
    """
    Service for user registration.

    Built per request from the shared state via from_state().
    """

    def __init__(self, db: Engine):
        self.db = db

    @classmethod
    def from_state(cls, state: AppState) -> "AuthService":
        return cls(db=state.db)

    def register_user(self, username: str) -> str:
        """
        Register a user.

        Args:
            username: requested user name; surrounding whitespace is ignored

        Returns:
            The registered user name

        Raises:
            InputValidationError: blank or over-long name
        """
        name = username.strip()
        if not name:
            raise InputValidationError("Username must not be empty", field="username")
        if len(name) > MAX_USERNAME_LENGTH:
            raise InputValidationError(
                f"Username must be at most {MAX_USERNAME_LENGTH} characters",
                field="username",
            )

        logger.info(f"Registered user: {name}")
        return name
