"""
Auth Service
Login (credential check + session issue) and logout.
"""

import structlog

from courier.errors import (
    CourierError,
    InvalidAccessToken,
    InvalidCredentials,
    NotFound,
    SessionCreationFailed,
    SessionExpired,
    storage_errors,
)
from courier.services.user_service import normalize_email

logger = structlog.get_logger(__name__)

TOKEN_TYPE = "Bearer"


class AuthService:
    def __init__(self, users, sessions):
        self.users = users
        self.sessions = sessions

    def login(self, email, password):
        with storage_errors():
            user = self.users.get_by_email(normalize_email(email))

        # Same error for unknown email and wrong password
        if user is None or not user.check_password(password):
            logger.info("Login rejected")
            raise InvalidCredentials()

        try:
            session = self.sessions.create_session(user.id)
        except CourierError as e:
            logger.error("Session creation failed", user_id=user.id, error=e.message)
            raise SessionCreationFailed(detail=e.message) from e

        return {
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
            "expires_at": session.expires_at.isoformat(),
            "token_type": TOKEN_TYPE,
        }

    def logout(self, access_token):
        try:
            view = self.sessions.validate_session(access_token)
        except (NotFound, SessionExpired) as e:
            raise InvalidAccessToken() from e

        self.sessions.invalidate_session(access_token)
        logger.info("Logged out", user_id=view["user_id"])
