"""
Session Service
Issues, validates and invalidates login sessions.
"""

import structlog

from courier.clock import utcnow
from courier.errors import InvalidToken, NotFound, SessionExpired, storage_errors
from courier.models import UserSession
from courier.services import tokens

logger = structlog.get_logger(__name__)


class SessionService:
    def __init__(self, sessions, config, clock=utcnow):
        self.sessions = sessions
        self.config = config
        self.clock = clock

    def create_session(self, user_id):
        access_token, refresh_token = tokens.issue_token_pair(
            user_id, self.config.access_token_lifetime, self.config.refresh_token_lifetime
        )
        session = UserSession(
            user_id=user_id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=self.clock() + self.config.access_token_lifetime,
        )
        with storage_errors("session token already in use"):
            self.sessions.create(session)

        logger.info("Session issued", user_id=user_id, session_id=session.id,
                    expires_at=session.expires_at.isoformat())
        return session

    def validate_session(self, access_token):
        """
        Returns the session view for a live token.
        An expired session is deleted before SessionExpired is raised, so the
        next lookup for the same token fails with NotFound.
        """
        with storage_errors():
            session = self.sessions.get_by_access_token(access_token)
        if session is None:
            raise NotFound("user session not found")

        if session.is_expired(self.clock()):
            user_id, session_id = session.user_id, session.id
            with storage_errors():
                self.sessions.delete_by_access_token(access_token)
            logger.info("Session expired", user_id=user_id, session_id=session_id)
            raise SessionExpired()

        return session.to_view()

    def invalidate_session(self, access_token):
        with storage_errors():
            deleted = self.sessions.delete_by_access_token(access_token)
        if not deleted:
            raise NotFound("session not found")

    def cleanup_expired_sessions(self):
        with storage_errors():
            purged = self.sessions.delete_expired(self.clock())
        logger.info("Expired sessions purged", count=purged)
        return purged

    def authenticate(self, access_token):
        """
        Resolves a bearer token to a user id. The session record must be live
        and the token itself must verify; both must name the same user.
        """
        try:
            view = self.validate_session(access_token)
        except (NotFound, SessionExpired) as e:
            raise InvalidToken(detail=e.message) from e

        claims = tokens.verify_token(access_token)
        if claims[tokens.USER_ID_CLAIM] != view["user_id"]:
            raise InvalidToken(detail="token does not match session")
        return view["user_id"]
