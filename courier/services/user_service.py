"""
User Service
Registration, lookup and email changes for user accounts.
"""

import structlog

from courier.errors import AccessDenied, Conflict, NotFound, storage_errors
from courier.models import User
from courier.validators import USER_CREATE_RULES, USER_UPDATE_RULES, validate

logger = structlog.get_logger(__name__)


def normalize_email(email):
    return (email or "").strip().lower()


class UserService:
    def __init__(self, users, sessions):
        self.users = users
        self.sessions = sessions

    def create_user(self, payload):
        data = validate(payload, USER_CREATE_RULES)
        email = normalize_email(data["email"])

        with storage_errors():
            existing = self.users.get_by_email(email)
        if existing is not None:
            raise Conflict(f"user with email '{email}' already exists")

        user = User(email=email)
        user.set_password(data["password"])
        with storage_errors(f"user with email '{email}' already exists"):
            self.users.create(user)

        logger.info("User registered", user_id=user.id)
        return user

    def get_user(self, user_id):
        with storage_errors():
            user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("user not found", detail=f"user with ID {user_id} not found")
        return user

    def get_user_by_email(self, email):
        with storage_errors():
            user = self.users.get_by_email(normalize_email(email))
        if user is None:
            raise NotFound("user not found")
        return user

    def list_users(self, limit, offset):
        with storage_errors():
            return self.users.list(limit, offset)

    def update_user_email(self, user_id, payload):
        """Changes the email; the current password must be supplied."""
        if isinstance(payload, dict):
            payload = dict(payload, id=user_id)
        data = validate(payload, USER_UPDATE_RULES)
        user = self.get_user(data["id"])

        if not user.check_password(data["password"]):
            raise AccessDenied("password verification failed")

        email = normalize_email(data["email"])
        if email != user.email:
            with storage_errors():
                existing = self.users.get_by_email(email)
            if existing is not None and existing.id != user.id:
                raise Conflict(f"user with email '{email}' already exists")
            user.email = email

        with storage_errors(f"user with email '{email}' already exists"):
            self.users.save(user)
        return user

    def delete_user(self, user_id):
        """Deletes the account; its sessions go with it so its tokens stop working."""
        user = self.get_user(user_id)
        with storage_errors():
            ended = self.sessions.delete_by_user(user.id)
            self.users.delete_by_id(user.id)
        logger.info("User deleted", user_id=user_id, sessions_ended=ended)
