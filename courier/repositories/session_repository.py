from sqlalchemy import delete, select

from courier.models import UserSession
from courier.repositories.base import Repository


class SessionRepository(Repository):
    model = UserSession

    def get_by_access_token(self, access_token):
        statement = select(UserSession).where(UserSession.access_token == access_token)
        return self._read(statement).scalar_one_or_none()

    def delete_by_access_token(self, access_token):
        return self._execute_write(
            delete(UserSession).where(UserSession.access_token == access_token)
        )

    def delete_expired(self, now):
        return self._execute_write(delete(UserSession).where(UserSession.expires_at <= now))

    def delete_by_user(self, user_id):
        return self._execute_write(delete(UserSession).where(UserSession.user_id == user_id))
