from sqlalchemy import select

from courier.models import User
from courier.repositories.base import Repository


class UserRepository(Repository):
    model = User

    def get_by_email(self, email):
        return self._read(select(User).where(User.email == email)).scalar_one_or_none()
