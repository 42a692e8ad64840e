from sqlalchemy import delete, select

from courier.extensions import read_engine


class Repository:
    """
    Persistence for one model.

    Reads run against the replica engine, writes commit through the primary.
    Storage exceptions are rolled back and re-raised unchanged; services
    decide what they mean.
    """

    model = None

    def __init__(self, session, read_bind=read_engine):
        self.session = session
        self.read_bind = read_bind

    def _read(self, statement):
        return self.session.execute(statement, bind_arguments={"bind": self.read_bind()})

    def _commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _execute_write(self, statement):
        try:
            result = self.session.execute(statement)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return result.rowcount

    def create(self, instance):
        self.session.add(instance)
        self._commit()
        return instance

    def save(self, instance):
        self.session.add(instance)
        self._commit()
        return instance

    def get_by_id(self, id):
        return self._read(select(self.model).where(self.model.id == id)).scalar_one_or_none()

    def list(self, limit, offset):
        statement = select(self.model).order_by(self.model.id).limit(limit).offset(offset)
        return list(self._read(statement).scalars())

    def delete_by_id(self, id):
        return self._execute_write(delete(self.model).where(self.model.id == id))


class NamedRepository(Repository):
    def get_by_name(self, name):
        return self._read(select(self.model).where(self.model.name == name)).scalar_one_or_none()
