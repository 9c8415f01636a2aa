import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from kindergarten.errors import ConflictError, InternalError, NotFoundError

logger = logging.getLogger(__name__)


class BaseRepository:
    """CRUD over one table, addressed by string document ID.

    The session is injected so that services can group several repository
    writes into a single transaction.
    """
    model = None
    entity_name = 'record'

    def __init__(self, session):
        self.session = session

    def query(self):
        return self.session.query(self.model)

    def find_all(self):
        return self._run('fetching', lambda: self.query().all())

    def get(self, id):
        """Like find_by_id but returns None for a missing record."""
        return self._run('fetching', lambda: self.session.get(self.model, id))

    def find_by_id(self, id):
        record = self.get(id)
        if record is None:
            raise NotFoundError(f'{self.entity_name.capitalize()} not found')
        return record

    def create(self, data):
        record = self.model(**data)
        self.session.add(record)
        self.commit('creating')
        return record

    def update(self, id, data):
        record = self.find_by_id(id)
        for key, value in data.items():
            setattr(record, key, value)
        self.commit('updating')
        return record

    def delete(self, id):
        record = self.find_by_id(id)
        self.session.delete(record)
        self.commit('deleting')
        return True

    def flush(self, op='updating'):
        self._run(op, self.session.flush)

    def commit(self, op='saving'):
        self._run(op, self.session.commit)

    def _run(self, op, action):
        try:
            return action()
        except StaleDataError:
            self.session.rollback()
            raise ConflictError(f'{self.entity_name.capitalize()} was modified concurrently, please retry')
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Error {op} {self.entity_name}: {e}")
            raise InternalError(f'Error {op} {self.entity_name}')
