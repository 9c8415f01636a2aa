from kindergarten.models import Semester
from kindergarten.repositories.base import BaseRepository


class SemesterRepository(BaseRepository):
    model = Semester
    entity_name = 'semester'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(Semester.created_at).all())

    def find_by_name(self, semester_name):
        return self._run('fetching', lambda: self.query().filter_by(semester_name=semester_name).all())
