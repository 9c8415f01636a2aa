from sqlalchemy import or_
from kindergarten.models import Teacher
from kindergarten.repositories.base import BaseRepository


class TeacherRepository(BaseRepository):
    model = Teacher
    entity_name = 'teacher'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(Teacher.last_name, Teacher.first_name).all())

    def find_by_teacher_id(self, teacher_id):
        return self._run('fetching', lambda: self.query().filter_by(teacher_id=teacher_id).first())

    def search(self, term):
        if not term:
            return self.find_all()
        pattern = f'%{term}%'
        return self._run('searching', lambda: self.query().filter(or_(
            Teacher.first_name.ilike(pattern),
            Teacher.last_name.ilike(pattern),
            Teacher.teacher_id.ilike(pattern),
        )).order_by(Teacher.last_name, Teacher.first_name).all())
