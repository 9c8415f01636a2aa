from sqlalchemy import or_
from kindergarten.models import Student
from kindergarten.repositories.base import BaseRepository


class StudentRepository(BaseRepository):
    model = Student
    entity_name = 'student'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(Student.name).all())

    def find_by_student_id(self, student_id):
        return self._run('fetching', lambda: self.query().filter_by(student_id=student_id).first())

    def find_by_student_ids(self, student_ids):
        if not student_ids:
            return []
        return self._run('fetching', lambda: self.query().filter(Student.student_id.in_(student_ids)).all())

    def find_by_class(self, class_name):
        return self._run('fetching', lambda: self.query().filter_by(class_name=class_name).order_by(Student.name).all())

    def search(self, term):
        if not term:
            return []
        pattern = f'%{term}%'
        return self._run('searching', lambda: self.query().filter(or_(
            Student.name.ilike(pattern),
            Student.student_id.ilike(pattern),
            Student.father_fullname.ilike(pattern),
            Student.mother_fullname.ilike(pattern),
            Student.class_name.ilike(pattern),
            Student.school.ilike(pattern),
        )).order_by(Student.name).limit(50).all())

    def existing_student_ids(self):
        return {row[0] for row in self._run('fetching', lambda: self.session.query(Student.student_id).all())}

    def add_all(self, records):
        students = [Student(**record) for record in records]
        self.session.add_all(students)
        self.commit('importing')
        return students
