import logging
from pydantic import ValidationError as SchemaValidationError
from kindergarten.errors import ConflictError, ValidationError
from kindergarten.repositories import ClassRepository, TeacherRepository
from kindergarten.schemas import TeacherCreate
from kindergarten.utils.helpers import utc_now

logger = logging.getLogger(__name__)


class TeacherService:

    def __init__(self, session):
        self.session = session
        self.teachers = TeacherRepository(session)
        self.classes = ClassRepository(session)

    def create_teacher(self, payload):
        record = payload.to_record()
        if self.teachers.find_by_teacher_id(record['teacher_id']):
            raise ConflictError('Teacher ID already exists')
        teacher = self.teachers.create(record)
        logger.info(f"Created teacher {teacher.teacher_id}")
        return teacher

    def update_teacher(self, id, payload):
        """Partial update. A new teacherID is carried over to every class that points at the old one."""
        teacher = self.teachers.find_by_id(id)
        record = {k: v for k, v in payload.to_record(partial=True).items() if v is not None}
        old_teacher_id = teacher.teacher_id
        new_teacher_id = record.get('teacher_id', old_teacher_id)
        assigned = []
        if new_teacher_id != old_teacher_id:
            if self.teachers.find_by_teacher_id(new_teacher_id):
                raise ConflictError('Teacher ID already exists')
            assigned = self.classes.find_by_teacher_id(old_teacher_id)

        for key, value in record.items():
            setattr(teacher, key, value)
        for class_room in assigned:
            class_room.teacher_id = new_teacher_id
            self.classes.stamp(class_room)
        self.teachers.commit('updating')
        if assigned:
            logger.info(f"Teacher {old_teacher_id} renamed to {new_teacher_id} on {len(assigned)} classes")
        return teacher

    def delete_teacher(self, id):
        """Delete a teacher and unassign it from its classes in the same transaction."""
        teacher = self.teachers.find_by_id(id)
        teacher_id = teacher.teacher_id
        assigned = self.classes.find_by_teacher_id(teacher_id)
        for class_room in assigned:
            class_room.teacher_id = None
            self.classes.stamp(class_room)
        self.session.delete(teacher)
        self.teachers.commit('deleting')
        logger.info(f"Deleted teacher {teacher_id}, unassigned from {len(assigned)} classes")
        return True

    def import_teachers(self, items):
        if not isinstance(items, list):
            raise ValidationError('Invalid request format. Expected an array of teachers.')
        if not items:
            raise ValidationError('No teacher data provided.')

        seen = set()
        successful = []
        errors = []
        duplicates = 0
        for item in items:
            teacher_id = item.get('teacherID') if isinstance(item, dict) else None
            if teacher_id and (teacher_id in seen or self.teachers.find_by_teacher_id(teacher_id)):
                duplicates += 1
                errors.append({'teacherID': teacher_id, 'error': 'Teacher ID already exists'})
                continue
            try:
                record = TeacherCreate.model_validate(item).to_record()
            except SchemaValidationError as e:
                errors.append({'teacherID': teacher_id, 'error': '; '.join(err['msg'] for err in e.errors())})
                continue
            successful.append(self.teachers.create(record))
            seen.add(teacher_id)

        results = {
            'imported': len(successful),
            'failed': len(errors) - duplicates,
            'duplicates': duplicates,
            'details': {
                'successful': [t.to_dict() for t in successful],
                'errors': errors
            }
        }
        if not successful:
            raise ValidationError(
                'Failed to import teachers: ' + '; '.join(f"{e['teacherID']}: {e['error']}" for e in errors),
                errors=errors
            )
        logger.info(f"Imported {len(successful)} teachers, {duplicates} duplicates, {results['failed']} failed")
        return results

    def print_data(self, search_term=''):
        teachers = self.teachers.search(search_term)
        return {
            'teachers': [t.to_dict() for t in teachers],
            'generatedAt': utc_now().isoformat(),
            'totalCount': len(teachers)
        }
