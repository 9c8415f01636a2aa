"""Class roster consistency rules.

A student ID appears on at most one class roster at a time. Every roster
mutation that touches more than one class row runs inside a single database
transaction; class rows carry a version counter so a write based on a stale
read is rejected instead of silently overwriting a concurrent change.
"""
import logging
from pydantic import ValidationError as SchemaValidationError
from kindergarten.errors import AppError, ConflictError, NotFoundError, ValidationError
from kindergarten.repositories import ClassRepository, SemesterRepository, StudentRepository, TeacherRepository
from kindergarten.schemas import ClassDocument

logger = logging.getLogger(__name__)


def _dedupe(ids):
    unique = []
    for i in ids:
        if i not in unique:
            unique.append(i)
    return unique


class RosterService:

    def __init__(self, session):
        self.session = session
        self.classes = ClassRepository(session)
        self.students = StudentRepository(session)
        self.teachers = TeacherRepository(session)
        self.semesters = SemesterRepository(session)

    # -- class records -------------------------------------------------

    def get_all_classes(self):
        return self.classes.find_all()

    def get_class(self, class_id):
        return self.classes.find_by_id(class_id)

    def find_classes_by_name(self, class_name):
        return self.classes.find_by_name(class_name)

    def find_classes_by_teacher(self, teacher_id):
        return self.classes.find_by_teacher_id(teacher_id)

    def create_class(self, record):
        self._check_references(record.get('teacher_id'), record.get('semester_id'))
        roster = record.get('students') or []
        self._ensure_students_exist(roster)
        self._ensure_unassigned(roster)
        class_room = self.classes.create(record)
        logger.info(f"Created class {class_room.class_name} ({class_room.id}) with {class_room.student_count} students")
        return class_room

    def replace_class(self, class_id, record):
        """Full-document replace: every field comes from ``record``."""
        class_room = self.classes.find_by_id(class_id)
        self._check_references(record.get('teacher_id'), record.get('semester_id'))
        roster = record.get('students') or []
        self._ensure_students_exist(roster)
        self._ensure_unassigned(roster, exclude_id=class_room.id)

        class_room.class_name = record['class_name']
        class_room.teacher_id = record.get('teacher_id')
        class_room.semester_id = record.get('semester_id')
        class_room.students = list(roster)
        self.classes.stamp(class_room)
        self.classes.commit('updating')
        return class_room

    def delete_class(self, class_id):
        return self.classes.delete(class_id)

    def import_classes(self, items):
        imported = []
        failed = []
        for item in items:
            try:
                record = ClassDocument.model_validate(item).to_record()
                imported.append(self.create_class(record))
            except SchemaValidationError as e:
                failed.append({'data': item, 'errors': '; '.join(err['msg'] for err in e.errors())})
            except AppError as e:
                failed.append({'data': item, 'errors': e.message})
        return {
            'imported': len(imported),
            'failed': len(failed),
            'details': {
                'successful': [c.to_dict() for c in imported],
                'errors': failed
            }
        }

    # -- roster operations ---------------------------------------------

    def add_students(self, class_id, student_ids):
        class_room = self.classes.find_by_id(class_id)
        student_ids = _dedupe(student_ids)
        if not student_ids:
            raise ValidationError('No students selected')

        self._ensure_students_exist(student_ids)
        roster = list(class_room.students or [])
        overlap = [sid for sid in student_ids if sid in roster]
        if overlap:
            raise ConflictError(f'Some selected students are already in this class: {self._describe(overlap)}')
        self._ensure_unassigned(student_ids, exclude_id=class_room.id)

        self._write(lambda: self.classes.set_roster(class_room, roster + student_ids))
        logger.info(f"Added {len(student_ids)} students to class {class_room.id}")
        return class_room

    def remove_students(self, class_id, student_ids):
        class_room = self.classes.find_by_id(class_id)
        removing = set(student_ids)
        remaining = [sid for sid in class_room.students or [] if sid not in removing]
        if len(remaining) != class_room.student_count:
            self._write(lambda: self.classes.set_roster(class_room, remaining))
            logger.info(f"Removed students from class {class_room.id}, {len(remaining)} remain")
        return class_room

    def transfer_students(self, source_class_id, target_class_id, student_ids):
        if source_class_id == target_class_id:
            raise ValidationError('Source and target class must be different')
        source = self.classes.find_by_id(source_class_id)
        target = self.classes.find_by_id(target_class_id)
        student_ids = _dedupe(student_ids)
        if not student_ids:
            raise ValidationError('No students selected')

        source_roster = list(source.students or [])
        target_roster = list(target.students or [])
        already = [sid for sid in student_ids if sid in target_roster]
        if already:
            raise ConflictError(f'Some selected students are already in the target class: {self._describe(already)}')
        missing = [sid for sid in student_ids if sid not in source_roster]
        if missing:
            raise ValidationError(f'Some selected students are not in the current class: {", ".join(missing)}')

        moving = set(student_ids)

        def write_both():
            self.classes.set_roster(source, [sid for sid in source_roster if sid not in moving])
            self.classes.set_roster(target, target_roster + student_ids)

        self._write(write_both)
        logger.info(f"Transferred {len(student_ids)} students from class {source.id} to {target.id}")
        return source, target

    def update_class_teacher(self, class_id, teacher_id):
        class_room = self.classes.find_by_id(class_id)
        if teacher_id is not None and self.teachers.find_by_teacher_id(teacher_id) is None:
            raise NotFoundError(f'No teacher found with ID: {teacher_id}')
        class_room.teacher_id = teacher_id
        self.classes.stamp(class_room)
        self.classes.commit('updating')
        logger.info(f"Class {class_room.id} teacher set to {teacher_id}")
        return class_room

    def change_semester(self, class_id, semester_id):
        class_room = self.classes.find_by_id(class_id)
        self.semesters.find_by_id(semester_id)
        class_room.semester_id = semester_id
        self.classes.stamp(class_room)
        self.classes.commit('updating')
        logger.info(f"Class {class_room.id} moved to semester {semester_id}")
        return class_room

    def detach_student(self, student_id):
        """Drop a student from whichever roster holds it; the caller commits."""
        owner = self.classes.find_containing([student_id]).get(student_id)
        if owner is not None:
            self.classes.set_roster(owner, [sid for sid in owner.students if sid != student_id])
        return owner

    # -- helpers -------------------------------------------------------

    def _write(self, action):
        try:
            action()
            self.classes.commit('updating')
        except Exception:
            self.session.rollback()
            logger.error("Roster update failed, transaction rolled back")
            raise

    def _check_references(self, teacher_id, semester_id):
        if teacher_id and self.teachers.find_by_teacher_id(teacher_id) is None:
            raise NotFoundError(f'No teacher found with ID: {teacher_id}')
        if semester_id and self.semesters.get(semester_id) is None:
            raise NotFoundError('Semester not found')

    def _ensure_students_exist(self, student_ids):
        if not student_ids:
            return
        found = {s.student_id for s in self.students.find_by_student_ids(student_ids)}
        missing = [sid for sid in student_ids if sid not in found]
        if missing:
            raise NotFoundError(f'Students not found: {", ".join(missing)}')

    def _ensure_unassigned(self, student_ids, exclude_id=None):
        owners = self.classes.find_containing(student_ids, exclude_id=exclude_id)
        if owners:
            taken = ', '.join(f'{self._describe([sid])} is already in class {owner.class_name}'
                              for sid, owner in owners.items())
            raise ConflictError(f'Students already assigned to another class: {taken}')

    def _describe(self, student_ids):
        names = {s.student_id: s.name for s in self.students.find_by_student_ids(student_ids)}
        return ', '.join(f'{names[sid]} ({sid})' if sid in names else sid for sid in student_ids)
