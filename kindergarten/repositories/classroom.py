from kindergarten.models import ClassRoom
from kindergarten.repositories.base import BaseRepository
from kindergarten.utils.helpers import utc_now


class ClassRepository(BaseRepository):
    model = ClassRoom
    entity_name = 'class'

    def find_all(self):
        return self._run('fetching', lambda: self.query().order_by(ClassRoom.class_name).all())

    def find_by_name(self, class_name):
        return self._run('fetching', lambda: self.query().filter_by(class_name=class_name).all())

    def find_by_teacher_id(self, teacher_id):
        return self._run('fetching', lambda: self.query().filter_by(teacher_id=teacher_id).all())

    def membership_query(self):
        """All classes, read FOR UPDATE.

        Roster writes check membership against every class, so the rows are
        locked until the transaction ends and concurrent checks run one after
        the other. SQLite has no row locks and ignores the clause; there the
        version counter only catches writers of the same class.
        """
        return self.query().order_by(ClassRoom.class_name).with_for_update()

    def find_containing(self, student_ids, exclude_id=None):
        """Map each of ``student_ids`` found on a roster to the class holding it."""
        wanted = set(student_ids)
        owners = {}
        for class_room in self._run('fetching', self.membership_query().all):
            if class_room.id == exclude_id:
                continue
            for student_id in class_room.students or []:
                if student_id in wanted:
                    owners[student_id] = class_room
        return owners

    def set_roster(self, class_room, student_ids):
        """Write a new roster without committing; the caller owns the transaction."""
        class_room.students = list(student_ids)
        class_room.updated_at = utc_now()
        self.flush('updating')
        return class_room

    def stamp(self, class_room):
        class_room.updated_at = utc_now()
