from kindergarten import db
from kindergarten.utils.helpers import new_id, utc_now, isoformat

class ClassRoom(db.Model):
    __tablename__ = 'classes'
    
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    class_name = db.Column(db.String(100), nullable=False, index=True)
    teacher_id = db.Column(db.String(50), index=True)
    semester_id = db.Column(db.String(32))
    students = db.Column(db.JSON, nullable=False, default=list)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now)
    
    __mapper_args__ = {'version_id_col': version}
    
    @property
    def student_count(self):
        return len(self.students or [])
    
    def to_dict(self):
        return {
            'id': self.id,
            'className': self.class_name,
            'teacherID': self.teacher_id,
            'semesterID': self.semester_id,
            'students': list(self.students or []),
            'studentCount': self.student_count,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
    
    def __repr__(self):
        return f'<ClassRoom {self.class_name}>'
