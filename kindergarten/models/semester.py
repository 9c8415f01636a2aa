from kindergarten import db
from kindergarten.utils.helpers import new_id, utc_now

class Semester(db.Model):
    __tablename__ = 'semesters'
    
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    semester_name = db.Column(db.String(100), nullable=False, index=True)
    start_date = db.Column(db.String(10), nullable=False)
    end_date = db.Column(db.String(10), nullable=False)
    created_at = db.Column(db.DateTime, default=utc_now)
    
    def to_dict(self):
        return {
            'id': self.id,
            'semesterName': self.semester_name,
            'startDate': self.start_date,
            'endDate': self.end_date,
        }
    
    def __repr__(self):
        return f'<Semester {self.semester_name}>'
