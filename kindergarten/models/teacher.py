from kindergarten import db
from kindergarten.utils.helpers import new_id, utc_now, isoformat

class Teacher(db.Model):
    __tablename__ = 'teachers'
    
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    teacher_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    gender = db.Column(db.String(10))
    phone = db.Column(db.String(20))
    date_of_birth = db.Column(db.String(10))
    avatar = db.Column(db.String(500), default='')
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)
    
    @property
    def full_name(self):
        return f'{self.last_name} {self.first_name}'.strip()
    
    def to_dict(self):
        return {
            'id': self.id,
            'teacherID': self.teacher_id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'fullName': self.full_name,
            'gender': self.gender,
            'phone': self.phone,
            'dateOfBirth': self.date_of_birth,
            'avatar': self.avatar or '',
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
    
    def __repr__(self):
        return f'<Teacher {self.teacher_id}>'
