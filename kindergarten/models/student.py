from kindergarten import db
from kindergarten.utils.helpers import new_id, utc_now, isoformat

DOCUMENT_FIELDS = ('image', 'birthCertificate', 'householdRegistration')

class Student(db.Model):
    __tablename__ = 'students'
    
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    student_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    date_of_birth = db.Column(db.String(10))
    gender = db.Column(db.String(10))
    father_fullname = db.Column(db.String(100))
    father_occupation = db.Column(db.String(100))
    mother_fullname = db.Column(db.String(100))
    mother_occupation = db.Column(db.String(100))
    grade_level = db.Column(db.Integer)
    school = db.Column(db.String(200))
    class_name = db.Column(db.String(100), index=True)
    education_system = db.Column(db.String(100))
    parent_contact = db.Column(db.String(20))
    documents = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=utc_now)
    updated_at = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)
    
    def document_public_ids(self):
        """public_ids of every uploaded document, for cleanup at the media host"""
        documents = self.documents or {}
        return [doc['public_id'] for doc in (documents.get(f) for f in DOCUMENT_FIELDS)
                if isinstance(doc, dict) and doc.get('public_id')]
    
    def to_dict(self):
        documents = self.documents or {}
        return {
            'id': self.id,
            'studentID': self.student_id,
            'name': self.name,
            'dateOfBirth': self.date_of_birth,
            'gender': self.gender,
            'fatherFullname': self.father_fullname,
            'fatherOccupation': self.father_occupation,
            'motherFullname': self.mother_fullname,
            'motherOccupation': self.mother_occupation,
            'gradeLevel': self.grade_level,
            'school': self.school,
            'class': self.class_name,
            'educationSystem': self.education_system,
            'parentContact': self.parent_contact,
            'studentDocument': {field: documents.get(field) for field in DOCUMENT_FIELDS},
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
    
    def __repr__(self):
        return f'<Student {self.student_id}>'
