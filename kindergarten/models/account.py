from kindergarten import db
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from kindergarten.utils.helpers import new_id, utc_now

class Account(UserMixin, db.Model):
    __tablename__ = 'accounts'
    
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False)
    full_name = db.Column(db.String(100), nullable=False)
    phone_number = db.Column(db.String(20), index=True)
    actor = db.Column(db.String(50))
    created_at = db.Column(db.DateTime, default=utc_now)
    
    def set_password(self, password):
        self.password_hash = generate_password_hash(password)
    
    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
    
    def to_dict(self):
        """Sanitized view: the password hash never leaves the server."""
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'fullName': self.full_name,
            'phoneNumber': self.phone_number,
            'actor': self.actor,
        }
    
    def __repr__(self):
        return f'<Account {self.username}>'
