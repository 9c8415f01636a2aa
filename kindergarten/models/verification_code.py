from datetime import timedelta
from kindergarten import db
from werkzeug.security import generate_password_hash, check_password_hash
from kindergarten.utils.helpers import utc_now

class VerificationCode(db.Model):
    __tablename__ = 'verification_codes'
    
    phone_number = db.Column(db.String(20), primary_key=True)
    code_hash = db.Column(db.String(255), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    verified = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utc_now)
    
    def set_code(self, code, ttl_minutes):
        self.code_hash = generate_password_hash(code)
        self.created_at = utc_now()
        self.expires_at = self.created_at + timedelta(minutes=ttl_minutes)
        self.verified = False
    
    def check_code(self, code):
        return check_password_hash(self.code_hash, code)
    
    def is_expired(self):
        return utc_now() >= self.expires_at
    
    def __repr__(self):
        return f'<VerificationCode {self.phone_number}>'
