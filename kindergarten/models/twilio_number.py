from kindergarten import db
from kindergarten.utils.helpers import utc_now, isoformat

class TwilioNumber(db.Model):
    __tablename__ = 'twilio_numbers'
    
    phone_number = db.Column(db.String(20), primary_key=True)
    sid = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(20), default='active')
    date_created = db.Column(db.DateTime, default=utc_now)
    
    def to_dict(self):
        return {
            'phoneNumber': self.phone_number,
            'sid': self.sid,
            'status': self.status,
            'dateCreated': isoformat(self.date_created),
        }
    
    def __repr__(self):
        return f'<TwilioNumber {self.phone_number}>'
