from kindergarten.models.student import Student
from kindergarten.models.teacher import Teacher
from kindergarten.models.classroom import ClassRoom
from kindergarten.models.semester import Semester
from kindergarten.models.news import News
from kindergarten.models.account import Account
from kindergarten.models.verification_code import VerificationCode
from kindergarten.models.twilio_number import TwilioNumber

__all__ = [
    'Student', 'Teacher', 'ClassRoom', 'Semester', 'News',
    'Account', 'VerificationCode', 'TwilioNumber'
]
