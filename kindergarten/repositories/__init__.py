from kindergarten.repositories.account import AccountRepository, VerificationCodeRepository
from kindergarten.repositories.classroom import ClassRepository
from kindergarten.repositories.news import NewsRepository
from kindergarten.repositories.semester import SemesterRepository
from kindergarten.repositories.student import StudentRepository
from kindergarten.repositories.teacher import TeacherRepository

__all__ = [
    'AccountRepository', 'VerificationCodeRepository', 'ClassRepository',
    'NewsRepository', 'SemesterRepository', 'StudentRepository', 'TeacherRepository'
]
from kindergarten.repositories.twilio_number import TwilioNumberRepository
