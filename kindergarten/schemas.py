"""
Request schemas for the JSON API (pydantic models).
Field aliases carry the camelCase wire names; attribute names are the
snake_case column names used by the repositories.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from kindergarten.utils.helpers import parse_date


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    def to_record(self, partial=False):
        """Column-named dict; a partial dump only carries fields the client sent."""
        return self.model_dump(exclude_unset=partial)


def _check_date(value, past_only=False):
    if value is None:
        return value
    parsed = parse_date(value)
    if past_only and parsed > date.today():
        raise ValueError('Date of birth cannot be in the future')
    return value


def _unique_ids(values):
    seen = set()
    for value in values:
        if value in seen:
            raise ValueError(f'Duplicate student ID: {value}')
        seen.add(value)
    return values


# Students
class DocumentRef(BaseModel):
    url: str = ''
    public_id: str = ''


class StudentCreate(WireModel):
    student_id: str = Field(..., alias='studentID', min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: str = Field(..., alias='dateOfBirth')
    gender: Literal['Male', 'Female', 'Other']
    father_fullname: str = Field(..., alias='fatherFullname', min_length=1, max_length=100)
    father_occupation: str = Field(..., alias='fatherOccupation', min_length=1, max_length=100)
    mother_fullname: str = Field(..., alias='motherFullname', min_length=1, max_length=100)
    mother_occupation: str = Field(..., alias='motherOccupation', min_length=1, max_length=100)
    grade_level: int = Field(..., alias='gradeLevel', ge=1)
    school: str = Field(..., min_length=1)
    class_name: str = Field(..., alias='class', min_length=1)
    education_system: str = Field(..., alias='educationSystem', min_length=1)
    parent_contact: Optional[str] = Field(None, alias='parentContact')

    @field_validator('date_of_birth')
    @classmethod
    def check_date_of_birth(cls, value):
        return _check_date(value, past_only=True)


class StudentUpdate(WireModel):
    student_id: Optional[str] = Field(None, alias='studentID', min_length=1)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    date_of_birth: Optional[str] = Field(None, alias='dateOfBirth')
    gender: Optional[Literal['Male', 'Female', 'Other']] = None
    father_fullname: Optional[str] = Field(None, alias='fatherFullname', max_length=100)
    father_occupation: Optional[str] = Field(None, alias='fatherOccupation', max_length=100)
    mother_fullname: Optional[str] = Field(None, alias='motherFullname', max_length=100)
    mother_occupation: Optional[str] = Field(None, alias='motherOccupation', max_length=100)
    grade_level: Optional[int] = Field(None, alias='gradeLevel', ge=1)
    school: Optional[str] = None
    class_name: Optional[str] = Field(None, alias='class')
    education_system: Optional[str] = Field(None, alias='educationSystem')
    parent_contact: Optional[str] = Field(None, alias='parentContact')

    @field_validator('date_of_birth')
    @classmethod
    def check_date_of_birth(cls, value):
        return _check_date(value, past_only=True)


# Teachers
class TeacherCreate(WireModel):
    teacher_id: str = Field(..., alias='teacherID', min_length=1)
    first_name: str = Field(..., alias='firstName', min_length=1, max_length=100)
    last_name: str = Field(..., alias='lastName', min_length=1, max_length=100)
    gender: Optional[Literal['Male', 'Female', 'Other']] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, alias='dateOfBirth')
    avatar: str = ''

    @field_validator('date_of_birth')
    @classmethod
    def check_date_of_birth(cls, value):
        return _check_date(value, past_only=True)


class TeacherUpdate(TeacherCreate):
    teacher_id: Optional[str] = Field(None, alias='teacherID', min_length=1)
    first_name: Optional[str] = Field(None, alias='firstName', min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, alias='lastName', min_length=1, max_length=100)


# Semesters
class SemesterCreate(WireModel):
    semester_name: str = Field(..., alias='semesterName', min_length=1)
    start_date: str = Field(..., alias='startDate')
    end_date: str = Field(..., alias='endDate')

    @field_validator('start_date', 'end_date')
    @classmethod
    def check_dates(cls, value):
        return _check_date(value)

    @model_validator(mode='after')
    def check_range(self):
        if parse_date(self.start_date) > parse_date(self.end_date):
            raise ValueError('Start date must not be after end date')
        return self


# Classes
class ClassDocument(WireModel):
    class_name: str = Field(..., alias='className', min_length=1)
    teacher_id: Optional[str] = Field(None, alias='teacherID')
    semester_id: Optional[str] = Field(None, alias='semesterID')
    students: List[str] = Field(default_factory=list)

    @field_validator('teacher_id', 'semester_id')
    @classmethod
    def blank_to_none(cls, value):
        return value or None

    @field_validator('students')
    @classmethod
    def check_students(cls, value):
        return _unique_ids(value)


class ClassTeacherChange(WireModel):
    teacher_id: Optional[str] = Field(None, alias='teacherID')

    @field_validator('teacher_id')
    @classmethod
    def blank_to_none(cls, value):
        return value or None


class ClassSemesterChange(WireModel):
    semester_id: str = Field(..., alias='semesterID', min_length=1)


class RosterChange(WireModel):
    student_ids: List[str] = Field(..., alias='studentIds', min_length=1)


class RosterTransfer(RosterChange):
    source_class_id: str = Field(..., alias='sourceClassId', min_length=1)
    target_class_id: str = Field(..., alias='targetClassId', min_length=1)


# News
class Subtitle(BaseModel):
    subtitle: str = ''
    content: str = ''
    image_url: Optional[str] = Field(None, alias='imageUrl')

    model_config = ConfigDict(populate_by_name=True)


class NewsCreate(WireModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    author: Optional[str] = None
    image_url: Optional[str] = Field(None, alias='imageUrl')
    subtitles: List[Subtitle] = Field(default_factory=list)

    def to_record(self, partial=False):
        record = super().to_record(partial)
        if 'subtitles' in record:
            record['subtitles'] = [s.model_dump(by_alias=True) for s in self.subtitles]
        return record


class NewsUpdate(NewsCreate):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1)


class ChatMessage(BaseModel):
    role: Literal['system', 'user', 'assistant']
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1)


# Accounts
SECRET_FIELDS = ('password', 'new_password')


class SecretModel(WireModel):
    """Passwords are kept verbatim; the other string fields are still trimmed."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False)

    @field_validator('*', mode='before')
    @classmethod
    def _trim(cls, value, info):
        if isinstance(value, str) and info.field_name not in SECRET_FIELDS:
            return value.strip()
        return value


class Credentials(SecretModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AccountCreate(SecretModel):
    username: str = Field(..., min_length=1, max_length=80)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., alias='fullName', min_length=1)
    role: Literal['admin', 'teacher', 'staff']
    phone_number: str = Field(..., alias='phoneNumber', min_length=1)
    actor: Optional[str] = None


class AccountUpdate(SecretModel):
    username: Optional[str] = Field(None, min_length=1, max_length=80)
    password: Optional[str] = Field(None, min_length=6)
    full_name: Optional[str] = Field(None, alias='fullName', min_length=1)
    role: Optional[Literal['admin', 'teacher', 'staff']] = None
    phone_number: Optional[str] = Field(None, alias='phoneNumber', min_length=1)
    actor: Optional[str] = None


class PhoneNumberRequest(WireModel):
    phone_number: str = Field(..., alias='phoneNumber', min_length=1)


class CodeCheck(PhoneNumberRequest):
    code: str = Field(..., pattern=r'^\d{6}$')


class PasswordReset(SecretModel):
    phone_number: str = Field(..., alias='phoneNumber', min_length=1)
    code: str = Field(..., pattern=r'^\d{6}$')
    new_password: str = Field(..., alias='newPassword', min_length=6)


# Twilio
class NumberSearch(WireModel):
    country_code: str = Field('US', alias='countryCode', min_length=2, max_length=2)
    area_code: Optional[str] = Field(None, alias='areaCode')


class NumberPurchase(PhoneNumberRequest):
    pass
