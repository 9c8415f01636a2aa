import re
import pytest
from config import TestingConfig
from kindergarten import create_app, db
from kindergarten.errors import UpstreamError
from kindergarten.models import Account, ClassRoom, Semester, Student, Teacher


def student_payload(student_id='S001', name='Alice Doe', **overrides):
    payload = {
        'studentID': student_id,
        'name': name,
        'dateOfBirth': '15-03-2019',
        'gender': 'Female',
        'fatherFullname': 'John Doe',
        'fatherOccupation': 'Engineer',
        'motherFullname': 'Jane Doe',
        'motherOccupation': 'Doctor',
        'gradeLevel': 1,
        'school': 'Sunshine Kindergarten',
        'class': 'K1',
        'educationSystem': 'National',
    }
    payload.update(overrides)
    return payload


class FakeMediaHost:

    def __init__(self):
        self.uploads = []
        self.destroyed = []
        self.fail_destroy = False

    def upload(self, file, folder, resource_type='auto'):
        public_id = f'{folder}/upload-{len(self.uploads) + 1}'
        self.uploads.append((folder, file))
        return {'url': f'https://media.test/{public_id}', 'public_id': public_id}

    def destroy(self, public_id, resource_type='image'):
        if self.fail_destroy:
            raise UpstreamError('Media host request failed')
        self.destroyed.append(public_id)
        return True


class FakeSmsClient:

    def __init__(self):
        self.messages = []
        self.fail = False
        self.purchased = []

    def send_sms(self, to_number, body):
        if self.fail:
            raise UpstreamError('SMS provider request failed')
        self.messages.append((to_number, body))
        return 'SM123'

    def last_code(self):
        return re.search(r'\d{6}', self.messages[-1][1]).group(0)

    def search_numbers(self, country_code, area_code=None, limit=10):
        return ['+15005550001', '+15005550002']

    def purchase_number(self, phone_number):
        self.purchased.append(phone_number)
        return {'phone_number': phone_number, 'sid': 'PN123'}


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def media(monkeypatch):
    host = FakeMediaHost()
    monkeypatch.setattr('kindergarten.services.students.get_media_host', lambda: host)
    return host


@pytest.fixture
def sms(monkeypatch):
    sms_client = FakeSmsClient()
    monkeypatch.setattr('kindergarten.services.auth.get_sms_client', lambda: sms_client)
    monkeypatch.setattr('kindergarten.routes.twilio.get_sms_client', lambda: sms_client)
    return sms_client


@pytest.fixture
def make_student(app):
    def _make(student_id, name=None, documents=None, **fields):
        student = Student(student_id=student_id, name=name or f'Student {student_id}',
                          documents=documents or {}, **fields)
        db.session.add(student)
        db.session.commit()
        return student
    return _make


@pytest.fixture
def make_class(app):
    def _make(class_name, students=(), teacher_id=None, semester_id=None):
        class_room = ClassRoom(class_name=class_name, students=list(students),
                               teacher_id=teacher_id, semester_id=semester_id)
        db.session.add(class_room)
        db.session.commit()
        return class_room
    return _make


@pytest.fixture
def make_teacher(app):
    def _make(teacher_id, first_name='Mary', last_name='Smith'):
        teacher = Teacher(teacher_id=teacher_id, first_name=first_name, last_name=last_name)
        db.session.add(teacher)
        db.session.commit()
        return teacher
    return _make


@pytest.fixture
def make_semester(app):
    def _make(semester_name='Fall 2024', start_date='01-09-2024', end_date='31-12-2024'):
        semester = Semester(semester_name=semester_name, start_date=start_date, end_date=end_date)
        db.session.add(semester)
        db.session.commit()
        return semester
    return _make


@pytest.fixture
def make_account(app):
    def _make(username='admin', password='secret123', role='admin', phone_number='+15550001111'):
        account = Account(username=username, role=role, full_name=username.title(), phone_number=phone_number)
        account.set_password(password)
        db.session.add(account)
        db.session.commit()
        return account
    return _make
