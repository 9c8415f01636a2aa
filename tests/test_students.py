from io import BytesIO
import pytest
from openpyxl import Workbook, load_workbook
from kindergarten import db
from kindergarten.errors import ConflictError, ValidationError
from kindergarten.models import ClassRoom, Student
from kindergarten.schemas import StudentCreate, StudentUpdate
from kindergarten.services.students import StudentService, extract_documents
from kindergarten.utils.excel import STUDENT_COLUMNS
from tests.conftest import student_payload

IMAGE_URI = 'data:image/png;base64,iVBORw0KGgo='


@pytest.fixture
def service(app, media):
    return StudentService(db.session)


def xlsx_upload(rows, filename='students.xlsx'):
    wb = Workbook()
    ws = wb.active
    ws.append([c[0] for c in STUDENT_COLUMNS])
    for row in rows:
        ws.append([row.get(c[2], '') for c in STUDENT_COLUMNS])
    stream = BytesIO()
    wb.save(stream)
    stream.seek(0)
    return {'file': (stream, filename)}


def test_extract_documents_reads_both_shapes():
    body = {'image': IMAGE_URI, 'studentDocument': {'birthCertificate': None}}

    assert extract_documents(body) == {'image': IMAGE_URI, 'birthCertificate': None}
    assert extract_documents({'name': 'x'}) == {}


def test_create_student_rejects_duplicate_id(service):
    service.create_student(StudentCreate.model_validate(student_payload('S001')))

    with pytest.raises(ConflictError) as exc:
        service.create_student(StudentCreate.model_validate(student_payload('S001', 'Other')))

    assert exc.value.message == 'Student ID already exists'


def test_create_student_uploads_data_uri_documents(service, media):
    student = service.create_student(StudentCreate.model_validate(student_payload('S001')),
                                     {'image': IMAGE_URI})

    assert media.uploads[0][0] == 'kindergarten/students/image'
    assert student.to_dict()['studentDocument']['image']['public_id'] == 'kindergarten/students/image/upload-1'
    assert student.to_dict()['studentDocument']['birthCertificate'] is None


def test_update_student_is_partial_and_keeps_id(service):
    student = service.create_student(StudentCreate.model_validate(student_payload('S001')))

    updated = service.update_student(student.id, StudentUpdate.model_validate({'school': 'Rainbow', 'studentID': 'S001'}))

    assert updated.school == 'Rainbow'
    assert updated.name == 'Alice Doe'
    assert updated.father_fullname == 'John Doe'

    with pytest.raises(ValidationError):
        service.update_student(student.id, StudentUpdate.model_validate({'studentID': 'S999'}))


def test_update_student_replaces_previous_upload(service, media, make_student):
    old = {'url': 'https://media.test/old', 'public_id': 'old-image'}
    student = make_student('S001', documents={'image': old})

    updated = service.update_student(student.id, StudentUpdate.model_validate({}), {'image': IMAGE_URI})

    assert updated.documents['image']['public_id'] != 'old-image'
    assert media.destroyed == ['old-image']


def test_invalid_data_uri_is_rejected(service, make_student):
    student = make_student('S001')

    with pytest.raises(ValidationError):
        service.update_student(student.id, StudentUpdate.model_validate({}), {'image': 'data:text/html;base64,AAAA'})


def test_delete_student_detaches_and_cleans_media(service, media, make_student, make_class):
    student = make_student('S001', documents={'image': {'url': 'u', 'public_id': 'img-1'},
                                              'birthCertificate': {'url': 'u', 'public_id': 'bc-1'}})
    make_student('S002')
    class_id = make_class('K1', ['S001', 'S002']).id

    service.delete_student(student.id)

    db.session.expire_all()
    assert Student.query.filter_by(student_id='S001').first() is None
    assert db.session.get(ClassRoom, class_id).students == ['S002']
    assert sorted(media.destroyed) == ['bc-1', 'img-1']


def test_delete_student_survives_media_failure(service, media, make_student):
    student = make_student('S001', documents={'image': {'url': 'u', 'public_id': 'img-1'}})
    media.fail_destroy = True

    assert service.delete_student(student.id) is True
    assert Student.query.count() == 0


def test_import_students_skips_bad_rows(client, make_student):
    make_student('S001')
    upload = xlsx_upload([
        student_payload('S002', 'Bea'),
        student_payload('S001', 'Copy'),
        student_payload('S003', 'Cal', gender='Unknown'),
        student_payload('', 'Nameless'),
    ])

    response = client.post('/api/student/import', data=upload, content_type='multipart/form-data')

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['count'] == 1
    assert [f['row'] for f in data['failed']] == [3, 4, 5]
    imported = Student.query.filter_by(student_id='S002').first()
    assert imported.grade_level == 1
    assert imported.class_name == 'K1'


def test_import_without_valid_rows_fails(client, make_student):
    make_student('S001')
    upload = xlsx_upload([student_payload('S001')])

    response = client.post('/api/student/import', data=upload, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json()['message'] == 'No valid student data found in the file'


def test_import_rejects_other_extensions(client):
    upload = {'file': (BytesIO(b'a,b'), 'students.csv')}

    response = client.post('/api/student/import', data=upload, content_type='multipart/form-data')

    assert response.status_code == 400


def test_export_json_filters_by_ids(client, make_student):
    make_student('S001', 'Amy')
    make_student('S002', 'Ben')

    response = client.post('/api/student/export/json', json={'studentIds': ['S002']})

    assert response.status_code == 200
    assert [s['studentID'] for s in response.get_json()['data']] == ['S002']


def test_export_json_rejects_non_object_body(client, make_student):
    make_student('S001', 'Amy')

    response = client.post('/api/student/export/json', json=['S001'])

    assert response.status_code == 400
    assert response.get_json()['message'] == 'Request body must be a JSON object'


def test_export_xlsx_returns_workbook(client, make_student):
    make_student('S001', 'Amy', documents={'image': {'url': 'https://media.test/a', 'public_id': 'a'}})

    response = client.get('/api/student/export/xlsx')

    assert response.status_code == 200
    assert response.mimetype.endswith('spreadsheetml.sheet')
    ws = load_workbook(BytesIO(response.data)).active
    assert ws.cell(row=1, column=1).value == 'Student ID'
    assert ws.cell(row=2, column=1).value == 'S001'
    assert ws.cell(row=2, column=len(STUDENT_COLUMNS) + 1).value == 'https://media.test/a'


def test_export_with_no_students_fails(client):
    assert client.get('/api/student/export/json').status_code == 400
    assert client.get('/api/student/export/pdf').status_code == 400


def test_student_routes_crud(client, media):
    created = client.post('/api/student', json=student_payload('S001'))
    assert created.status_code == 201
    student_id = created.get_json()['data']['id']

    assert client.post('/api/student', json=student_payload('S001')).status_code == 409

    updated = client.put(f'/api/student/{student_id}', json={'gradeLevel': 2})
    assert updated.get_json()['data']['gradeLevel'] == 2
    assert updated.get_json()['data']['name'] == 'Alice Doe'

    assert client.get('/api/student/search?term=alice').get_json()['data'][0]['studentID'] == 'S001'
    assert client.get('/api/student/search?term=').get_json()['data'] == []
    assert len(client.get('/api/student/class/K1').get_json()['data']) == 1

    assert client.delete(f'/api/student/{student_id}').status_code == 200
    assert client.get(f'/api/student/{student_id}').status_code == 404


def test_student_validation_errors(client):
    response = client.post('/api/student', json=student_payload('S001', dateOfBirth='2019-03-15'))

    assert response.status_code == 400
    body = response.get_json()
    assert body['success'] is False
    assert body['errors'][0]['field'] == 'dateOfBirth'
    assert body['errors'][0]['message'] == 'Date must be in format DD-MM-YYYY'


def test_upload_and_optimize(client, media):
    upload = {'file': (BytesIO(b'\x89PNG'), 'photo.png')}

    response = client.post('/api/student/upload', data=upload, content_type='multipart/form-data')

    assert response.status_code == 201
    assert response.get_json()['data']['public_id'] == 'kindergarten/students/photos/upload-1'

    optimized = client.get('/api/student/image/optimize?publicId=abc&width=200&height=100')
    assert optimized.get_json()['data']['url'] == \
        'https://res.cloudinary.com/demo/image/upload/q_auto,f_auto,w_200,h_100,c_fill/abc'
    assert client.get('/api/student/image/optimize').status_code == 400
