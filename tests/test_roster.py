import pytest
from sqlalchemy import text
from kindergarten import db
from kindergarten.errors import ConflictError, InternalError, NotFoundError, ValidationError
from kindergarten.models import ClassRoom
from kindergarten.services.roster import RosterService


@pytest.fixture
def service(app):
    return RosterService(db.session)


@pytest.fixture
def students(make_student):
    return [make_student(sid, name) for sid, name in
            [('s1', 'Amy'), ('s2', 'Ben'), ('s3', 'Cleo'), ('s4', 'Dan')]]


def rosters():
    db.session.expire_all()
    return {c.class_name: list(c.students) for c in ClassRoom.query.all()}


def assert_single_membership():
    seen = {}
    for class_name, roster in rosters().items():
        for student_id in roster:
            assert student_id not in seen, f'{student_id} is on {seen[student_id]} and {class_name}'
            seen[student_id] = class_name


def test_add_students_appends_in_request_order(service, students, make_class):
    c1 = make_class('C1', ['s1'])

    service.add_students(c1.id, ['s3', 's2', 's3'])

    assert rosters()['C1'] == ['s1', 's3', 's2']
    assert_single_membership()


def test_add_student_already_in_class_is_rejected(service, students, make_class):
    c1 = make_class('C1', ['s1', 's2'])

    with pytest.raises(ConflictError) as exc:
        service.add_students(c1.id, ['s2'])

    assert 'already in this class' in exc.value.message
    assert 'Ben (s2)' in exc.value.message
    assert rosters()['C1'] == ['s1', 's2']


def test_add_student_from_another_class_is_rejected(service, students, make_class):
    c1 = make_class('C1', ['s1'])
    make_class('C2', ['s2'])

    with pytest.raises(ConflictError) as exc:
        service.add_students(c1.id, ['s3', 's2'])

    assert 'C2' in exc.value.message
    assert rosters() == {'C1': ['s1'], 'C2': ['s2']}


def test_add_unknown_student_is_not_found(service, students, make_class):
    c1 = make_class('C1')

    with pytest.raises(NotFoundError):
        service.add_students(c1.id, ['s1', 'ghost'])

    assert rosters()['C1'] == []


def test_add_requires_students_and_existing_class(service, students, make_class):
    c1 = make_class('C1')

    with pytest.raises(ValidationError):
        service.add_students(c1.id, [])
    with pytest.raises(NotFoundError):
        service.add_students('missing', ['s1'])


def test_remove_students_is_idempotent(service, students, make_class):
    c1 = make_class('C1', ['s1', 's2', 's3'])

    service.remove_students(c1.id, ['s2', 'ghost'])
    assert rosters()['C1'] == ['s1', 's3']

    service.remove_students(c1.id, ['s2', 'ghost'])
    assert rosters()['C1'] == ['s1', 's3']


def test_remove_from_missing_class_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.remove_students('missing', ['s1'])


def test_transfer_moves_students_and_repeat_conflicts(service, students, make_class):
    c1 = make_class('C1', ['s1', 's2'])
    c2 = make_class('C2', [])

    source, target = service.transfer_students(c1.id, c2.id, ['s1'])

    assert source.students == ['s2']
    assert target.students == ['s1']
    assert rosters() == {'C1': ['s2'], 'C2': ['s1']}

    with pytest.raises(ConflictError) as exc:
        service.transfer_students(c1.id, c2.id, ['s1'])

    assert 'already in the target class' in exc.value.message
    assert rosters() == {'C1': ['s2'], 'C2': ['s1']}
    assert_single_membership()


def test_transfer_rejects_same_class(service, students, make_class):
    c1 = make_class('C1', ['s1'])

    with pytest.raises(ValidationError):
        service.transfer_students(c1.id, c1.id, ['s1'])


def test_transfer_rejects_students_not_in_source(service, students, make_class):
    c1 = make_class('C1', ['s1'])
    c2 = make_class('C2', [])

    with pytest.raises(ValidationError) as exc:
        service.transfer_students(c1.id, c2.id, ['s1', 's3'])

    assert 'not in the current class' in exc.value.message
    assert rosters() == {'C1': ['s1'], 'C2': []}


def test_transfer_requires_both_classes(service, students, make_class):
    c1 = make_class('C1', ['s1'])

    with pytest.raises(NotFoundError):
        service.transfer_students(c1.id, 'missing', ['s1'])
    with pytest.raises(NotFoundError):
        service.transfer_students('missing', c1.id, ['s1'])


def test_transfer_failure_on_target_restores_source(service, students, make_class, monkeypatch):
    c1_id = make_class('C1', ['s1', 's2']).id
    c2_id = make_class('C2', ['s3']).id
    write_roster = service.classes.set_roster

    def fail_on_target(class_room, student_ids):
        if class_room.id == c2_id:
            raise InternalError('Error updating class')
        return write_roster(class_room, student_ids)

    monkeypatch.setattr(service.classes, 'set_roster', fail_on_target)

    with pytest.raises(InternalError):
        service.transfer_students(c1_id, c2_id, ['s1'])

    assert rosters() == {'C1': ['s1', 's2'], 'C2': ['s3']}
    assert_single_membership()


def test_stale_class_write_is_a_conflict(service, students, make_class):
    c1 = make_class('C1', ['s1'])
    service.get_class(c1.id)
    db.session.execute(text('UPDATE classes SET version = version + 1 WHERE id = :id'), {'id': c1.id})

    with pytest.raises(ConflictError) as exc:
        service.add_students(c1.id, ['s2'])

    assert 'modified concurrently' in exc.value.message
    assert rosters()['C1'] == ['s1']


def test_update_teacher_preserves_roster_and_semester(service, students, make_class, make_teacher, make_semester):
    make_teacher('T1')
    make_teacher('T2')
    semester = make_semester()
    c1 = make_class('C1', ['s1', 's2'], teacher_id='T1', semester_id=semester.id)

    class_room = service.update_class_teacher(c1.id, 'T2')

    assert class_room.teacher_id == 'T2'
    assert class_room.students == ['s1', 's2']
    assert class_room.semester_id == semester.id


def test_update_teacher_can_clear_and_rejects_unknown(service, make_class, make_teacher):
    make_teacher('T1')
    c1 = make_class('C1', teacher_id='T1')

    with pytest.raises(NotFoundError) as exc:
        service.update_class_teacher(c1.id, 'T9')
    assert exc.value.message == 'No teacher found with ID: T9'

    assert service.update_class_teacher(c1.id, None).teacher_id is None


def test_change_semester_preserves_other_fields(service, students, make_class, make_teacher, make_semester):
    make_teacher('T1')
    spring = make_semester('Spring 2025', '01-01-2025', '30-06-2025')
    c1 = make_class('C1', ['s1'], teacher_id='T1')

    class_room = service.change_semester(c1.id, spring.id)

    assert class_room.semester_id == spring.id
    assert class_room.class_name == 'C1'
    assert class_room.teacher_id == 'T1'
    assert class_room.students == ['s1']

    with pytest.raises(NotFoundError):
        service.change_semester(c1.id, 'missing')


def test_create_class_rejects_assigned_students(service, students, make_class):
    make_class('C1', ['s1'])

    with pytest.raises(ConflictError):
        service.create_class({'class_name': 'C2', 'teacher_id': None, 'semester_id': None, 'students': ['s1']})

    created = service.create_class({'class_name': 'C2', 'teacher_id': None, 'semester_id': None,
                                    'students': ['s2']})
    assert created.students == ['s2']
    assert_single_membership()


def test_replace_class_keeps_own_students(service, students, make_class):
    c1 = make_class('C1', ['s1', 's2'])
    make_class('C2', ['s3'])

    replaced = service.replace_class(c1.id, {'class_name': 'C1-renamed', 'teacher_id': None,
                                             'semester_id': None, 'students': ['s2', 's4']})
    assert replaced.students == ['s2', 's4']

    with pytest.raises(ConflictError):
        service.replace_class(c1.id, {'class_name': 'C1', 'teacher_id': None,
                                      'semester_id': None, 'students': ['s3']})
    assert_single_membership()


def test_detach_student_removes_from_roster(service, students, make_class):
    c1 = make_class('C1', ['s1', 's2'])

    owner = service.detach_student('s1')
    db.session.commit()

    assert owner.id == c1.id
    assert rosters()['C1'] == ['s2']
    assert service.detach_student('ghost') is None


def test_import_classes_reports_failures(service, students, make_class):
    make_class('C0', ['s1'])

    results = service.import_classes([
        {'className': 'C1', 'students': ['s2']},
        {'className': 'C2', 'students': ['s1']},
        {'students': ['s3']},
    ])

    assert results['imported'] == 1
    assert results['failed'] == 2
    assert len(results['details']['errors']) == 2
    assert_single_membership()
