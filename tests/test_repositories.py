import pytest
from sqlalchemy.dialects import postgresql
from kindergarten import db
from kindergarten.errors import InternalError, NotFoundError
from kindergarten.repositories import (AccountRepository, ClassRepository, NewsRepository, SemesterRepository,
                                       StudentRepository, TeacherRepository)


def test_find_by_id_raises_not_found(app):
    with pytest.raises(NotFoundError) as exc:
        StudentRepository(db.session).find_by_id('missing')

    assert exc.value.message == 'Student not found'
    assert StudentRepository(db.session).get('missing') is None


def test_create_update_delete(app):
    repo = SemesterRepository(db.session)

    semester = repo.create({'semester_name': 'Fall', 'start_date': '01-09-2024', 'end_date': '31-12-2024'})
    repo.update(semester.id, {'semester_name': 'Autumn'})

    assert repo.find_by_id(semester.id).semester_name == 'Autumn'
    assert [s.id for s in repo.find_by_name('Autumn')] == [semester.id]

    assert repo.delete(semester.id) is True
    with pytest.raises(NotFoundError):
        repo.delete(semester.id)


def test_persistence_failure_becomes_internal_error(app, make_student):
    make_student('S001')
    repo = StudentRepository(db.session)

    with pytest.raises(InternalError) as exc:
        repo.create({'student_id': 'S001', 'name': 'Copy'})

    assert exc.value.message == 'Error creating student'
    assert len(repo.find_all()) == 1


def test_student_finders(app, make_student):
    make_student('S001', 'Zoe', class_name='K1', father_fullname='Mark Ray')
    make_student('S002', 'Adam', class_name='K2')
    repo = StudentRepository(db.session)

    assert [s.name for s in repo.find_all()] == ['Adam', 'Zoe']
    assert repo.find_by_student_id('S002').name == 'Adam'
    assert [s.student_id for s in repo.find_by_class('K1')] == ['S001']
    assert [s.student_id for s in repo.search('ray')] == ['S001']
    assert repo.search('') == []
    assert repo.existing_student_ids() == {'S001', 'S002'}


def test_teacher_search(app, make_teacher):
    make_teacher('T1', 'Mary', 'Smith')
    make_teacher('T2', 'John', 'Brown')
    repo = TeacherRepository(db.session)

    assert [t.teacher_id for t in repo.search('john')] == ['T2']
    assert [t.teacher_id for t in repo.search('T1')] == ['T1']
    assert len(repo.search('')) == 2
    assert repo.find_by_teacher_id('T9') is None


def test_class_finders(app, make_class):
    a = make_class('A', ['s1', 's2'], teacher_id='T1')
    b = make_class('B', ['s3'])
    repo = ClassRepository(db.session)

    owners = repo.find_containing(['s2', 's3', 's9'])
    assert {sid: c.id for sid, c in owners.items()} == {'s2': a.id, 's3': b.id}
    assert repo.find_containing(['s2'], exclude_id=a.id) == {}
    assert [c.id for c in repo.find_by_teacher_id('T1')] == [a.id]
    assert [c.id for c in repo.find_by_name('B')] == [b.id]


def test_membership_check_locks_class_rows(app):
    sql = str(ClassRepository(db.session).membership_query().statement.compile(dialect=postgresql.dialect()))

    assert sql.rstrip().endswith('FOR UPDATE')


def test_class_version_increments(app, make_class):
    class_room = make_class('A', ['s1'])
    repo = ClassRepository(db.session)

    repo.set_roster(class_room, ['s1', 's2'])
    repo.commit()

    assert class_room.version == 2


def test_account_repository_hashes_passwords(app):
    repo = AccountRepository(db.session)

    account = repo.create({'username': 'admin', 'password': 'secret123', 'full_name': 'Admin',
                           'role': 'admin', 'phone_number': '+1001'})
    assert account.check_password('secret123')

    repo.update(account.id, {'password': 'changed123'})
    assert repo.find_by_username('admin').check_password('changed123')
    assert repo.find_by_phone_number('+1001').id == account.id


def test_news_newest_first(app):
    repo = NewsRepository(db.session)
    first = repo.create({'title': 'First', 'content': 'a'})
    second = repo.create({'title': 'Second', 'content': 'b'})
    first.created_at = second.created_at.replace(year=second.created_at.year - 1)
    db.session.commit()

    assert [n.title for n in repo.find_all()] == ['Second', 'First']
