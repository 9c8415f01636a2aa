from flask import Blueprint, request
from pydantic import ValidationError as SchemaValidationError
from kindergarten import db
from kindergarten.errors import ValidationError, schema_errors
from kindergarten.repositories import SemesterRepository
from kindergarten.schemas import SemesterCreate
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response

bp = Blueprint('semester', __name__, url_prefix='/api/semester')


@bp.route('', methods=['GET'])
@admin_required
def list_semesters():
    repo = SemesterRepository(db.session)
    name = request.args.get('semesterName')
    semesters = repo.find_by_name(name) if name else repo.find_all()
    return success_response([s.to_dict() for s in semesters])


@bp.route('', methods=['POST'])
@admin_required
def create_semester():
    record = SemesterCreate.model_validate(json_body()).to_record()
    semester = SemesterRepository(db.session).create(record)
    return success_response(semester.to_dict(), 201)


@bp.route('/import', methods=['POST'])
@admin_required
def import_semesters():
    body = request.get_json(silent=True)
    items = body.get('semesters') if isinstance(body, dict) else body
    if not isinstance(items, list) or not items:
        raise ValidationError('Please provide a non-empty list of semesters')

    repo = SemesterRepository(db.session)
    imported = []
    errors = []
    for item in items:
        try:
            record = SemesterCreate.model_validate(item).to_record()
        except SchemaValidationError as e:
            errors.append({'data': item, 'errors': schema_errors(e)})
            continue
        imported.append(repo.create(record))

    return success_response({
        'imported': len(imported),
        'failed': len(errors),
        'details': {'successful': [s.to_dict() for s in imported], 'errors': errors}
    }, 201)


@bp.route('/<id>', methods=['GET'])
@admin_required
def get_semester(id):
    return success_response(SemesterRepository(db.session).find_by_id(id).to_dict())


@bp.route('/<id>', methods=['PUT'])
@admin_required
def update_semester(id):
    repo = SemesterRepository(db.session)
    semester = repo.find_by_id(id)
    body = dict(semester.to_dict(), **json_body())
    body.pop('id', None)
    record = SemesterCreate.model_validate(body).to_record()
    return success_response(repo.update(id, record).to_dict())


@bp.route('/<id>', methods=['DELETE'])
@admin_required
def delete_semester(id):
    SemesterRepository(db.session).delete(id)
    return success_response(message='Semester deleted successfully')
