from flask import Blueprint, request, send_file
from kindergarten import db
from kindergarten.errors import NotFoundError
from kindergarten.repositories import TeacherRepository
from kindergarten.schemas import TeacherCreate, TeacherUpdate
from kindergarten.services.teachers import TeacherService
from kindergarten.utils.excel import XLSX_MIMETYPE, export_teachers_to_excel
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response

bp = Blueprint('teacher', __name__, url_prefix='/api/teacher')


@bp.route('', methods=['GET'])
@admin_required
def list_teachers():
    return success_response([t.to_dict() for t in TeacherRepository(db.session).find_all()])


@bp.route('', methods=['POST'])
@admin_required
def create_teacher():
    payload = TeacherCreate.model_validate(json_body())
    teacher = TeacherService(db.session).create_teacher(payload)
    return success_response(teacher.to_dict(), 201)


@bp.route('/search', methods=['GET'])
@admin_required
def search_teachers():
    teachers = TeacherRepository(db.session).search(request.args.get('query', '').strip())
    return success_response([t.to_dict() for t in teachers])


@bp.route('/print', methods=['GET'])
@admin_required
def print_teachers():
    return success_response(TeacherService(db.session).print_data(request.args.get('search', '').strip()))


@bp.route('/export', methods=['GET'])
@admin_required
def export_teachers():
    teachers = TeacherRepository(db.session).search(request.args.get('search', '').strip())
    if not teachers:
        raise NotFoundError('No teachers to export')
    return send_file(export_teachers_to_excel(teachers), mimetype=XLSX_MIMETYPE, as_attachment=True,
                     download_name='teachers.xlsx')


@bp.route('/import', methods=['POST'])
@admin_required
def import_teachers():
    body = request.get_json(silent=True)
    items = body.get('teachers') if isinstance(body, dict) else body
    return success_response(TeacherService(db.session).import_teachers(items), 201)


@bp.route('/by-teacher-id/<teacher_id>', methods=['GET'])
@admin_required
def get_by_teacher_id(teacher_id):
    teacher = TeacherRepository(db.session).find_by_teacher_id(teacher_id)
    if teacher is None:
        raise NotFoundError(f'No teacher found with ID: {teacher_id}')
    return success_response(teacher.to_dict())


@bp.route('/<id>', methods=['GET'])
@admin_required
def get_teacher(id):
    return success_response(TeacherRepository(db.session).find_by_id(id).to_dict())


@bp.route('/<id>', methods=['PUT'])
@admin_required
def update_teacher(id):
    payload = TeacherUpdate.model_validate(json_body())
    teacher = TeacherService(db.session).update_teacher(id, payload)
    return success_response(teacher.to_dict())


@bp.route('/<id>', methods=['DELETE'])
@admin_required
def delete_teacher(id):
    TeacherService(db.session).delete_teacher(id)
    return success_response(message='Teacher deleted successfully')
