from flask import Blueprint, current_app, request, send_file
from kindergarten import db
from kindergarten.errors import ValidationError
from kindergarten.schemas import StudentCreate, StudentUpdate
from kindergarten.services.students import StudentService, extract_documents
from kindergarten.utils.excel import XLSX_MIMETYPE
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response
from kindergarten.utils.media import get_media_host

bp = Blueprint('student', __name__, url_prefix='/api/student')


def _service():
    return StudentService(db.session, folder=current_app.config['CLOUDINARY_FOLDER'])


@bp.route('', methods=['GET'])
@admin_required
def list_students():
    return success_response([s.to_dict() for s in _service().get_all_students()])


@bp.route('', methods=['POST'])
@admin_required
def create_student():
    body = json_body()
    payload = StudentCreate.model_validate(body)
    student = _service().create_student(payload, extract_documents(body))
    return success_response(student.to_dict(), 201)


@bp.route('/search', methods=['GET'])
@admin_required
def search_students():
    students = _service().search_students(request.args.get('term', '').strip())
    return success_response([s.to_dict() for s in students])


@bp.route('/class/<class_name>', methods=['GET'])
@admin_required
def students_by_class(class_name):
    return success_response([s.to_dict() for s in _service().get_students_by_class(class_name)])


@bp.route('/import', methods=['POST'])
@admin_required
def import_students():
    results = _service().import_students(request.files.get('file'))
    return success_response(results, 201, message=f"Successfully imported {results['count']} students")


@bp.route('/export/<fmt>', methods=['GET', 'POST'])
@admin_required
def export_students(fmt):
    if request.method == 'POST':
        student_ids = json_body().get('studentIds')
    else:
        student_ids = [i for i in request.args.get('studentIds', '').split(',') if i]
    if student_ids is not None and not isinstance(student_ids, list):
        raise ValidationError('studentIds must be a list')

    exported = _service().export_students(fmt, student_ids)
    if fmt == 'xlsx':
        return send_file(exported, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name='students.xlsx')
    return success_response(exported)


@bp.route('/upload', methods=['POST'])
@admin_required
def upload_file():
    result = _service().upload_file(request.files.get('file'), request.form.get('field', 'photos'))
    return success_response(result, 201)


@bp.route('/image/optimize', methods=['GET'])
@admin_required
def optimize_image():
    public_id = request.args.get('publicId')
    if not public_id:
        raise ValidationError('publicId is required')
    try:
        width = int(request.args['width']) if request.args.get('width') else None
        height = int(request.args['height']) if request.args.get('height') else None
    except ValueError:
        raise ValidationError('width and height must be integers')
    url = get_media_host().optimized_url(public_id, width, height, request.args.get('quality', 'auto'))
    return success_response({'url': url})


@bp.route('/<id>', methods=['GET'])
@admin_required
def get_student(id):
    return success_response(_service().get_student(id).to_dict())


@bp.route('/<id>', methods=['PUT'])
@admin_required
def update_student(id):
    body = json_body()
    payload = StudentUpdate.model_validate(body)
    student = _service().update_student(id, payload, extract_documents(body))
    return success_response(student.to_dict())


@bp.route('/<id>', methods=['DELETE'])
@admin_required
def delete_student(id):
    _service().delete_student(id)
    return success_response(message='Student deleted successfully')
