from flask import Blueprint, request
from kindergarten import db
from kindergarten.errors import ValidationError
from kindergarten.schemas import ClassDocument, ClassSemesterChange, ClassTeacherChange, RosterChange, RosterTransfer
from kindergarten.services.roster import RosterService
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response

bp = Blueprint('classroom', __name__, url_prefix='/api/class')


@bp.route('', methods=['GET'])
@admin_required
def list_classes():
    service = RosterService(db.session)
    class_name = request.args.get('className')
    teacher_id = request.args.get('teacherID')
    if class_name:
        classes = service.find_classes_by_name(class_name)
    elif teacher_id:
        classes = service.find_classes_by_teacher(teacher_id)
    else:
        classes = service.get_all_classes()
    return success_response([c.to_dict() for c in classes])


@bp.route('', methods=['POST'])
@admin_required
def create_class():
    record = ClassDocument.model_validate(json_body()).to_record()
    class_room = RosterService(db.session).create_class(record)
    return success_response(class_room.to_dict(), 201)


@bp.route('/transfer', methods=['POST'])
@admin_required
def transfer_students():
    payload = RosterTransfer.model_validate(json_body())
    source, target = RosterService(db.session).transfer_students(
        payload.source_class_id, payload.target_class_id, payload.student_ids)
    return success_response(
        {'sourceClass': source.to_dict(), 'targetClass': target.to_dict()},
        message=f'{len(payload.student_ids)} students transferred successfully'
    )


@bp.route('/import', methods=['POST'])
@admin_required
def import_classes():
    body = request.get_json(silent=True)
    items = body.get('classes') if isinstance(body, dict) else body
    if not isinstance(items, list) or not items:
        raise ValidationError('Please provide a non-empty list of classes')
    results = RosterService(db.session).import_classes(items)
    return success_response(results, 201)


@bp.route('/<id>', methods=['GET'])
@admin_required
def get_class(id):
    return success_response(RosterService(db.session).get_class(id).to_dict())


@bp.route('/<id>', methods=['PUT'])
@admin_required
def replace_class(id):
    record = ClassDocument.model_validate(json_body()).to_record()
    class_room = RosterService(db.session).replace_class(id, record)
    return success_response(class_room.to_dict())


@bp.route('/<id>', methods=['DELETE'])
@admin_required
def delete_class(id):
    RosterService(db.session).delete_class(id)
    return success_response(message='Class deleted successfully')


@bp.route('/<id>/teacher', methods=['PATCH'])
@admin_required
def update_class_teacher(id):
    payload = ClassTeacherChange.model_validate(json_body())
    class_room = RosterService(db.session).update_class_teacher(id, payload.teacher_id)
    return success_response(class_room.to_dict())


@bp.route('/<id>/semester', methods=['PATCH'])
@admin_required
def change_semester(id):
    payload = ClassSemesterChange.model_validate(json_body())
    class_room = RosterService(db.session).change_semester(id, payload.semester_id)
    return success_response(class_room.to_dict())


@bp.route('/<id>/students', methods=['POST'])
@admin_required
def add_students(id):
    payload = RosterChange.model_validate(json_body())
    class_room = RosterService(db.session).add_students(id, payload.student_ids)
    return success_response(class_room.to_dict(), message='Students added successfully')


@bp.route('/<id>/students/remove', methods=['POST'])
@admin_required
def remove_students(id):
    payload = RosterChange.model_validate(json_body())
    class_room = RosterService(db.session).remove_students(id, payload.student_ids)
    return success_response(class_room.to_dict(), message='Students removed successfully')
