from flask import Blueprint
from kindergarten import db
from kindergarten.errors import ConflictError
from kindergarten.repositories import AccountRepository
from kindergarten.schemas import AccountCreate, AccountUpdate
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response

bp = Blueprint('user_account', __name__, url_prefix='/api/user-accounts')


@bp.route('', methods=['GET'])
@admin_required
def list_accounts():
    return success_response([a.to_dict() for a in AccountRepository(db.session).find_all()])


@bp.route('', methods=['POST'])
@admin_required
def create_account():
    record = AccountCreate.model_validate(json_body()).to_record()
    repo = AccountRepository(db.session)
    if repo.find_by_username(record['username']):
        raise ConflictError('Username already exists')
    return success_response(repo.create(record).to_dict(), 201)


@bp.route('/<id>', methods=['GET'])
@admin_required
def get_account(id):
    return success_response(AccountRepository(db.session).find_by_id(id).to_dict())


@bp.route('/<id>', methods=['PUT'])
@admin_required
def update_account(id):
    payload = AccountUpdate.model_validate(json_body())
    record = {k: v for k, v in payload.to_record(partial=True).items() if v is not None}
    repo = AccountRepository(db.session)
    if 'username' in record:
        existing = repo.find_by_username(record['username'])
        if existing is not None and existing.id != id:
            raise ConflictError('Username already exists')
    return success_response(repo.update(id, record).to_dict())


@bp.route('/<id>', methods=['DELETE'])
@admin_required
def delete_account(id):
    AccountRepository(db.session).delete(id)
    return success_response(message='Account deleted successfully')
