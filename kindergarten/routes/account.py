from flask import Blueprint, current_app
from flask_login import current_user, login_user, logout_user
from kindergarten import db
from kindergarten.errors import UnauthorizedError
from kindergarten.repositories import AccountRepository
from kindergarten.schemas import CodeCheck, Credentials, PasswordReset, PhoneNumberRequest
from kindergarten.services.auth import AuthService
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response

bp = Blueprint('account', __name__, url_prefix='/api/account')


def _service():
    return AuthService(db.session, code_ttl_minutes=current_app.config['VERIFICATION_CODE_TTL_MINUTES'])


@bp.route('/authenticate', methods=['POST'])
def authenticate():
    credentials = Credentials.model_validate(json_body())
    account = _service().authenticate(credentials.username, credentials.password)
    login_user(account)
    return success_response(account.to_dict())


@bp.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return success_response(message='Logged out successfully')


@bp.route('/me', methods=['GET'])
def me():
    if not current_user.is_authenticated:
        raise UnauthorizedError()
    return success_response(current_user.to_dict())


@bp.route('/send-verification-code', methods=['POST'])
def send_verification_code():
    payload = PhoneNumberRequest.model_validate(json_body())
    _service().send_verification_code(payload.phone_number)
    return success_response(message='Verification code sent successfully')


@bp.route('/verify-code', methods=['POST'])
def verify_code():
    payload = CodeCheck.model_validate(json_body())
    _service().verify_code(payload.phone_number, payload.code)
    return success_response(message='Verification code is valid')


@bp.route('/reset-password', methods=['POST'])
def reset_password():
    payload = PasswordReset.model_validate(json_body())
    _service().reset_password(payload.phone_number, payload.code, payload.new_password)
    return success_response(message='Password reset successfully')


@bp.route('/<id>', methods=['GET'])
@admin_required
def get_account(id):
    return success_response(AccountRepository(db.session).find_by_id(id).to_dict())
