from flask import Blueprint
from kindergarten import db
from kindergarten.errors import ConflictError
from kindergarten.repositories import TwilioNumberRepository
from kindergarten.schemas import NumberPurchase, NumberSearch
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response
from kindergarten.utils.sms import get_sms_client

bp = Blueprint('twilio', __name__, url_prefix='/api/twilio')


@bp.route('/search-numbers', methods=['POST'])
@admin_required
def search_numbers():
    payload = NumberSearch.model_validate(json_body())
    numbers = get_sms_client().search_numbers(payload.country_code, payload.area_code)
    return success_response({'availableNumbers': numbers})


@bp.route('/purchase-number', methods=['POST'])
@admin_required
def purchase_number():
    payload = NumberPurchase.model_validate(json_body())
    repo = TwilioNumberRepository(db.session)
    if repo.get(payload.phone_number) is not None:
        raise ConflictError('Phone number already purchased')
    purchased = get_sms_client().purchase_number(payload.phone_number)
    number = repo.create({'phone_number': purchased['phone_number'], 'sid': purchased['sid'], 'status': 'active'})
    return success_response(number.to_dict(), 201, message='Phone number purchased successfully')


@bp.route('/numbers', methods=['GET'])
@admin_required
def list_numbers():
    return success_response([n.to_dict() for n in TwilioNumberRepository(db.session).find_all()])
