import uuid
from datetime import datetime, timezone
from flask import jsonify, request
from kindergarten.errors import ValidationError

DATE_FORMAT = '%d-%m-%Y'


def utc_now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return uuid.uuid4().hex


def isoformat(value):
    return value.isoformat() if value else None


def parse_date(value):
    """Parse a ``DD-MM-YYYY`` string (day and month may be one digit)."""
    parts = value.split('-') if isinstance(value, str) else []
    if len(parts) != 3 or not all(p.isdigit() for p in parts) or len(parts[2]) != 4:
        raise ValueError('Date must be in format DD-MM-YYYY')
    day, month, year = (int(p) for p in parts)
    try:
        return datetime(year, month, day).date()
    except ValueError:
        raise ValueError('Invalid date')


def format_date(value):
    return value.strftime(DATE_FORMAT)


def success_response(data=None, status=200, message=None):
    payload = {'success': True, 'data': data if data is not None else {}}
    if message:
        payload['message'] = message
    return jsonify(payload), status


def json_body():
    """The request's JSON object, ``{}`` when no JSON was sent."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body
