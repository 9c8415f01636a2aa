from flask import Blueprint
from kindergarten import db
from kindergarten.repositories import NewsRepository
from kindergarten.schemas import ChatRequest, NewsCreate, NewsUpdate
from kindergarten.utils.chat import generate_chat_response
from kindergarten.utils.decorators import admin_required
from kindergarten.utils.helpers import json_body, success_response

bp = Blueprint('news', __name__, url_prefix='/api/news')


@bp.route('', methods=['GET'])
def list_news():
    return success_response([n.to_dict() for n in NewsRepository(db.session).find_all()])


@bp.route('', methods=['POST'])
@admin_required
def create_news():
    record = NewsCreate.model_validate(json_body()).to_record()
    return success_response(NewsRepository(db.session).create(record).to_dict(), 201)


@bp.route('/chat', methods=['POST'])
@admin_required
def chat():
    payload = ChatRequest.model_validate(json_body())
    reply = generate_chat_response([m.model_dump() for m in payload.messages])
    return success_response({'message': reply})


@bp.route('/<id>', methods=['GET'])
def get_news(id):
    return success_response(NewsRepository(db.session).find_by_id(id).to_dict())


@bp.route('/<id>', methods=['PUT'])
@admin_required
def update_news(id):
    record = NewsUpdate.model_validate(json_body()).to_record(partial=True)
    record = {k: v for k, v in record.items() if v is not None or k in ('author', 'image_url')}
    return success_response(NewsRepository(db.session).update(id, record).to_dict())


@bp.route('/<id>', methods=['DELETE'])
@admin_required
def delete_news(id):
    NewsRepository(db.session).delete(id)
    return success_response(message='News deleted successfully')
