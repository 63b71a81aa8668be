import logging

from flask import Blueprint, jsonify, request, session
from pydantic import ValidationError

from services.errors import InvalidQuery, NotFound
from services.history import ViewHistory
from services.models import PokemonRecord
from .common import get_store, records_response

logger = logging.getLogger(__name__)

bp = Blueprint('history', __name__, url_prefix='/history')


def _history():
    return ViewHistory(session)


def _record_from_body():
    """Accept a full record, or ``{"name": ...}`` looked up in the catalog."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidQuery('Request body must be a JSON object')
    if set(body) <= {'name', 'Name'}:
        name = body.get('name') or body.get('Name') or ''
        if not isinstance(name, str):
            raise InvalidQuery('name must be a string')
        name = name.strip()
        if not name:
            raise InvalidQuery('name is required')
        record = get_store().find_by_name(name)
        if record is None:
            raise NotFound(f'No pokemon named {name!r}')
        return record
    try:
        return PokemonRecord.model_validate(body)
    except ValidationError as e:
        raise InvalidQuery(str(e), message='Invalid pokemon') from e


@bp.route('', methods=['GET'])
def list_history():
    return records_response(_history().all())


@bp.route('', methods=['POST'])
def record_view():
    record = _record_from_body()
    history = _history().record(record)
    logger.info('Recorded view of %s (%d in history)', record.name, len(history))
    return records_response(history), 201


@bp.route('', methods=['DELETE'])
def clear_history():
    _history().clear()
    return records_response([])


@bp.route('/last-viewed')
def last_viewed():
    record = _history().last_viewed()
    if record is None:
        raise NotFound('No pokemon viewed yet')
    return jsonify(record.to_json())


@bp.route('/<path:name>', methods=['DELETE'])
def remove_entry(name):
    return records_response(_history().remove(name))
