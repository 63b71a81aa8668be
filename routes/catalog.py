import logging

from flask import Blueprint, jsonify, request

from services.core import parse_limit
from services.errors import InvalidQuery, NotFound
from services.models import PokemonType
from .common import get_store, records_response

logger = logging.getLogger(__name__)

bp = Blueprint('catalog', __name__, url_prefix='/catalog')


def _parse_type(raw):
    try:
        return PokemonType.parse(raw)
    except ValueError as e:
        raise InvalidQuery(str(e), message='Unknown type') from e


@bp.route('')
@bp.route('/')
def list_all():
    records = get_store().list_all()
    logger.info('Found %d pokemon', len(records))
    return records_response(records)


@bp.route('/search')
def search():
    name = (request.args.get('name') or '').strip()
    if not name:
        return jsonify([])
    return records_response(get_store().find_by_name_substring(name))


@bp.route('/type/<type_name>')
def by_type(type_name):
    return records_response(get_store().find_by_type(_parse_type(type_name)))


@bp.route('/random')
def random_pokemon():
    limit = parse_limit(request.args.get('limit'))
    records = get_store().random_sample(limit)
    logger.info('Found %d random pokemon', len(records))
    return records_response(records)


@bp.route('/suggested/<type_name>')
def suggested(type_name):
    """Random pokemon sharing ``type_name``, excluding ``currentPokemon``."""
    pokemon_type = _parse_type(type_name)
    limit = parse_limit(request.args.get('limit'))
    current = (request.args.get('currentPokemon') or '').strip()
    exclude = {current} if current else set()
    records = get_store().sample_excluding(exclude, limit, pokemon_type=pokemon_type)
    logger.info('Found %d suggested %s pokemon (excluding %r)', len(records), pokemon_type.value, current)
    return records_response(records)


@bp.route('/<path:name>')
def detail(name):
    record = get_store().find_by_name(name)
    if record is None:
        raise NotFound(f'No pokemon named {name!r}')
    return jsonify(record.to_json())
