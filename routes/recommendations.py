import logging

from flask import Blueprint, request, session

from services.core import parse_limit
from services.errors import MalformedHistoryInput
from services.history import ViewHistory, parse_history_param
from .common import get_engine, records_response

logger = logging.getLogger(__name__)

bp = Blueprint('recommendations', __name__)


@bp.route('/recommendations')
def recommendations():
    """Smart suggestions from a view history.

    ``history`` is a JSON array of records; when the parameter is absent the
    caller's session history is used. An undecodable history is treated as
    empty, which degrades to random suggestions.
    """
    limit = parse_limit(request.args.get('limit'))
    if 'history' in request.args:
        try:
            history = parse_history_param(request.args.get('history'))
        except MalformedHistoryInput as e:
            logger.warning('Ignoring malformed history: %s', e.details)
            history = []
    else:
        history = ViewHistory(session).all()
    exclude = {p.name for p in history}
    return records_response(get_engine().suggest(history, exclude, limit))
