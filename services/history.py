import json
import logging

from pydantic import ValidationError

from .core import HISTORY_KEY, MAX_HISTORY, SELECTED_KEY
from .errors import MalformedHistoryInput
from .models import PokemonRecord

logger = logging.getLogger(__name__)


class ViewHistory:
    """Most-recent-first, deduplicated, capped list of viewed Pokémon.

    Entries live in ``session`` (any mutable mapping: Flask's cookie session in
    the app, a plain dict in tests) as JSON-ready dicts, so the history stays
    on the client and the server keeps nothing between requests.
    """

    def __init__(self, session, max_entries: int = MAX_HISTORY):
        self.session = session
        self.max_entries = max_entries

    def all(self):
        out = []
        for raw in self.session.get(HISTORY_KEY) or []:
            try:
                out.append(PokemonRecord.model_validate(raw))
            except ValidationError:
                logger.warning('Dropping invalid history entry: %r', raw)
        return out

    def _save(self, records):
        self.session[HISTORY_KEY] = [r.to_json() for r in records[:self.max_entries]]

    def record(self, entry: PokemonRecord):
        """Put *entry* at the front, dropping any older entry with the same name."""
        rest = [r for r in self.all() if r.name != entry.name]
        history = [entry] + rest
        self._save(history)
        self.set_last_viewed(entry)
        return history[:self.max_entries]

    def remove(self, name: str):
        history = [r for r in self.all() if r.name != name]
        self._save(history)
        return history

    def clear(self):
        self.session[HISTORY_KEY] = []

    def names(self):
        return {r.name for r in self.all()}

    def last_viewed(self):
        raw = self.session.get(SELECTED_KEY)
        if not raw:
            return None
        try:
            return PokemonRecord.model_validate(raw)
        except ValidationError:
            return None

    def set_last_viewed(self, record: PokemonRecord):
        self.session[SELECTED_KEY] = record.to_json()


def parse_history_param(raw):
    """Decode a JSON-encoded list of records (the ``history`` query value).

    Blank input gives an empty list. Anything that is not a JSON array of
    valid records raises MalformedHistoryInput.
    """
    if raw is None or not str(raw).strip():
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise MalformedHistoryInput(f'history is not valid JSON: {e}') from e
    if not isinstance(data, list):
        raise MalformedHistoryInput('history must be a JSON array')
    try:
        return [PokemonRecord.model_validate(item) for item in data]
    except ValidationError as e:
        raise MalformedHistoryInput(str(e)) from e
