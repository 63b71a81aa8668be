import logging
import random
import sqlite3
import threading

from .errors import StoreUnavailable
from .models import PokemonRecord, PokemonType, STAT_FIELDS
from .text_utils import search_key

logger = logging.getLogger(__name__)

COLUMNS = ('name', 'alternate_name', 'primary_type', 'secondary_type') + STAT_FIELDS + ('total',)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS pokemon (
    name TEXT PRIMARY KEY,
    alternate_name TEXT,
    primary_type TEXT NOT NULL,
    secondary_type TEXT,
    hp INTEGER NOT NULL,
    attack INTEGER NOT NULL,
    defense INTEGER NOT NULL,
    speed INTEGER NOT NULL,
    special_attack INTEGER NOT NULL,
    special_defense INTEGER NOT NULL,
    total INTEGER NOT NULL
)
"""
_SELECT = f"SELECT {', '.join(COLUMNS)} FROM pokemon"


class CatalogStore:
    """Read-mostly table of Pokémon records on SQLite.

    One connection is shared by all request threads and guarded by a lock.
    Random draws go through ``rng`` so tests can seed them.
    """

    def __init__(self, path: str = ':memory:', rng: random.Random = None):
        self.path = str(path)
        self.rng = rng or random.Random()
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False)
            self._conn.create_function('search_key', 1, search_key, deterministic=True)
            self._conn.create_function('fold_case', 1, _fold_case, deterministic=True)
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as e:
            logger.error('Catalog connection failed: %s', e)
            raise StoreUnavailable(str(e)) from e

    def _require_conn(self):
        # call with self._lock held
        if self._conn is None:
            raise StoreUnavailable('catalog store is closed')
        return self._conn

    def _query(self, sql: str, params=()):
        try:
            with self._lock:
                rows = self._require_conn().execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error('Catalog query failed: %s', e)
            raise StoreUnavailable(str(e)) from e
        return [_row_to_record(r) for r in rows]

    def load(self, records) -> int:
        """Replace the table contents with *records*. Returns the row count."""
        rows = [_record_to_row(r) for r in records]
        placeholders = ', '.join('?' for _ in COLUMNS)
        try:
            with self._lock:
                conn = self._require_conn()
                with conn:
                    conn.execute('DELETE FROM pokemon')
                    conn.executemany(
                        f"INSERT OR REPLACE INTO pokemon ({', '.join(COLUMNS)}) VALUES ({placeholders})",
                        rows,
                    )
        except sqlite3.Error as e:
            logger.error('Catalog load failed: %s', e)
            raise StoreUnavailable(str(e)) from e
        logger.info('Loaded %d pokemon into catalog', len(rows))
        return len(rows)

    def count(self) -> int:
        try:
            with self._lock:
                return self._require_conn().execute('SELECT COUNT(*) FROM pokemon').fetchone()[0]
        except sqlite3.Error as e:
            raise StoreUnavailable(str(e)) from e

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def list_all(self):
        return self._query(f'{_SELECT} ORDER BY name')

    def find_by_name(self, name: str):
        """Exact (case-insensitive) name lookup. Returns a record or None."""
        rows = self._query(f'{_SELECT} WHERE name = ? COLLATE NOCASE', ((name or '').strip(),))
        return rows[0] if rows else None

    def find_by_name_substring(self, fragment: str):
        key = search_key(fragment)
        if not key:
            return []
        return self._query(
            f"{_SELECT} WHERE instr(search_key(name), ?) > 0 "
            f"OR instr(search_key(coalesce(alternate_name, '')), ?) > 0 ORDER BY name",
            (key, key),
        )

    def find_by_type(self, pokemon_type):
        t = PokemonType.parse(pokemon_type).value
        return self._query(
            f'{_SELECT} WHERE primary_type = ? OR secondary_type = ? ORDER BY name', (t, t)
        )

    def random_sample(self, n: int):
        """Up to *n* records drawn uniformly without replacement."""
        if n <= 0:
            return []
        rows = self.list_all()
        return self.rng.sample(rows, min(n, len(rows)))

    def sample_excluding(self, names, n: int, pokemon_type=None):
        """Random sample of up to *n* records whose name is not in *names*,
        optionally restricted to records having *pokemon_type* as either type.
        """
        if n <= 0:
            return []
        pool = self.find_by_type(pokemon_type) if pokemon_type else self.list_all()
        excluded = {x.lower() for x in names or ()}
        pool = [r for r in pool if r.name.lower() not in excluded]
        return self.rng.sample(pool, min(n, len(pool)))

    def find_candidates(self, types, exclude_names=()):
        """Records sharing at least one of *types* (as primary or secondary),
        minus any whose name is in *exclude_names*.
        """
        type_values = sorted({PokemonType.parse(t).value for t in types})
        if not type_values:
            return []
        type_marks = ', '.join('?' for _ in type_values)
        sql = f'{_SELECT} WHERE (primary_type IN ({type_marks}) OR secondary_type IN ({type_marks}))'
        params = list(type_values) * 2
        names = sorted({_fold_case(n) for n in exclude_names or () if n})
        if names:
            sql += f" AND fold_case(name) NOT IN ({', '.join('?' for _ in names)})"
            params.extend(names)
        return self._query(sql + ' ORDER BY name', params)


def _fold_case(s):
    # SQLite's lower() only folds ASCII
    return s.lower() if isinstance(s, str) else s


def _record_to_row(record: PokemonRecord):
    data = record.to_json()
    return tuple(data[c] for c in COLUMNS)


def _row_to_record(row) -> PokemonRecord:
    return PokemonRecord(**dict(zip(COLUMNS, row)))
