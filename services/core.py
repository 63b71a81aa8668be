import os
from pathlib import Path

# Constants
POKEAPI_BASE = 'https://pokeapi.co/api/v2'
ROOT_DIR = Path(__file__).resolve().parent.parent

CATALOG_CSV = Path(os.environ.get('CATALOG_CSV') or ROOT_DIR / 'data' / 'pokemon.csv')
CATALOG_DB = os.environ.get('CATALOG_DB') or ':memory:'

MAX_HISTORY = 20
DEFAULT_LIMIT = 15
MAX_LIMIT = 100

# Session keys (client-side signed cookie)
HISTORY_KEY = 'pokemon_search_history'
SELECTED_KEY = 'selected_pokemon'

# Recommendation randomization
RANDOM_FACTOR_SPAN = 3.0  # random_factor is drawn from [0, span)
PURE_RANDOM_CHANCE = 0.3  # chance a candidate is ranked by random_factor alone

# National Dex ids fetched when rebuilding the dataset (Gen 1 by default)
DEFAULT_DEX_RANGE = (1, 151)


def parse_limit(raw, default: int = DEFAULT_LIMIT) -> int:
    """Parse a ``limit`` query value. Non-integers fall back to *default*,
    values above MAX_LIMIT are capped; zero or negative values are kept so
    callers can return an empty result.
    """
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        return default
    return min(limit, MAX_LIMIT)
