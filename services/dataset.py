"""Static Pokémon dataset: CSV loading for the catalog, and a PokeAPI importer
that rebuilds the CSV.

    python -m services.dataset --out data/pokemon.csv --start 1 --end 151
"""
import argparse
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import pandas as pd
import requests
from pydantic import ValidationError

from .core import CATALOG_CSV, DEFAULT_DEX_RANGE, POKEAPI_BASE
from .errors import DatasetError
from .models import DATASET_COLUMNS, PokemonRecord

logger = logging.getLogger(__name__)

# PokeAPI stat name -> record field
POKEAPI_STATS = {
    'hp': 'hp',
    'attack': 'attack',
    'defense': 'defense',
    'speed': 'speed',
    'special-attack': 'special_attack',
    'special-defense': 'special_defense',
}

# Bounded to be polite to PokeAPI
MAX_WORKERS = 8


def load_dataset(path=CATALOG_CSV):
    """Read the dataset CSV into a list of PokemonRecord."""
    path = Path(path)
    if not path.exists():
        raise DatasetError(f'dataset not found: {path}')
    try:
        df = pd.read_csv(path, encoding='utf-8', dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise DatasetError(f'could not read {path}: {e}') from e
    missing = [c for c in DATASET_COLUMNS if c not in df.columns and c not in ('Alternate Name', 'Total')]
    if missing:
        raise DatasetError(f'{path} is missing columns: {", ".join(missing)}')

    records = []
    for i, row in enumerate(df.to_dict(orient='records'), start=2):
        row = {k: (v if v != '' else None) for k, v in row.items() if k in DATASET_COLUMNS}
        try:
            records.append(PokemonRecord.model_validate(row))
        except ValidationError as e:
            raise DatasetError(f'{path}:{i}: {e}') from e
    logger.info('Read %d pokemon from %s', len(records), path)
    return records


def write_dataset(records, path=CATALOG_CSV):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    field_to_col = {v: k for k, v in DATASET_COLUMNS.items()}
    df = pd.DataFrame([r.to_json() for r in records], columns=list(field_to_col))
    df = df.rename(columns=field_to_col)
    df.to_csv(path, index=False, encoding='utf-8')
    logger.info('Wrote %d pokemon to %s', len(df), path)
    return path


def record_from_pokeapi(j: dict) -> PokemonRecord:
    """Map a PokeAPI ``/pokemon/{id}`` payload to a record."""
    types = sorted(j.get('types') or [], key=lambda t: t.get('slot', 0))
    type_names = [(t.get('type') or {}).get('name') for t in types]
    stats = {}
    for s in j.get('stats') or []:
        field = POKEAPI_STATS.get((s.get('stat') or {}).get('name'))
        if field:
            stats[field] = s.get('base_stat')
    slug = j.get('name') or ''
    return PokemonRecord(
        name=slug.replace('-', ' ').title(),
        alternate_name=slug if '-' in slug else None,
        primary_type=type_names[0] if type_names else None,
        secondary_type=type_names[1] if len(type_names) > 1 else None,
        **stats,
    )


def fetch_pokemon(poke_id: int) -> PokemonRecord:
    url = f'{POKEAPI_BASE}/pokemon/{poke_id}'
    r = requests.get(url, timeout=20)
    r.raise_for_status()
    return record_from_pokeapi(r.json())


def fetch_from_pokeapi(ids):
    """Fetch records for *ids* in parallel. Ids that fail are logged and skipped;
    the result is in the order of *ids*.
    """
    ids = list(ids)
    found = {}
    with ThreadPoolExecutor(max_workers=MAX_WORKERS) as executor:
        futures = {executor.submit(fetch_pokemon, pid): pid for pid in ids}
        for f in as_completed(futures):
            pid = futures[f]
            try:
                found[pid] = f.result()
            except (requests.RequestException, ValueError) as e:
                logger.warning('Skipping pokemon %s: %s', pid, e)
    return [found[pid] for pid in ids if pid in found]


def main(argv=None):
    parser = argparse.ArgumentParser(description='Rebuild the Pokémon dataset from PokeAPI')
    parser.add_argument('--out', type=Path, default=CATALOG_CSV, help='CSV file to write')
    parser.add_argument('--start', type=int, default=DEFAULT_DEX_RANGE[0], help='first National Dex id')
    parser.add_argument('--end', type=int, default=DEFAULT_DEX_RANGE[1], help='last National Dex id (inclusive)')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    records = fetch_from_pokeapi(range(args.start, args.end + 1))
    if not records:
        logger.error('No pokemon fetched; leaving %s untouched', args.out)
        return 1
    write_dataset(records, args.out)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
