import random
import sys
from pathlib import Path

import pytest

root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root))

from app import create_app  # noqa: E402
from services.catalog import CatalogStore  # noqa: E402
from services.models import PokemonRecord  # noqa: E402


def make_record(name, primary, secondary=None, base=50, alternate_name=None, **kwargs):
    stats = {f: base for f in ('hp', 'attack', 'defense', 'speed', 'special_attack', 'special_defense')}
    stats.update(kwargs)
    return PokemonRecord(
        name=name, alternate_name=alternate_name, primary_type=primary, secondary_type=secondary, **stats
    )


@pytest.fixture
def records():
    return [
        make_record('Charmander', 'Fire'),
        make_record('Charizard', 'Fire', 'Flying', base=90),
        make_record('Squirtle', 'Water'),
        make_record('Gyarados', 'Water', 'Flying', base=90),
        make_record('Bulbasaur', 'Grass', 'Poison'),
        make_record('Pikachu', 'Electric'),
        make_record('Pidgey', 'Normal', 'Flying'),
        make_record('Flabébé', 'Fairy', alternate_name='Flabebe'),
        make_record('Nidoran♀', 'Poison', alternate_name='Nidoran F'),
        make_record('Mr. Mime', 'Psychic', 'Fairy'),
    ]


@pytest.fixture
def store(records):
    s = CatalogStore(rng=random.Random(7))
    s.load(records)
    yield s
    s.close()


@pytest.fixture
def app(records):
    app = create_app({'TESTING': True, 'CATALOG_RECORDS': records, 'RANDOM_SEED': 1})
    yield app
    app.extensions['catalog_store'].close()


@pytest.fixture
def client(app):
    return app.test_client()
