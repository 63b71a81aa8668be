from unittest.mock import MagicMock

import pytest
import requests

from services import dataset
from services.core import CATALOG_CSV
from services.errors import DatasetError
from services.models import PokemonType


def pokeapi_payload(name, types, stats):
    return {
        'name': name,
        'types': [{'slot': i + 1, 'type': {'name': t}} for i, t in enumerate(types)],
        'stats': [{'base_stat': v, 'stat': {'name': k}} for k, v in stats.items()],
    }


CHARIZARD = pokeapi_payload(
    'charizard', ['fire', 'flying'],
    {'hp': 78, 'attack': 84, 'defense': 78, 'special-attack': 109, 'special-defense': 85, 'speed': 100},
)


def test_bundled_dataset_loads():
    records = dataset.load_dataset(CATALOG_CSV)
    assert len(records) > 100
    by_name = {r.name: r for r in records}
    charizard = by_name['Charizard']
    assert charizard.types == (PokemonType.FIRE, PokemonType.FLYING)
    assert charizard.total == 534
    assert by_name['Charmander'].secondary_type is None


def test_write_then_load(tmp_path, records):
    path = dataset.write_dataset(records, tmp_path / 'out' / 'pokemon.csv')
    header = path.read_text(encoding='utf-8').splitlines()[0]
    assert header.startswith('Name,Alternate Name,Primary Type,Secondary type')
    loaded = dataset.load_dataset(path)
    assert [r.name for r in loaded] == [r.name for r in records]
    assert loaded == records


def test_missing_file(tmp_path):
    with pytest.raises(DatasetError):
        dataset.load_dataset(tmp_path / 'nope.csv')


def test_missing_columns(tmp_path):
    path = tmp_path / 'bad.csv'
    path.write_text('Name,HP\nPikachu,35\n', encoding='utf-8')
    with pytest.raises(DatasetError, match='missing columns'):
        dataset.load_dataset(path)


def test_invalid_row_reports_line(tmp_path):
    path = tmp_path / 'bad.csv'
    path.write_text(
        'Name,Primary Type,Secondary type,HP,Attack,Defense,Speed,Sp.Attack,Sp.Defense\n'
        'Pikachu,Electric,,35,55,40,90,50,50\n'
        'Glitch,Shadow,,1,1,1,1,1,1\n',
        encoding='utf-8',
    )
    with pytest.raises(DatasetError, match=':3:'):
        dataset.load_dataset(path)


def test_record_from_pokeapi():
    r = dataset.record_from_pokeapi(CHARIZARD)
    assert r.name == 'Charizard'
    assert r.primary_type is PokemonType.FIRE
    assert r.secondary_type is PokemonType.FLYING
    assert r.special_attack == 109
    assert r.total == 534


def test_record_from_pokeapi_form_name():
    payload = pokeapi_payload('mr-mime', ['psychic', 'fairy'], {k: 10 for k in dataset.POKEAPI_STATS})
    r = dataset.record_from_pokeapi(payload)
    assert r.name == 'Mr Mime'
    assert r.alternate_name == 'mr-mime'


def test_fetch_from_pokeapi_skips_failures(monkeypatch):
    def fake_get(url, timeout=None):
        resp = MagicMock()
        if url.endswith('/6'):
            resp.json.return_value = CHARIZARD
        else:
            resp.raise_for_status.side_effect = requests.HTTPError('404')
        return resp

    monkeypatch.setattr(dataset.requests, 'get', fake_get)
    records = dataset.fetch_from_pokeapi([5, 6, 7])
    assert [r.name for r in records] == ['Charizard']


def test_main_writes_csv(monkeypatch, tmp_path):
    monkeypatch.setattr(dataset, 'fetch_from_pokeapi', lambda ids: [dataset.record_from_pokeapi(CHARIZARD)])
    out = tmp_path / 'pokemon.csv'
    assert dataset.main(['--out', str(out), '--start', '6', '--end', '6']) == 0
    assert [r.name for r in dataset.load_dataset(out)] == ['Charizard']


def test_main_without_results(monkeypatch, tmp_path):
    monkeypatch.setattr(dataset, 'fetch_from_pokeapi', lambda ids: [])
    out = tmp_path / 'pokemon.csv'
    assert dataset.main(['--out', str(out)]) == 1
    assert not out.exists()
