import pytest
from pydantic import ValidationError

from services.models import PokemonRecord, PokemonType


def test_total_is_computed_from_stats():
    p = PokemonRecord(name='Mew', primary_type='Psychic', hp=100, attack=100, defense=100,
                      speed=100, special_attack=100, special_defense=100)
    assert p.total == 600


def test_total_mismatch_rejected():
    with pytest.raises(ValidationError):
        PokemonRecord(name='Mew', primary_type='Psychic', hp=100, attack=100, defense=100,
                      speed=100, special_attack=100, special_defense=100, total=601)


@pytest.mark.parametrize('raw', ['fire', 'FIRE', 'Fire', ' Fire '])
def test_type_parsing_is_case_insensitive(raw):
    assert PokemonType.parse(raw) is PokemonType.FIRE


def test_unknown_type_rejected():
    with pytest.raises(ValueError):
        PokemonType.parse('Shadow')


def test_dataset_columns_and_blank_secondary():
    p = PokemonRecord.model_validate({
        'Name': 'Charmander', 'Alternate Name': '', 'Primary Type': 'Fire', 'Secondary type': '',
        'HP': 39, 'Attack': 52, 'Defense': 43, 'Speed': 65, 'Sp.Attack': 60, 'Sp.Defense': 50,
        'Total': 309,
    })
    assert p.name == 'Charmander'
    assert p.alternate_name is None
    assert p.secondary_type is None
    assert p.types == (PokemonType.FIRE,)


def test_secondary_same_as_primary_is_dropped():
    p = PokemonRecord(name='Odd', primary_type='Fire', secondary_type='fire', hp=1, attack=1,
                      defense=1, speed=1, special_attack=1, special_defense=1)
    assert p.secondary_type is None


def test_records_are_frozen():
    p = PokemonRecord(name='Ditto', primary_type='Normal', hp=48, attack=48, defense=48,
                      speed=48, special_attack=48, special_defense=48)
    with pytest.raises(ValidationError):
        p.name = 'Mew'


def test_to_json_uses_type_values():
    p = PokemonRecord(name='Zubat', primary_type='poison', secondary_type='flying', hp=40, attack=45,
                      defense=35, speed=55, special_attack=30, special_defense=40)
    data = p.to_json()
    assert data['primary_type'] == 'Poison'
    assert data['secondary_type'] == 'Flying'
    assert data['total'] == 245
