from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

STAT_FIELDS = ('hp', 'attack', 'defense', 'speed', 'special_attack', 'special_defense')

# Dataset CSV header -> record field
DATASET_COLUMNS = {
    'Name': 'name',
    'Alternate Name': 'alternate_name',
    'Primary Type': 'primary_type',
    'Secondary type': 'secondary_type',
    'HP': 'hp',
    'Attack': 'attack',
    'Defense': 'defense',
    'Speed': 'speed',
    'Sp.Attack': 'special_attack',
    'Sp.Defense': 'special_defense',
    'Total': 'total',
}


class PokemonType(str, Enum):
    NORMAL = 'Normal'
    FIRE = 'Fire'
    WATER = 'Water'
    GRASS = 'Grass'
    ELECTRIC = 'Electric'
    ICE = 'Ice'
    FIGHTING = 'Fighting'
    POISON = 'Poison'
    GROUND = 'Ground'
    FLYING = 'Flying'
    PSYCHIC = 'Psychic'
    BUG = 'Bug'
    ROCK = 'Rock'
    GHOST = 'Ghost'
    DRAGON = 'Dragon'
    DARK = 'Dark'
    STEEL = 'Steel'
    FAIRY = 'Fairy'

    @classmethod
    def parse(cls, value):
        """Case-insensitive lookup: 'fire', 'FIRE' and 'Fire' all map to FIRE.
        Raises ValueError for unknown tags.
        """
        if isinstance(value, cls):
            return value
        key = str(value or '').strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f'Unknown Pokémon type: {value!r}') from None


class PokemonRecord(BaseModel):
    """Immutable catalog entry. ``total`` always equals the sum of the six base stats."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    alternate_name: Optional[str] = None
    primary_type: PokemonType
    secondary_type: Optional[PokemonType] = None
    hp: int = Field(ge=0)
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    speed: int = Field(ge=0)
    special_attack: int = Field(ge=0)
    special_defense: int = Field(ge=0)
    total: Optional[int] = None

    @model_validator(mode='before')
    @classmethod
    def _accept_dataset_columns(cls, data):
        # Clients and the CSV dataset may use the dataset's column headers.
        if isinstance(data, dict) and any(k in DATASET_COLUMNS for k in data):
            data = {DATASET_COLUMNS.get(k, k): v for k, v in data.items()}
        return data

    @field_validator('name')
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('name must not be blank')
        return v

    @field_validator('alternate_name', mode='before')
    @classmethod
    def _blank_alternate(cls, v):
        if v is None or not str(v).strip():
            return None
        return str(v).strip()

    @field_validator('primary_type', mode='before')
    @classmethod
    def _parse_primary(cls, v):
        return PokemonType.parse(v)

    @field_validator('secondary_type', mode='before')
    @classmethod
    def _parse_secondary(cls, v):
        if v is None or not str(v).strip():
            return None
        return PokemonType.parse(v)

    @model_validator(mode='after')
    def _check_total(self):
        stats_sum = sum(getattr(self, f) for f in STAT_FIELDS)
        if self.total is None:
            # frozen model
            object.__setattr__(self, 'total', stats_sum)
        elif self.total != stats_sum:
            raise ValueError(f'total {self.total} does not match stat sum {stats_sum}')
        if self.secondary_type == self.primary_type:
            object.__setattr__(self, 'secondary_type', None)
        return self

    @property
    def types(self):
        if self.secondary_type:
            return (self.primary_type, self.secondary_type)
        return (self.primary_type,)

    def to_json(self) -> dict:
        return self.model_dump(mode='json')
