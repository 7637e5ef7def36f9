"""
models.py - Exported item records and the enums they carry.

ItemClass and Rarity are tagged unions: a named IntEnum member for every
value the client defines, or Custom(raw) for anything else, so unknown
values survive a write/read round trip.  InventoryType has no catch-all;
unknown slots collapse to NONE.

Serialized form (JSON and YAML alike):
    "class":          "Weapon" | {"Custom": 14}
    "rarity":         "Epic"   | {"Custom": 7}
    "inventory_type": "TwoHand"
    "set":            null | {"name": ..., "id": ..., "spells": [[2, "..."], ...]}
"""

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Tuple, Union

from dbc_items.config import UNKNOWN_ITEM_NAME


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class LabelledEnum(IntEnum):
    """IntEnum serialized by its CamelCase label (TRADE_GOODS -> 'TradeGoods')."""

    @property
    def label(self) -> str:
        return ''.join(part.capitalize() for part in self.name.split('_'))

    @classmethod
    def from_label(cls, label: str):
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"unknown {cls.__name__} label {label!r}")


@dataclass(frozen=True)
class Custom:
    """A value outside the named variants, kept verbatim."""
    value: int


class ItemClass(LabelledEnum):
    CONSUMABLE = 0
    CONTAINER = 1
    WEAPON = 2
    GEM = 3
    ARMOR = 4
    PROJECTILE = 5
    TRADE_GOODS = 6
    GENERIC = 7
    RECIPE = 8
    MONEY = 9
    QUIVER = 10
    QUEST = 11
    KEY = 12
    PERMANENT = 13
    MISCELLANEOUS = 15
    GLYPH = 16


class Rarity(LabelledEnum):
    COMMON = 0
    UNCOMMON = 1
    RARE = 2
    EPIC = 3
    LEGENDARY = 4


class InventoryType(LabelledEnum):
    NONE = 0
    HEAD = 1
    NECK = 2
    SHOULDERS = 3
    SHIRT = 4
    VEST = 5
    WAIST = 6
    LEGS = 7
    FEET = 8
    WRIST = 9
    HANDS = 10
    RING = 11
    TRINKET = 12
    ONE_HAND = 13
    SHIELD = 14
    BOW = 15
    BACK = 16
    TWO_HAND = 17
    BAG = 18
    TABARD = 19
    ROBE = 20
    MAIN_HAND = 21
    OFF_HAND = 22
    HELD = 23
    AMMO = 24
    THROWN = 25
    RANGED = 26
    RANGED_RIGHT = 27
    RELIC = 28


ItemClassValue = Union[ItemClass, Custom]
RarityValue = Union[Rarity, Custom]

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1
_INT32_LABEL = re.compile(r'[+-]?[0-9]+')


def item_class_from_id(value: int) -> ItemClassValue:
    try:
        return ItemClass(value)
    except ValueError:
        return Custom(value)


def rarity_from_id(value: int) -> RarityValue:
    try:
        return Rarity(value)
    except ValueError:
        return Custom(value)


def rarity_from_label(label: str) -> RarityValue:
    """Map a tier label such as 'epic' or 'Epic' to a Rarity.

    Any other label becomes Custom(n) when it is a plain 32-bit integer
    ("3", "-1", "+7"), else Custom(0).  Numbers never map onto named tiers.
    """
    lowered = label.lower()
    for member in Rarity:
        if member.label.lower() == lowered:
            return member
    if _INT32_LABEL.fullmatch(label):
        value = int(label)
        if INT32_MIN <= value <= INT32_MAX:
            return Custom(value)
    return Custom(0)


def inventory_type_from_id(value: int) -> InventoryType:
    try:
        return InventoryType(value)
    except ValueError:
        return InventoryType.NONE


def variant_to_data(value: Union[LabelledEnum, Custom]):
    if isinstance(value, Custom):
        return {'Custom': value.value}
    return value.label


def variant_from_data(data, enum_cls):
    if isinstance(data, dict):
        if set(data) != {'Custom'}:
            raise ValueError(f"bad {enum_cls.__name__} value {data!r}")
        return Custom(int(data['Custom']))
    return enum_cls.from_label(data)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass
class ItemSetInfo:
    """The item set an item belongs to, with its resolved bonus texts."""
    id: int
    name: str
    spells: List[Tuple[int, str]] = field(default_factory=list)

    def to_data(self) -> dict:
        return {
            'name': self.name,
            'id': self.id,
            'spells': [[threshold, text] for threshold, text in self.spells],
        }

    @classmethod
    def from_data(cls, data: dict) -> 'ItemSetInfo':
        return cls(
            id=int(data['id']),
            name=data['name'],
            spells=[(int(threshold), text) for threshold, text in data['spells']],
        )


@dataclass
class ItemRecord:
    """One exported item.

    Created from an Item row by the enrichment join, then patched by the
    supplemental overlay.  `item_class` and `item_set` serialize as
    'class' and 'set'.
    """
    id: int
    name: str = UNKNOWN_ITEM_NAME
    item_class: ItemClassValue = ItemClass.CONSUMABLE
    subclass: str = ''
    inventory_icon: str = ''
    inventory_type: InventoryType = InventoryType.NONE
    item_set: Optional[ItemSetInfo] = None
    required_level: int = 0
    stats: List[str] = field(default_factory=list)
    spells: List[str] = field(default_factory=list)
    requires: List[str] = field(default_factory=list)
    rarity: RarityValue = Rarity.COMMON
    damage: str = ''
    added_damage: str = ''
    armor: str = ''
    speed: str = ''
    dps: str = ''
    bonding: str = ''
    hands: str = ''

    @classmethod
    def from_row(cls, row) -> 'ItemRecord':
        """Seed a record from an ItemRow; everything not in the row is defaulted."""
        return cls(
            id=row.id,
            item_class=item_class_from_id(row.class_id),
            inventory_type=inventory_type_from_id(row.inventory_type),
        )

    def to_data(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'class': variant_to_data(self.item_class),
            'subclass': self.subclass,
            'inventory_icon': self.inventory_icon,
            'inventory_type': self.inventory_type.label,
            'set': self.item_set.to_data() if self.item_set else None,
            'required_level': self.required_level,
            'stats': list(self.stats),
            'spells': list(self.spells),
            'requires': list(self.requires),
            'rarity': variant_to_data(self.rarity),
            'damage': self.damage,
            'added_damage': self.added_damage,
            'armor': self.armor,
            'speed': self.speed,
            'dps': self.dps,
            'bonding': self.bonding,
            'hands': self.hands,
        }

    @classmethod
    def from_data(cls, data: dict) -> 'ItemRecord':
        item_set = data.get('set')
        return cls(
            id=int(data['id']),
            name=data['name'],
            item_class=variant_from_data(data['class'], ItemClass),
            subclass=data['subclass'],
            inventory_icon=data['inventory_icon'],
            inventory_type=InventoryType.from_label(data['inventory_type']),
            item_set=ItemSetInfo.from_data(item_set) if item_set else None,
            required_level=int(data['required_level']),
            stats=list(data['stats']),
            spells=list(data['spells']),
            requires=list(data['requires']),
            rarity=variant_from_data(data['rarity'], Rarity),
            damage=data['damage'],
            added_damage=data['added_damage'],
            armor=data['armor'],
            speed=data['speed'],
            dps=data['dps'],
            bonding=data['bonding'],
            hands=data['hands'],
        )


@dataclass
class SupplementalRecord:
    """Externally curated facts for one item.  Every field is optional."""
    name: str = ''
    rarity_type: Optional[str] = None
    stats: Optional[List[str]] = None
    spells: Optional[List[str]] = None
    requires_level: Optional[int] = None
    requires: Optional[List[str]] = None
    damage: Optional[str] = None
    added_damage: Optional[str] = None
    armor: Optional[str] = None
    speed: Optional[str] = None
    dps: Optional[str] = None
    bonding: Optional[str] = None
    hands: Optional[str] = None

    @classmethod
    def from_data(cls, data: Dict) -> 'SupplementalRecord':
        """Build from one JSON entry ('type' carries the rarity label).

        Raises ValueError on wrongly typed fields.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        def _str(key):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{key!r} must be a string")
            return value

        def _str_list(key):
            value = data.get(key)
            if value is None:
                return None
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"{key!r} must be a list of strings")
            return value

        level = data.get('requires_level')
        if level is not None and (isinstance(level, bool) or not isinstance(level, int)
                                  or level < 0):
            raise ValueError("'requires_level' must be a non-negative integer")

        return cls(
            name=_str('name') or '',
            rarity_type=_str('type'),
            stats=_str_list('stats'),
            spells=_str_list('spells'),
            requires_level=level,
            requires=_str_list('requires'),
            damage=_str('damage'),
            added_damage=_str('added_damage'),
            armor=_str('armor'),
            speed=_str('speed'),
            dps=_str('dps'),
            bonding=_str('bonding'),
            hands=_str('hands'),
        )
