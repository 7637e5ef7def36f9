"""
tables.py - Row types and WDBC layouts for the item-related client tables.

Layouts follow the 3.3.5a (build 12340) client.  Only the columns the
exporter reads are named; the rest are decoded and dropped.
"""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from dbc_items.dbc_utils import RecordLayout, compile_layout, read_records


# ---------------------------------------------------------------------------
# Row types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ItemRow:
    id: int
    class_id: int
    subclass_id: int
    sound_override_subclass_id: int
    material: int
    display_info_id: int
    inventory_type: int
    sheathe_type: int


@dataclass(frozen=True)
class ItemDisplayInfoRow:
    id: int
    model_name: Tuple[str, str]
    model_texture: Tuple[str, str]
    inventory_icon: Tuple[str, str]
    geoset_group: Tuple[int, int, int]
    flags: int
    spell_visual_id: int
    group_sound_index: int
    helmet_geoset_vis_id: Tuple[int, int]
    texture: Tuple[str, ...]
    item_visual: int
    particle_color_id: int


@dataclass(frozen=True)
class ItemClassRow:
    class_id: int
    subclass_map_id: int
    flags: int
    class_name: str


@dataclass(frozen=True)
class ItemSubClassRow:
    class_id: int
    subclass_id: int
    prerequisite_proficiency: int
    postrequisite_proficiency: int
    flags: int
    display_flags: int
    weapon_parry_seq: int
    weapon_ready_seq: int
    weapon_attack_seq: int
    weapon_swing_size: int
    display_name: str
    verbose_name: str


@dataclass(frozen=True)
class ItemSetRow:
    id: int
    name: str
    item_ids: Tuple[int, ...]
    set_spell_ids: Tuple[int, ...]
    set_thresholds: Tuple[int, ...]
    required_skill: int
    required_skill_rank: int

    def contains(self, item_id: int) -> bool:
        return item_id in self.item_ids


@dataclass(frozen=True)
class SpellRow:
    id: int
    name: str
    name_subtext: str
    description: str
    aura_description: str
    description_variables_id: int


@dataclass(frozen=True)
class SpellDescriptionVariablesRow:
    id: int
    variables: str


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TableSchema:
    """Binds a table name to its record layout and row constructor."""
    name: str
    layout: RecordLayout
    build: Callable[[tuple], object]


def _item(v):
    return ItemRow(*v)


def _item_display_info(v):
    return ItemDisplayInfoRow(
        id=v[0],
        model_name=tuple(v[1:3]),
        model_texture=tuple(v[3:5]),
        inventory_icon=tuple(v[5:7]),
        geoset_group=tuple(v[7:10]),
        flags=v[10],
        spell_visual_id=v[11],
        group_sound_index=v[12],
        helmet_geoset_vis_id=tuple(v[13:15]),
        texture=tuple(v[15:23]),
        item_visual=v[23],
        particle_color_id=v[24],
    )


def _item_class(v):
    return ItemClassRow(*v)


def _item_sub_class(v):
    return ItemSubClassRow(*v)


def _item_set(v):
    return ItemSetRow(
        id=v[0],
        name=v[1],
        item_ids=tuple(v[2:19]),
        set_spell_ids=tuple(v[19:27]),
        set_thresholds=tuple(v[27:35]),
        required_skill=v[35],
        required_skill_rank=v[36],
    )


# Spell.dbc has 234 fields.  Columns 136-203 are the four localized
# strings (name, rank, description, tooltip); column 232 is the
# SpellDescriptionVariables id.  After collapsing the localized columns
# the decoded tuple is 170 long and column 232 lands at index 168.
_SPELL_LEADING = 136
_SPELL_TRAILING = 30
_SPELL_DESC_VARS_INDEX = _SPELL_LEADING + 4 + (232 - 204)


def _spell(v):
    return SpellRow(
        id=v[0],
        name=v[_SPELL_LEADING],
        name_subtext=v[_SPELL_LEADING + 1],
        description=v[_SPELL_LEADING + 2],
        aura_description=v[_SPELL_LEADING + 3],
        description_variables_id=v[_SPELL_DESC_VARS_INDEX],
    )


def _spell_description_variables(v):
    return SpellDescriptionVariablesRow(*v)


ITEM = TableSchema('Item', compile_layout('i' * 8), _item)

ITEM_DISPLAY_INFO = TableSchema(
    'ItemDisplayInfo',
    compile_layout('i ss ss ss iii i i i ii ssssssss i i'),
    _item_display_info,
)

ITEM_CLASS = TableSchema('ItemClass', compile_layout('iii L'), _item_class)

ITEM_SUB_CLASS = TableSchema(
    'ItemSubClass', compile_layout('i' * 10 + 'LL'), _item_sub_class)

ITEM_SET = TableSchema(
    'ItemSet',
    compile_layout('i L ' + 'i' * 17 + ' ' + 'i' * 8 + ' ' + 'i' * 8 + ' ii'),
    _item_set,
)

SPELL = TableSchema(
    'Spell',
    compile_layout('i' * _SPELL_LEADING + 'LLLL' + 'i' * _SPELL_TRAILING),
    _spell,
)

SPELL_DESCRIPTION_VARIABLES = TableSchema(
    'SpellDescriptionVariables', compile_layout('is'), _spell_description_variables)


def decode_table(data: bytes, schema: TableSchema) -> List[object]:
    """Decode a whole table file into row objects of `schema`.

    Raises DecodeError when the file does not match the schema.
    """
    return [schema.build(values) for values in read_records(data, schema.layout)]
