"""
enrich.py - Joins the accumulated tables into ItemRecords.

Per item row:
    display info  -> icon URL
    subclass      -> subclass display name
    item set      -> set id/name and (threshold, bonus text) pairs, where
                     each bonus text is the spell's description variables
                     when present, else the spell description

A lookup that finds nothing leaves its field at the default.  The join
only reads the accumulators.
"""

from typing import List, Optional, Tuple

from dbc_items.accumulators import ItemTables, SpellDescriptionVars, Spells
from dbc_items.config import ICON_URL_TEMPLATE
from dbc_items.models import ItemRecord, ItemSetInfo
from dbc_items.tables import ItemDisplayInfoRow, ItemRow, ItemSetRow


def icon_url(display_info: ItemDisplayInfoRow) -> str:
    icon = display_info.inventory_icon[0]
    return ICON_URL_TEMPLATE.format(icon=icon.lower())


def resolve_set_spells(item_set: ItemSetRow, spells: Spells,
                       spell_desc_vars: SpellDescriptionVars) -> List[Tuple[int, str]]:
    """Pair each set bonus threshold with its bonus text.

    Spell ids and thresholds are parallel arrays; bonuses whose spell is
    not in the Spell table are skipped.
    """
    result = []
    for spell_id, threshold in zip(item_set.set_spell_ids, item_set.set_thresholds):
        spell = spells.get(spell_id)
        if spell is None:
            continue
        desc_vars = spell_desc_vars.get(spell.description_variables_id)
        text = desc_vars.variables if desc_vars is not None else spell.description
        result.append((threshold, text))
    return result


def enrich_item(row: ItemRow, tables: ItemTables) -> ItemRecord:
    item = ItemRecord.from_row(row)

    display_info = tables.display_infos.get(row.display_info_id)
    if display_info is not None:
        item.inventory_icon = icon_url(display_info)

    sub_class = tables.sub_classes.get(row.class_id, row.subclass_id)
    if sub_class is not None:
        item.subclass = sub_class.display_name

    item_set: Optional[ItemSetRow] = tables.item_sets.find_set_containing(row.id)
    if item_set is not None:
        item.item_set = ItemSetInfo(
            id=item_set.id,
            name=item_set.name,
            spells=resolve_set_spells(item_set, tables.spells, tables.spell_desc_vars),
        )

    return item


def build_item_records(tables: ItemTables) -> List[ItemRecord]:
    """One ItemRecord per accumulated item row (unordered)."""
    return [enrich_item(row, tables) for row in tables.items.all_rows()]
