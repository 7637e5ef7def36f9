"""
supplemental.py - Overlays hand-curated item facts onto joined records.

The supplemental file is a JSON object keyed by item id (as a string):

    {"100": {"name": "Thunderfury", "type": "Legendary", "stats": ["+5 Agility"]}}

A field overrides the joined value only when it is present and, for text
and list fields, non-empty.  A missing or broken file counts as empty.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Union

from dbc_items.models import ItemRecord, SupplementalRecord, rarity_from_label

logger = logging.getLogger(__name__)

SupplementalMap = Dict[str, SupplementalRecord]

# Fields copied as-is when the supplied value is non-empty.
_TEXT_FIELDS = ('stats', 'spells', 'requires', 'damage', 'added_damage', 'armor',
                'speed', 'dps', 'bonding', 'hands')


def parse_supplemental(raw) -> SupplementalMap:
    if not isinstance(raw, dict):
        raise ValueError("supplemental data must be a JSON object")
    return {str(key): SupplementalRecord.from_data(value) for key, value in raw.items()}


def load_supplemental(path: Union[str, Path]) -> SupplementalMap:
    """Load the supplemental map; any read or parse failure yields {}."""
    path = Path(path)
    try:
        with open(path, encoding='utf-8') as fh:
            raw = json.load(fh)
        return parse_supplemental(raw)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring supplemental data %s: %s", path, exc)
        return {}


def apply_supplemental(item: ItemRecord, extra: SupplementalRecord) -> ItemRecord:
    """Copy the usable fields of `extra` onto `item` in place."""
    if extra.name:
        item.name = extra.name
    if extra.rarity_type is not None:
        item.rarity = rarity_from_label(extra.rarity_type)
    if extra.requires_level is not None:
        item.required_level = extra.requires_level
    for name in _TEXT_FIELDS:
        value = getattr(extra, name)
        if value:
            setattr(item, name, list(value) if isinstance(value, list) else value)
    return item


def overlay_supplemental(items: Iterable[ItemRecord],
                         supplemental: SupplementalMap) -> List[ItemRecord]:
    result = []
    for item in items:
        extra = supplemental.get(str(item.id))
        if extra is not None:
            apply_supplemental(item, extra)
        result.append(item)
    return result
