"""
accumulators.py - Per-table row stores filled by the parsing pipeline.

Each accumulator owns one table schema and a key -> row mapping.  The
pipeline offers it every table file from every archive; files that do
not decode against the schema raise DecodeError and are dropped by the
pipeline.  Rows are inserted in the order they are offered, and a later
row replaces an earlier one with the same key.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, Iterator, List, Optional, Tuple

from dbc_items import tables
from dbc_items.tables import (
    ItemClassRow,
    ItemDisplayInfoRow,
    ItemRow,
    ItemSetRow,
    ItemSubClassRow,
    SpellDescriptionVariablesRow,
    SpellRow,
    TableSchema,
)

logger = logging.getLogger(__name__)


class TableAccumulator:
    """Base accumulator: decode with `schema`, key rows by `id`."""

    schema: TableSchema = None
    label = 'Table'

    def __init__(self):
        self.rows: Dict[Hashable, object] = {}

    def __len__(self) -> int:
        return len(self.rows)

    def can_handle(self, file_name: str) -> bool:
        """Whether to try decoding `file_name` at all.  Accepts everything."""
        return True

    def parse(self, file_name: str, data: bytes) -> int:
        """Decode `data` and ingest every row; returns the row count.

        Raises DecodeError if the file is not this accumulator's table.
        """
        rows = tables.decode_table(data, self.schema)
        logger.debug("  Found %s with %d entries for %s", file_name, len(rows), self.label)
        for row in rows:
            self.ingest(row)
        return len(rows)

    def key_of(self, row) -> Hashable:
        return row.id

    def ingest(self, row) -> None:
        self.rows[self.key_of(row)] = row

    def get(self, key):
        return self.rows.get(key)

    def finish(self) -> None:
        logger.info("%s finished with %d entries", self.label, len(self.rows))


class Items(TableAccumulator):
    schema = tables.ITEM
    label = 'Items'

    def all_rows(self) -> Iterator[ItemRow]:
        """Every item row; order is not meaningful."""
        return iter(self.rows.values())

    def get(self, item_id: int) -> Optional[ItemRow]:
        return self.rows.get(item_id)


class ItemDisplayInfos(TableAccumulator):
    schema = tables.ITEM_DISPLAY_INFO
    label = 'ItemDisplayInfos'

    def get(self, display_info_id: int) -> Optional[ItemDisplayInfoRow]:
        return self.rows.get(display_info_id)


class ItemClasses(TableAccumulator):
    schema = tables.ITEM_CLASS
    label = 'ItemClasses'

    def key_of(self, row: ItemClassRow) -> int:
        return row.class_id

    def get(self, class_id: int) -> Optional[ItemClassRow]:
        return self.rows.get(class_id)


class ItemSubClasses(TableAccumulator):
    schema = tables.ITEM_SUB_CLASS
    label = 'ItemSubClasses'

    def key_of(self, row: ItemSubClassRow) -> Tuple[int, int]:
        return (row.class_id, row.subclass_id)

    def get(self, class_id: int, subclass_id: int) -> Optional[ItemSubClassRow]:
        return self.rows.get((class_id, subclass_id))


class ItemSets(TableAccumulator):
    schema = tables.ITEM_SET
    label = 'ItemSets'

    def get(self, set_id: int) -> Optional[ItemSetRow]:
        return self.rows.get(set_id)

    def find_set_containing(self, item_id: int) -> Optional[ItemSetRow]:
        """First set, in first-ingestion order, that lists `item_id`.

        If an item belongs to several sets which one comes back is not
        part of the contract.
        """
        for item_set in self.rows.values():
            if item_set.contains(item_id):
                return item_set
        return None


class Spells(TableAccumulator):
    schema = tables.SPELL
    label = 'Spells'

    def get(self, spell_id: int) -> Optional[SpellRow]:
        return self.rows.get(spell_id)


class SpellDescriptionVars(TableAccumulator):
    schema = tables.SPELL_DESCRIPTION_VARIABLES
    label = 'SpellDescriptionVars'

    def get(self, vars_id: int) -> Optional[SpellDescriptionVariablesRow]:
        return self.rows.get(vars_id)


@dataclass
class ItemTables:
    """The full set of accumulators one extraction run fills."""
    items: Items
    display_infos: ItemDisplayInfos
    item_classes: ItemClasses
    sub_classes: ItemSubClasses
    item_sets: ItemSets
    spells: Spells
    spell_desc_vars: SpellDescriptionVars

    @classmethod
    def empty(cls) -> 'ItemTables':
        return cls(Items(), ItemDisplayInfos(), ItemClasses(), ItemSubClasses(),
                   ItemSets(), Spells(), SpellDescriptionVars())

    def handlers(self) -> List[TableAccumulator]:
        return [self.items, self.display_infos, self.item_classes, self.sub_classes,
                self.item_sets, self.spells, self.spell_desc_vars]
