"""
baseline.py - Level cap and "already known item" filtering.

The baseline is the target server's item table export (item_template).
Only its first column is used: the item entry id.  CSV exports are read
with the csv module; .xlsx exports with openpyxl.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

import openpyxl

from dbc_items.config import MAX_REQUIRED_LEVEL
from dbc_items.errors import BaselineLoadError
from dbc_items.models import ItemRecord

logger = logging.getLogger(__name__)

XLSX_SUFFIXES = ('.xlsx', '.xlsm')


def filter_by_level(items: Iterable[ItemRecord],
                    max_level: int = MAX_REQUIRED_LEVEL) -> List[ItemRecord]:
    return [item for item in items if item.required_level <= max_level]


def _parse_entry(value) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _csv_entries(path: Path) -> Iterable:
    with open(path, encoding='utf-8-sig', newline='') as fh:
        reader = csv.reader(fh)
        next(reader, None)  # header
        for row in reader:
            if row:
                yield row[0]


def _xlsx_entries(path: Path) -> Iterable:
    wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        for (value,) in ws.iter_rows(min_row=2, max_col=1, values_only=True):
            yield value
    finally:
        wb.close()


def load_baseline_ids(path: Union[str, Path]) -> Set[int]:
    """Read the entry ids from a baseline table.

    Rows whose first cell is not an integer are skipped.

    Raises
    ------
    BaselineLoadError
        If the file cannot be read.
    """
    path = Path(path)
    reader = _xlsx_entries if path.suffix.lower() in XLSX_SUFFIXES else _csv_entries
    ids = set()
    skipped = 0
    try:
        for value in reader(path):
            entry = _parse_entry(value)
            if entry is None:
                skipped += 1
            else:
                ids.add(entry)
    except Exception as exc:
        # csv/decoding errors, or zipfile/KeyError from openpyxl on a damaged workbook
        raise BaselineLoadError(f"cannot read baseline {path}: {exc}") from exc
    if skipped:
        logger.debug("Skipped %d unparsable baseline rows in %s", skipped, path)
    return ids


class BaselineChecker:
    """Answers "is this item new?" against a fixed set of known ids."""

    def __init__(self, existing_entries: Iterable[int]):
        self.existing_entries = frozenset(existing_entries)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'BaselineChecker':
        checker = cls(load_baseline_ids(path))
        logger.info("Loaded %d existing entries from %s", len(checker), Path(path).name)
        return checker

    def __len__(self) -> int:
        return len(self.existing_entries)

    def is_item_new(self, item_id: int) -> bool:
        return item_id not in self.existing_entries

    def check_items_batch(self, item_ids: Iterable[int]) -> List[Tuple[int, bool]]:
        return [(item_id, self.is_item_new(item_id)) for item_id in item_ids]

    def filter_new(self, items: Iterable[ItemRecord]) -> List[ItemRecord]:
        return [item for item in items if self.is_item_new(item.id)]
