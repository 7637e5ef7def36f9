#!/usr/bin/env python3
"""
extract.py - WotLK 3.3.5 item data parser & exporter.

Reads the item-related DBC tables out of the client's MPQ archives,
joins them into one record per item, patches in hand-curated facts from
data/parsed_items.json, drops items above level 60 and items the target
server already has (data/wotlk_item_template.csv), and writes the rest
sorted by id.

Usage:
    dbc-items --data-dir "/path/to/WoW/Data"
    dbc-items --data-dir Data -o web/items -f yaml
    python3 -m dbc_items.extract --data-dir Data --baseline item_template.xlsx
"""

import argparse
import logging
import sys
from pathlib import Path

from dbc_items import config
from dbc_items.accumulators import ItemTables
from dbc_items.archives import collect_archive_paths
from dbc_items.baseline import BaselineChecker, filter_by_level
from dbc_items.enrich import build_item_records
from dbc_items.errors import ExtractionError, NoArchivesError
from dbc_items.output import sort_items, write_items
from dbc_items.pipeline import parse_tables
from dbc_items.supplemental import load_supplemental, overlay_supplemental


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dbc-items', description='WotLK 3.3.5 Item Data Parser & Exporter')
    parser.add_argument('--data-dir', required=True, type=Path,
                        help='Path to WoW Data directory')
    parser.add_argument('-o', '--output', default=config.DEFAULT_OUTPUT,
                        help='Output file name (without extension)')
    parser.add_argument('-f', '--format', default=config.DEFAULT_FORMAT,
                        choices=config.OUTPUT_FORMATS, help='Output format')
    parser.add_argument('--supplemental', type=Path, default=config.SUPPLEMENTAL_PATH,
                        help='Curated item facts (JSON keyed by item id)')
    parser.add_argument('--baseline', type=Path, default=config.BASELINE_PATH,
                        help='Known items table (CSV or XLSX, entry id in column 1)')
    parser.add_argument('--locale', default=config.LOCALE_DIR,
                        help='Localized archive subdirectory')
    parser.add_argument('--max-level', type=int, default=config.MAX_REQUIRED_LEVEL,
                        help='Highest required level to export')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every table file each accumulator rejects')
    return parser


def run(args: argparse.Namespace) -> Path:
    # -----------------------------------------------------------------------
    # Phase 1: Locate archives
    # -----------------------------------------------------------------------
    print(f"Scanning for MPQ files in: {args.data_dir}", flush=True)
    mpq_paths = collect_archive_paths(args.data_dir, args.locale)
    if not mpq_paths:
        raise NoArchivesError(f"No MPQ files found in data directory {args.data_dir}")
    print(f"Found {len(mpq_paths)} MPQ files")

    # -----------------------------------------------------------------------
    # Phase 2: Parse DBC tables
    # -----------------------------------------------------------------------
    print("\n--- Parsing DBC tables ---", flush=True)
    tables = ItemTables.empty()
    stats = parse_tables(mpq_paths, tables.handlers())
    print(f"  {stats.table_files} table files in {stats.archives} archives "
          f"({stats.accepted} decoded, {stats.rejected} rejected)")
    for handler in tables.handlers():
        print(f"  {handler.label:<22} {len(handler):>7} rows")

    # -----------------------------------------------------------------------
    # Phase 3: Join + supplement
    # -----------------------------------------------------------------------
    print("\n--- Building item records ---", flush=True)
    supplemental = load_supplemental(args.supplemental)
    print(f"  Loaded {len(supplemental)} datamined entries")

    items = build_item_records(tables)
    items = overlay_supplemental(items, supplemental)
    items = filter_by_level(items, args.max_level)
    print(f"  {len(items)} items at or below level {args.max_level}")

    # -----------------------------------------------------------------------
    # Phase 4: Baseline filter
    # -----------------------------------------------------------------------
    checker = BaselineChecker.from_file(args.baseline)
    print(f"  Filtering {len(items)} items against {len(checker)} baseline entries...")
    items = checker.filter_new(items)
    print(f"  Filtered to {len(items)} new items (not in baseline)")

    # -----------------------------------------------------------------------
    # Phase 5: Write
    # -----------------------------------------------------------------------
    items = sort_items(items)
    path = write_items(items, args.output, args.format)
    print(f"\nSuccessfully exported {len(items)} items to: {path}")
    return path


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    try:
        run(args)
    except ExtractionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
