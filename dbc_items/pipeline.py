"""
pipeline.py - Drives table files out of the archives into the accumulators.

Ordering contract (last-wins correctness depends on it):
    archives in the order given, then files in the archive's listing
    order, then records in file order.  Every accumulator sees every
    table file.

Failure contract:
    - an archive that cannot be opened or read aborts the run;
    - any exception while one accumulator handles one file is logged at
      DEBUG and dropped; the other accumulators and files carry on.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from dbc_items.accumulators import TableAccumulator
from dbc_items.archives import open_archive
from dbc_items.config import TABLE_SUFFIX

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    archives: int = 0
    table_files: int = 0
    accepted: int = 0
    rejected: int = 0


def is_table_file(name: str) -> bool:
    return name.lower().endswith(TABLE_SUFFIX)


def offer_file(name: str, data: bytes, accumulators: Sequence[TableAccumulator],
               stats: PipelineStats) -> None:
    """Hand one table file to every accumulator that wants it."""
    for accumulator in accumulators:
        if not accumulator.can_handle(name):
            continue
        try:
            accumulator.parse(name, data)
        except Exception as exc:
            # Most of these are schema mismatches; the rest are corrupt files.
            stats.rejected += 1
            logger.debug("%s rejected %s: %s", accumulator.label, name, exc)
        else:
            stats.accepted += 1


def parse_tables(archive_paths: Sequence[Path],
                 accumulators: Sequence[TableAccumulator],
                 opener: Optional[Callable] = None) -> PipelineStats:
    """Read every table file of every archive into `accumulators`.

    Parameters
    ----------
    archive_paths : sequence of Path
        Archives in priority order (lowest first).
    accumulators : sequence of TableAccumulator
        Offered each table file in this order.
    opener : callable, optional
        path -> archive object with list(), read_file(name) and close().
        Defaults to archives.open_archive.

    Returns
    -------
    PipelineStats

    Raises
    ------
    ArchiveOpenError, ArchiveReadError
        Propagated from the opener / archive.
    """
    opener = opener or open_archive
    stats = PipelineStats()

    for path in archive_paths:
        logger.info("mpq: %s", path)
        archive = opener(path)
        try:
            for name in archive.list():
                if not is_table_file(name):
                    continue
                data = archive.read_file(name)
                stats.table_files += 1
                offer_file(name, data, accumulators, stats)
        finally:
            archive.close()
        stats.archives += 1

    for accumulator in accumulators:
        accumulator.finish()

    return stats
