"""
archives.py - MPQ discovery and a thin reader over mpyq.

Archive priority is positional: collect_archive_paths() returns the root
archives first, then the localized ones, each group sorted by filename.
Tables read from a later archive replace rows read from an earlier one.
"""

import logging
from pathlib import Path
from typing import List, Union

import mpyq

from dbc_items.config import ARCHIVE_IGNORE_PREFIX, ARCHIVE_SUFFIX, LOCALE_DIR
from dbc_items.errors import ArchiveListingError, ArchiveOpenError, ArchiveReadError

logger = logging.getLogger(__name__)

LISTFILE_NAME = '(listfile)'


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

def is_candidate_archive(name: str) -> bool:
    lowered = name.lower()
    return lowered.endswith(ARCHIVE_SUFFIX) and not lowered.startswith(ARCHIVE_IGNORE_PREFIX)


def collect_archives(directory: Union[str, Path]) -> List[Path]:
    """List the MPQ archives directly inside `directory`, sorted by filename.

    A directory that does not exist yields an empty list.

    Raises
    ------
    ArchiveListingError
        If the directory exists but cannot be listed.
    """
    directory = Path(directory)
    if not directory.exists():
        return []
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise ArchiveListingError(f"cannot list {directory}: {exc}") from exc

    paths = [p for p in entries if is_candidate_archive(p.name) and not p.is_dir()]
    paths.sort(key=lambda p: p.name)
    return paths


def collect_archive_paths(data_dir: Union[str, Path], locale: str = LOCALE_DIR) -> List[Path]:
    """Return every archive under the data directory in priority order.

    Root archives come first, then those in the `locale` subdirectory (if
    present), so localized data overrides the base data.

    Raises
    ------
    ArchiveListingError
        If the data directory itself is missing or unreadable.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise ArchiveListingError(f"data directory not found: {data_dir}")

    paths = collect_archives(data_dir)
    if locale:
        paths.extend(collect_archives(data_dir / locale))
    return paths


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------

class MpqArchive:
    """An open MPQ archive.

    Wraps mpyq.MPQArchive with the three operations the pipeline needs:
    list(), read_file() and close().  Usable as a context manager.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        # (listfile) is optional; list() reads it.
        self._mpq = mpyq.MPQArchive(str(self.path), listfile=False)

    def list(self) -> List[str]:
        """Names from the archive's (listfile); empty if it has none."""
        try:
            listing = self._mpq.read_file(LISTFILE_NAME)
        except Exception as exc:
            raise ArchiveReadError(f"{self.path.name}: cannot read {LISTFILE_NAME}: {exc}") from exc
        if listing is None:
            logger.debug("%s has no %s", self.path.name, LISTFILE_NAME)
            return []
        return [line.decode('utf-8', errors='replace')
                for line in listing.splitlines() if line]

    def read_file(self, name: str) -> bytes:
        try:
            data = self._mpq.read_file(name)
        except Exception as exc:
            raise ArchiveReadError(f"{self.path.name}: cannot read {name}: {exc}") from exc
        if data is None:
            raise ArchiveReadError(f"{self.path.name}: {name} is listed but missing")
        return data

    def close(self) -> None:
        self._mpq.file.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def open_archive(path: Union[str, Path]) -> MpqArchive:
    """Open an MPQ archive, turning any failure into ArchiveOpenError."""
    try:
        return MpqArchive(path)
    except Exception as exc:
        raise ArchiveOpenError(f"cannot open archive {path}: {exc}") from exc
