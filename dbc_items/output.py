"""
output.py - Writes the final item list as JSON or YAML, and reads it back.
"""

import json
from pathlib import Path
from typing import Iterable, List, Union

import yaml

from dbc_items.config import OUTPUT_FORMATS
from dbc_items.errors import OutputWriteError
from dbc_items.models import ItemRecord

SUFFIXES = {'json': '.json', 'yaml': '.yaml'}


def sort_items(items: Iterable[ItemRecord]) -> List[ItemRecord]:
    return sorted(items, key=lambda item: item.id)


def dumps_items(items: Iterable[ItemRecord], fmt: str) -> str:
    data = [item.to_data() for item in items]
    if fmt == 'json':
        return json.dumps(data, ensure_ascii=False, indent=2)
    if fmt == 'yaml':
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False,
                              default_flow_style=False)
    raise ValueError(f"unknown output format {fmt!r} (expected one of {OUTPUT_FORMATS})")


def output_path(base: Union[str, Path], fmt: str) -> Path:
    """`items_full` + 'json' -> items_full.json"""
    return Path(f"{base}{SUFFIXES[fmt]}")


def write_items(items: Iterable[ItemRecord], base: Union[str, Path], fmt: str) -> Path:
    """Serialize `items` to `<base>.<ext>` and return the path written.

    Raises OutputWriteError if the file or its directory cannot be created.
    """
    text = dumps_items(items, fmt)
    path = output_path(base, fmt)
    try:
        if path.parent != Path('.'):
            path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as fh:
            fh.write(text)
    except OSError as exc:
        raise OutputWriteError(f"cannot write {path}: {exc}") from exc
    return path


def loads_items(text: str, fmt: str) -> List[ItemRecord]:
    if fmt == 'json':
        data = json.loads(text)
    elif fmt == 'yaml':
        data = yaml.safe_load(text) or []
    else:
        raise ValueError(f"unknown output format {fmt!r}")
    return [ItemRecord.from_data(entry) for entry in data]


def load_items(path: Union[str, Path]) -> List[ItemRecord]:
    """Read an exported file back; the format is taken from the suffix."""
    path = Path(path)
    suffix = path.suffix.lower()
    fmt = 'yaml' if suffix in ('.yaml', '.yml') else 'json'
    with open(path, encoding='utf-8') as fh:
        return loads_items(fh.read(), fmt)
