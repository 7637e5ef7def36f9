"""Run-wide constants. Everything here can be overridden from the CLI."""

from pathlib import Path

# ---------------------------------------------------------------------------
# Archive discovery
# ---------------------------------------------------------------------------

ARCHIVE_SUFFIX = '.mpq'

#: Audio archives never carry tables; skipping them saves most of the I/O.
ARCHIVE_IGNORE_PREFIX = 'speech'

#: Localized archives live here and take priority over the root ones.
LOCALE_DIR = 'enUS'

TABLE_SUFFIX = '.dbc'

# ---------------------------------------------------------------------------
# External data files (relative to the working directory)
# ---------------------------------------------------------------------------

SUPPLEMENTAL_PATH = Path('data') / 'parsed_items.json'
BASELINE_PATH = Path('data') / 'wotlk_item_template.csv'

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

DEFAULT_OUTPUT = 'items_full'
OUTPUT_FORMATS = ('json', 'yaml')
DEFAULT_FORMAT = 'json'

ICON_URL_TEMPLATE = 'https://wotlk.evowow.com/static/images/wow/icons/large/{icon}.jpg'

#: Highest required level exported (classic level cap).
MAX_REQUIRED_LEVEL = 60

UNKNOWN_ITEM_NAME = '<unknown>'
