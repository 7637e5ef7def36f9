"""
dbc_items - item catalog exporter for WotLK 3.3.5 client data.

Scans the client's MPQ archives for DBC tables, joins the item tables
into denormalized item records and writes them out as JSON or YAML.
"""

__version__ = '0.3.0'
