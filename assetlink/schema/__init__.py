"""Inventory schema definitions: header aliases, palette, export layout and limits."""

from typing import Dict, List

# Semantic fields that can link two rows to the same physical asset,
# in resolution priority order.
IDENTITY_FIELDS = ["mac", "hostname", "ip", "generic_id"]

# Header name variations accepted for each semantic field.
#
# Aliases are compared after lower-casing and removing whitespace, hyphens
# and underscores, so "MAC Address", "mac_address" and "mac-address" all
# match "macaddress". List order is NOT a priority signal: the first column
# of the row (in the row's own order) that matches any alias wins.
COLUMN_MAPPINGS: Dict[str, List[str]] = {
    "mac": [
        "mac", "macaddress", "physicaladdress", "ethernet", "hwaddress",
        "hardwareaddress", "physical"
    ],
    "hostname": [
        "hostname", "host", "computername", "name", "assetname", "devicename",
        "systemname", "computer", "device", "system"
    ],
    "ip": [
        "ip", "ipaddress", "ipv4", "address", "ipv4address",
        "internetaddress", "ipaddr"
    ],
    "generic_id": [
        "id", "assetid", "serial", "serialnumber", "tag", "assettag"
    ],
    "manufacturer": [
        "manufacturer", "mfg", "vendor", "make", "devicevendor",
        "hardwarevendor", "manuf"
    ],
}

# Display palette, assigned by source index and cycling.
SOURCE_COLORS = [
    "#0B5AA8",  # dark blue
    "#40A7DB",  # light blue
    "emerald-600",
    "amber-600",
    "rose-600",
    "indigo-600",
    "cyan-600",
    "orange-600",
    "teal-600",
    "violet-600",
]

# Flat export layout, in column order
EXPORT_HEADERS = [
    "Status",
    "Primary Identifier",
    "Match Type",
    "Hostname",
    "IP",
    "Manufacturer",
    "Sources Count",
    "Sources List",
]

STATUS_SYNCED = "Synced"
STATUS_UNIQUE = "Unique"
UNKNOWN_MANUFACTURER = "Unknown"

# Match-type labels for the network identity fields, in priority order.
# A generic asset id has no match-type label.
MATCH_TYPE_LABELS = [
    ("mac", "MAC"),
    ("hostname", "HOSTNAME"),
    ("ip", "IP"),
]

# Workspace and presentation limits
MAX_SOURCES = 10
PAGE_SIZE = 500

# Separators stripped from MAC addresses (and from MAC search terms)
MAC_SEPARATORS = ":-."

__all__ = [
    "IDENTITY_FIELDS",
    "COLUMN_MAPPINGS",
    "SOURCE_COLORS",
    "EXPORT_HEADERS",
    "STATUS_SYNCED",
    "STATUS_UNIQUE",
    "UNKNOWN_MANUFACTURER",
    "MATCH_TYPE_LABELS",
    "MAX_SOURCES",
    "PAGE_SIZE",
    "MAC_SEPARATORS",
]
