"""
Creation-script options for articles.

`CreationScriptOptions` is the capability set sent to the publisher as the article
`@schema_option` bitmask. It controls which auxiliary schema objects (indexes,
constraints, statistics, ...) are scripted for subscribers at initial synchronisation.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntFlag


class CreationScriptOptions(IntFlag):
    """Bits of the article `@schema_option` value."""

    NONE = 0x00
    PRIMARY_OBJECT = 0x01
    CUSTOM_PROCEDURES = 0x02
    IDENTITY = 0x04
    KEEP_TIMESTAMP = 0x08
    CLUSTERED_INDEXES = 0x10
    USER_TYPES_TO_BASE_TYPES = 0x20
    NON_CLUSTERED_INDEXES = 0x40
    DRI_PRIMARY_KEY = 0x80
    USER_TRIGGERS = 0x100
    DRI_FOREIGN_KEYS = 0x200
    DRI_CHECKS = 0x400
    DRI_DEFAULTS = 0x800
    COLLATION = 0x1000
    EXTENDED_PROPERTIES = 0x2000
    DRI_UNIQUE_KEYS = 0x4000
    MARK_REPLICATED_CHECK_CONSTRAINTS_AS_NOT_FOR_REPLICATION = 0x10000
    MARK_REPLICATED_FOREIGN_KEY_CONSTRAINTS_AS_NOT_FOR_REPLICATION = 0x20000
    FILE_GROUPS = 0x40000
    PARTITION_SCHEMES_FOR_TABLES = 0x80000
    PARTITION_SCHEMES_FOR_INDEXES = 0x100000
    STATISTICS = 0x200000
    DEFAULT_BINDINGS = 0x400000
    RULE_BINDINGS = 0x800000
    FULL_TEXT_INDEXES = 0x1000000
    XML_INDEXES = 0x4000000
    SCHEMA = 0x8000000
    PERMISSIONS = 0x40000000

    def as_hex(self) -> str:
        """Render as the binary(8) literal the replication procedures accept."""
        return f"0x{int(self):016X}"


DEFAULT_CREATION_SCRIPT_OPTIONS = (
    CreationScriptOptions.PRIMARY_OBJECT
    | CreationScriptOptions.IDENTITY
    | CreationScriptOptions.KEEP_TIMESTAMP
    | CreationScriptOptions.CLUSTERED_INDEXES
    | CreationScriptOptions.DRI_PRIMARY_KEY
    | CreationScriptOptions.COLLATION
    | CreationScriptOptions.DRI_UNIQUE_KEYS
    | CreationScriptOptions.MARK_REPLICATED_CHECK_CONSTRAINTS_AS_NOT_FOR_REPLICATION
    | CreationScriptOptions.MARK_REPLICATED_FOREIGN_KEY_CONSTRAINTS_AS_NOT_FOR_REPLICATION
    | CreationScriptOptions.SCHEMA
)


def _normalise_option_name(name: str) -> str:
    """'DriPrimaryKey', 'dri_primary_key' and 'DRI-PRIMARY-KEY' all map to 'DRIPRIMARYKEY'."""
    return "".join(ch for ch in str(name) if ch.isalnum()).upper()


_OPTIONS_BY_NORMALISED_NAME: dict[str, CreationScriptOptions] = {
    _normalise_option_name(member.name): member
    for member in CreationScriptOptions
    if member.name is not None
}


def parse_creation_script_option(name: str) -> CreationScriptOptions:
    """Look up a single option by name (case and separator insensitive)."""
    option = _OPTIONS_BY_NORMALISED_NAME.get(_normalise_option_name(name))
    if option is None:
        raise ValueError(f"Unknown creation script option: {name!r}")
    return option


def build_creation_script_options(
    names: Iterable[str] = (),
    include_defaults: bool = True,
) -> CreationScriptOptions:
    """
    Combine named options into one capability set.

    The defaults cover the primary object, its keys, indexes and constraints;
    pass `include_defaults=False` to start from an empty set.
    """
    combined = DEFAULT_CREATION_SCRIPT_OPTIONS if include_defaults else CreationScriptOptions.NONE
    for name in names:
        combined |= parse_creation_script_option(name)
    return combined
