"""Configuration loading and the sheet layout used by the builder."""

import os
from dataclasses import dataclass

import yaml

DEFAULT_ROOT_SHEET = "OPC Config Model"

DEFAULTS = {
    "root_sheet": DEFAULT_ROOT_SHEET,
    "sub_processes": [],
    "data_types": [
        "Boolean", "SByte", "Byte", "Int16", "UInt16", "Int32", "UInt32",
        "Int64", "UInt64", "Float", "Double", "String", "DateTime",
    ],
    # Column positions are 1-based, as in Excel
    "hierarchy_columns": 10,
    "name_column": 15,
    "type_column": 16,
    "notes_column": 17,
    "root_first_row": 4,
    "reference_first_row": 2,
    "log_level": "INFO",
    "output": None,
}


@dataclass(frozen=True)
class GridLayout:
    """Where the builder finds things on a definition sheet."""
    hierarchy_columns: int = 10
    name_column: int = 15
    type_column: int = 16
    notes_column: int = 17
    root_first_row: int = 4
    reference_first_row: int = 2
    description_cell: tuple = (1, 2)
    version_cell: tuple = (2, 2)


def load_config(config_path=None):
    """Load configuration from a YAML file, merged over :data:`DEFAULTS`."""
    config = dict(DEFAULTS)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        config.update(user_config)
    return config


def layout_from_config(config):
    """Build a :class:`GridLayout` from the column/row keys of *config*.

    Keys missing from *config* fall back to :data:`DEFAULTS`.
    """
    config = {**DEFAULTS, **config}
    return GridLayout(
        hierarchy_columns=int(config["hierarchy_columns"]),
        name_column=int(config["name_column"]),
        type_column=int(config["type_column"]),
        notes_column=int(config["notes_column"]),
        root_first_row=int(config["root_first_row"]),
        reference_first_row=int(config["reference_first_row"]),
    )
