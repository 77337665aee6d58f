"""
Helpers used while scanning definition sheets: basic-type membership,
the ``PD:xxx:`` description placeholder, and sheet-name suggestions for
error messages.
"""

import re

# A parametric description, e.g. ``PD:xxx:12ab$``
PLACEHOLDER_RE = re.compile(r"^PD:xxx:(\d+)[a-zA-Z]+\$$")

SUB_PROCESS_TOKEN = "xxx"
ROW_VALUE_TOKEN = "yy"

SUGGESTION_PREFIX_LENGTH = 3


def is_basic_type(type_name, data_types):
    """Return True if *type_name* is one of the recognised *data_types*."""
    return type_name in data_types


def is_placeholder(description):
    """Return True if *description* is a ``PD:xxx:<digits><letters>$`` pattern."""
    if not description:
        return False
    return PLACEHOLDER_RE.fullmatch(description) is not None


def replace_placeholders(pattern, sub_process, row_value):
    """Substitute the ``xxx`` and ``yy`` tokens of *pattern*.

    ``xxx`` is replaced first with *sub_process*, then ``yy`` with
    *row_value*.  A missing value (``None``) substitutes an empty string.
    """
    result = pattern.replace(SUB_PROCESS_TOKEN, sub_process or "")
    return result.replace(ROW_VALUE_TOKEN, row_value or "")


def find_similar_sheet_names(desired, sheet_names):
    """Return the sheet names sharing the first three characters of *desired*.

    The comparison is case-insensitive and uses ``min(3, len(desired))``
    characters, so an empty name matches every sheet.
    """
    prefix = desired[:SUGGESTION_PREFIX_LENGTH].casefold()
    return [name for name in sheet_names if name.casefold().startswith(prefix)]
