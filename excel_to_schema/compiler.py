"""
Top-level compile step: root sheet -> node tree -> pages.
"""

import logging

from .builder import GridTreeBuilder
from .config import DEFAULTS, layout_from_config, load_config
from .errors import CompileError, SchemaError
from .flattener import flatten_config

logger = logging.getLogger(__name__)


def compile_tree(source, config=None, root_sheet=None):
    """Build the node tree for the configured root sheet.

    Args:
        source: A ``GridSource`` (e.g. :class:`OpenpyxlGridSource`).
        config: Configuration dict as returned by :func:`load_config`.
            Missing keys fall back to :data:`~excel_to_schema.config.DEFAULTS`.
        root_sheet: Overrides ``config["root_sheet"]``.

    Returns:
        The :class:`~excel_to_schema.model.NodeConfig` for the root sheet.

    Raises:
        CompileError: wrapping the underlying :class:`SchemaError`.
    """
    config = {**DEFAULTS, **(config or load_config())}
    root_sheet = root_sheet or config["root_sheet"]
    builder = GridTreeBuilder(
        source,
        sub_processes=config.get("sub_processes") or [],
        data_types=config.get("data_types") or [],
        layout=layout_from_config(config),
    )
    logger.info(f"Compiling root sheet '{root_sheet}'")
    try:
        return builder.build(root_sheet)
    except SchemaError as e:
        raise CompileError(root_sheet, e) from e


def compile_workbook(source, config=None, root_sheet=None):
    """Build the tree and flatten it; returns ``(node_config, pages)``."""
    config = {**DEFAULTS, **(config or load_config())}
    root_sheet = root_sheet or config["root_sheet"]
    node_config = compile_tree(source, config, root_sheet)
    try:
        pages = flatten_config(node_config, root_sheet)
    except SchemaError as e:
        raise CompileError(root_sheet, e) from e
    return node_config, pages
