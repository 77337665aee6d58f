#!/usr/bin/env python
"""
Excel-to-Schema - CLI entry point.

Usage:
    # Print the compiled node tree of a workbook
    python -m excel_to_schema.main tree <excel_file> [--config config.yaml] [--root-sheet NAME]

    # Flatten the tree into pages and write them to a report workbook
    python -m excel_to_schema.main pages <excel_file> [--output pages.xlsx]

    # ... or print the pages as Markdown tables
    python -m excel_to_schema.main pages <excel_file> --format markdown
"""

import argparse
import logging
import os
import sys

from excel_to_schema.compiler import compile_tree, compile_workbook
from excel_to_schema.config import load_config
from excel_to_schema.errors import SchemaError
from excel_to_schema.report import (
    format_tree,
    pages_to_markdown,
    write_pages_report,
)
from excel_to_schema.workbook import OpenpyxlGridSource

logger = logging.getLogger(__name__)


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def _build_parser():
    parser = argparse.ArgumentParser(
        description="Compile linked definition sheets into a node tree and pages"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("excel_file", help="Path to the workbook (.xlsx)")
    common.add_argument("--config", default="config.yaml",
                        help="Path to config YAML file (default: config.yaml)")
    common.add_argument("--root-sheet", default=None,
                        help="Root definition sheet (overrides config)")
    common.add_argument("--log-level", default=None,
                        help="Logging level: DEBUG, INFO, WARNING, ERROR")

    sub = parser.add_subparsers(dest="command", required=True)

    # ---- tree ----
    sub.add_parser("tree", parents=[common],
                   help="Print the compiled node tree")

    # ---- pages ----
    p_pages = sub.add_parser("pages", parents=[common],
                             help="Flatten the tree into one page per type")
    p_pages.add_argument(
        "--output", default=None,
        help="Report path (default: ./output/pages.xlsx)",
    )
    p_pages.add_argument(
        "--format", choices=["xlsx", "markdown"], default="xlsx",
        help="Write an xlsx report or print Markdown tables",
    )
    return parser


def main(argv=None):
    args = _build_parser().parse_args(argv)
    config = load_config(args.config)
    setup_logging(args.log_level or config.get("log_level", "INFO"))

    if not os.path.exists(args.excel_file):
        logger.error(f"Excel file not found: {args.excel_file}")
        return 1

    root_sheet = args.root_sheet or config["root_sheet"]
    try:
        with OpenpyxlGridSource.from_file(args.excel_file) as source:
            if args.command == "tree":
                node_config = compile_tree(source, config, root_sheet)
                print(f"{root_sheet}: {node_config.description} "
                      f"(version {node_config.version})")
                print(format_tree(node_config.nodes))
                return 0

            _, pages = compile_workbook(source, config, root_sheet)
    except SchemaError as e:
        logger.error(f"Error: {e}")
        return 1

    if args.format == "markdown":
        print(pages_to_markdown(pages))
    else:
        out = args.output or config.get("output") or os.path.join("output", "pages.xlsx")
        write_pages_report(pages, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
