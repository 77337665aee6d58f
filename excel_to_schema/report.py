"""
Page output: write flattened pages to an Excel report, or render them as
pandas DataFrames / Markdown tables.
"""

import logging
import os

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font, PatternFill

from .model import Column, PageSet

logger = logging.getLogger(__name__)

COLUMNS = ["TagName", "DataType", "Description", "ObjectLevel"]

LABEL_SEPARATOR = " / "

# Excel limits sheet titles to 31 characters and forbids a few symbols
_MAX_TITLE = 31
_INVALID_TITLE_CHARS = set('[]:*?/\\')

_HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4",
                           fill_type="solid")
_HEADER_FONT = Font(bold=True, color="FFFFFF")


def _column_values(column):
    return [
        column.tag_name,
        column.data_type,
        column.description,
        LABEL_SEPARATOR.join(column.ancestor_labels),
    ]


def _sheet_title(name, used):
    """Return a valid, unique worksheet title for page *name*."""
    title = "".join("_" if ch in _INVALID_TITLE_CHARS else ch for ch in name)
    title = (title or "Page")[:_MAX_TITLE]
    candidate, n = title, 1
    while candidate.casefold() in used:
        n += 1
        suffix = f"~{n}"
        candidate = title[:_MAX_TITLE - len(suffix)] + suffix
    used.add(candidate.casefold())
    return candidate


def _write_table_header(ws, row, headers):
    """Write a bold, coloured header row."""
    for ci, h in enumerate(headers, 1):
        cell = ws.cell(row=row, column=ci, value=h)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
    return row + 1


def write_pages_report(pages, output_path):
    """Write one worksheet per page to *output_path*.

    Parameters
    ----------
    pages : PageSet
        Pages produced by :func:`~excel_to_schema.flattener.flatten`.
    output_path : str
        Destination ``.xlsx`` file.

    Returns
    -------
    str
        Path to the written report.
    """
    wb = Workbook()
    # Drop the default sheet up front so a page may be named "Sheet"
    if len(pages):
        wb.remove(wb.active)
    used = set()

    for page in pages:
        ws = wb.create_sheet(_sheet_title(page.name, used))
        ws.column_dimensions["A"].width = 24
        ws.column_dimensions["B"].width = 20
        ws.column_dimensions["C"].width = 40
        ws.column_dimensions["D"].width = 40

        row = _write_table_header(ws, 1, COLUMNS)
        for column in page.rows:
            for ci, value in enumerate(_column_values(column), 1):
                ws.cell(row=row, column=ci, value=value)
            row += 1
        if ws.title != page.name:
            logger.warning(f"Page '{page.name}' written as sheet '{ws.title}'")

    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    wb.save(output_path)
    wb.close()
    logger.info(f"Generated pages report: {output_path}")
    return output_path


def _read_sheet_rows(ws):
    """Read a worksheet into a list of dicts keyed by the header row."""
    headers = [ws.cell(row=1, column=c).value
               for c in range(1, ws.max_column + 1)]
    col_map = {h: i for i, h in enumerate(headers)}
    rows = []
    for r in range(2, ws.max_row + 1):
        vals = [ws.cell(row=r, column=c).value
                for c in range(1, ws.max_column + 1)]
        if all(v is None for v in vals):
            continue
        rows.append({h: vals[i] for h, i in col_map.items()})
    return rows


def read_pages_report(report_path):
    """Load a report written by :func:`write_pages_report` back into pages.

    Page names are the worksheet titles.
    """
    wb = load_workbook(report_path)
    pages = PageSet()
    for sn in wb.sheetnames:
        page = pages.create(sn)
        for row_dict in _read_sheet_rows(wb[sn]):
            labels = row_dict.get("ObjectLevel") or ""
            page.rows.append(Column(
                tag_name=str(row_dict.get("TagName") or ""),
                data_type=str(row_dict.get("DataType") or ""),
                description=str(row_dict.get("Description") or ""),
                ancestor_labels=labels.split(LABEL_SEPARATOR) if labels else [],
            ))
    wb.close()
    return pages


def pages_to_frames(pages):
    """Return ``{page name: DataFrame}`` with the report columns."""
    return {
        page.name: pd.DataFrame(
            [_column_values(c) for c in page.rows], columns=COLUMNS)
        for page in pages
    }


def pages_to_markdown(pages) -> str:
    """Render every page as a Markdown table."""
    parts = []
    for page in pages:
        parts.append(f"## Page: {page.name}\n")
        if not page.rows:
            parts.append("_empty page_\n")
            continue
        lines = ["| " + " | ".join(COLUMNS) + " |"]
        lines.append("| " + " | ".join(["---"] * len(COLUMNS)) + " |")
        for column in page.rows:
            vals = [str(v).replace("|", "\\|") for v in _column_values(column)]
            lines.append("| " + " | ".join(vals) + " |")
        parts.append("\n".join(lines) + "\n")
    return "\n".join(parts)


def format_tree(nodes, indent="  ") -> str:
    """Render a node list as an indented outline, one node per line."""
    lines = []

    def _visit(node, depth):
        type_name = node.type.type_name
        label = f"{node.name} [{type(node.type).__name__.lower()}"
        label += f": {type_name}]" if type_name else "]"
        if node.description:
            label += f" - {node.description}"
        lines.append(f"{indent * depth}{label}")
        for child in node.children:
            _visit(child, depth + 1)

    for node in nodes:
        _visit(node, 0)
    return "\n".join(lines)
