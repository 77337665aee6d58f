"""
Build definition workbooks for the schema compiler tests.

A definition sheet row is described by a dict:

    {"levels": ["Plant", "WC1"], "name": "Speed", "type": "Int", "notes": "..."}

``levels`` fill the hierarchy columns from column A; ``name``, ``type``
and ``notes`` go to the field columns (O, P, Q by default).
"""

from openpyxl import Workbook
from openpyxl.styles import Font

NAME_COL = 15
TYPE_COL = 16
NOTES_COL = 17

ROOT_FIRST_ROW = 4
REFERENCE_FIRST_ROW = 2


def _write_header(ws, row):
    ws.cell(row=row, column=1, value="Level 1").font = Font(bold=True)
    ws.cell(row=row, column=NAME_COL, value="Name").font = Font(bold=True)
    ws.cell(row=row, column=TYPE_COL, value="Type").font = Font(bold=True)
    ws.cell(row=row, column=NOTES_COL, value="Description").font = Font(bold=True)


def _write_rows(ws, first_row, rows):
    for offset, row_def in enumerate(rows):
        r = first_row + offset
        for ci, level in enumerate(row_def.get("levels", []), 1):
            if level:
                ws.cell(row=r, column=ci, value=level)
        if row_def.get("name"):
            ws.cell(row=r, column=NAME_COL, value=row_def["name"])
        if row_def.get("type"):
            ws.cell(row=r, column=TYPE_COL, value=row_def["type"])
        if row_def.get("notes"):
            ws.cell(row=r, column=NOTES_COL, value=row_def["notes"])


def add_root_sheet(wb, title, rows, description="", version=""):
    """Add a root definition sheet: B1 description, B2 version, header on row 3."""
    ws = wb.create_sheet(title)
    ws["A1"] = "Description"
    ws["B1"] = description or None
    ws["A2"] = "Version"
    ws["B2"] = version or None
    _write_header(ws, ROOT_FIRST_ROW - 1)
    _write_rows(ws, ROOT_FIRST_ROW, rows)
    return ws


def add_definition_sheet(wb, title, rows):
    """Add a referenced definition sheet: header on row 1, data from row 2."""
    ws = wb.create_sheet(title)
    _write_header(ws, REFERENCE_FIRST_ROW - 1)
    _write_rows(ws, REFERENCE_FIRST_ROW, rows)
    return ws


def new_workbook():
    """Return an empty workbook (the default sheet removed)."""
    wb = Workbook()
    del wb[wb.active.title]
    return wb


def create_motor_workbook():
    """The Main/MotorDef workbook: one leaf and one reference on the root."""
    wb = new_workbook()
    add_root_sheet(wb, "Main", [
        {"levels": ["Main"], "name": "Speed", "type": "Int"},
        {"levels": ["Main"], "name": "Motor", "type": "MotorDef"},
    ], description="Motor line", version="1.0")
    add_definition_sheet(wb, "MotorDef", [
        {"name": "RPM", "type": "Int"},
        {"name": "Torque", "type": "Int"},
    ])
    return wb


def create_sample_workbook(output_path):
    """Save a plant model with sub-processes and parametric descriptions."""
    wb = new_workbook()
    add_root_sheet(wb, "OPC Config Model", [
        {"levels": ["Plant", "WC1"], "name": "Status", "type": "Int"},
        {"levels": ["Plant", "WC1"], "name": "Drive", "type": "DriveDef",
         "notes": "PD:xxx:10ab$"},
        {"levels": ["Plant", "WC2"], "name": "Status", "type": "Int"},
        {"levels": ["Plant", "WC2"], "name": "Drive", "type": "DriveDef",
         "notes": "PD:xxx:10ab$"},
        {"name": "Alarms", "notes": "Alarms"},
    ], description="Plant model", version="2.3")
    add_definition_sheet(wb, "DriveDef", [
        {"name": "Current", "type": "Float", "notes": "Amps"},
        {"name": "Enabled", "type": "Bool", "notes": "Run"},
    ])
    add_definition_sheet(wb, "Alarms", [
        {"levels": ["Group"], "name": "High", "type": "Bool"},
        {"levels": ["Group"], "name": "Low", "type": "Bool"},
    ])
    wb.save(output_path)
    wb.close()
    return output_path
