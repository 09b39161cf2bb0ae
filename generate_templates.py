"""
Generate placeholder spreadsheet templates for the two export layouts.
Uses openpyxl to lay out labels around the fixed cells the exporter writes to,
so the service can be run and tested without the official template files.

Replace the generated files with the real templates for production use; the
value cells in layouts.py must stay at the same addresses.

Run:  python generate_templates.py
"""

import os

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from layouts import (
    DISPATCH_LEFT_COLUMN,
    DISPATCH_RIGHT_COLUMN,
    FUEL_LOG_FIRST_ROW,
)

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
ASSETS_DIR = os.path.join(SCRIPT_DIR, "assets")

TITLE_FONT = Font(bold=True, size=14)
LABEL_FONT = Font(bold=True)


def _label(ws, address, text):
    ws[address] = text
    ws[address].font = LABEL_FONT
    ws[address].alignment = Alignment(horizontal="center")


def build_dispatch_template():
    """Blank 派車單里程 sheet; only label cells are filled."""
    wb = Workbook()
    ws = wb.active
    ws.title = "派車單"

    ws["E1"] = "派車單"
    ws["E1"].font = TITLE_FONT

    _label(ws, "A2", "事由")
    _label(ws, "A4", "用車時間")
    _label(ws, "H5", "駕駛人")
    _label(ws, "B8", "出發里程")

    # Column headings sit on row 7, above both trip columns
    for dest_col, km_col, _, _ in (DISPATCH_LEFT_COLUMN, DISPATCH_RIGHT_COLUMN):
        _label(ws, f"{dest_col}7", "目的地")
        _label(ws, f"{km_col}7", "里程")

    _label(ws, "A22", "加油日期")
    _label(ws, "E22", "公升")
    _label(ws, "I22", "加油里程")

    for col in "ABCDEFGHI":
        ws.column_dimensions[col].width = 14
    return wb


def build_fuel_log_template():
    """Blank 消耗油料登記表 sheet; only label cells are filled."""
    wb = Workbook()
    ws = wb.active
    ws.title = "油料登記"

    ws["A1"] = "消耗油料登記表"
    ws["A1"].font = TITLE_FONT

    _label(ws, "F3", "年月")

    headers = {
        "A": "日",
        "B": "起始里程",
        "C": "結束里程",
        "E": "加油日期",
        "F": "加油公升",
        "G": "加油里程",
        "H": "行駛公里",
        "J": "油耗 km/l",
    }
    for col, text in headers.items():
        _label(ws, f"{col}{FUEL_LOG_FIRST_ROW - 1}", text)
        ws.column_dimensions[col].width = 12
    return wb


def main():
    print("=" * 50)
    print("Fuel Log – Template Generator")
    print("=" * 50)
    print()

    templates = {
        "dispatch_template.xlsx": build_dispatch_template,
        "fuel_log_template.xlsx": build_fuel_log_template,
    }

    os.makedirs(ASSETS_DIR, exist_ok=True)
    for filename, builder in templates.items():
        output_path = os.path.join(ASSETS_DIR, filename)
        if os.path.exists(output_path):
            print(f"  Skipped {filename} (already exists)")
            continue
        builder().save(output_path)
        print(f"  Created {filename}")

    print()
    print(f"Templates saved to: {ASSETS_DIR}")
    for f in sorted(os.listdir(ASSETS_DIR)):
        fsize = os.path.getsize(os.path.join(ASSETS_DIR, f))
        print(f"  {f:30s}  {fsize:>8,} bytes")


if __name__ == "__main__":
    main()
