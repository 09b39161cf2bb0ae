"""
Fuel Log – Template cell layouts.
Writes trip records into the fixed cell addresses of the two spreadsheet templates:

  * 派車單里程   (dispatch / mileage sheet) – one sheet per date + driver group
  * 消耗油料登記表 (fuel consumption log)  – one sheet for all records, one row per day

Only known cells are written; the templates are never restructured.
Any change to the template files requires updating the coordinates below.
"""

from dataclasses import dataclass

from grouping import day_key, group_by
from rocdate import day_of_month, to_roc_date, to_roc_month

# ── Dispatch sheet coordinates ───────────────────────────────────────────────

DISPATCH_REASON_CELL = "C2"
DISPATCH_DATE_CELL = "C4"
DISPATCH_DRIVER_CELL = "I5"
DISPATCH_START_KM_CELL = "D8"

# (destination column, end-km column, first row, last row)
DISPATCH_LEFT_COLUMN = ("B", "D", 9, 19)  # 11 rows
DISPATCH_RIGHT_COLUMN = ("G", "I", 8, 19)  # 12 rows

DISPATCH_FUEL_DATE_CELL = "A23"
DISPATCH_FUEL_LITERS_CELL = "E23"
DISPATCH_FUEL_KM_CELL = "I23"

# ── Fuel-log coordinates ─────────────────────────────────────────────────────

FUEL_LOG_MONTH_CELL = "G3"
FUEL_LOG_FIRST_ROW = 6
FUEL_LOG_LAST_ROW = 27  # 22 days

FUEL_LOG_DAY_COL = "A"
FUEL_LOG_START_KM_COL = "B"
FUEL_LOG_END_KM_COL = "C"
FUEL_LOG_LITERS_COL = "F"
FUEL_LOG_FUEL_KM_COL = "G"
FUEL_LOG_KM_DIFF_COL = "H"
FUEL_LOG_CONSUMPTION_COL = "J"


def _capacity(column):
    _, _, first, last = column
    return last - first + 1


DISPATCH_CAPACITY = _capacity(DISPATCH_LEFT_COLUMN) + _capacity(DISPATCH_RIGHT_COLUMN)
FUEL_LOG_CAPACITY = FUEL_LOG_LAST_ROW - FUEL_LOG_FIRST_ROW + 1


@dataclass
class FillResult:
    """How many items a layout wrote and how many it had no room for."""

    written: int = 0
    dropped: int = 0


def _put(ws, address, value):
    """Write *value* unless it is missing; missing values leave the cell untouched."""
    if value is None:
        return
    ws[address] = value


def dispatch_slot(index):
    """
    Return the ``(destination_cell, end_km_cell)`` pair for the *index*-th
    trip of a dispatch group, or None when it falls past both columns.

    The left column is filled top to bottom first, then the right column.
    """
    for column in (DISPATCH_LEFT_COLUMN, DISPATCH_RIGHT_COLUMN):
        dest_col, km_col, first, _ = column
        size = _capacity(column)
        if index < size:
            row = first + index
            return f"{dest_col}{row}", f"{km_col}{row}"
        index -= size
    return None


# ╔═══════════════════════════════════════════════════════════════════════════╗
# ║  DISPATCH SHEET                                                         ║
# ╚═══════════════════════════════════════════════════════════════════════════╝


def fill_dispatch(ws, date, user, items):
    """
    Fill one dispatch sheet for the trips *items* made by *user* on *date*.

    The fuel block shows the last trip in the group that carries fuel data;
    it is left blank when none does.
    """
    result = FillResult()

    if items and items[0].reason:
        ws[DISPATCH_REASON_CELL] = items[0].reason
    ws[DISPATCH_DATE_CELL] = to_roc_date(date)
    if items:
        _put(ws, DISPATCH_START_KM_CELL, items[0].start_km)
    ws[DISPATCH_DRIVER_CELL] = user

    fuel_item = None
    for index, item in enumerate(items):
        slot = dispatch_slot(index)
        if slot is None:
            result.dropped += 1
        else:
            dest_cell, km_cell = slot
            ws[dest_cell] = item.destination
            _put(ws, km_cell, item.end_km)
            result.written += 1

        # later fuel-bearing trips replace earlier ones
        if item.has_fuel:
            fuel_item = item

    if fuel_item is not None:
        ws[DISPATCH_FUEL_DATE_CELL] = to_roc_date(fuel_item.date)
        ws[DISPATCH_FUEL_LITERS_CELL] = fuel_item.fuel.liters
        ws[DISPATCH_FUEL_KM_CELL] = fuel_item.fuel.current_fuel_km

    return result


# ╔═══════════════════════════════════════════════════════════════════════════╗
# ║  FUEL LOG                                                               ║
# ╚═══════════════════════════════════════════════════════════════════════════╝


def fill_fuel_log(ws, records):
    """
    Fill the fuel log with one row per calendar day of *records*.

    Days keep the order in which their date first appears. Each row carries
    the day's first start odometer and last end odometer; the fuel columns
    come from the first trip of the day that has fuel data.
    """
    result = FillResult()
    if not records:
        return result

    _put(ws, FUEL_LOG_MONTH_CELL, to_roc_month(records[0].date) or None)

    days = group_by(records, day_key)
    for offset, (date, items) in enumerate(days):
        if offset >= FUEL_LOG_CAPACITY:
            result.dropped += 1
            continue
        row = FUEL_LOG_FIRST_ROW + offset

        ws[f"{FUEL_LOG_DAY_COL}{row}"] = day_of_month(date)
        _put(ws, f"{FUEL_LOG_START_KM_COL}{row}", items[0].start_km)
        _put(ws, f"{FUEL_LOG_END_KM_COL}{row}", items[-1].end_km)

        fuel_item = next((item for item in items if item.has_fuel), None)
        if fuel_item is not None:
            fuel = fuel_item.fuel
            ws[f"{FUEL_LOG_LITERS_COL}{row}"] = fuel.liters
            ws[f"{FUEL_LOG_FUEL_KM_COL}{row}"] = fuel.current_fuel_km
            km_diff = fuel.km_since_last
            if km_diff is not None and km_diff > 0:
                ws[f"{FUEL_LOG_KM_DIFF_COL}{row}"] = km_diff
            _put(ws, f"{FUEL_LOG_CONSUMPTION_COL}{row}", fuel_item.fuel_consumption)

        result.written += 1

    return result
