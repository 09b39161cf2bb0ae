"""
Fuel Log – Spreadsheet export.
Loads a template workbook, fills it through ``layouts`` and serializes it back to bytes.

Each export runs to completion or raises a single ``ExportError``. Documents that
were already handed to ``emit`` before a failure stay valid; nothing is rolled back.
"""

import io
import logging
import zipfile
from dataclasses import dataclass

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from grouping import dispatch_key, group_by
from layouts import fill_dispatch, fill_fuel_log
from rocdate import roc_year_month

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

DISPATCH_FILE_PREFIX = "派車單里程"
FUEL_LOG_FILE_PREFIX = "消耗油料登記表"


# ── Errors ───────────────────────────────────────────────────────────────────


class ExportError(Exception):
    """Base class for everything an export call can fail with."""


class EmptyInputError(ExportError):
    """Raised when an export is requested without any records."""


class ResourceFetchError(ExportError):
    """Raised when a template cannot be read or opened as a workbook."""


class SerializationError(ExportError):
    """Raised when a filled workbook cannot be written back to bytes."""


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    data: bytes
    mimetype: str = XLSX_MIMETYPE


# ── Template I/O ─────────────────────────────────────────────────────────────


def load_template(locator):
    """Read the template at *locator* (a filesystem path) fully into memory."""
    try:
        with open(locator, "rb") as fh:
            return fh.read()
    except OSError as e:
        raise ResourceFetchError(f"Could not load template {locator}: {e}") from e


def _template_bytes(template):
    if isinstance(template, (bytes, bytearray)):
        return bytes(template)
    return load_template(template)


def open_worksheet(template_bytes):
    """Open a fresh workbook from *template_bytes*; return ``(workbook, first sheet)``."""
    try:
        wb = load_workbook(io.BytesIO(template_bytes))
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ResourceFetchError(f"Template is not a readable workbook: {e}") from e
    return wb, wb.worksheets[0]


def serialize_workbook(wb):
    buf = io.BytesIO()
    try:
        wb.save(buf)
    except Exception as e:
        raise SerializationError(f"Failed to write workbook: {e}") from e
    return buf.getvalue()


# ── Filenames ────────────────────────────────────────────────────────────────


def dispatch_filename(date, user):
    # driver names must not turn into directories inside the zip bundle
    safe_user = user.replace("/", "_").replace("\\", "_")
    return f"{DISPATCH_FILE_PREFIX}_{date}_{safe_user}.xlsx"


def fuel_log_filename(first_date):
    year, month = roc_year_month(first_date)
    return f"{FUEL_LOG_FILE_PREFIX}_{year}-{month:02d}.xlsx"


# ╔═══════════════════════════════════════════════════════════════════════════╗
# ║  EXPORTS                                                                ║
# ╚═══════════════════════════════════════════════════════════════════════════╝


def export_dispatch(records, template, emit):
    """
    Produce one dispatch sheet per (date, driver) group of *records*.

    Parameters
    ----------
    records : list[TripRecord]
        Trip records in entry order; treated as read-only.
    template : str | os.PathLike | bytes
        Path to the dispatch template, or its bytes.
    emit : callable
        Called with each ``ExportedDocument`` as soon as it is ready.

    Returns
    -------
    int
        The number of documents emitted (one per group).

    Raises
    ------
    EmptyInputError
        If *records* is empty.
    ResourceFetchError, SerializationError
        If the template cannot be loaded or a sheet cannot be written.
    """
    if not records:
        raise EmptyInputError("No records to export. Add a record first.")

    template_bytes = _template_bytes(template)
    groups = group_by(records, dispatch_key)

    count = 0
    for (date, user), items in groups:
        wb, ws = open_worksheet(template_bytes)
        result = fill_dispatch(ws, date, user, items)
        if result.dropped:
            logger.warning(
                "Dispatch sheet %s/%s has no room for %d trip(s); they were left out",
                date, user, result.dropped,
            )
        doc = ExportedDocument(dispatch_filename(date, user), serialize_workbook(wb))
        emit(doc)
        count += 1
        logger.info("Exported %s (%d trips)", doc.filename, result.written)

    return count


def export_fuel_log(records, template, emit):
    """
    Produce the fuel log for all *records*, one row per day.

    Returns 1, or 0 without touching the template when *records* is empty.
    """
    if not records:
        return 0

    wb, ws = open_worksheet(_template_bytes(template))
    result = fill_fuel_log(ws, records)
    if result.dropped:
        logger.warning("Fuel log has no room for %d day(s); they were left out", result.dropped)

    doc = ExportedDocument(fuel_log_filename(records[0].date), serialize_workbook(wb))
    emit(doc)
    logger.info("Exported %s (%d days)", doc.filename, result.written)
    return 1


def bundle_documents(documents, filename):
    """Pack several exported documents into a single zip archive."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        for doc in documents:
            zf.writestr(doc.filename, doc.data)
    return ExportedDocument(filename, buf.getvalue(), mimetype="application/zip")
