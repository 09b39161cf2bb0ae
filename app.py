"""
Fuel Log – Trip Log & Spreadsheet Export Service
=================================================
Main Flask application – routes, configuration, and database init.

Operators log each vehicle use (date, destination, driver, odometer readings and
optional refuelling data) and export the log into two pre-formatted templates:

  1. 派車單里程     dispatch / mileage sheet, one file per date + driver
  2. 消耗油料登記表  fuel consumption log, one file per export, one row per day

How to run
----------
1.  pip install -e .
2.  python generate_templates.py   # only if you do not have the real templates
3.  python app.py                  # starts the dev server on http://127.0.0.1:5000

Template locations are read from DISPATCH_TEMPLATE_PATH / FUEL_LOG_TEMPLATE_PATH
(defaults: assets/dispatch_template.xlsx and assets/fuel_log_template.xlsx).
"""

import io
import math
import os
from datetime import date

from dotenv import load_dotenv
from flask import Flask, jsonify, request, send_file
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_wtf.csrf import CSRFProtect, generate_csrf

from exporter import (
    DISPATCH_FILE_PREFIX,
    EmptyInputError,
    ExportError,
    bundle_documents,
    export_dispatch,
    export_fuel_log,
)
from models import RecordStore, db
from records import TripRecord

# ── App & config ─────────────────────────────────────────────────────────────

load_dotenv()  # load .env file if present

app = Flask(__name__)

basedir = os.path.abspath(os.path.dirname(__file__))
database_url = os.environ.get(
    "DATABASE_URL", "sqlite:///" + os.path.join(basedir, "fuel_log.db")
)
# Heroku / PythonAnywhere may provide postgres:// but SQLAlchemy 2.x needs postgresql://
if database_url.startswith("postgres://"):
    database_url = database_url.replace("postgres://", "postgresql://", 1)
app.config["SQLALCHEMY_DATABASE_URI"] = database_url
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "fuel-log-dev-secret-key")

# ── Template config ──────────────────────────────────────────────────────────
app.config["DISPATCH_TEMPLATE_PATH"] = os.environ.get(
    "DISPATCH_TEMPLATE_PATH", os.path.join(basedir, "assets", "dispatch_template.xlsx")
)
app.config["FUEL_LOG_TEMPLATE_PATH"] = os.environ.get(
    "FUEL_LOG_TEMPLATE_PATH", os.path.join(basedir, "assets", "fuel_log_template.xlsx")
)
app.config["EXPORT_RATE_LIMIT"] = os.environ.get("EXPORT_RATE_LIMIT", "30/minute")

db.init_app(app)
csrf = CSRFProtect(app)
limiter = Limiter(app=app, key_func=get_remote_address, default_limits=[])

EMPTY_LOG_MESSAGE = "No records to export. Add a record first."


def get_store():
    return RecordStore(db.session)


def export_rate_limit():
    return app.config["EXPORT_RATE_LIMIT"]


# ── Create DB tables ─────────────────────────────────────────────────────────

with app.app_context():
    db.create_all()


# ── Form parsing helpers ─────────────────────────────────────────────────────


def _field(data, name):
    value = data.get(name)
    if value is None:
        return ""
    return str(value).strip()


def _parse_number(data, name, label, errors, required=False):
    """Parse an optional numeric field; blank means absent, never zero."""
    raw = _field(data, name)
    if not raw:
        if required:
            errors.append(f"{label} is required.")
        return None
    try:
        value = float(raw)
    except ValueError:
        errors.append(f"{label} must be a number.")
        return None
    if not math.isfinite(value):
        errors.append(f"{label} must be a number.")
        return None
    if value < 0:
        errors.append(f"{label} cannot be negative.")
        return None
    return value


def _flag(data, name):
    return _field(data, name).lower() in ("1", "true", "on", "yes")


def build_record(data, previous):
    """
    Validate submitted trip data and build a TripRecord.

    *previous* is the most recent stored record (or None); it supplies the
    default start odometer and, when requested, the carried-over reason/driver.

    Returns ``(record, errors)``; *record* is None when *errors* is non-empty.
    """
    errors = []

    trip_date = _field(data, "date")
    if not trip_date:
        errors.append("Date is required.")
    else:
        try:
            trip_date = date.fromisoformat(trip_date).isoformat()
        except ValueError:
            errors.append("Date must be in YYYY-MM-DD format.")

    destination = _field(data, "destination")
    if not destination:
        errors.append("Destination is required.")

    reason = _field(data, "reason")
    if _flag(data, "carryReason") and previous is not None:
        reason = previous.reason

    user = _field(data, "user")
    if _flag(data, "carryUser") and previous is not None:
        user = previous.user
    if not user:
        errors.append("Driver is required.")

    end_km = _parse_number(data, "endKm", "End odometer", errors, required=True)
    start_km = _parse_number(data, "startKm", "Start odometer", errors)
    if start_km is None and not _field(data, "startKm"):
        # Continue from where the previous trip ended
        start_km = previous.end_km if previous is not None and previous.end_km is not None else 0

    if start_km is not None and end_km is not None and end_km < start_km:
        errors.append(
            f"End odometer ({end_km:g}) cannot be less than start odometer ({start_km:g})."
        )

    last_fuel_km = _parse_number(data, "lastFuelKm", "Last refuel odometer", errors)
    current_fuel_km = _parse_number(data, "currentFuelKm", "Refuel odometer", errors)
    fuel_liters = _parse_number(data, "fuelLiters", "Fuel litres", errors)

    if errors:
        return None, errors

    record = TripRecord.create(
        id=None,
        date=trip_date,
        destination=destination,
        reason=reason,
        user=user,
        start_km=start_km,
        end_km=end_km,
        last_fuel_km=last_fuel_km,
        current_fuel_km=current_fuel_km,
        fuel_liters=fuel_liters,
    )
    return record, []


# ╔═══════════════════════════════════════════════════════════════════════════╗
# ║  RECORDS                                                                ║
# ╚═══════════════════════════════════════════════════════════════════════════╝


@app.route("/api/csrf-token")
def csrf_token():
    """Token for clients posting forms (send it back as X-CSRFToken)."""
    return jsonify({"csrfToken": generate_csrf()})


@app.route("/api/records", methods=["GET"])
def record_list():
    records = get_store().all()
    return jsonify({"records": [r.to_dict() for r in records], "count": len(records)})


@app.route("/api/records", methods=["POST"])
def record_add():
    """Log a trip. Accepts JSON or form data with the record's camelCase fields."""
    data = request.get_json(silent=True) or request.form
    store = get_store()

    record, errors = build_record(data, store.last())
    if errors:
        return jsonify({"errors": errors}), 400

    record = store.add(record)
    app.logger.info(f"Logged trip #{record.id}: {record.date} {record.user} → {record.destination}")
    return jsonify(record.to_dict()), 201


@app.route("/api/records/<int:record_id>", methods=["GET"])
def record_detail(record_id):
    record = get_store().get(record_id)
    if record is None:
        return jsonify({"error": "Record not found."}), 404
    return jsonify(record.to_dict())


@app.route("/api/records/<int:record_id>", methods=["DELETE"])
@app.route("/api/records/<int:record_id>/delete", methods=["POST"])
def record_delete(record_id):
    if not get_store().delete(record_id):
        return jsonify({"error": "Record not found."}), 404
    app.logger.info(f"Deleted trip #{record_id}")
    return jsonify({"deleted": record_id})


@app.route("/api/records/clear", methods=["POST"])
def record_clear():
    removed = get_store().clear()
    app.logger.info(f"Cleared trip log ({removed} records)")
    return jsonify({"deleted": removed})


# ╔═══════════════════════════════════════════════════════════════════════════╗
# ║  EXPORTS                                                                ║
# ╚═══════════════════════════════════════════════════════════════════════════╝


def _download(doc):
    return send_file(
        io.BytesIO(doc.data),
        mimetype=doc.mimetype,
        as_attachment=True,
        download_name=doc.filename,
    )


@app.route("/export/dispatch")
@limiter.limit(export_rate_limit)
def dispatch_export():
    """Download the dispatch sheets – one .xlsx, or a .zip when there are several groups."""
    records = get_store().all()
    documents = []
    try:
        count = export_dispatch(records, app.config["DISPATCH_TEMPLATE_PATH"], documents.append)
    except EmptyInputError:
        return jsonify({"error": EMPTY_LOG_MESSAGE}), 400
    except ExportError as e:
        app.logger.error(f"Dispatch export failed: {e}")
        return jsonify({"error": f"Dispatch export failed: {e}"}), 500

    app.logger.info(f"Generated {count} dispatch sheet(s)")
    if count == 1:
        return _download(documents[0])
    return _download(
        bundle_documents(documents, f"{DISPATCH_FILE_PREFIX}_{records[0].date}.zip")
    )


@app.route("/export/fuel-log")
@limiter.limit(export_rate_limit)
def fuel_log_export():
    """Download the fuel consumption log for the whole trip log."""
    records = get_store().all()
    if not records:
        return jsonify({"error": EMPTY_LOG_MESSAGE}), 400

    documents = []
    try:
        export_fuel_log(records, app.config["FUEL_LOG_TEMPLATE_PATH"], documents.append)
    except ExportError as e:
        app.logger.error(f"Fuel log export failed: {e}")
        return jsonify({"error": f"Fuel log export failed: {e}"}), 500

    return _download(documents[0])


# ── Run ──────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(host="0.0.0.0", port=port, debug=debug)
