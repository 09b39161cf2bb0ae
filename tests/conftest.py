"""
Shared pytest fixtures for the Fuel Log tests.
Uses an in-memory SQLite database so tests never touch production data, and
placeholder templates generated into a temporary directory.
"""

import os

import pytest

# Must be set before app.py is imported – the engine is created at import time
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from app import app as flask_app, limiter  # noqa: E402
from generate_templates import build_dispatch_template, build_fuel_log_template  # noqa: E402
from models import db as _db, RecordStore  # noqa: E402
from records import TripRecord  # noqa: E402


@pytest.fixture(scope="session")
def template_dir(tmp_path_factory):
    path = tmp_path_factory.mktemp("templates")
    build_dispatch_template().save(path / "dispatch_template.xlsx")
    build_fuel_log_template().save(path / "fuel_log_template.xlsx")
    return path


@pytest.fixture(scope="session")
def dispatch_template(template_dir):
    return str(template_dir / "dispatch_template.xlsx")


@pytest.fixture(scope="session")
def fuel_log_template(template_dir):
    return str(template_dir / "fuel_log_template.xlsx")


@pytest.fixture(scope="session")
def app(dispatch_template, fuel_log_template):
    """Create the Flask application with a test config."""
    flask_app.config.update(
        {
            "TESTING": True,
            "WTF_CSRF_ENABLED": False,
            "SECRET_KEY": "test-secret",
            "RATELIMIT_ENABLED": False,
            "DISPATCH_TEMPLATE_PATH": dispatch_template,
            "FUEL_LOG_TEMPLATE_PATH": fuel_log_template,
        }
    )
    limiter.enabled = False
    with flask_app.app_context():
        _db.create_all()
        yield flask_app
        _db.drop_all()


@pytest.fixture(autouse=True)
def clean_db(app):
    """Empty the trip log after every test so each test starts fresh."""
    with app.app_context():
        yield
        _db.session.rollback()
        RecordStore(_db.session).clear()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    with app.app_context():
        yield RecordStore(_db.session)


# ── Helper: build records ────────────────────────────────────────────────────


def make_record(
    id=1,
    date="2026-02-15",
    destination="市政府",
    user="王小明",
    start_km=1000,
    end_km=1010,
    reason="公務",
    last_fuel_km=None,
    current_fuel_km=None,
    fuel_liters=None,
):
    return TripRecord.create(
        id=id,
        date=date,
        destination=destination,
        user=user,
        start_km=start_km,
        end_km=end_km,
        reason=reason,
        last_fuel_km=last_fuel_km,
        current_fuel_km=current_fuel_km,
        fuel_liters=fuel_liters,
    )


def trip_payload(**overrides):
    """JSON body for POST /api/records."""
    data = {
        "date": "2026-02-15",
        "destination": "市政府",
        "reason": "公務",
        "user": "王小明",
        "startKm": "1000",
        "endKm": "1010",
    }
    data.update(overrides)
    return data
