"""
Unit tests for the SQLAlchemy storage layer.
"""

from models import TripEntry, db
from tests.conftest import make_record


class TestTripEntryModel:
    def test_round_trip_keeps_fuel_fields(self, app):
        with app.app_context():
            record = make_record(last_fuel_km=100, current_fuel_km=150, fuel_liters=5)
            entry = TripEntry.from_record(record)
            db.session.add(entry)
            db.session.flush()
            stored = entry.to_record()
            assert stored.id == entry.id
            assert stored.fuel.liters == 5
            assert stored.fuel_consumption == 10.0

    def test_no_fuel_gives_no_triple(self, app):
        with app.app_context():
            entry = TripEntry.from_record(make_record())
            db.session.add(entry)
            db.session.flush()
            assert entry.to_record().fuel is None

    def test_created_at_default(self, app):
        with app.app_context():
            entry = TripEntry.from_record(make_record())
            db.session.add(entry)
            db.session.flush()
            assert entry.created_at is not None


class TestRecordStore:
    def test_empty_store(self, store):
        assert store.all() == []
        assert store.last() is None
        assert store.count() == 0

    def test_add_assigns_id_and_keeps_order(self, store):
        first = store.add(make_record(id=None, destination="A"))
        second = store.add(make_record(id=None, destination="B"))
        assert first.id is not None
        assert second.id > first.id
        assert [r.destination for r in store.all()] == ["A", "B"]
        assert store.last().destination == "B"

    def test_get(self, store):
        added = store.add(make_record(id=None))
        assert store.get(added.id) == added
        assert store.get(added.id + 1000) is None

    def test_delete(self, store):
        added = store.add(make_record(id=None))
        assert store.delete(added.id) is True
        assert store.delete(added.id) is False
        assert store.all() == []

    def test_clear(self, store):
        store.add(make_record(id=None))
        store.add(make_record(id=None))
        assert store.clear() == 2
        assert store.count() == 0
