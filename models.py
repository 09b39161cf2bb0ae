"""
Fuel Log – Record storage.
SQLAlchemy model for logged trip entries and the RecordStore the export routes read from.
"""

from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

from records import FuelFill, TripRecord

db = SQLAlchemy()


# ---------------------------------------------------------------------------
# TripEntry  (one logged vehicle use)
# ---------------------------------------------------------------------------
class TripEntry(db.Model):
    __tablename__ = "trip_entries"

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.String(10), nullable=False)  # YYYY-MM-DD
    destination = db.Column(db.String(200), nullable=False)
    reason = db.Column(db.String(200), nullable=False, default="")
    user = db.Column(db.String(100), nullable=False)  # driver name

    start_km = db.Column(db.Float, nullable=True)
    end_km = db.Column(db.Float, nullable=True)

    # Refuelling (optional)
    last_fuel_km = db.Column(db.Float, nullable=True)
    current_fuel_km = db.Column(db.Float, nullable=True)
    fuel_liters = db.Column(db.Float, nullable=True)
    fuel_consumption = db.Column(db.Float, nullable=True)  # km/l, set once at creation

    created_at = db.Column(
        db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_record(cls, record):
        fuel = record.fuel or FuelFill()
        return cls(
            date=record.date,
            destination=record.destination,
            reason=record.reason,
            user=record.user,
            start_km=record.start_km,
            end_km=record.end_km,
            last_fuel_km=fuel.last_fuel_km,
            current_fuel_km=fuel.current_fuel_km,
            fuel_liters=fuel.liters,
            fuel_consumption=record.fuel_consumption,
        )

    def to_record(self):
        return TripRecord(
            id=self.id,
            date=self.date,
            destination=self.destination,
            reason=self.reason or "",
            user=self.user,
            start_km=self.start_km,
            end_km=self.end_km,
            fuel=FuelFill.from_values(
                self.last_fuel_km, self.current_fuel_km, self.fuel_liters
            ),
            fuel_consumption=self.fuel_consumption,
        )

    def __repr__(self):
        return f"<TripEntry {self.id} – {self.date} {self.user}>"


# ---------------------------------------------------------------------------
# RecordStore
# ---------------------------------------------------------------------------
class RecordStore:
    """
    The trip log, in entry order.

    Exports receive ``store.all()`` – a plain list of immutable TripRecords –
    so nothing they do can touch the stored rows.
    """

    def __init__(self, session):
        self.session = session

    def _query(self):
        return self.session.query(TripEntry).order_by(TripEntry.id)

    def all(self):
        return [entry.to_record() for entry in self._query().all()]

    def count(self):
        return self._query().count()

    def get(self, record_id):
        entry = self.session.get(TripEntry, record_id)
        return entry.to_record() if entry else None

    def last(self):
        entry = self.session.query(TripEntry).order_by(TripEntry.id.desc()).first()
        return entry.to_record() if entry else None

    def add(self, record):
        """Store *record* and return it with its assigned id."""
        entry = TripEntry.from_record(record)
        self.session.add(entry)
        self.session.commit()
        return entry.to_record()

    def delete(self, record_id):
        """Remove a record; return False if it did not exist."""
        entry = self.session.get(TripEntry, record_id)
        if entry is None:
            return False
        self.session.delete(entry)
        self.session.commit()
        return True

    def clear(self):
        removed = self.session.query(TripEntry).delete()
        self.session.commit()
        return removed
