"""
Fuel Log – Trip record model.
Immutable trip entries and the one derived value, fuel efficiency (km/l).
"""

from dataclasses import dataclass
from typing import Optional


def compute_fuel_consumption(last_fuel_km, current_fuel_km, fuel_liters):
    """
    Return km per litre since the previous refuel, rounded to 2 decimals.

    Parameters
    ----------
    last_fuel_km : float | None
        Odometer reading at the previous refuel.
    current_fuel_km : float | None
        Odometer reading at this refuel.
    fuel_liters : float | None
        Litres put in at this refuel.

    Returns
    -------
    float | None
        None unless all three inputs are present, the litres are positive and
        the distance travelled since the last refuel is positive.
    """
    if last_fuel_km is None or current_fuel_km is None or fuel_liters is None:
        return None
    if fuel_liters <= 0:
        return None
    distance = current_fuel_km - last_fuel_km
    if distance <= 0:
        return None
    return round(distance / fuel_liters, 2)


# ---------------------------------------------------------------------------
# FuelFill  (refuelling triple)
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FuelFill:
    last_fuel_km: Optional[float] = None
    current_fuel_km: Optional[float] = None
    liters: Optional[float] = None

    @classmethod
    def from_values(cls, last_fuel_km=None, current_fuel_km=None, liters=None):
        """Build a triple, or return None when no refuelling data was given."""
        if last_fuel_km is None and current_fuel_km is None and liters is None:
            return None
        return cls(last_fuel_km, current_fuel_km, liters)

    @property
    def is_complete(self):
        return None not in (self.last_fuel_km, self.current_fuel_km, self.liters)

    @property
    def km_since_last(self):
        if self.last_fuel_km is None or self.current_fuel_km is None:
            return None
        return self.current_fuel_km - self.last_fuel_km


# ---------------------------------------------------------------------------
# TripRecord
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TripRecord:
    id: int
    date: str  # YYYY-MM-DD
    destination: str
    reason: str
    user: str
    start_km: Optional[float]
    end_km: Optional[float]
    fuel: Optional[FuelFill] = None
    fuel_consumption: Optional[float] = None

    @classmethod
    def create(
        cls,
        id,
        date,
        destination,
        user,
        start_km,
        end_km,
        reason="",
        last_fuel_km=None,
        current_fuel_km=None,
        fuel_liters=None,
    ):
        """Create a record, deriving fuel consumption once from the refuel triple."""
        return cls(
            id=id,
            date=date,
            destination=destination,
            reason=reason or "",
            user=user,
            start_km=start_km,
            end_km=end_km,
            fuel=FuelFill.from_values(last_fuel_km, current_fuel_km, fuel_liters),
            fuel_consumption=compute_fuel_consumption(
                last_fuel_km, current_fuel_km, fuel_liters
            ),
        )

    @property
    def has_fuel(self):
        """True when the record carries usable refuelling data (litres and odometer)."""
        if self.fuel is None:
            return False
        return bool(
            self.fuel.liters is not None
            and self.fuel.liters > 0
            and self.fuel.current_fuel_km is not None
            and self.fuel.current_fuel_km > 0
        )

    @property
    def day(self):
        return int(self.date.split("-")[2])

    def to_dict(self):
        fuel = self.fuel or FuelFill()
        return {
            "id": self.id,
            "date": self.date,
            "destination": self.destination,
            "reason": self.reason,
            "user": self.user,
            "startKm": self.start_km,
            "endKm": self.end_km,
            "lastFuelKm": fuel.last_fuel_km,
            "currentFuelKm": fuel.current_fuel_km,
            "fuelLiters": fuel.liters,
            "fuelConsumption": self.fuel_consumption,
        }

    def __repr__(self):
        return f"<TripRecord {self.id} – {self.date} {self.user} → {self.destination}>"
