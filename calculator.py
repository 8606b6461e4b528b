# calculator.py
"""Monthly carbon footprint from lifestyle inputs.

``compute`` is the pure calculation; ``parse_inputs`` is the boundary that turns
raw form values into ``LifestyleInputs`` and rejects anything malformed.
"""
import math
from dataclasses import dataclass, asdict
from typing import Dict, Mapping

# kg CO2 per unit, monthly basis
MULTIPLIERS = {
    "car_km": 0.21,
    "bus_km": 0.09,
    "plane_km": 0.15,
    "veg_days": -0.5,       # each vegetarian day per week saves 0.5 kg
    "meat_meals": 1.8,
    "clothing_items": 25,
    "electronics": 200,     # per item per year, amortised over 12 months
}

# form snapshot keys used by the UI and stored in history
FORM_KEYS = {
    "car_km": "carKm",
    "bus_km": "busKm",
    "plane_km": "planeKm",
    "veg_days": "vegDays",
    "meat_meals": "meatMeals",
    "clothing_items": "clothingItems",
    "electronics": "electronics",
}
INTEGER_FIELDS = ("clothing_items", "electronics")
MAX_VEG_DAYS = 7


class InvalidInputError(ValueError):
    def __init__(self, field, message):
        super().__init__(f"{field}: {message}")
        self.field = field


@dataclass(frozen=True)
class LifestyleInputs:
    car_km: float = 0.0
    bus_km: float = 0.0
    plane_km: float = 0.0
    veg_days: float = 0.0
    meat_meals: float = 0.0
    clothing_items: int = 0
    electronics: int = 0

    def to_form(self) -> Dict[str, float]:
        return {FORM_KEYS[k]: v for k, v in asdict(self).items()}

    @classmethod
    def from_form(cls, form: Mapping) -> "LifestyleInputs":
        return parse_inputs(form)


@dataclass(frozen=True)
class EmissionsResult:
    travel: float
    diet: float
    shopping: float
    total: float

    @property
    def breakdown(self) -> Dict[str, float]:
        return {"travel": self.travel, "diet": self.diet, "shopping": self.shopping}


def compute(inputs: LifestyleInputs) -> EmissionsResult:
    travel = (inputs.car_km * MULTIPLIERS["car_km"] +
              inputs.bus_km * MULTIPLIERS["bus_km"] +
              inputs.plane_km * MULTIPLIERS["plane_km"])
    # diet can go negative when veg days outweigh meat meals
    diet = (inputs.veg_days * MULTIPLIERS["veg_days"] +
            inputs.meat_meals * MULTIPLIERS["meat_meals"])
    shopping = (inputs.clothing_items * MULTIPLIERS["clothing_items"] +
                (inputs.electronics / 12) * MULTIPLIERS["electronics"])
    total = travel + diet + shopping
    return EmissionsResult(travel=travel, diet=diet, shopping=shopping, total=total)


def _to_number(field, raw):
    if raw is None:
        return 0.0
    if isinstance(raw, bool):
        raise InvalidInputError(field, "must be a number")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError(field, f"{raw!r} is not a number")
    if not math.isfinite(value):
        raise InvalidInputError(field, "must be finite")
    if value < 0:
        raise InvalidInputError(field, "must not be negative")
    return value


def parse_inputs(raw: Mapping) -> LifestyleInputs:
    """Coerce a form mapping (camelCase or snake_case keys) into inputs.

    Missing or blank fields count as 0. Raises InvalidInputError for anything
    that is not a finite non-negative number, for vegetarian days outside
    0-7 and for fractional item counts.
    """
    values = {}
    for field, form_key in FORM_KEYS.items():
        raw_value = raw.get(form_key, raw.get(field))
        value = _to_number(field, raw_value)
        if field in INTEGER_FIELDS:
            if not value.is_integer():
                raise InvalidInputError(field, "must be a whole number")
            value = int(value)
        values[field] = value
    if values["veg_days"] > MAX_VEG_DAYS:
        raise InvalidInputError("veg_days", f"must be between 0 and {MAX_VEG_DAYS}")
    return LifestyleInputs(**values)
