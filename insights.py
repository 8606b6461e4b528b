# insights.py
import math
import random
from dataclasses import dataclass, replace
from typing import Dict, List

from calculator import (EmissionsResult, InvalidInputError, LifestyleInputs,
                        MAX_VEG_DAYS, compute)

GOALS = {
    "travel": 100,   # kg CO2 per month
    "diet": 30,
    "shopping": 50,
}
ECO_COLORS = {"Green": "#43a047", "Yellow": "#fbc02d", "Red": "#d32f2f"}
# monthly total (kg CO2) at or below which the rating is Green / Yellow
GREEN_LIMIT = 120
YELLOW_LIMIT = 180
KM_PER_CAR_TRIP = 5

ACTIONS = [
    "Walk, cycle, or use public transport for short trips.",
    "Choose vegetarian meals more often.",
    "Buy fewer, higher-quality clothing items.",
    "Unplug electronics when not in use.",
    "Track your progress weekly and set new goals.",
]

WHAT_IF_HABITS = {
    "meat_meals": "Reduce meat meals",
    "car_km": "Replace short car trips with walking",
    "veg_days": "Add vegetarian days",
}


def eco_rating(total: float) -> str:
    if total > YELLOW_LIMIT:
        return "Red"
    if total > GREEN_LIMIT:
        return "Yellow"
    return "Green"


def goal_progress(result: EmissionsResult) -> Dict[str, int]:
    """Percent of each monthly goal used, clamped to 0-100 for progress bars."""
    progress = {}
    for category, goal in GOALS.items():
        percent = round(getattr(result, category) / goal * 100)
        progress[category] = max(0, min(100, percent))
    return progress


def personalised_recommendations(inputs: LifestyleInputs, result: EmissionsResult) -> Dict[str, List[str]]:
    recs = {"Travel": [], "Diet": [], "Shopping": []}
    # Travel
    if result.travel > GOALS["travel"]:
        recs["Travel"].append("Reduce car or plane travel. Try carpooling, public transport, or walking for short trips.")
    elif inputs.car_km > 0 and result.travel > 60:
        recs["Travel"].append("Replace some car trips with cycling or walking.")
    if inputs.plane_km > 0:
        recs["Travel"].append("Consider alternatives to flying, such as trains or video calls.")
    # Diet
    if result.diet > GOALS["diet"]:
        recs["Diet"].append("Reduce meat meals and increase vegetarian days.")
    elif inputs.meat_meals > 3:
        recs["Diet"].append('Try a "Meatless Monday" or similar weekly challenge.')
    if inputs.veg_days < 3:
        recs["Diet"].append("Add more vegetarian days to your week.")
    # Shopping
    if result.shopping > GOALS["shopping"]:
        recs["Shopping"].append("Buy fewer new clothing or electronics items this month.")
    if inputs.clothing_items > 2:
        recs["Shopping"].append("Choose quality over quantity when shopping for clothes.")
    if inputs.electronics > 0:
        recs["Shopping"].append("Delay upgrading electronics unless necessary.")
    return {cat: items[:2] for cat, items in recs.items()}


def recommended_actions(rng=None) -> List[str]:
    rng = rng or random
    return rng.sample(ACTIONS, len(ACTIONS))


@dataclass(frozen=True)
class WhatIfOutcome:
    label: str
    baseline: EmissionsResult
    projected: EmissionsResult
    reduction: float
    percent: float


def simulate_what_if(inputs: LifestyleInputs, habit: str, value: float) -> WhatIfOutcome:
    """Re-run the calculation with one habit changed by ``value``."""
    if habit not in WHAT_IF_HABITS:
        raise InvalidInputError("habit", f"unknown habit {habit!r}")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError("value", "must be a number")
    if not math.isfinite(value) or value < 1:
        raise InvalidInputError("value", "enter a change of at least 1")

    if habit == "meat_meals":
        changed = replace(inputs, meat_meals=max(0, inputs.meat_meals - value))
        label = f"Reducing meat meals by {value:g}"
    elif habit == "car_km":
        changed = replace(inputs, car_km=max(0, inputs.car_km - value * KM_PER_CAR_TRIP))
        label = f"Replacing {value:g} short car trips ({KM_PER_CAR_TRIP}km each) with walking"
    else:
        changed = replace(inputs, veg_days=min(MAX_VEG_DAYS, inputs.veg_days + value))
        label = f"Adding {value:g} vegetarian day(s) per week"

    baseline = compute(inputs)
    projected = compute(changed)
    reduction = baseline.total - projected.total
    percent = reduction / baseline.total * 100 if baseline.total > 0 else 0.0
    return WhatIfOutcome(label=label, baseline=baseline, projected=projected,
                         reduction=reduction, percent=percent)
