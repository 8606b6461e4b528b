import random

import pytest

from calculator import EmissionsResult, InvalidInputError, LifestyleInputs, compute
from insights import (ACTIONS, eco_rating, goal_progress, personalised_recommendations,
                      recommended_actions, simulate_what_if)


@pytest.mark.parametrize("total, rating", [
    (0, "Green"), (-3.5, "Green"), (120, "Green"),
    (120.01, "Yellow"), (180, "Yellow"),
    (180.01, "Red"), (1000, "Red"),
])
def test_eco_rating(total, rating):
    assert eco_rating(total) == rating


def test_goal_progress_is_clamped():
    r = EmissionsResult(travel=50, diet=-3.5, shopping=500, total=546.5)
    assert goal_progress(r) == {"travel": 50, "diet": 0, "shopping": 100}


def test_no_recommendations_for_green_habits(green_inputs):
    recs = personalised_recommendations(green_inputs, compute(green_inputs))
    assert recs == {"Travel": [], "Diet": [], "Shopping": []}


def test_recommendations_for_heavy_footprint():
    inputs = LifestyleInputs(car_km=600, plane_km=500, veg_days=0, meat_meals=30,
                             clothing_items=5, electronics=2)
    recs = personalised_recommendations(inputs, compute(inputs))
    assert len(recs["Travel"]) == 2
    assert recs["Travel"][0].startswith("Reduce car or plane travel")
    assert recs["Diet"] == ["Reduce meat meals and increase vegetarian days.",
                            "Add more vegetarian days to your week."]
    # three shopping rules fire, only two are kept
    assert len(recs["Shopping"]) == 2
    assert recs["Shopping"][0].startswith("Buy fewer")


def test_moderate_car_use_and_meatless_monday():
    inputs = LifestyleInputs(car_km=350, veg_days=4, meat_meals=5)
    recs = personalised_recommendations(inputs, compute(inputs))
    assert recs["Travel"] == ["Replace some car trips with cycling or walking."]
    assert recs["Diet"] == ['Try a "Meatless Monday" or similar weekly challenge.']


def test_recommended_actions_is_a_permutation():
    actions = recommended_actions(random.Random(7))
    assert sorted(actions) == sorted(ACTIONS)


def test_what_if_fewer_meat_meals(typical_inputs):
    outcome = simulate_what_if(typical_inputs, "meat_meals", 5)
    assert outcome.reduction == pytest.approx(9.0)
    assert outcome.projected.diet == pytest.approx(outcome.baseline.diet - 9.0)
    assert outcome.percent == pytest.approx(9.0 / outcome.baseline.total * 100)
    assert "meat meals" in outcome.label


def test_what_if_car_trips_floor_at_zero():
    inputs = LifestyleInputs(car_km=10)
    outcome = simulate_what_if(inputs, "car_km", 4)
    assert outcome.projected.travel == 0
    assert outcome.reduction == pytest.approx(2.1)


def test_what_if_veg_days_capped_at_seven():
    inputs = LifestyleInputs(veg_days=6, meat_meals=10)
    outcome = simulate_what_if(inputs, "veg_days", 3)
    assert outcome.projected.diet == pytest.approx(-3.5 + 18)
    assert outcome.reduction == pytest.approx(0.5)


def test_what_if_zero_baseline_has_zero_percent():
    outcome = simulate_what_if(LifestyleInputs(), "veg_days", 1)
    assert outcome.percent == 0.0


@pytest.mark.parametrize("habit, value", [
    ("meat_meals", 0), ("meat_meals", -2), ("car_km", float("nan")),
    ("flights", 1), ("veg_days", "x"),
])
def test_what_if_rejects_bad_changes(typical_inputs, habit, value):
    with pytest.raises(InvalidInputError):
        simulate_what_if(typical_inputs, habit, value)
