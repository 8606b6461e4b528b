import math

import pytest

from calculator import (EmissionsResult, InvalidInputError, LifestyleInputs,
                        compute, parse_inputs)


def test_car_travel():
    assert compute(LifestyleInputs(car_km=100)).travel == pytest.approx(21.0)


def test_travel_mixes_all_modes():
    result = compute(LifestyleInputs(car_km=10, bus_km=100, plane_km=1000))
    assert result.travel == pytest.approx(2.1 + 9.0 + 150.0)


def test_full_veg_week_gives_negative_diet():
    result = compute(LifestyleInputs(veg_days=7))
    assert result.diet == pytest.approx(-3.5)
    assert result.total == pytest.approx(-3.5)


def test_shopping_amortises_electronics():
    result = compute(LifestyleInputs(clothing_items=2, electronics=12))
    assert result.shopping == pytest.approx(250.0)


def test_all_zero():
    assert compute(LifestyleInputs()) == EmissionsResult(0.0, 0.0, 0.0, 0.0)


@pytest.mark.parametrize("inputs", [
    LifestyleInputs(car_km=123.4, bus_km=56.7, plane_km=890, veg_days=3.5,
                    meat_meals=17, clothing_items=4, electronics=3),
    LifestyleInputs(car_km=0.1, veg_days=6.9, meat_meals=0.3, electronics=7),
    LifestyleInputs(plane_km=12000, clothing_items=30),
])
def test_total_is_sum_of_categories(inputs):
    r = compute(inputs)
    assert r.total == r.travel + r.diet + r.shopping


def test_compute_is_deterministic(typical_inputs):
    assert compute(typical_inputs) == compute(typical_inputs)


def test_breakdown():
    r = compute(LifestyleInputs(car_km=100, meat_meals=10, clothing_items=1))
    assert r.breakdown == {"travel": r.travel, "diet": r.diet, "shopping": r.shopping}


def test_parse_camel_case_form():
    inputs = parse_inputs({"carKm": "120", "busKm": 10, "planeKm": 0, "vegDays": 2,
                           "meatMeals": 8, "clothingItems": "3", "electronics": 1.0})
    assert inputs == LifestyleInputs(car_km=120, bus_km=10, plane_km=0, veg_days=2,
                                     meat_meals=8, clothing_items=3, electronics=1)
    assert isinstance(inputs.clothing_items, int)


def test_parse_accepts_snake_case_keys():
    assert parse_inputs({"car_km": 5}).car_km == 5


def test_missing_and_blank_fields_become_zero():
    assert parse_inputs({"carKm": "", "busKm": None}) == LifestyleInputs()


def test_form_round_trip(typical_inputs):
    assert LifestyleInputs.from_form(typical_inputs.to_form()) == typical_inputs


@pytest.mark.parametrize("raw, field", [
    ({"carKm": -1}, "car_km"),
    ({"meatMeals": "lots"}, "meat_meals"),
    ({"planeKm": math.nan}, "plane_km"),
    ({"busKm": math.inf}, "bus_km"),
    ({"vegDays": 8}, "veg_days"),
    ({"vegDays": -0.5}, "veg_days"),
    ({"clothingItems": 1.5}, "clothing_items"),
    ({"electronics": True}, "electronics"),
    ({"carKm": 10**400}, "car_km"),
])
def test_parse_rejects_invalid_values(raw, field):
    with pytest.raises(InvalidInputError) as excinfo:
        parse_inputs(raw)
    assert excinfo.value.field == field


def test_veg_days_boundaries_are_accepted():
    assert parse_inputs({"vegDays": 0}).veg_days == 0
    assert parse_inputs({"vegDays": 7}).veg_days == 7


def test_invalid_input_error_is_value_error():
    with pytest.raises(ValueError):
        parse_inputs({"carKm": -5})
