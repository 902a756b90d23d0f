from dataclasses import replace

import pytest

from doughcalc.core.formula import (
    compute_dough,
    derive_total_weight,
    estimate_bake_minutes,
    estimate_weight_from_diameter,
    estimate_weight_from_square,
    format_grams,
    suggest_yeast_percent,
    yeast_multiplier,
)
from doughcalc.core.models import DoughInputs, YEAST_TYPES

BASE_INPUTS = DoughInputs(
    mode="weight",
    pizza_count=2,
    target_weight=1000,
    diameter_cm=30,
    hydration_percent=65,
    salt_percent=2.5,
    oil_percent=3,
    sugar_percent=1,
    yeast_percent=0.35,
    yeast_type="instant",
    thickness_factor=0.36,
)


# the 1000 g / 2 ball scenario: flour is solved from the total, water follows hydration
def test_computes_ingredient_weights_from_total_dough():
    result = compute_dough(BASE_INPUTS)
    assert format_grams(result.total_dough) == 1000
    assert 570 < result.flour < 590
    assert result.water == pytest.approx(result.flour * 0.65, rel=1e-4)
    assert result.per_ball == pytest.approx(500, abs=0.05)


def test_derives_total_weight_from_diameter_mode():
    total = derive_total_weight(replace(BASE_INPUTS, mode="diameter", pizza_count=2))
    assert 450 < total < 520


def test_diameter_round_trip_is_exact():
    for d, n, f in [(30, 2, 0.36), (35.56, 3, 0.34), (26, 1, 0.45), (40, 7, 0.33)]:
        inputs = replace(BASE_INPUTS, mode="diameter", diameter_cm=d, pizza_count=n, thickness_factor=f)
        assert derive_total_weight(inputs) == estimate_weight_from_diameter(d, f) * n


def test_weight_mode_ignores_diameter_and_clamps_negative_weight():
    assert derive_total_weight(replace(BASE_INPUTS, diameter_cm=99)) == 1000
    assert derive_total_weight(replace(BASE_INPUTS, target_weight=-50)) == 0


def test_estimates_weight_from_diameter_and_thickness():
    assert estimate_weight_from_diameter(30, 0.36) == pytest.approx(254, abs=1)


def test_negative_or_missing_dimensions_clamp_to_zero():
    assert estimate_weight_from_diameter(-30, 0.36) == 0
    assert estimate_weight_from_diameter(None, 0.36) == 0
    assert estimate_weight_from_square(-30, 40, 0.36) == 0
    assert estimate_weight_from_square(30, None, 0.36) == 0


def test_estimates_weight_from_square():
    assert estimate_weight_from_square(30, 40, 0.4) == pytest.approx(480.0)


@pytest.mark.parametrize("yeast_type", YEAST_TYPES)
def test_mass_is_conserved_for_every_yeast_type(yeast_type):
    for total, hydration in [(1000, 65), (250, 80), (3333.3, 58)]:
        inputs = replace(BASE_INPUTS, target_weight=total, hydration_percent=hydration, yeast_type=yeast_type)
        result = compute_dough(inputs)
        assert result.ingredient_sum() == pytest.approx(result.total_dough, abs=1e-6 * result.total_dough)


def test_yeast_type_scales_effective_yeast():
    instant = compute_dough(BASE_INPUTS)
    fresh = compute_dough(replace(BASE_INPUTS, yeast_type="fresh"))
    assert fresh.yeast / fresh.flour == pytest.approx(2.5 * instant.yeast / instant.flour)
    assert yeast_multiplier("sourdough-starter") == 20
    assert yeast_multiplier("mystery") == 1


def test_non_positive_pizza_count_divides_by_one():
    result = compute_dough(replace(BASE_INPUTS, pizza_count=0))
    assert result.per_ball == pytest.approx(result.total_dough)


def test_matches_thecalcs_bakers_percentages_example():
    inputs = DoughInputs(
        mode="weight",
        pizza_count=4,
        target_weight=1000,
        diameter_cm=30,
        hydration_percent=65,
        salt_percent=2,
        oil_percent=0,
        sugar_percent=0,
        yeast_percent=0.5,
        yeast_type="instant",
        thickness_factor=0.36,
    )
    result = compute_dough(inputs)
    # grams are rounded up
    assert 597 <= format_grams(result.flour) < 600
    assert 388 <= format_grams(result.water) < 390
    assert 11 <= format_grams(result.salt) < 13
    assert 2 <= format_grams(result.yeast) < 4
    assert 999 <= format_grams(result.total_dough) < 1003


def test_matches_ny_14in_example_totals():
    inputs = DoughInputs(
        mode="diameter",
        pizza_count=2,
        target_weight=0,
        diameter_cm=35.56,
        hydration_percent=63,
        salt_percent=2.5,
        oil_percent=2,
        sugar_percent=0,
        yeast_percent=0.3,
        yeast_type="instant",
        thickness_factor=0.34,
    )
    result = compute_dough(inputs)
    assert result.flour == pytest.approx(402.5, abs=0.5)
    assert result.water == pytest.approx(253.5, abs=0.5)
    assert result.salt == pytest.approx(10, abs=0.5)
    assert result.oil == pytest.approx(8, abs=0.5)
    assert result.yeast == pytest.approx(1.2, abs=0.05)
    assert result.total_dough == pytest.approx(675.3, abs=0.5)


def test_matches_neapolitan_long_room_temp_example():
    inputs = replace(
        BASE_INPUTS,
        target_weight=815,
        hydration_percent=60,
        salt_percent=2.8,
        oil_percent=0,
        sugar_percent=0,
        yeast_percent=0.1,
        thickness_factor=0.33,
    )
    result = compute_dough(inputs)
    assert result.flour == pytest.approx(500, abs=5)
    assert result.water == pytest.approx(300, abs=5)
    assert result.salt == pytest.approx(14, abs=0.5)
    assert result.yeast == pytest.approx(0.5, abs=0.05)


def test_format_grams_rounds_up():
    assert format_grams(500) == 500
    assert format_grams(500.01) == 501
    assert format_grams(0) == 0
    assert format_grams(0.2) == 1
    assert isinstance(format_grams(12.5), int)


def test_estimates_bake_minutes_with_reasonable_bounds():
    assert estimate_bake_minutes(450, 0.33) < 8
    assert estimate_bake_minutes(230, 0.45) > 7
    assert estimate_bake_minutes(250, 0.36) == 12.0


def test_bake_minutes_floor_oven_temperature_at_180():
    assert estimate_bake_minutes(100, 0.36) == estimate_bake_minutes(180, 0.36)
    assert estimate_bake_minutes(-40, 0.36) == estimate_bake_minutes(180, 0.36)


def test_bake_minutes_stay_within_range():
    for temp in (0, 150, 180, 250, 320, 450, 600, 1000):
        for thickness in (0.0, 0.1, 0.33, 0.45, 1.0, 5.0):
            assert 1.5 <= estimate_bake_minutes(temp, thickness) <= 15


def test_suggests_yeast_percent_based_on_time_and_temp():
    base = 0.35
    cool_slow = suggest_yeast_percent(base_percent=base, target_hours=48, temp_c=18)
    warm_fast = suggest_yeast_percent(base_percent=base, target_hours=8, temp_c=26)
    assert cool_slow > base * 0.3
    assert warm_fast < base * 3.5
    assert warm_fast > base * 0.5


def test_yeast_anchor_is_seven_hours_at_21c():
    assert suggest_yeast_percent(0.4, 7, 21) == pytest.approx(0.4)


def test_keeps_yeast_suggestion_sane_for_short_warm_rise():
    suggested = suggest_yeast_percent(base_percent=0.5, target_hours=1, temp_c=24)
    assert 0.4 <= suggested <= 5


def test_raises_yeast_materially_when_target_time_is_very_short():
    four_hour = suggest_yeast_percent(base_percent=0.3, target_hours=4, temp_c=20)
    one_hour = suggest_yeast_percent(base_percent=0.3, target_hours=1, temp_c=20)
    assert one_hour > four_hour * 1.5


def test_aligns_with_room_temp_yeast_charts_around_21c():
    base = 0.5
    assert suggest_yeast_percent(base, 6.4, 21) == pytest.approx(0.55, abs=0.05)
    assert suggest_yeast_percent(base, 4, 21) == pytest.approx(0.9, abs=0.05)
    assert suggest_yeast_percent(base, 2, 21) == pytest.approx(1.9, abs=0.05)


def test_increases_yeast_noticeably_when_colder():
    twenty = suggest_yeast_percent(base_percent=0.3, target_hours=6, temp_c=20)
    ten = suggest_yeast_percent(base_percent=0.3, target_hours=6, temp_c=10)
    assert ten > twenty * 1.5


def test_yeast_suggestion_is_monotonic_in_time_and_temperature():
    hours = [0.1, 0.5, 1, 2, 4, 7, 12, 24, 48, 96]
    temps = [-5, 4, 10, 18, 21, 26, 35]
    for base in (0.1, 0.35, 2.0):
        for temp in temps:
            values = [suggest_yeast_percent(base, h, temp) for h in reversed(hours)]
            assert values == sorted(values)
        for h in hours:
            values = [suggest_yeast_percent(base, h, t) for t in reversed(temps)]
            assert values == sorted(values)


def test_yeast_suggestion_stays_within_range():
    for base in (0, 0.001, 0.35, 20):
        for h in (0, 0.2, 7, 200):
            for temp in (-30, 21, 60):
                assert 0.01 <= suggest_yeast_percent(base, h, temp) <= 5


def test_non_finite_amounts_count_as_zero():
    assert format_grams(float("nan")) == 0
    assert format_grams(float("inf")) == 0
    assert format_grams(float("-inf")) == 0
    assert derive_total_weight(replace(BASE_INPUTS, target_weight=float("nan"))) == 0
    result = compute_dough(replace(BASE_INPUTS, target_weight=float("inf")))
    assert result.total_dough == 0
    assert format_grams(result.flour) == 0
