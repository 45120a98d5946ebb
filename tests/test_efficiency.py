"""
Tests for the LED current-to-lumens droop model.
"""

import pytest

from speccheck.analysis.efficiency import LedDroopModel, calculate_led_lumens_at_current


def test_linear_region_is_proportional():
    assert calculate_led_lumens_at_current(750, 3000, 1000) == pytest.approx(250)


def test_half_current_gives_exactly_half_flux():
    assert calculate_led_lumens_at_current(1500, 3000, 1052) == 526


def test_rated_current_includes_droop():
    # 500 linear + 500 * 1.0 * 0.75
    assert calculate_led_lumens_at_current(3000, 3000, 1000) == 875


def test_three_quarter_current():
    assert calculate_led_lumens_at_current(2250, 3000, 1000) == 728


def test_non_decreasing_in_current():
    outputs = [calculate_led_lumens_at_current(current, 3000, 1052) for current in range(0, 3001, 50)]
    assert all(later >= earlier for earlier, later in zip(outputs, outputs[1:]))


def test_current_above_rating_is_capped():
    assert calculate_led_lumens_at_current(6000, 3000, 1000) == calculate_led_lumens_at_current(3000, 3000, 1000)


@pytest.mark.parametrize("target,max_current,lumens", [(0, 3000, 1000), (1000, 0, 1000), (-5, 3000, 1000)])
def test_degenerate_inputs_yield_zero(target, max_current, lumens):
    assert calculate_led_lumens_at_current(target, max_current, lumens) == 0


def test_model_parameters_are_tunable():
    no_droop = LedDroopModel(peak_efficiency_ratio=1.0)
    assert calculate_led_lumens_at_current(3000, 3000, 1000, model=no_droop) == 1000


def test_any_object_with_lumens_at_current_can_stand_in():
    class FlatModel:
        def lumens_at_current(self, target_current, max_current, max_lumens):
            return 42.0

    assert calculate_led_lumens_at_current(1, 2, 3, model=FlatModel()) == 42.0
