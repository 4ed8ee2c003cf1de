import math

import numpy as np
import pytest

from glint_matrix import compute_reflection_transmission
from glint_sensitivity import (
    RESONANCE_UNIT,
    perturbed_material,
    sensitivity_curve,
    spri_sensitivity,
)
from optical_models import Konstant


@pytest.fixture
def spr_stack(gold):
    return [(gold, 47e-9)]


class TestPerturbedMaterial:

    def test_real_offset(self, gold):
        shifted = perturbed_material(gold, 1e-3)
        assert shifted.evaluate(633e-9) == pytest.approx(gold.evaluate(633e-9) + 1e-3)

    @pytest.mark.parametrize("step, exc", [
        (np.inf, ValueError),
        (np.nan, ValueError),
        (1e-6 + 1e-6j, TypeError),
        ("1e-6", TypeError),
        (True, TypeError),
    ])
    def test_malformed_step(self, water, step, exc):
        with pytest.raises(exc):
            perturbed_material(water, step)


class TestSpriSensitivity:

    def test_bare_interface_analytic(self, glass, water):
        # r = (n1 − n2)/(n1 + n2) at normal incidence, dR/dn2 = 2r·dr/dn2
        n1, n2 = 1.5, 1.33
        r = (n1 - n2) / (n1 + n2)
        dr_dn = -2.0 * n1 / (n1 + n2) ** 2
        expected_abs = 2.0 * r * dr_dn

        s_abs = spri_sensitivity(glass, [], water, 633e-9, 0.0, absolute=True)
        s_rel = spri_sensitivity(glass, [], water, 633e-9, 0.0)
        assert s_abs == pytest.approx(expected_abs, rel=1e-3)
        assert s_rel == pytest.approx(expected_abs / r ** 2, rel=1e-3)

    def test_relative_is_absolute_over_baseline(self, sf10, spr_stack, water):
        args = (sf10, spr_stack, water, 660e-9, 57.0)
        r0 = compute_reflection_transmission(
            660e-9, sf10, spr_stack, water, 57.0, "p").reflectance
        s_abs = spri_sensitivity(*args, absolute=True)
        s_rel = spri_sensitivity(*args)
        assert s_rel == pytest.approx(s_abs / r0, rel=1e-9)

    def test_vanishing_step_is_nan(self, sf10, spr_stack, water):
        args = (sf10, spr_stack, water, 660e-9, 57.0)
        assert math.isnan(spri_sensitivity(*args, index_step=1e-21))
        assert math.isnan(spri_sensitivity(*args, absolute=True, index_step=1e-21))
        assert math.isnan(spri_sensitivity(*args, index_step=0.0))

    def test_zero_baseline_relative_is_nan(self, glass):
        # Index-matched media reflect nothing
        matched = Konstant(1.5)
        assert math.isnan(spri_sensitivity(glass, [], matched, 633e-9, 0.0))
        s_abs = spri_sensitivity(glass, [], matched, 633e-9, 0.0, absolute=True)
        assert np.isfinite(s_abs)
        assert 0.0 <= s_abs < 1e-5

    def test_default_step_is_one_resonance_unit(self, sf10, spr_stack, water):
        args = (sf10, spr_stack, water, 660e-9, 57.0)
        assert spri_sensitivity(*args) == spri_sensitivity(
            *args, index_step=RESONANCE_UNIT)

    def test_negative_step_same_slope(self, glass, water):
        up = spri_sensitivity(glass, [], water, 633e-9, 0.0, absolute=True)
        down = spri_sensitivity(glass, [], water, 633e-9, 0.0, absolute=True,
                                index_step=-1e-6)
        assert down == pytest.approx(up, rel=1e-3)

    def test_malformed_step_raises(self, glass, water):
        with pytest.raises(ValueError):
            spri_sensitivity(glass, [], water, 633e-9, 0.0, index_step=np.inf)


class TestSensitivityCurve:

    def test_matches_pointwise(self, sf10, spr_stack, water):
        angles = np.array([50.0, 55.0, 57.5, 60.0, 65.0])
        curve = sensitivity_curve(sf10, spr_stack, water, 660e-9, angles)
        assert curve.shape == angles.shape
        for angle, value in zip(angles, curve):
            point = spri_sensitivity(sf10, spr_stack, water, 660e-9, angle)
            assert value == pytest.approx(point, rel=1e-9)

    def test_absolute_matches_pointwise(self, sf10, spr_stack, water):
        angles = [52.0, 58.0]
        curve = sensitivity_curve(sf10, spr_stack, water, 660e-9, angles,
                                  absolute=True)
        for angle, value in zip(angles, curve):
            point = spri_sensitivity(sf10, spr_stack, water, 660e-9, angle,
                                     absolute=True)
            assert value == pytest.approx(point, rel=1e-9)

    def test_nan_where_undefined(self, glass):
        curve = sensitivity_curve(glass, [], Konstant(1.5), 633e-9, [0.0, 10.0])
        assert np.all(np.isnan(curve))

    def test_vanishing_step(self, sf10, spr_stack, water):
        curve = sensitivity_curve(sf10, spr_stack, water, 660e-9, [55.0, 60.0],
                                  index_step=1e-21)
        assert np.all(np.isnan(curve))
