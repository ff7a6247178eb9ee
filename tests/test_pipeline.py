"""Unit tests for gradecube.grading.pipeline: the five-stage color transform."""
import itertools

import numpy as np
import pytest

from gradecube.grading.pipeline import (
    STAGES,
    apply_contrast,
    apply_lift_gamma_gain,
    apply_saturation,
    apply_shadows_highlights,
    apply_temperature_tint,
    contrast_factor,
    transform,
    transform_arrays,
)
from gradecube.params.presets import PRESETS
from gradecube.params.schema import GradingParameters, RGBTriple

GRID = [0.0, 0.1, 0.25, 0.5, 0.75, 0.9, 1.0]


def _extreme_params() -> list[GradingParameters]:
    out = []
    for v in (-1.0, 1.0):
        out.append(GradingParameters(
            contrast=v, saturation=v, temperature=v, tint=v, shadows=v, highlights=v,
            lift=RGBTriple(r=v, g=-v, b=v),
            gamma=RGBTriple(r=v, g=v, b=-v),
            gain=RGBTriple(r=-v, g=v, b=v),
        ))
    return out


class TestStageOrder:
    """Pipeline stage ordering."""

    def test_stage_names_in_fixed_order(self):
        assert [name for name, _ in STAGES] == [
            "lift_gamma_gain",
            "shadows_highlights",
            "temperature_tint",
            "contrast",
            "saturation",
        ]

    def test_order_changes_result(self):
        """Saturation after contrast differs from contrast after saturation."""
        params = GradingParameters(contrast=0.5, saturation=-0.5, temperature=0.5)
        r, g, b = (np.float64(0.8), np.float64(0.3), np.float64(0.2))
        forward = transform_arrays(r, g, b, params)
        x = (r, g, b)
        for _name, stage in reversed(STAGES):
            x = stage(*x, params)
        assert not np.allclose(forward, x)


class TestIdentity:
    """Neutral parameters leave colors unchanged."""

    def test_neutral_params_are_identity(self):
        params = GradingParameters()
        for r, g, b in itertools.product(GRID, repeat=3):
            assert transform(r, g, b, params) == pytest.approx((r, g, b), abs=1e-12)

    def test_neutral_grid_arrays(self):
        vals = np.linspace(0.0, 1.0, 17)
        r, g, b = np.meshgrid(vals, vals, vals, indexing="ij")
        out = transform_arrays(r, g, b, GradingParameters())
        np.testing.assert_allclose(out[0], r, atol=1e-12)
        np.testing.assert_allclose(out[1], g, atol=1e-12)
        np.testing.assert_allclose(out[2], b, atol=1e-12)


class TestClamping:
    """Output clamping."""

    @pytest.mark.parametrize("params", _extreme_params() + list(PRESETS.values()))
    def test_outputs_within_unit_range(self, params):
        vals = np.linspace(0.0, 1.0, 9)
        r, g, b = np.meshgrid(vals, vals, vals, indexing="ij")
        for channel in transform_arrays(r, g, b, params):
            assert np.all(channel >= 0.0)
            assert np.all(channel <= 1.0)
            assert not np.any(np.isnan(channel))

    def test_no_negative_zero(self):
        out = transform(0.0, 0.0, 0.0, GradingParameters(contrast=1.0))
        assert all(np.copysign(1.0, c) == 1.0 for c in out)


class TestLiftGammaGain:
    """Lift/gamma/gain stage."""

    def test_lift_raises_shadows_more_than_highlights(self):
        params = GradingParameters(lift=RGBTriple(r=1.0, g=1.0, b=1.0))
        r, _, _ = apply_lift_gamma_gain(np.float64(0.0), np.float64(0.0), np.float64(0.0), params)
        assert float(r) == pytest.approx(0.1)
        r, _, _ = apply_lift_gamma_gain(np.float64(1.0), np.float64(1.0), np.float64(1.0), params)
        assert float(r) == pytest.approx(1.0)

    def test_gamma_brightens_midtones(self):
        params = GradingParameters(gamma=RGBTriple(r=1.0, g=0.0, b=-1.0))
        r, g, b = apply_lift_gamma_gain(np.float64(0.5), np.float64(0.5), np.float64(0.5), params)
        assert float(r) == pytest.approx(0.5 ** (1 / 1.2))
        assert float(g) == pytest.approx(0.5)
        assert float(b) == pytest.approx(0.5 ** (1 / 0.8))

    def test_negative_lift_clamped_before_power(self):
        params = GradingParameters(lift=RGBTriple(r=-1.0, g=0.0, b=0.0), gamma=RGBTriple(r=0.5, g=0.0, b=0.0))
        r, _, _ = apply_lift_gamma_gain(np.float64(0.0), np.float64(0.0), np.float64(0.0), params)
        assert float(r) == 0.0

    def test_gain_multiplies(self):
        params = GradingParameters(gain=RGBTriple(r=0.5, g=-0.5, b=0.0))
        r, g, b = apply_lift_gamma_gain(np.float64(0.5), np.float64(0.5), np.float64(0.5), params)
        assert float(r) == pytest.approx(0.55)
        assert float(g) == pytest.approx(0.45)
        assert float(b) == pytest.approx(0.5)


class TestShadowsHighlights:
    """Shadows/highlights stage."""

    def test_zero_controls_short_circuit(self):
        r = np.array([0.1, 0.5, 0.9])
        out = apply_shadows_highlights(r, r, r, GradingParameters())
        assert out[0] is r

    def test_shadows_strongest_at_black_and_zero_at_midpoint(self):
        params = GradingParameters(shadows=1.0)
        v = np.array([0.0, 0.25, 0.5, 0.75])
        out, _, _ = apply_shadows_highlights(v, v, v, params)
        np.testing.assert_allclose(out, [0.15, 0.25 + 0.15 * 0.5, 0.5, 0.75])

    def test_highlights_mirror_shadows(self):
        params = GradingParameters(highlights=-1.0)
        v = np.array([0.25, 0.5, 0.75, 1.0])
        out, _, _ = apply_shadows_highlights(v, v, v, params)
        np.testing.assert_allclose(out, [0.25, 0.5, 0.75 - 0.15 * 0.5, 0.85])


class TestTemperatureTint:
    """Temperature/tint stage."""

    def test_warm_shifts_red_up_blue_down(self):
        params = GradingParameters(temperature=1.0)
        r, g, b = apply_temperature_tint(np.float64(0.5), np.float64(0.5), np.float64(0.5), params)
        assert (float(r), float(g), float(b)) == pytest.approx((0.6, 0.5, 0.4))

    def test_tint_moves_green_only(self):
        params = GradingParameters(tint=1.0)
        r, g, b = apply_temperature_tint(np.float64(0.5), np.float64(0.5), np.float64(0.5), params)
        assert (float(r), float(g), float(b)) == pytest.approx((0.5, 0.45, 0.5))


class TestContrast:
    """Contrast stage."""

    def test_factor_neutral(self):
        assert contrast_factor(0.0) == 1.0

    def test_factor_finite_at_bounds(self):
        assert contrast_factor(1.0) == pytest.approx(200.0)
        assert contrast_factor(-1.0) == 0.0

    def test_pivot_at_half(self):
        params = GradingParameters(contrast=0.7)
        r, g, b = apply_contrast(np.float64(0.5), np.float64(0.2), np.float64(0.8), params)
        assert float(r) == pytest.approx(0.5)
        assert float(g) < 0.2
        assert float(b) > 0.8

    def test_minimum_contrast_flattens_to_gray(self):
        params = GradingParameters(contrast=-1.0)
        out = apply_contrast(np.float64(0.0), np.float64(0.3), np.float64(1.0), params)
        assert [float(c) for c in out] == pytest.approx([0.5, 0.5, 0.5])


class TestSaturation:
    """Saturation stage."""

    def test_full_desaturation_of_red(self):
        params = GradingParameters(saturation=-1.0)
        assert transform(1.0, 0.0, 0.0, params) == pytest.approx((0.299, 0.299, 0.299))

    def test_saturation_boost_spreads_channels(self):
        params = GradingParameters(saturation=0.5)
        r, g, b = apply_saturation(np.float64(0.6), np.float64(0.5), np.float64(0.4), params)
        assert float(r) > 0.6
        assert float(b) < 0.4

    def test_gray_unchanged_by_saturation(self):
        params = GradingParameters(saturation=1.0)
        assert transform(0.4, 0.4, 0.4, params) == pytest.approx((0.4, 0.4, 0.4))
