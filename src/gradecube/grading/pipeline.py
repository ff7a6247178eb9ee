"""Five-stage color transform: lift/gamma/gain, shadows/highlights,
temperature/tint, contrast, saturation.

Every stage takes and returns three float64 arrays (or scalars) in [0, 1] and
clamps its output. Stage order is fixed by ``STAGES``; ``transform_arrays``
is the only place they are composed.

Arrays are evaluated element-wise, so one call can sample a whole LUT grid.
"""
from typing import Callable

import numpy as np

from gradecube.params.schema import GradingParameters

Channels = tuple[np.ndarray, np.ndarray, np.ndarray]
Stage = Callable[[np.ndarray, np.ndarray, np.ndarray, GradingParameters], Channels]

LIFT_SCALE = 0.1
GAMMA_SCALE = 0.2
GAIN_SCALE = 0.2
SHADOW_HIGHLIGHT_SCALE = 0.15
TEMPERATURE_SCALE = 0.1
TINT_SCALE = 0.05
CONTRAST_DENOMINATOR_SCALE = 0.99

# Rec.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def clamp(value: np.ndarray) -> np.ndarray:
    # + 0.0 turns -0.0 into 0.0 so formatting never yields "-0.000000"
    return np.clip(value, 0.0, 1.0) + 0.0


def luma(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    wr, wg, wb = LUMA_WEIGHTS
    return wr * r + wg * g + wb * b


def _lift_gamma_gain_channel(value: np.ndarray, lift: float, gamma: float, gain: float) -> np.ndarray:
    result = value + lift * LIFT_SCALE * (1.0 - value)
    power = 1.0 / (1.0 + gamma * GAMMA_SCALE)
    result = np.power(np.maximum(result, 0.0), power)
    result = result * (1.0 + gain * GAIN_SCALE)
    return clamp(result)


def apply_lift_gamma_gain(r, g, b, params: GradingParameters) -> Channels:
    lift, gamma, gain = params.lift, params.gamma, params.gain
    return (
        _lift_gamma_gain_channel(r, lift.r, gamma.r, gain.r),
        _lift_gamma_gain_channel(g, lift.g, gamma.g, gain.g),
        _lift_gamma_gain_channel(b, lift.b, gamma.b, gain.b),
    )


def _shadows_highlights_channel(value: np.ndarray, shadows: float, highlights: float) -> np.ndarray:
    if shadows != 0:
        shadow_mask = 1.0 - value / 0.5
        value = np.where(
            value < 0.5,
            clamp(value + shadows * SHADOW_HIGHLIGHT_SCALE * shadow_mask),
            value,
        )
    # Evaluated on the shadow-adjusted value
    if highlights != 0:
        highlight_mask = (value - 0.5) / 0.5
        value = np.where(
            value > 0.5,
            clamp(value + highlights * SHADOW_HIGHLIGHT_SCALE * highlight_mask),
            value,
        )
    return value


def apply_shadows_highlights(r, g, b, params: GradingParameters) -> Channels:
    if params.shadows == 0 and params.highlights == 0:
        return r, g, b
    return (
        _shadows_highlights_channel(r, params.shadows, params.highlights),
        _shadows_highlights_channel(g, params.shadows, params.highlights),
        _shadows_highlights_channel(b, params.shadows, params.highlights),
    )


def apply_temperature_tint(r, g, b, params: GradingParameters) -> Channels:
    temp_shift = params.temperature * TEMPERATURE_SCALE
    tint_shift = params.tint * TINT_SCALE
    # Tint only moves green; positive tint pushes toward magenta
    return clamp(r + temp_shift), clamp(g - tint_shift), clamp(b - temp_shift)


def contrast_factor(contrast: float) -> float:
    return (1.0 + contrast) / (1.0 - contrast * CONTRAST_DENOMINATOR_SCALE)


def apply_contrast(r, g, b, params: GradingParameters) -> Channels:
    factor = contrast_factor(params.contrast)
    return tuple(clamp((c - 0.5) * factor + 0.5) for c in (r, g, b))


def apply_saturation(r, g, b, params: GradingParameters) -> Channels:
    y = luma(r, g, b)
    factor = 1.0 + params.saturation
    return tuple(clamp(y + (c - y) * factor) for c in (r, g, b))


# Order matters: reordering changes the look of every generated LUT.
STAGES: tuple[tuple[str, Stage], ...] = (
    ("lift_gamma_gain", apply_lift_gamma_gain),
    ("shadows_highlights", apply_shadows_highlights),
    ("temperature_tint", apply_temperature_tint),
    ("contrast", apply_contrast),
    ("saturation", apply_saturation),
)


def transform_arrays(r, g, b, params: GradingParameters) -> Channels:
    """Run every stage in ``STAGES`` order over channel arrays of equal shape."""
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    for _name, stage in STAGES:
        r, g, b = stage(r, g, b, params)
    return r, g, b


def transform(r: float, g: float, b: float, params: GradingParameters) -> tuple[float, float, float]:
    """Map one RGB sample in [0, 1] through the pipeline and return the graded sample."""
    r_out, g_out, b_out = transform_arrays(r, g, b, params)
    return float(r_out), float(g_out), float(b_out)
