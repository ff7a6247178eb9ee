"""Range and gamma compensation for Apple HEVC (H.265) footage.

Apple HEVC clips are usually limited range (16-235 in 8-bit) and encoded with a
gamma near 1.96 rather than 2.2. A LUT built for full-range, gamma 2.2 footage
looks washed out on them. The compensated transform expands the input to full
range under gamma 2.2, grades it, then maps the result back.
"""
import numpy as np

from gradecube.grading.pipeline import Channels, clamp, transform_arrays
from gradecube.params.schema import GradingParameters

# 16/255 and 235/255, rounded as the HEVC profile has always emitted them
LIMITED_RANGE_MIN = 0.0627
LIMITED_RANGE_MAX = 0.9216

HEVC_GAMMA = 1.96
STANDARD_GAMMA = 2.2


def limited_to_full(value: np.ndarray) -> np.ndarray:
    return clamp((value - LIMITED_RANGE_MIN) / (LIMITED_RANGE_MAX - LIMITED_RANGE_MIN))


def full_to_limited(value: np.ndarray) -> np.ndarray:
    return clamp(value * (LIMITED_RANGE_MAX - LIMITED_RANGE_MIN) + LIMITED_RANGE_MIN)


def expand_codec_gamma(value: np.ndarray) -> np.ndarray:
    """Linearize with the HEVC gamma, re-encode with the standard gamma."""
    linear = np.power(np.maximum(value, 0.0), HEVC_GAMMA)
    return np.power(linear, 1.0 / STANDARD_GAMMA)


def compress_codec_gamma(value: np.ndarray) -> np.ndarray:
    """Inverse of expand_codec_gamma."""
    linear = np.power(np.maximum(value, 0.0), STANDARD_GAMMA)
    return np.power(linear, 1.0 / HEVC_GAMMA)


def transform_compensated_arrays(r, g, b, params: GradingParameters) -> Channels:
    """Same contract as transform_arrays, wrapped in the HEVC pre/post pass."""
    pre = [
        expand_codec_gamma(limited_to_full(np.asarray(c, dtype=np.float64)))
        for c in (r, g, b)
    ]
    graded = transform_arrays(*pre, params)
    return tuple(full_to_limited(compress_codec_gamma(c)) for c in graded)


def transform_compensated(r: float, g: float, b: float, params: GradingParameters) -> tuple[float, float, float]:
    r_out, g_out, b_out = transform_compensated_arrays(r, g, b, params)
    return float(r_out), float(g_out), float(b_out)
