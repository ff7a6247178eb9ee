"""Reference-image statistics: average color, HSL saturation, luma percentiles,
histograms, dominant colors and a warm/cool temperature estimate.

The analyzer works on a dense row-major RGBA uint8 buffer. Callers are expected
to downsample first (``load_image_pixels`` does this); the luma percentile
step sorts every sample, which is only cheap at analysis resolution.
"""
from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from gradecube.config import ANALYSIS_MAX_DIMENSION
from gradecube.errors import AnalysisError, ImageLoadError
from gradecube.grading.pipeline import luma
from gradecube.models import DominantColor, Histograms, ImageAnalysis, RGBColor

logger = logging.getLogger(__name__)

HISTOGRAM_BINS = 256
QUANTIZE_LEVELS = 8
DOMINANT_COLOR_COUNT = 5
TEMPERATURE_FLOOR = 0.01


# ---------------------------------------------------------------------------
# Image loading
# ---------------------------------------------------------------------------

def load_image_pixels(
    path: Path,
    max_dimension: int = ANALYSIS_MAX_DIMENSION,
) -> tuple[np.ndarray, int, int]:
    """Decode an image file into an RGBA buffer no larger than max_dimension per side.

    Returns
    -------
    tuple[np.ndarray, int, int]
        ``(pixels, width, height)`` where pixels is a flat uint8 array of
        length ``width * height * 4``.

    Raises
    ------
    ImageLoadError
        If the file is missing or OpenCV cannot decode it.
    """
    if not path.exists():
        raise ImageLoadError(path, "file does not exist")

    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise ImageLoadError(path, "OpenCV could not decode the file")

    height, width = img.shape[:2]
    scale = min(max_dimension / width, max_dimension / height, 1.0)
    if scale < 1.0:
        width = max(1, int(round(width * scale)))
        height = max(1, int(round(height * scale)))
        img = cv2.resize(img, (width, height), interpolation=cv2.INTER_AREA)
        logger.debug("downsampled %s to %dx%d for analysis", path.name, width, height)

    rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    return np.ascontiguousarray(rgba).reshape(-1), width, height


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

def _as_rgba(pixels, width: int, height: int) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise AnalysisError(f"image dimensions must be positive, got {width}x{height}")
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        buf = np.frombuffer(pixels, dtype=np.uint8)
    else:
        buf = np.asarray(pixels, dtype=np.uint8).reshape(-1)
    expected = width * height * 4
    if buf.size != expected:
        raise AnalysisError(
            f"buffer holds {buf.size} bytes but {width}x{height} RGBA needs {expected}"
        )
    return buf.reshape(-1, 4)


def hsl_saturation(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Per-pixel HSL saturation. Achromatic pixels (max == min) get 0."""
    high = np.maximum(np.maximum(r, g), b)
    low = np.minimum(np.minimum(r, g), b)
    lightness = (high + low) / 2.0
    delta = high - low
    denom = np.where(lightness > 0.5, 2.0 - high - low, high + low)
    chromatic = delta > 0
    # Guarded divide: denom is only zero where delta is also zero
    safe_denom = np.where(chromatic, denom, 1.0)
    return np.where(chromatic, delta / safe_denom, 0.0)


def _dominant_colors(rgb: np.ndarray, pixel_count: int) -> tuple[DominantColor, ...]:
    # floor(c * 8) gives levels 0..8 (pure 1.0 lands in its own bucket)
    levels = np.floor(rgb * QUANTIZE_LEVELS).astype(np.int64)
    base = QUANTIZE_LEVELS + 1
    keys = (levels[:, 0] * base + levels[:, 1]) * base + levels[:, 2]
    unique_keys, first_index, counts = np.unique(keys, return_index=True, return_counts=True)
    # Most populous first; ties go to the bucket seen first in the image
    order = np.lexsort((first_index, -counts))[:DOMINANT_COLOR_COUNT]

    result: list[DominantColor] = []
    for idx in order:
        key = int(unique_keys[idx])
        qb = key % base
        qg = (key // base) % base
        qr = key // (base * base)
        result.append(DominantColor(
            r=qr / QUANTIZE_LEVELS,
            g=qg / QUANTIZE_LEVELS,
            b=qb / QUANTIZE_LEVELS,
            percentage=float(counts[idx]) / pixel_count * 100.0,
        ))
    return tuple(result)


def _histograms(rgb8: np.ndarray, lum: np.ndarray) -> Histograms:
    # Epsilon absorbs float noise at bin edges; pure white luma can land just under 1.0
    lum_bins = np.minimum(np.floor(lum * 255 + 1e-9).astype(np.int64), HISTOGRAM_BINS - 1)
    counts = [
        np.bincount(rgb8[:, 0], minlength=HISTOGRAM_BINS),
        np.bincount(rgb8[:, 1], minlength=HISTOGRAM_BINS),
        np.bincount(rgb8[:, 2], minlength=HISTOGRAM_BINS),
        np.bincount(lum_bins, minlength=HISTOGRAM_BINS),
    ]
    peak = max(int(c.max()) for c in counts)
    scale = float(peak) if peak > 0 else 1.0
    return Histograms(*(tuple((c / scale).tolist()) for c in counts))


def analyze_pixels(pixels, width: int, height: int) -> ImageAnalysis:
    """Reduce an RGBA buffer to the statistics used for parameter mapping.

    Alpha is ignored. Raises AnalysisError for empty or mis-sized buffers.
    """
    rgba = _as_rgba(pixels, width, height)
    pixel_count = rgba.shape[0]
    rgb8 = rgba[:, :3]
    rgb = rgb8.astype(np.float64) / 255.0
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    # Pass 1: sums, saturation, luma, histograms, dominant buckets
    avg_r, avg_g, avg_b = (float(v) for v in rgb.sum(axis=0) / pixel_count)
    saturation = float(hsl_saturation(r, g, b).sum() / pixel_count)
    lum = luma(r, g, b)
    brightness = float(lum.sum() / pixel_count)
    histograms = _histograms(rgb8, lum)
    dominant = _dominant_colors(rgb, pixel_count)

    # Pass 2: luma percentiles
    sorted_lum = np.sort(lum)
    p5 = float(sorted_lum[int(pixel_count * 0.05)])
    p95 = float(sorted_lum[int(pixel_count * 0.95)])

    temperature = (avg_r - avg_b) / max(avg_r, avg_b, TEMPERATURE_FLOOR)

    logger.debug(
        "analyzed %dx%d: brightness=%.3f contrast=%.3f saturation=%.3f temperature=%.3f",
        width, height, brightness, p95 - p5, saturation, temperature,
    )
    return ImageAnalysis(
        average_color=RGBColor(avg_r, avg_g, avg_b),
        dominant_colors=dominant,
        brightness=brightness,
        contrast=p95 - p5,
        saturation=saturation,
        temperature=temperature,
        histograms=histograms,
    )
