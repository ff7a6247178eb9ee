from dataclasses import dataclass


@dataclass(frozen=True)
class RGBColor:
    """An RGB color with channels in [0, 1]."""

    r: float
    g: float
    b: float


@dataclass(frozen=True)
class DominantColor:
    """A quantized color bucket and the share of pixels that fell into it."""

    r: float            # Quantized to multiples of 1/8
    g: float
    b: float
    percentage: float   # 0-100


@dataclass(frozen=True)
class Histograms:
    """256-bucket histograms scaled so the tallest bucket across all four is 1.0."""

    r: tuple[float, ...]
    g: tuple[float, ...]
    b: tuple[float, ...]
    luminance: tuple[float, ...]


@dataclass(frozen=True)
class ImageAnalysis:
    """Statistical snapshot of one reference image. Computed once, never persisted."""

    average_color: RGBColor
    dominant_colors: tuple[DominantColor, ...]   # At most 5, most populous first
    brightness: float   # Mean Rec.601 luma
    contrast: float     # 95th minus 5th percentile luma
    saturation: float   # Mean HSL saturation
    temperature: float  # (avgR - avgB) / max(avgR, avgB, 0.01)
    histograms: Histograms
