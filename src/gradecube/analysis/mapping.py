"""Map ImageAnalysis statistics onto GradingParameters.

The mapping answers "what offset from neutral gray would make neutral footage
resemble this reference". Every output is clamped to [-1, 1] by the
GradingParameters validators.
"""
from gradecube.models import ImageAnalysis
from gradecube.params.schema import GradingParameters, RGBTriple

NEUTRAL_GRAY = 0.5

LIFT_COEFFICIENT = 0.3
GAMMA_COEFFICIENT = 0.5
GAIN_COEFFICIENT = 0.3

# Brightness band inside which shadows/highlights stay neutral
SHADOW_THRESHOLD = 0.4
HIGHLIGHT_THRESHOLD = 0.6
TONE_COEFFICIENT = 0.5


def _offset_triple(analysis: ImageAnalysis, coefficient: float) -> RGBTriple:
    avg = analysis.average_color
    return RGBTriple(
        r=(avg.r - NEUTRAL_GRAY) * coefficient,
        g=(avg.g - NEUTRAL_GRAY) * coefficient,
        b=(avg.b - NEUTRAL_GRAY) * coefficient,
    )


def _gain_triple(analysis: ImageAnalysis) -> RGBTriple:
    """Pull the weaker channels down relative to the strongest one."""
    avg = analysis.average_color
    max_channel = max(avg.r, avg.g, avg.b)
    if max_channel <= 0.0:
        # Pure black reference has no channel balance to emphasize
        return RGBTriple()
    return RGBTriple(
        r=(avg.r / max_channel - 1.0) * GAIN_COEFFICIENT,
        g=(avg.g / max_channel - 1.0) * GAIN_COEFFICIENT,
        b=(avg.b / max_channel - 1.0) * GAIN_COEFFICIENT,
    )


def analysis_to_parameters(analysis: ImageAnalysis) -> GradingParameters:
    avg = analysis.average_color
    brightness = analysis.brightness

    shadows = 0.0
    if brightness < SHADOW_THRESHOLD:
        shadows = -(SHADOW_THRESHOLD - brightness) * TONE_COEFFICIENT
    highlights = 0.0
    if brightness > HIGHLIGHT_THRESHOLD:
        highlights = (brightness - HIGHLIGHT_THRESHOLD) * TONE_COEFFICIENT

    return GradingParameters(
        contrast=(analysis.contrast - 0.5) * 0.6,
        saturation=(analysis.saturation - 0.3) * 1.5,
        temperature=analysis.temperature * 0.8,
        tint=(avg.g - (avg.r + avg.b) / 2.0) * 0.5,
        shadows=shadows,
        highlights=highlights,
        lift=_offset_triple(analysis, LIFT_COEFFICIENT),
        gamma=_offset_triple(analysis, GAMMA_COEFFICIENT),
        gain=_gain_triple(analysis),
    )


def describe_analysis(analysis: ImageAnalysis) -> str:
    """Short human-readable summary of the reference look, e.g. 'dark/low-key, warm tones'."""
    parts: list[str] = []

    if analysis.brightness < 0.35:
        parts.append("dark/low-key")
    elif analysis.brightness > 0.65:
        parts.append("bright/high-key")

    if analysis.contrast > 0.7:
        parts.append("high contrast")
    elif analysis.contrast < 0.4:
        parts.append("low contrast/flat")

    if analysis.saturation > 0.5:
        parts.append("vibrant/saturated")
    elif analysis.saturation < 0.2:
        parts.append("desaturated/muted")

    if analysis.temperature > 0.15:
        parts.append("warm tones")
    elif analysis.temperature < -0.15:
        parts.append("cool tones")

    if analysis.dominant_colors:
        top = analysis.dominant_colors[0]
        if top.r > top.g and top.r > top.b:
            parts.append("red/orange dominant")
        elif top.g > top.r and top.g > top.b:
            parts.append("green dominant")
        elif top.b > top.r and top.b > top.g:
            parts.append("blue/cyan dominant")

    return ", ".join(parts) if parts else "balanced/neutral"
