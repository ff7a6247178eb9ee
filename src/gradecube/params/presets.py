"""Named grading presets and offline prompt-to-preset keyword matching.

Presets are static configuration: an immutable mapping of frozen
GradingParameters. Callers derive edited copies with merge_parameters().
"""
from types import MappingProxyType
from typing import Mapping, Optional

from gradecube.errors import PresetError
from gradecube.params.schema import GradingParameters, RGBTriple

PRESETS: Mapping[str, GradingParameters] = MappingProxyType({
    "cinematic-orange-teal": GradingParameters(
        contrast=0.15,
        saturation=0.1,
        temperature=0.2,
        tint=0.05,
        shadows=-0.1,
        highlights=0.1,
        lift=RGBTriple(r=0.0, g=-0.1, b=0.1),
        gamma=RGBTriple(r=0.05, g=0.0, b=-0.05),
        gain=RGBTriple(r=0.1, g=0.05, b=-0.1),
    ),
    "vintage-film": GradingParameters(
        contrast=0.1,
        saturation=-0.15,
        temperature=0.1,
        shadows=0.1,
        highlights=-0.1,
        lift=RGBTriple(r=0.1, g=0.05, b=0.0),
        gain=RGBTriple(r=-0.05, g=-0.05, b=-0.1),
    ),
    "black-and-white": GradingParameters(
        saturation=-1.0,
        contrast=0.2,
    ),
    "high-contrast": GradingParameters(
        contrast=0.35,
        saturation=0.1,
        shadows=-0.15,
        highlights=0.15,
    ),
    "muted-pastel": GradingParameters(
        saturation=-0.25,
        contrast=-0.1,
        highlights=0.1,
        lift=RGBTriple(r=0.05, g=0.05, b=0.08),
    ),
    "warm-golden": GradingParameters(
        temperature=0.3,
        saturation=0.1,
        contrast=0.05,
        gain=RGBTriple(r=0.1, g=0.05, b=-0.1),
    ),
    "cool-blue": GradingParameters(
        temperature=-0.3,
        saturation=0.05,
        tint=-0.1,
        gain=RGBTriple(r=-0.1, g=0.0, b=0.15),
    ),
    "vibrant-pop": GradingParameters(
        saturation=0.4,
        contrast=0.15,
        highlights=0.1,
    ),
})

# Evaluated in order; first rule with any matching keyword wins.
# A rule given as a tuple-of-tuples requires every keyword in the inner tuple.
_KEYWORD_RULES: tuple[tuple[tuple[tuple[str, ...], ...], str], ...] = (
    ((("cinematic",), ("teal",), ("orange",)), "cinematic-orange-teal"),
    ((("vintage",), ("film",), ("retro",)), "vintage-film"),
    ((("black", "white"),), "black-and-white"),
    ((("high contrast",), ("dramatic",)), "high-contrast"),
    ((("muted",), ("pastel",), ("soft",)), "muted-pastel"),
    ((("warm",), ("golden",), ("sunset",)), "warm-golden"),
    ((("cool",), ("blue",), ("cold",)), "cool-blue"),
    ((("vibrant",), ("pop",), ("saturated",)), "vibrant-pop"),
)


def get_preset(name: str) -> GradingParameters:
    """Return the preset called ``name``. Raises PresetError if unknown."""
    normalized = name.strip().lower().replace(" ", "-")
    if normalized not in PRESETS:
        raise PresetError(name, sorted(PRESETS))
    return PRESETS[normalized]


def preset_title(name: str) -> str:
    """'warm-golden' -> 'Warm Golden'."""
    return " ".join(word.capitalize() for word in name.split("-"))


def match_preset(prompt: str) -> Optional[str]:
    """Pick the preset whose keywords appear in a free-form look description.

    Used when no generation service is available. Returns None when nothing matches.
    """
    lowered = prompt.lower()
    for alternatives, preset_name in _KEYWORD_RULES:
        for required in alternatives:
            if all(keyword in lowered for keyword in required):
                return preset_name
    return None
