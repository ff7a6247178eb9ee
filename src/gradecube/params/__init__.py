"""Grading parameter schema, parameter-file loading and static presets."""
from gradecube.params.schema import GradingParameters, RGBTriple, NEUTRAL_PARAMETERS, merge_parameters

__all__ = [
    "GradingParameters",
    "RGBTriple",
    "NEUTRAL_PARAMETERS",
    "merge_parameters",
]
