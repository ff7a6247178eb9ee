"""Reference-image analysis and mapping of image statistics onto grading parameters."""
from gradecube.analysis.analyzer import analyze_pixels, load_image_pixels
from gradecube.analysis.mapping import analysis_to_parameters, describe_analysis

__all__ = [
    "analyze_pixels",
    "load_image_pixels",
    "analysis_to_parameters",
    "describe_analysis",
]
