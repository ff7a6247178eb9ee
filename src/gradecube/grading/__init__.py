"""Grading package: the five-stage color transform and the HEVC range/gamma compensator."""
from gradecube.grading.pipeline import STAGES, transform, transform_arrays
from gradecube.grading.compensation import transform_compensated, transform_compensated_arrays

__all__ = [
    "STAGES",
    "transform",
    "transform_arrays",
    "transform_compensated",
    "transform_compensated_arrays",
]
