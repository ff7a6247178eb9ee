"""gradecube: deterministic 3D .cube LUT generation from grading parameters, reference images, or free text."""

__version__ = "0.1.0"
