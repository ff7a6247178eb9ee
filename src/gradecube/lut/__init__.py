"""LUT package: grid sampling and .cube serialization."""
