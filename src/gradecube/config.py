"""Static configuration: grid bounds, analysis resolution, output directory."""
import os
from pathlib import Path

DEFAULT_GRID_SIZE = 33
MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 65

# Longest image side fed to the analyzer; full-resolution frames are downsampled first.
ANALYSIS_MAX_DIMENSION = 256

DEFAULT_TITLE = "Generated LUT"


def get_output_dir() -> Path:
    """Return the directory generated .cube files are written to by default.

    Respects the GRADECUBE_OUTPUT_DIR environment variable.
    Falls back to the current working directory when the variable is not set.
    """
    env_val = os.environ.get("GRADECUBE_OUTPUT_DIR")
    if env_val is not None:
        return Path(env_val).expanduser().resolve()
    return Path.cwd()
