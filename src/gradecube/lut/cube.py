"""Sample the grading pipeline over a 3D grid and serialize it as a .cube file.

CRITICAL sample order: R is FASTEST (innermost), B is SLOWEST (outermost).
Consumers (Resolve, Premiere, Final Cut, After Effects) reject or misread
grids in any other order, or with any count other than size**3.
"""
import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np

from gradecube.config import DEFAULT_GRID_SIZE, DEFAULT_TITLE, MAX_GRID_SIZE, MIN_GRID_SIZE
from gradecube.errors import LUTWriteError
from gradecube.grading.compensation import transform_compensated_arrays
from gradecube.grading.pipeline import transform_arrays
from gradecube.params.schema import GradingParameters

logger = logging.getLogger(__name__)

CUBE_SUFFIX = ".cube"


class OutputProfile(str, Enum):
    """Target footage profile. HEVC wraps the pipeline in range/gamma compensation."""
    STANDARD = "standard"
    HEVC = "hevc"

    @property
    def compensate(self) -> bool:
        return self is OutputProfile.HEVC


@dataclass(frozen=True, eq=False)
class CubeLUT:
    """A sampled 3D LUT: ``samples`` has shape (size**3, 3) in red-major order.

    ``samples`` is read-only; equality and hashing compare sample values.
    """

    title: str
    size: int
    samples: np.ndarray
    compensated: bool = False

    def __post_init__(self) -> None:
        self.samples.flags.writeable = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeLUT):
            return NotImplemented
        return (
            self.title == other.title
            and self.size == other.size
            and self.compensated == other.compensated
            and np.array_equal(self.samples, other.samples)
        )

    def __hash__(self) -> int:
        return hash((self.title, self.size, self.compensated, self.samples.tobytes()))

    def header_lines(self) -> list[str]:
        lines = [
            f'TITLE "{self.title}"',
            "",
            "# Generated by gradecube",
        ]
        if self.compensated:
            lines.append("# HEVC-Compatible: Optimized for Apple HEVC/H.265 footage")
            lines.append("# Compensates for limited range (16-235) and gamma differences")
        lines += [
            "# Compatible with: Final Cut Pro, Premiere Pro, DaVinci Resolve, After Effects",
            "",
            f"LUT_3D_SIZE {self.size}",
            "",
            "DOMAIN_MIN 0.0 0.0 0.0",
            "DOMAIN_MAX 1.0 1.0 1.0",
            "",
        ]
        return lines

    def to_text(self) -> str:
        data = (f"{r:.6f} {g:.6f} {b:.6f}" for r, g, b in self.samples.tolist())
        return "\n".join([*self.header_lines(), *data])


def _validate_size(size: int) -> None:
    if not MIN_GRID_SIZE <= size <= MAX_GRID_SIZE:
        raise ValueError(
            f"LUT grid size must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}, got {size}"
        )


def sanitize_title(title: str) -> str:
    """Strip characters that would break the TITLE header line."""
    cleaned = " ".join(title.replace('"', "").split())
    return cleaned or DEFAULT_TITLE


def grid_inputs(size: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return flattened (r, g, b) grid inputs in red-major order.

    Axis index i maps to i / (size - 1), so the first and last samples on each
    axis are exactly 0.0 and 1.0.
    """
    _validate_size(size)
    vals = np.arange(size, dtype=np.float64) / (size - 1)
    # indexing="ij" with (b, g, r): array[bi, gi, ri], so C-order ravel puts R fastest
    b, g, r = np.meshgrid(vals, vals, vals, indexing="ij")
    return r.ravel(), g.ravel(), b.ravel()


def sample_grid(
    params: GradingParameters,
    size: int = DEFAULT_GRID_SIZE,
    compensate: bool = False,
) -> np.ndarray:
    """Evaluate the pipeline at every grid point. Returns shape (size**3, 3)."""
    r, g, b = grid_inputs(size)
    transform = transform_compensated_arrays if compensate else transform_arrays
    r_out, g_out, b_out = transform(r, g, b, params)
    return np.stack([r_out, g_out, b_out], axis=1)


def build_cube_lut(
    params: GradingParameters,
    title: str = DEFAULT_TITLE,
    size: int = DEFAULT_GRID_SIZE,
    compensate: bool = False,
) -> CubeLUT:
    samples = sample_grid(params, size, compensate)
    logger.debug("sampled %d grid points (size=%d, compensate=%s)", len(samples), size, compensate)
    return CubeLUT(
        title=sanitize_title(title),
        size=size,
        samples=samples,
        compensated=compensate,
    )


def serialize_cube(
    params: GradingParameters,
    title: str = DEFAULT_TITLE,
    size: int = DEFAULT_GRID_SIZE,
    compensate: bool = False,
) -> str:
    """Render the .cube text for ``params``. Pure: identical inputs give identical text."""
    return build_cube_lut(params, title, size, compensate).to_text()


def write_cube_file(text: str, output_path: Path) -> Path:
    """Atomically write .cube text to output_path, creating parent directories.

    Uses tempfile.mkstemp() in the destination directory + os.replace() so a
    reader never sees a partially written LUT.
    """
    data = text.encode("utf-8")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=output_path.parent, suffix=".cube.tmp")
    except OSError as e:
        raise LUTWriteError(output_path, str(e)) from e
    closed = False
    try:
        os.write(fd, data)
        os.fsync(fd)
        os.close(fd)
        closed = True
        os.replace(tmp_path, output_path)
    except OSError as e:
        if not closed:
            os.close(fd)
        os.unlink(tmp_path)
        raise LUTWriteError(output_path, str(e)) from e
    logger.debug("wrote %d bytes to %s", len(data), output_path)
    return output_path
