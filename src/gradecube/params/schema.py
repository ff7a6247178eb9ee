import math
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

SCALAR_FIELDS: tuple[str, ...] = (
    "contrast",
    "saturation",
    "temperature",
    "tint",
    "shadows",
    "highlights",
)
RGB_FIELDS: tuple[str, ...] = ("lift", "gamma", "gain")


def clamp_signed(value: float) -> float:
    """Clamp a finite control value to [-1, 1]. Non-finite values are rejected."""
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"must be a finite number, got {value!r}")
    return max(-1.0, min(1.0, value))


class RGBTriple(BaseModel):
    """Per-channel control for lift, gamma or gain. Each channel in [-1, 1]."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def accept_sequence(cls, data: Any) -> Any:
        # Parameter files may write triples as [r, g, b]
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise ValueError(f"RGB triple needs exactly 3 values, got {len(data)}")
            return {"r": data[0], "g": data[1], "b": data[2]}
        return data

    @field_validator("r", "g", "b", mode="after")
    @classmethod
    def clamp_channel(cls, v: float) -> float:
        return clamp_signed(v)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


class GradingParameters(BaseModel):
    """The full set of grading controls threaded through the LUT pipeline.

    Every field is a signed normalized value in [-1, 1] and defaults to 0, so
    ``GradingParameters()`` is the identity transform. Instances are frozen:
    use ``merge_parameters()`` to derive an updated copy.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    contrast: float = 0.0
    saturation: float = 0.0
    temperature: float = 0.0
    tint: float = 0.0
    shadows: float = 0.0
    highlights: float = 0.0
    lift: RGBTriple = RGBTriple()
    gamma: RGBTriple = RGBTriple()
    gain: RGBTriple = RGBTriple()

    @field_validator(*SCALAR_FIELDS, mode="after")
    @classmethod
    def clamp_scalar(cls, v: float) -> float:
        return clamp_signed(v)

    def is_neutral(self) -> bool:
        return self == NEUTRAL_PARAMETERS


NEUTRAL_PARAMETERS = GradingParameters()


def merge_parameters(
    base: GradingParameters,
    updates: Mapping[str, Any],
) -> GradingParameters:
    """Return a new GradingParameters with ``updates`` laid over ``base``.

    ``updates`` is a partial mapping (e.g. from the free-text extractor or a
    user edit). RGB fields are replaced whole, matching a shallow merge.
    The result is re-validated, so clamping and NaN rejection apply.
    """
    merged = base.model_dump()
    for key, value in updates.items():
        if isinstance(value, RGBTriple):
            value = value.model_dump()
        merged[key] = value
    return GradingParameters.model_validate(merged)
