"""Numerical tolerance settings for the quaternion engine."""

from pydantic import BaseModel, ConfigDict, Field


class Tolerances(BaseModel):
    """Thresholds and fallback constants used by degenerate-input guards.

    The defaults are the values the calculator has always used; changing them
    changes the results of near-singular operations.
    """

    model_config = ConfigDict(frozen=True)

    norm_epsilon: float = Field(
        default=1e-10,
        gt=0,
        description="Magnitude below which a norm, squared norm or divisor is treated as zero"
    )
    slerp_epsilon: float = Field(
        default=1e-3,
        gt=0,
        description="Sine of the half angle below which slerp falls back to a linear blend"
    )
    axis_fallback_reciprocal: float = Field(
        default=1e5,
        gt=0,
        description="Reciprocal substituted for a zero-length rotation axis"
    )


DEFAULT_TOLERANCES = Tolerances()
