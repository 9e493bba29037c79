"""Quaternion value holder and operand identities."""

import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

COMPONENTS = ("w", "i", "j", "k")


def finite_or_none(value: Any) -> Optional[float]:
    """Coerce value to float, or return None if it is not a finite number."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class OperandId(str, Enum):
    """Identity of a calculator operand slot."""

    FIRST = "Q_1"
    SECOND = "Q_2"


class QuaternionValue(BaseModel):
    """Plain quaternion holder w + i*i + j*j + k*k.

    Components are always finite. A non-finite or non-numeric component is
    ignored and the prior value kept (0.0 for a fresh value); no error is
    raised. The id records which operand produced the value and takes no
    part in arithmetic.
    """

    model_config = ConfigDict(validate_assignment=True)

    w: float = Field(default=0.0, description="Real part")
    i: float = Field(default=0.0, description="i component")
    j: float = Field(default=0.0, description="j component")
    k: float = Field(default=0.0, description="k component")
    id: Optional[str] = Field(default=None, description="Provenance tag")

    def __init__(
        self,
        w: Any = 0.0,
        i: Any = 0.0,
        j: Any = 0.0,
        k: Any = 0.0,
        id: Optional[str] = None,
        **data: Any
    ):
        super().__init__(w=w, i=i, j=j, k=k, id=id, **data)

    @field_validator('w', 'i', 'j', 'k', mode='before')
    @classmethod
    def reject_non_finite(cls, v):
        number = finite_or_none(v)
        return 0.0 if number is None else number

    def __setattr__(self, name: str, value: Any) -> None:
        if name in COMPONENTS and finite_or_none(value) is None:
            return
        super().__setattr__(name, value)

    @classmethod
    def from_array(cls, values: Sequence[Any], id: Optional[str] = None) -> "QuaternionValue":
        """Create a value from [w, i, j, k], or from [i, j, k] with w = 1."""
        values = list(values)
        if len(values) == 3:
            return cls(1.0, values[0], values[1], values[2], id=id)
        if len(values) == 4:
            return cls(*values, id=id)
        raise ValueError(f"Quaternion array must have 3 or 4 elements, got {len(values)}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], id: Optional[str] = None) -> "QuaternionValue":
        """Create a value from a mapping with optional w, i, j, k keys."""
        components = {name: data.get(name, 0.0) for name in COMPONENTS}
        return cls(**components, id=id if id is not None else data.get('id'))

    def to_array(self) -> List[float]:
        return [self.w, self.i, self.j, self.k]

    def to_dict(self) -> Dict[str, float]:
        return {'w': self.w, 'i': self.i, 'j': self.j, 'k': self.k}

    def to_numpy(self) -> np.ndarray:
        """Convert components to a (4,) numpy array."""
        return np.array(self.to_array(), dtype=float)

    def clone(self) -> "QuaternionValue":
        """Independent copy with the same components and id."""
        return self.model_copy(deep=True)
