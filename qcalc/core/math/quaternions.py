"""Quaternion algebra for 3D rotations.

Quaternions are stored as [w, i, j, k] (real part first). The engine never
raises on degenerate numeric input: near-zero norms, axes and sines are
replaced by fallback constants from Tolerances, and the guard that fired is
recorded on the engine as a Fallback.
"""

import logging
import math
import numbers
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..models.settings import DEFAULT_TOLERANCES, Tolerances

logger = logging.getLogger(__name__)


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product q1 * q2."""
    if q1.shape != (4,) or q2.shape != (4,):
        raise ValueError("Both quaternions must be 4-element vectors")

    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    return np.array([
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2
    ])


def quat_conjugate(q: np.ndarray) -> np.ndarray:
    """Return quaternion conjugate."""
    if q.shape != (4,):
        raise ValueError(f"Quaternion must be 4-element vector, got shape {q.shape}")

    return np.array([q[0], -q[1], -q[2], -q[3]])


def quat_dot(q1: np.ndarray, q2: np.ndarray) -> float:
    """4-component inner product."""
    if q1.shape != (4,) or q2.shape != (4,):
        raise ValueError("Both quaternions must be 4-element vectors")

    return float(np.dot(q1, q2))


class Fallback(str, Enum):
    """Degenerate-input guard applied by the last engine operation."""

    ZERO_AXIS = "zero_axis"
    ZERO_NORM = "zero_norm"
    SINGULAR_INVERSE = "singular_inverse"
    SINGULAR_SCALAR = "singular_scalar"
    DEGENERATE_MATRIX = "degenerate_matrix"
    SLERP_COINCIDENT = "slerp_coincident"
    SLERP_PARALLEL = "slerp_parallel"
    NON_FINITE_RESULT = "non_finite_result"


class QuaternionAlgebra:
    """Mutable quaternion with the full set of algebra operations.

    Verb methods (add, multiply, invert, ...) modify this instance in place.
    Their counterparts (added, multiplied, inverse, ...) return a new engine
    and leave both operands untouched. An engine is scratch state for one
    caller; do not share it between threads.

    Attributes:
        tolerances: Thresholds and fallback constants for degenerate input
        fallback: Guard applied by the last operation, None on the normal path
    """

    # Make numpy scalars defer to our reflected operators
    __array_ufunc__ = None

    def __init__(
        self,
        w: float = 1.0,
        i: float = 0.0,
        j: float = 0.0,
        k: float = 0.0,
        tolerances: Optional[Tolerances] = None
    ):
        self.tolerances = tolerances or DEFAULT_TOLERANCES
        self.fallback: Optional[Fallback] = None
        self._q = np.array([w, i, j, k], dtype=float)

    # ------------------------------------------------------------------
    # Loading and export
    # ------------------------------------------------------------------

    @property
    def values(self) -> np.ndarray:
        """Copy of the [w, i, j, k] state."""
        return self._q.copy()

    def from_components(self, w: float, i: float, j: float, k: float) -> "QuaternionAlgebra":
        """Load components directly, without validation.

        Returns:
            self, for chaining
        """
        self._q = np.array([w, i, j, k], dtype=float)
        self.fallback = None
        return self

    def from_array(self, values: Sequence[float]) -> "QuaternionAlgebra":
        """Load [w, i, j, k], or [i, j, k] with the real part set to 1.

        Fewer than three values leave the state unchanged.
        """
        values = list(values)
        if len(values) < 3:
            return self
        if len(values) == 3:
            return self.from_components(1.0, values[0], values[1], values[2])
        return self.from_components(values[0], values[1], values[2], values[3])

    def from_axis_angle(self, axis: Sequence[float], angle: float) -> "QuaternionAlgebra":
        """Load a rotation of angle radians about axis.

        The axis need not be unit length. For an axis shorter than
        norm_epsilon the reciprocal axis_fallback_reciprocal is used instead
        of dividing by the length; the result stays finite but is not a
        meaningful rotation.

        Args:
            axis: 3-element rotation axis
            angle: Rotation angle in radians

        Returns:
            self, for chaining
        """
        axis = np.asarray(axis, dtype=float)
        if axis.shape != (3,):
            raise ValueError(f"Axis must be 3-element vector, got shape {axis.shape}")

        self.fallback = None
        axis_norm = float(np.linalg.norm(axis))
        if abs(axis_norm) < self.tolerances.norm_epsilon:
            d = self.tolerances.axis_fallback_reciprocal
            self._record(Fallback.ZERO_AXIS)
        else:
            d = 1.0 / axis_norm

        half_angle = 0.5 * angle
        s = math.sin(half_angle) * d
        self._q = np.array([math.cos(half_angle), s * axis[0], s * axis[1], s * axis[2]])
        return self

    def from_x_rotation(self, angle: float) -> "QuaternionAlgebra":
        """Load a rotation about the x axis; a NaN angle counts as zero."""
        return self.from_axis_angle((1.0, 0.0, 0.0), _angle_or_zero(angle))

    def from_y_rotation(self, angle: float) -> "QuaternionAlgebra":
        """Load a rotation about the y axis."""
        return self.from_axis_angle((0.0, 1.0, 0.0), _angle_or_zero(angle))

    def from_z_rotation(self, angle: float) -> "QuaternionAlgebra":
        """Load a rotation about the z axis."""
        return self.from_axis_angle((0.0, 0.0, 1.0), _angle_or_zero(angle))

    def from_rotation_matrix(self, matrix: Sequence[Sequence[float]]) -> "QuaternionAlgebra":
        """Load the rotation described by a 3x3 rotation matrix.

        Uses the largest diagonal entry to pick the best conditioned imaginary
        component; there is no trace branch. The input must be orthonormal,
        anything else yields unspecified (possibly NaN) components.

        Args:
            matrix: 3x3 rotation matrix, column-vector convention

        Returns:
            self, for chaining
        """
        m = np.asarray(matrix, dtype=float)
        if m.shape != (3, 3):
            raise ValueError(f"Rotation matrix must be 3x3, got shape {m.shape}")

        self.fallback = None

        # u is the largest diagonal; (u, v, w) is an even permutation of (0, 1, 2)
        u = int(np.argmax(np.diag(m)))
        v = (u + 1) % 3
        w = (u + 2) % 3

        r = float(np.sqrt(1.0 + m[u, u] - m[v, v] - m[w, w]))
        if r < self.tolerances.norm_epsilon:
            # Every imaginary component vanishes: identity rotation
            self._q = np.array([1.0, 0.0, 0.0, 0.0])
            return self

        imaginary = np.empty(3)
        imaginary[u] = 0.5 * r
        s = 0.5 / r
        imaginary[v] = s * (m[v, u] + m[u, v])
        imaginary[w] = s * (m[w, u] + m[u, w])
        real = s * (m[w, v] - m[v, w])

        self._q = np.array([real, imaginary[0], imaginary[1], imaginary[2]])
        return self

    def to_rotation_matrix(self) -> Optional[np.ndarray]:
        """Convert to a 3x3 rotation matrix.

        Non-unit quaternions are scaled by 1/|q|^2, so any non-zero quaternion
        gives a proper rotation.

        Returns:
            3x3 rotation matrix, or None when |q|^2 is below norm_epsilon
        """
        self.fallback = None
        w, x, y, z = self._q

        n = w*w + x*x + y*y + z*z
        if abs(n) < self.tolerances.norm_epsilon:
            self._record(Fallback.DEGENERATE_MATRIX)
            return None

        d = 1.0 / n
        d2 = d + d

        return np.array([
            [d*(w*w + x*x - y*y - z*z), d2*(x*y - w*z), d2*(x*z + w*y)],
            [d2*(x*y + w*z), d*(w*w - x*x + y*y - z*z), d2*(y*z - w*x)],
            [d2*(x*z - w*y), d2*(y*z + w*x), d*(w*w - x*x - y*y + z*z)]
        ])

    def to_array(self) -> List[float]:
        return [float(c) for c in self._q]

    def to_dict(self) -> Dict[str, float]:
        w, i, j, k = self.to_array()
        return {'w': w, 'i': i, 'j': j, 'k': k}

    def copy(self) -> "QuaternionAlgebra":
        """Independent engine with the same state and tolerances."""
        return QuaternionAlgebra(*self._q, tolerances=self.tolerances)

    clone = copy

    # ------------------------------------------------------------------
    # Norms
    # ------------------------------------------------------------------

    def length(self) -> float:
        """Euclidean 4-norm."""
        return float(np.linalg.norm(self._q))

    def normalize(self) -> None:
        """Scale to unit length; a near-zero quaternion is left as is."""
        self.fallback = None
        norm = self.length()
        if abs(norm) < self.tolerances.norm_epsilon:
            d = 1.0
            self._record(Fallback.ZERO_NORM)
        else:
            d = 1.0 / norm
        self._q = self._q * d

    def normalized(self) -> "QuaternionAlgebra":
        result = self.copy()
        result.normalize()
        return result

    def dot(self, other: "QuaternionAlgebra") -> float:
        return quat_dot(self._q, other._q)

    # ------------------------------------------------------------------
    # Addition and subtraction
    # ------------------------------------------------------------------

    def add(self, other: "QuaternionAlgebra") -> None:
        self.fallback = None
        self._q = self._q + other._q

    def added(self, other: "QuaternionAlgebra") -> "QuaternionAlgebra":
        result = self.copy()
        result.add(other)
        return result

    def subtract(self, other: "QuaternionAlgebra") -> None:
        self.fallback = None
        self._q = self._q - other._q

    def subtracted(self, other: "QuaternionAlgebra") -> "QuaternionAlgebra":
        result = self.copy()
        result.subtract(other)
        return result

    def add_scalar(self, a: float) -> None:
        """Add a real number to the real part; non-finite input is ignored."""
        self.fallback = None
        if math.isfinite(a):
            self._q[0] += a

    def scalar_added(self, a: float) -> "QuaternionAlgebra":
        result = self.copy()
        result.add_scalar(a)
        return result

    def subtract_scalar(self, a: float) -> None:
        """Subtract a real number from the real part; non-finite input is ignored."""
        self.fallback = None
        if math.isfinite(a):
            self._q[0] -= a

    def scalar_subtracted(self, a: float) -> "QuaternionAlgebra":
        result = self.copy()
        result.subtract_scalar(a)
        return result

    # ------------------------------------------------------------------
    # Multiplication and division
    # ------------------------------------------------------------------

    def multiply(self, other: "QuaternionAlgebra") -> None:
        """Replace this quaternion with the Hamilton product self * other."""
        self.fallback = None
        self._q = quat_multiply(self._q, other._q)

    def multiplied(self, other: "QuaternionAlgebra") -> "QuaternionAlgebra":
        result = self.copy()
        result.multiply(other)
        return result

    def multiply_by_scalar(self, a: float) -> None:
        self.fallback = None
        self._q = self._q * a

    def scaled(self, a: float) -> "QuaternionAlgebra":
        result = self.copy()
        result.multiply_by_scalar(a)
        return result

    def invert(self) -> None:
        """Replace this quaternion with its inverse conj(q) / |q|^2.

        When |q|^2 is below norm_epsilon the division is skipped and the
        conjugate is used as is.
        """
        self.fallback = None
        n = quat_dot(self._q, self._q)
        if abs(n) < self.tolerances.norm_epsilon:
            d = 1.0
            self._record(Fallback.SINGULAR_INVERSE)
        else:
            d = 1.0 / n
        self._q = quat_conjugate(self._q) * d

    def inverse(self) -> "QuaternionAlgebra":
        result = self.copy()
        result.invert()
        return result

    def divide(self, other: "QuaternionAlgebra") -> None:
        """Right division: replace this quaternion with self * other^-1."""
        divisor = other.inverse()
        self.multiply(divisor)
        self.fallback = divisor.fallback

    def divided(self, other: "QuaternionAlgebra") -> "QuaternionAlgebra":
        result = self.copy()
        result.divide(other)
        return result

    def divide_by_scalar(self, a: float) -> None:
        """Divide every component by a; a near-zero divisor is treated as 1."""
        self.fallback = None
        if abs(a) < self.tolerances.norm_epsilon:
            d = 1.0
            self._record(Fallback.SINGULAR_SCALAR)
        else:
            d = 1.0 / a
        self._q = self._q * d

    def scalar_divided(self, a: float) -> "QuaternionAlgebra":
        result = self.copy()
        result.divide_by_scalar(a)
        return result

    def divide_scalar_by(self, a: float) -> None:
        """Replace this quaternion with a / q, i.e. a * q^-1."""
        self.invert()
        self._q = self._q * a

    # ------------------------------------------------------------------
    # Interpolation
    # ------------------------------------------------------------------

    def slerp(self, other: "QuaternionAlgebra", t: float) -> "QuaternionAlgebra":
        """Spherical linear interpolation from self (t=0) to other (t=1).

        Moves at constant angular velocity along the shorter arc. Both
        operands should be unit quaternions.

        Args:
            other: End quaternion
            t: Interpolation parameter, clamped to [0, 1]

        Returns:
            New engine holding the interpolated quaternion
        """
        t = min(max(t, 0.0), 1.0)
        result = self.copy()

        a = self._q
        b = other.values

        cos_half_theta = quat_dot(a, b)
        if abs(cos_half_theta) >= 1.0:
            # Coincident (or antipodal) operands
            result._record(Fallback.SLERP_COINCIDENT)
            return result

        if cos_half_theta < 0.0:
            # Take the shorter arc
            b = -b
            cos_half_theta = -cos_half_theta

        half_theta = math.acos(cos_half_theta)
        sin_half_theta = math.sqrt(1.0 - cos_half_theta * cos_half_theta)

        if abs(sin_half_theta) < self.tolerances.slerp_epsilon:
            result._q = 0.5 * a + 0.5 * b
            result._record(Fallback.SLERP_PARALLEL)
            return result

        ratio_a = math.sin((1.0 - t) * half_theta) / sin_half_theta
        ratio_b = math.sin(t * half_theta) / sin_half_theta
        result._q = ratio_a * a + ratio_b * b
        return result

    def nlerp(self, other: "QuaternionAlgebra", t: float) -> "QuaternionAlgebra":
        """Normalized linear interpolation from self (t=0) to other (t=1).

        Cheaper than slerp and follows the same path, but the angular
        velocity is not constant. Neither operand is modified.
        """
        t = min(max(t, 0.0), 1.0)
        t1 = 1.0 - t
        if self.dot(other) < 0.0:
            t = -t

        result = self.scaled(t1)
        result.add(other.scaled(t))
        result.normalize()
        return result

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other):
        if isinstance(other, QuaternionAlgebra):
            return self.added(other)
        if isinstance(other, numbers.Real):
            return self.scalar_added(float(other))
        return NotImplemented

    def __radd__(self, other):
        if isinstance(other, numbers.Real):
            return self.scalar_added(float(other))
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, QuaternionAlgebra):
            return self.subtracted(other)
        if isinstance(other, numbers.Real):
            return self.scalar_subtracted(float(other))
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, numbers.Real):
            result = self.scalar_subtracted(float(other))
            result.multiply_by_scalar(-1.0)
            return result
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, QuaternionAlgebra):
            return self.multiplied(other)
        if isinstance(other, numbers.Real):
            return self.scaled(float(other))
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self.scaled(float(other))
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, QuaternionAlgebra):
            return self.divided(other)
        if isinstance(other, numbers.Real):
            return self.scalar_divided(float(other))
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, numbers.Real):
            result = self.copy()
            result.divide_scalar_by(float(other))
            return result
        return NotImplemented

    def __iadd__(self, other):
        if isinstance(other, QuaternionAlgebra):
            self.add(other)
        elif isinstance(other, numbers.Real):
            self.add_scalar(float(other))
        else:
            return NotImplemented
        return self

    def __isub__(self, other):
        if isinstance(other, QuaternionAlgebra):
            self.subtract(other)
        elif isinstance(other, numbers.Real):
            self.subtract_scalar(float(other))
        else:
            return NotImplemented
        return self

    def __imul__(self, other):
        if isinstance(other, QuaternionAlgebra):
            self.multiply(other)
        elif isinstance(other, numbers.Real):
            self.multiply_by_scalar(float(other))
        else:
            return NotImplemented
        return self

    def __itruediv__(self, other):
        if isinstance(other, QuaternionAlgebra):
            self.divide(other)
        elif isinstance(other, numbers.Real):
            self.divide_by_scalar(float(other))
        else:
            return NotImplemented
        return self

    def __neg__(self) -> "QuaternionAlgebra":
        return self.scaled(-1.0)

    def __abs__(self) -> float:
        return self.length()

    def __repr__(self) -> str:
        w, i, j, k = self.to_array()
        return f"QuaternionAlgebra(w={w!r}, i={i!r}, j={j!r}, k={k!r})"

    def _record(self, fallback: Fallback) -> None:
        self.fallback = fallback
        logger.debug(f"Degenerate input, applied {fallback.value} fallback to {self.to_array()}")


def _angle_or_zero(angle: float) -> float:
    return 0.0 if math.isnan(angle) else angle
