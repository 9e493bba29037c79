"""Quaternion math for the calculator."""

from .quaternions import (
    Fallback,
    QuaternionAlgebra,
    quat_conjugate,
    quat_dot,
    quat_multiply,
)

__all__ = [
    "Fallback",
    "QuaternionAlgebra",
    "quat_conjugate",
    "quat_dot",
    "quat_multiply",
]
