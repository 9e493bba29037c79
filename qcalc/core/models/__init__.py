"""Data models for the quaternion calculator."""

from .values import OperandId, QuaternionValue
from .settings import DEFAULT_TOLERANCES, Tolerances
from .memory import MemoryAction, MemorySlot, MemorySnapshot
from .actions import (
    CalcAction,
    ComputeAction,
    Operation,
    RecallAction,
    StoreAction,
    parse_action,
)
from .calc_model import CalcModel

__all__ = [
    "OperandId",
    "QuaternionValue",
    "DEFAULT_TOLERANCES",
    "Tolerances",
    "MemoryAction",
    "MemorySlot",
    "MemorySnapshot",
    "CalcAction",
    "ComputeAction",
    "Operation",
    "RecallAction",
    "StoreAction",
    "parse_action",
    "CalcModel",
]
