"""qcalc - Quaternion Calculator

Quaternion algebra (arithmetic, inversion, rotation matrices, slerp and nlerp)
with a small calculator core for dispatching operations and holding memory.
"""

__version__ = "0.1.0"

# Algebra engine
from .core.math.quaternions import Fallback, QuaternionAlgebra

# Models
from .core.models.values import OperandId, QuaternionValue
from .core.models.settings import DEFAULT_TOLERANCES, Tolerances
from .core.models.memory import MemoryAction, MemorySlot, MemorySnapshot
from .core.models.actions import (
    ComputeAction,
    Operation,
    RecallAction,
    StoreAction,
    parse_action,
)
from .core.models.calc_model import CalcModel

# Calculator
from .core.calculator.dispatcher import (
    CalcOutcome,
    OperationDispatcher,
    ResultKind,
    apply_action,
    dispatch,
)
from .core.errors import UnsupportedOperationError

__all__ = [
    # Version
    "__version__",
    # Engine
    "Fallback",
    "QuaternionAlgebra",
    # Models
    "OperandId",
    "QuaternionValue",
    "DEFAULT_TOLERANCES",
    "Tolerances",
    "MemoryAction",
    "MemorySlot",
    "MemorySnapshot",
    "ComputeAction",
    "Operation",
    "RecallAction",
    "StoreAction",
    "parse_action",
    "CalcModel",
    # Calculator
    "CalcOutcome",
    "OperationDispatcher",
    "ResultKind",
    "apply_action",
    "dispatch",
    "UnsupportedOperationError",
]
