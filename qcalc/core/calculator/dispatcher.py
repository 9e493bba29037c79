"""Operation dispatch between quaternion values and the algebra engine."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

import numpy as np
from pydantic import BaseModel, Field

from ..math.quaternions import Fallback, QuaternionAlgebra
from ..models.actions import CalcAction, ComputeAction, Operation, RecallAction, StoreAction
from ..models.calc_model import CalcModel
from ..models.memory import MemorySlot
from ..models.settings import DEFAULT_TOLERANCES, Tolerances
from ..models.values import QuaternionValue


class ResultKind(str, Enum):
    """Whether a result took the normal path or a degenerate-input fallback."""

    OK = "ok"
    FALLBACK = "fallback"


class CalcOutcome(BaseModel):
    """Result of a dispatched operation."""

    operation: Operation = Field(description="Operation that was applied")
    value: QuaternionValue = Field(description="Resulting quaternion")
    kind: ResultKind = Field(default=ResultKind.OK, description="Normal or fallback result")
    fallback: Optional[Fallback] = Field(default=None, description="Guard that fired, if any")


_APPLY: Dict[Operation, Callable[[QuaternionAlgebra, QuaternionAlgebra], None]] = {
    Operation.ADD: QuaternionAlgebra.add,
    Operation.SUBTRACT: QuaternionAlgebra.subtract,
    Operation.MULTIPLY: QuaternionAlgebra.multiply,
    Operation.DIVIDE: QuaternionAlgebra.divide,
}


class OperationDispatcher:
    """Maps an operation and two quaternion values to a result value.

    Each call loads its operands into fresh engines, so a dispatcher holds no
    scratch state and can be shared between callers.
    """

    def __init__(self, tolerances: Optional[Tolerances] = None):
        self.tolerances = tolerances or DEFAULT_TOLERANCES
        self.logger = logging.getLogger(__name__)

    def compute(self, operation: Any, q1: QuaternionValue, q2: QuaternionValue) -> CalcOutcome:
        """Apply operation to q1 and q2 in that order.

        Args:
            operation: Operation, operation name or UI short label
            q1: Left operand
            q2: Right operand

        Returns:
            Outcome with the result value and whether a fallback was applied

        Raises:
            UnsupportedOperationError: If operation is not add, subtract, multiply or divide
        """
        op = Operation.parse(operation)

        left = QuaternionAlgebra(tolerances=self.tolerances).from_components(*q1.to_array())
        right = QuaternionAlgebra(tolerances=self.tolerances).from_components(*q2.to_array())
        with np.errstate(over="ignore", invalid="ignore"):
            _APPLY[op](left, right)

        fallback = left.fallback
        if not np.isfinite(left.values).all():
            # QuaternionValue zeroes non-finite components
            fallback = Fallback.NON_FINITE_RESULT

        value = QuaternionValue.from_array(left.to_array())
        if fallback is not None:
            self.logger.debug(f"{op.value} {q1.to_array()} {q2.to_array()}: {fallback.value} fallback")
            return CalcOutcome(operation=op, value=value, kind=ResultKind.FALLBACK, fallback=fallback)

        self.logger.debug(f"{op.value} {q1.to_array()} {q2.to_array()} = {value.to_array()}")
        return CalcOutcome(operation=op, value=value)

    def dispatch(self, operation: Any, q1: QuaternionValue, q2: QuaternionValue) -> QuaternionValue:
        """Apply operation to q1 and q2 and return only the result value."""
        return self.compute(operation, q1, q2).value

    def evaluate(self, model: CalcModel) -> Optional[QuaternionValue]:
        """Result of a calculator document's operation, or None without one."""
        if model.op is None:
            return None
        q1, q2 = model.operands()
        return self.dispatch(model.op, q1, q2)

    def apply(self, action: CalcAction, slot: MemorySlot) -> Optional[QuaternionValue]:
        """Route a calculator action.

        Compute actions return the result value, store actions return None
        and recall actions return the recalled value (None for empty memory).
        """
        if isinstance(action, ComputeAction):
            return self.dispatch(action.operation, action.q1, action.q2)
        if isinstance(action, StoreAction):
            slot.store(action.identity, action.value)
            return None
        if isinstance(action, RecallAction):
            return slot.recall(action.identity)
        raise ValueError(f"Unknown action: {action!r}")


_default_dispatcher = OperationDispatcher()


def dispatch(operation: Any, q1: QuaternionValue, q2: QuaternionValue) -> QuaternionValue:
    """Apply operation to q1 and q2 with default tolerances."""
    return _default_dispatcher.dispatch(operation, q1, q2)


def apply_action(
    action: CalcAction,
    slot: MemorySlot,
    dispatcher: Optional[OperationDispatcher] = None
) -> Optional[QuaternionValue]:
    """Route a calculator action through dispatcher, or the default one."""
    return (dispatcher or _default_dispatcher).apply(action, slot)
