"""Calculator document supplied by a host application."""

from typing import TYPE_CHECKING, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from .actions import Operation
from .values import OperandId, QuaternionValue

if TYPE_CHECKING:
    from ..calculator.dispatcher import OperationDispatcher


class CalcModel(BaseModel):
    """Saved calculator inputs: two operands, an operation and optional memory.

    Example document::

        {"q1": [1, 0, 0, 0], "q2": [0, 1, 0, 0], "op": "multiply", "memory": []}
    """

    q1: List[float] = Field(
        description="First operand [w, i, j, k]",
        min_length=4,
        max_length=4
    )
    q2: List[float] = Field(
        description="Second operand [w, i, j, k]",
        min_length=4,
        max_length=4
    )
    op: Optional[Operation] = Field(
        default=None,
        description="Operation to apply, None for no operation"
    )
    memory: List[float] = Field(
        default_factory=list,
        description="Memory quaternion [w, i, j, k], empty when memory is unused"
    )

    @field_validator('op', mode='before')
    @classmethod
    def validate_op(cls, v):
        if v is None or (isinstance(v, str) and v.strip().lower() in ("", "none")):
            return None
        return Operation.parse(v)

    @field_validator('memory')
    @classmethod
    def validate_memory(cls, v):
        if len(v) not in (0, 4):
            raise ValueError("memory must be empty or have exactly 4 elements")
        return v

    @classmethod
    def from_json(cls, text: str) -> "CalcModel":
        """Parse a JSON calculator document."""
        return cls.model_validate_json(text)

    def operands(self) -> Tuple[QuaternionValue, QuaternionValue]:
        """Operand values tagged with their operand identities."""
        return (
            QuaternionValue.from_array(self.q1, id=OperandId.FIRST.value),
            QuaternionValue.from_array(self.q2, id=OperandId.SECOND.value),
        )

    def memory_value(self) -> Optional[QuaternionValue]:
        if not self.memory:
            return None
        return QuaternionValue.from_array(self.memory)

    def evaluate(self, dispatcher: Optional["OperationDispatcher"] = None) -> Optional[QuaternionValue]:
        """Result of op on the two operands, or None when no operation is set."""
        # Imported here since the dispatcher module depends on this one
        from ..calculator.dispatcher import _default_dispatcher

        return (dispatcher or _default_dispatcher).evaluate(self)
