"""Calculator operations and tagged actions."""

from enum import Enum
from typing import Annotated, Any, Dict, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from ..errors import UnsupportedOperationError
from .values import OperandId, QuaternionValue

# Short labels used by the calculator UI
OPERATION_ALIASES = {
    "sub": "subtract",
    "mul": "multiply",
    "div": "divide",
}


class Operation(str, Enum):
    """Binary operation on two quaternion operands."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"

    @classmethod
    def parse(cls, label: Any) -> "Operation":
        """Resolve an Operation, its value or a UI short label.

        Raises:
            UnsupportedOperationError: If label names no supported operation
        """
        if isinstance(label, cls):
            return label
        if isinstance(label, str):
            key = label.strip().lower()
            key = OPERATION_ALIASES.get(key, key)
            for operation in cls:
                if operation.value == key:
                    return operation
        raise UnsupportedOperationError(label)


class ComputeAction(BaseModel):
    """Apply an operation to two operands."""

    type: Literal["compute"] = "compute"
    operation: Operation = Field(description="Operation to apply")
    q1: QuaternionValue = Field(description="First (left) operand")
    q2: QuaternionValue = Field(description="Second (right) operand")

    @field_validator('operation', mode='before')
    @classmethod
    def validate_operation(cls, v):
        return Operation.parse(v)


class StoreAction(BaseModel):
    """Place an operand into memory."""

    type: Literal["store"] = "store"
    identity: OperandId = Field(description="Operand the value comes from")
    value: QuaternionValue = Field(description="Quaternion to store")


class RecallAction(BaseModel):
    """Read memory back into an operand."""

    type: Literal["recall"] = "recall"
    identity: OperandId = Field(description="Operand to recall into")


CalcAction = Annotated[
    Union[ComputeAction, StoreAction, RecallAction],
    Field(discriminator="type"),
]

_action_adapter = TypeAdapter(CalcAction)


def parse_action(action_data: Dict[str, Any]) -> CalcAction:
    """Validate a mapping into the matching action model.

    Raises:
        pydantic.ValidationError: On an unknown type or a malformed payload
    """
    return _action_adapter.validate_python(action_data)
