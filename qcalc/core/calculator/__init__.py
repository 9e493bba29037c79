"""Calculator core: operation dispatch over quaternion values."""

from .dispatcher import CalcOutcome, OperationDispatcher, ResultKind, apply_action, dispatch

__all__ = [
    "CalcOutcome",
    "OperationDispatcher",
    "ResultKind",
    "apply_action",
    "dispatch",
]
