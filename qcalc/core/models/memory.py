"""Single-slot calculator memory."""

import logging
import threading
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from .values import OperandId, QuaternionValue


class MemoryAction(str, Enum):
    """Last operation performed on the memory slot."""

    STORED = "stored"
    RECALLED = "recalled"


class MemorySnapshot(BaseModel):
    """Point-in-time view of a memory slot."""

    value: Optional[QuaternionValue] = Field(default=None, description="Held quaternion, None when empty")
    identity: Optional[OperandId] = Field(default=None, description="Operand the value was stored from")
    action: Optional[MemoryAction] = Field(default=None, description="Provenance of the last access")


class MemorySlot:
    """Holds at most one quaternion, tagged with the operand it came from.

    Recall never clears the slot, so a stored value can be recalled any
    number of times. An empty slot recalls as None, which is distinct from a
    stored zero quaternion. Access is serialized with a lock.
    """

    def __init__(self):
        self._value: Optional[QuaternionValue] = None
        self._identity: Optional[OperandId] = None
        self._action: Optional[MemoryAction] = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return self._value is None

    @property
    def identity(self) -> Optional[OperandId]:
        with self._lock:
            return self._identity

    @property
    def action(self) -> Optional[MemoryAction]:
        with self._lock:
            return self._action

    def store(self, identity: Union[OperandId, str], value: QuaternionValue) -> None:
        """Replace the held value and identity; provenance becomes stored.

        Args:
            identity: Operand the value comes from
            value: Quaternion to hold; a copy is kept
        """
        identity = OperandId(identity)
        held = value.clone()
        with self._lock:
            self._value = held
            self._identity = identity
            self._action = MemoryAction.STORED
        self.logger.info(f"Stored {held.to_array()} from {identity.value}")

    def recall(self, identity: Optional[Union[OperandId, str]] = None) -> Optional[QuaternionValue]:
        """Return a copy of the held value; provenance becomes recalled.

        Args:
            identity: Operand the caller is recalling into

        Returns:
            Held quaternion, or None if nothing was ever stored
        """
        target = OperandId(identity) if identity is not None else None
        with self._lock:
            self._action = MemoryAction.RECALLED
            held = self._value

        if held is None:
            self.logger.debug("Recall from empty memory")
            return None

        if target is not None:
            self.logger.debug(f"Recalled {held.to_array()} into {target.value}")
        return held.clone()

    def clear(self) -> None:
        with self._lock:
            self._value = None
            self._identity = None
            self._action = None

    def snapshot(self) -> MemorySnapshot:
        with self._lock:
            return MemorySnapshot(
                value=self._value.clone() if self._value is not None else None,
                identity=self._identity,
                action=self._action
            )
