# toaster/exceptions.py
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toaster.state_machine import Operation, ToasterState


class ToasterError(Exception):
    """Base class for toaster errors."""


class InvalidOperation(ToasterError):
    """
    Raised when an operation has no edge from the current state.
    The toaster is left in the state it was in before the call.
    """

    def __init__(self, operation: "Operation", state: "ToasterState") -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Invalid operation: {operation.value} from {state.value}")
