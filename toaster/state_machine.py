# toaster/state_machine.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Tuple, Union

from toaster.exceptions import InvalidOperation


class Operation(str, Enum):
    INSERT_BREAD = "insert_bread"
    PULL_LEVER = "pull_lever"
    EJECT_BREAD = "eject_bread"
    REMOVE_BREAD = "remove_bread"


class ToasterState(str, Enum):
    IDLE = "Idle"
    BREAD_INSERTED = "BreadInserted"
    TOASTING = "Toasting"
    BREAD_EJECTED = "BreadEjected"

    def handle(self, operation: Union[Operation, str]) -> "ToasterState":
        return transition(self, operation)

    def insert_bread(self) -> "ToasterState":
        return transition(self, Operation.INSERT_BREAD)

    def pull_lever(self) -> "ToasterState":
        return transition(self, Operation.PULL_LEVER)

    def eject_bread(self) -> "ToasterState":
        return transition(self, Operation.EJECT_BREAD)

    def remove_bread(self) -> "ToasterState":
        return transition(self, Operation.REMOVE_BREAD)


INITIAL_STATE: ToasterState = ToasterState.IDLE

# Allowed transitions: (current_state, operation) -> next_state
_ALLOWED: Dict[Tuple[ToasterState, Operation], ToasterState] = {
    (ToasterState.IDLE, Operation.INSERT_BREAD): ToasterState.BREAD_INSERTED,
    (ToasterState.BREAD_INSERTED, Operation.PULL_LEVER): ToasterState.TOASTING,
    (ToasterState.TOASTING, Operation.EJECT_BREAD): ToasterState.BREAD_EJECTED,
    (ToasterState.BREAD_EJECTED, Operation.REMOVE_BREAD): ToasterState.IDLE,
}


@dataclass(frozen=True)
class TransitionResult:
    accepted: bool
    prev_state: ToasterState
    operation: Operation
    next_state: ToasterState
    reason: str  # STATE_ADVANCED or INVALID_OPERATION:<state>-><operation>


def transition(state: ToasterState, operation: Union[Operation, str]) -> ToasterState:
    """
    Pure lookup of the state reached by `operation` from `state`.
    Raises InvalidOperation when the table has no such edge.
    """
    op = Operation(operation)
    nxt = _ALLOWED.get((state, op))
    if nxt is None:
        raise InvalidOperation(op, state)
    return nxt


def try_transition(state: ToasterState, operation: Union[Operation, str]) -> TransitionResult:
    op = Operation(operation)
    key = (state, op)
    if key not in _ALLOWED:
        return TransitionResult(
            accepted=False,
            prev_state=state,
            operation=op,
            next_state=state,
            reason=f"INVALID_OPERATION:{state.value}->{op.value}",
        )

    return TransitionResult(
        accepted=True,
        prev_state=state,
        operation=op,
        next_state=_ALLOWED[key],
        reason="STATE_ADVANCED",
    )


def can_apply(state: ToasterState, operation: Union[Operation, str]) -> bool:
    return (state, Operation(operation)) in _ALLOWED


def allowed_operations(state: ToasterState) -> FrozenSet[Operation]:
    return frozenset(op for (s, op) in _ALLOWED if s == state)


def allowed_transitions() -> Dict[Tuple[ToasterState, Operation], ToasterState]:
    # returns a copy for safe external use (docs/figures/tests)
    return dict(_ALLOWED)
