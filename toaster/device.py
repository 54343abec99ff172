# toaster/device.py
from __future__ import annotations

from typing import Callable, Optional, Protocol, Union

from infra.state_logger import print_state
from toaster.state_machine import INITIAL_STATE, Operation, ToasterState

StateSink = Callable[[ToasterState], None]


class ToasterOperations(Protocol):
    def insert_bread(self) -> None: ...

    def pull_lever(self) -> None: ...

    def eject_bread(self) -> None: ...

    def remove_bread(self) -> None: ...


class Toaster(ToasterOperations):
    """
    Context object for the toaster FSM.

    Key properties:
    - Exactly one current state, always starting at Idle.
    - Every operation is forwarded to the current state; the state is only
      reassigned when the state returns a successor.
    - The state sink is told about the initial state and each new state,
      never about rejected operations.
    """

    def __init__(self, state_logger: Optional[StateSink] = None) -> None:
        self._state: ToasterState = INITIAL_STATE
        self._log_state: StateSink = state_logger or print_state
        self._log_current_state()

    @property
    def state(self) -> ToasterState:
        return self._state

    def insert_bread(self) -> None:
        self._commit(self._state.insert_bread())

    def pull_lever(self) -> None:
        self._commit(self._state.pull_lever())

    def eject_bread(self) -> None:
        self._commit(self._state.eject_bread())

    def remove_bread(self) -> None:
        self._commit(self._state.remove_bread())

    def apply(self, operation: Union[Operation, str]) -> None:
        self._commit(self._state.handle(operation))

    def _commit(self, nxt: ToasterState) -> None:
        self._state = nxt
        self._log_current_state()

    def _log_current_state(self) -> None:
        self._log_state(self._state)

    def __repr__(self) -> str:
        return f"Toaster(state={self._state.value})"
