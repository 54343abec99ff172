import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from toaster.device import Toaster
from toaster.state_machine import INITIAL_STATE, Operation, ToasterState, can_apply, try_transition


@dataclass
class OperationRequest:
    toaster_id: str
    seq: int
    operation: Operation


@dataclass
class SimulationSummary:
    total: int = 0
    accepted: int = 0
    rejected: int = 0
    final_states: Dict[str, ToasterState] = field(default_factory=dict)
    accepted_by_toaster: Dict[str, int] = field(default_factory=dict)
    reject_reasons: Dict[str, int] = field(default_factory=dict)  # INVALID_OPERATION:<state>-><op> -> count


class OperationStreamSimulator:
    def __init__(
        self,
        n_toasters=10,
        p_valid=0.8,
        seed: Optional[int] = None,
    ):
        self.n_toasters = n_toasters
        self.p_valid = p_valid
        self.rng = random.Random(seed)
        self.toaster_ids = [f"T{i}" for i in range(n_toasters)]

    def generate(self, n_operations: int) -> List[OperationRequest]:
        requests = []
        # simulator-side view of where each toaster should be
        tracked = {tid: INITIAL_STATE for tid in self.toaster_ids}

        for seq in range(n_operations):
            tid = self.rng.choice(self.toaster_ids)
            state = tracked[tid]

            if self.rng.random() < self.p_valid:
                op = next(o for o in Operation if can_apply(state, o))
                tracked[tid] = try_transition(state, op).next_state
            else:
                op = self.rng.choice([o for o in Operation if not can_apply(state, o)])

            requests.append(OperationRequest(toaster_id=tid, seq=seq, operation=op))

        return requests

    def run(self, requests: List[OperationRequest], toasters: Dict[str, Toaster]) -> SimulationSummary:
        summary = SimulationSummary()

        for req in requests:
            summary.total += 1
            toaster = toasters[req.toaster_id]

            tr = try_transition(toaster.state, req.operation)
            if not tr.accepted:
                summary.rejected += 1
                summary.reject_reasons[tr.reason] = summary.reject_reasons.get(tr.reason, 0) + 1
                continue

            toaster.apply(req.operation)
            summary.accepted += 1
            summary.accepted_by_toaster[req.toaster_id] = summary.accepted_by_toaster.get(req.toaster_id, 0) + 1

        summary.final_states = {tid: t.state for tid, t in toasters.items()}
        return summary
