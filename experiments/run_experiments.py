# experiments/run_experiments.py
from __future__ import annotations

import random
from typing import Callable, Dict, List, Optional

from infra.config_loader import load_toaster_config
from infra.state_logger import StateLogger
from simulators.misuse_injector import inject_repeat, inject_shuffle, inject_skip
from simulators.operation_stream_sim import OperationRequest, OperationStreamSimulator
from toaster.device import Toaster


Injector = Callable[[List[OperationRequest], random.Random], List[OperationRequest]]

SCENARIOS: Dict[str, Optional[Injector]] = {
    "Clean": None,
    "Repeat": lambda reqs, rng: inject_repeat(reqs, rate=0.15, rng=rng),
    "Skip": lambda reqs, rng: inject_skip(reqs, rate=0.15, rng=rng),
    "Shuffle": lambda reqs, rng: inject_shuffle(reqs, rng=rng),
}


def run_experiment(label: str, injector: Optional[Injector], logger: StateLogger, cfg) -> None:
    sim = OperationStreamSimulator(n_toasters=cfg.sim_toasters, p_valid=cfg.sim_p_valid, seed=cfg.sim_seed)
    requests = sim.generate(cfg.sim_operations)
    if injector is not None:
        requests = injector(requests, random.Random(cfg.sim_seed))

    toasters = {
        tid: Toaster(state_logger=logger.for_toaster(f"{label}:{tid}"))
        for tid in sim.toaster_ids
    }

    logger.log_event({"type": "SCENARIO_START", "scenario": label, "requests": len(requests)})
    summary = sim.run(requests, toasters)
    logger.log_event({
        "type": "SCENARIO_DONE",
        "scenario": label,
        "total": summary.total,
        "accepted": summary.accepted,
        "rejected": summary.rejected,
        "reject_reasons": summary.reject_reasons,
    })

    print(f"\nScenario: {label}")
    print(f"Total operations : {summary.total}")
    print(f"Accepted         : {summary.accepted}")
    print(f"Rejected         : {summary.rejected}")
    if summary.total:
        print(f"Reject rate      : {summary.rejected / summary.total:.2%}")
    for reason, count in sorted(summary.reject_reasons.items()):
        print(f"  {reason}: {count}")


if __name__ == "__main__":
    cfg = load_toaster_config("config/toaster_config.yaml")
    logger = StateLogger(
        db_path=cfg.db_path,
        state_log_path=cfg.state_log_path,
        event_log_path=cfg.event_log_path,
        echo=cfg.echo,
    )
    for label, injector in SCENARIOS.items():
        run_experiment(label, injector, logger, cfg)
    print("\nDONE. Check logs/ and state sqlite:", cfg.db_path)
