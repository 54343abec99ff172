from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional
import yaml


@dataclass(frozen=True)
class ToasterConfig:
    db_path: str
    state_log_path: str
    event_log_path: str
    echo: bool

    sim_toasters: int
    sim_operations: int
    sim_p_valid: float
    sim_seed: Optional[int]


def load_toaster_config(path: str = "config/toaster_config.yaml") -> ToasterConfig:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found at {path}")

    with open(path, "r", encoding="utf-8") as f:
        cfg: Dict[str, Any] = yaml.safe_load(f) or {}

    logging = cfg.get("logging") or {}
    sim = cfg.get("simulation") or {}
    seed = sim.get("seed")

    config = ToasterConfig(
        db_path=str(logging.get("db_path", "logs/states.sqlite")),
        state_log_path=str(logging.get("state_log_path", "logs/states.log")),
        event_log_path=str(logging.get("event_log_path", "logs/events.log")),
        echo=bool(logging.get("echo", True)),

        sim_toasters=int(sim.get("toasters", 10)),
        sim_operations=int(sim.get("operations", 200)),
        sim_p_valid=float(sim.get("p_valid", 0.8)),
        sim_seed=None if seed is None else int(seed),
    )
    _validate(config)
    return config


def _validate(config: ToasterConfig) -> None:
    if config.sim_toasters < 1:
        raise ValueError("simulation.toasters must be >= 1")
    if config.sim_operations < 0:
        raise ValueError("simulation.operations must be >= 0")
    if not 0.0 <= config.sim_p_valid <= 1.0:
        raise ValueError("simulation.p_valid must be between 0.0 and 1.0")
