"""Tests for config loading and state logging."""

import json
import os
import sqlite3

import pytest

from infra.config_loader import load_toaster_config
from infra.state_logger import StateLogger
from toaster.device import Toaster
from toaster.exceptions import InvalidOperation
from toaster.state_machine import ToasterState


def _write(tmp_path, text):
    path = tmp_path / "toaster_config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_config_defaults_for_empty_file(tmp_path):
    cfg = load_toaster_config(_write(tmp_path, ""))
    assert cfg.db_path == "logs/states.sqlite"
    assert cfg.state_log_path == "logs/states.log"
    assert cfg.event_log_path == "logs/events.log"
    assert cfg.echo is True
    assert cfg.sim_toasters == 10
    assert cfg.sim_operations == 200
    assert cfg.sim_p_valid == 0.8
    assert cfg.sim_seed is None


def test_config_overrides(tmp_path):
    cfg = load_toaster_config(_write(tmp_path, """
logging:
  db_path: out/db.sqlite
  echo: false
simulation:
  toasters: 3
  operations: 12
  p_valid: 1.0
  seed: 7
"""))
    assert cfg.db_path == "out/db.sqlite"
    assert cfg.echo is False
    assert (cfg.sim_toasters, cfg.sim_operations, cfg.sim_p_valid, cfg.sim_seed) == (3, 12, 1.0, 7)


def test_shipped_config_loads():
    path = os.path.join(os.path.dirname(__file__), "..", "config", "toaster_config.yaml")
    cfg = load_toaster_config(path)
    assert cfg.sim_seed == 42


@pytest.mark.parametrize("body", [
    "simulation:\n  toasters: 0\n",
    "simulation:\n  operations: -1\n",
    "simulation:\n  p_valid: 1.5\n",
])
def test_config_rejects_bad_values(tmp_path, body):
    with pytest.raises(ValueError):
        load_toaster_config(_write(tmp_path, body))


def test_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_toaster_config(str(tmp_path / "nope.yaml"))


@pytest.fixture
def state_logger(tmp_path):
    return StateLogger(
        db_path=str(tmp_path / "logs" / "states.sqlite"),
        state_log_path=str(tmp_path / "logs" / "states.log"),
        event_log_path=str(tmp_path / "logs" / "events.log"),
    )


def _read_jsonl(path):
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def test_state_logger_records_each_successful_state(state_logger):
    toaster = Toaster(state_logger=state_logger.for_toaster("T1"))
    toaster.insert_bread()
    with pytest.raises(InvalidOperation):
        toaster.remove_bread()
    toaster.pull_lever()

    rows = _read_jsonl(state_logger.state_log_path)
    assert [r["state"] for r in rows] == ["Idle", "BreadInserted", "Toasting"]
    assert [r["seq"] for r in rows] == [0, 1, 2]
    assert {r["toaster_id"] for r in rows} == {"T1"}

    con = sqlite3.connect(state_logger.db_path)
    db_rows = con.execute("SELECT toaster_id, seq, state FROM state_log ORDER BY id").fetchall()
    con.close()
    assert db_rows == [("T1", 0, "Idle"), ("T1", 1, "BreadInserted"), ("T1", 2, "Toasting")]


def test_state_logger_sequences_are_per_toaster(state_logger):
    state_logger.log_state("A", ToasterState.IDLE)
    state_logger.log_state("B", ToasterState.IDLE)
    state_logger.log_state("A", ToasterState.BREAD_INSERTED)
    rows = _read_jsonl(state_logger.state_log_path)
    assert [(r["toaster_id"], r["seq"]) for r in rows] == [("A", 0), ("B", 0), ("A", 1)]


def test_failed_insert_keeps_file_log_and_db_in_step(state_logger):
    con = sqlite3.connect(state_logger.db_path)
    con.execute("DROP TABLE state_log")
    con.commit()
    con.close()

    with pytest.raises(sqlite3.OperationalError):
        state_logger.log_state("T1", ToasterState.IDLE)
    assert not os.path.exists(state_logger.state_log_path)

    state_logger._init_db()
    state_logger.log_state("T1", ToasterState.IDLE)
    (row,) = _read_jsonl(state_logger.state_log_path)
    assert row["seq"] == 0

    con = sqlite3.connect(state_logger.db_path)
    db_rows = con.execute("SELECT toaster_id, seq, state FROM state_log").fetchall()
    con.close()
    assert db_rows == [("T1", 0, "Idle")]


def test_state_logger_echo(tmp_path, capsys):
    logger = StateLogger(
        db_path=str(tmp_path / "s.sqlite"),
        state_log_path=str(tmp_path / "s.log"),
        event_log_path=str(tmp_path / "e.log"),
        echo=True,
    )
    logger.log_state("T9", ToasterState.TOASTING)
    assert capsys.readouterr().out.strip() == "[T9] Toasting"


def test_log_event_appends(state_logger):
    state_logger.log_event({"type": "SCENARIO_START", "scenario": "Clean"})
    (row,) = _read_jsonl(state_logger.event_log_path)
    assert row["type"] == "SCENARIO_START"
    assert "timestamp_utc" in row
