from __future__ import annotations

import os
import sqlite3

import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from infra.config_loader import load_toaster_config
from toaster.state_machine import ToasterState


OUT_TABLE_DIR = "results/tables"
OUT_GRAPH_DIR = "results/graphs"


def read_state_log_sqlite(db_path: str) -> pd.DataFrame:
    con = sqlite3.connect(db_path)
    df = pd.read_sql_query("SELECT * FROM state_log", con)
    con.close()
    return df


def state_visits(df: pd.DataFrame) -> pd.DataFrame:
    """Count how often each state was reported, per scenario, in cycle order."""
    df = df.copy()
    df["scenario"] = df["toaster_id"].str.split(":").str[0]

    counts = df.groupby(["scenario", "state"]).size().unstack(fill_value=0)
    order = [s.value for s in ToasterState]
    return counts.reindex(columns=order, fill_value=0).reset_index()


def main() -> None:
    os.makedirs(OUT_TABLE_DIR, exist_ok=True)
    os.makedirs(OUT_GRAPH_DIR, exist_ok=True)

    cfg = load_toaster_config("config/toaster_config.yaml")
    visits = state_visits(read_state_log_sqlite(cfg.db_path))

    out_csv = os.path.join(OUT_TABLE_DIR, "state_visits.csv")
    visits.to_csv(out_csv, index=False)

    # grouped bars: one group per scenario, one bar per state
    states = [s.value for s in ToasterState]
    x = range(len(visits))
    width = 0.8 / len(states)

    plt.figure()
    for i, state in enumerate(states):
        offset = (i - (len(states) - 1) / 2) * width
        plt.bar([j + offset for j in x], visits[state], width=width, label=state)

    plt.xticks(list(x), visits["scenario"], rotation=30, ha="right")
    plt.ylabel("Times reported")
    plt.title("State visits per scenario")
    plt.legend()
    plt.tight_layout()

    out_png = os.path.join(OUT_GRAPH_DIR, "state_visits.png")
    plt.savefig(out_png, dpi=300)
    plt.close()

    print("RESULTS GENERATED:")
    print(" -", out_csv)
    print(" -", out_png)


if __name__ == "__main__":
    main()
