import json

import matplotlib.pyplot as plt
import pandas as pd
import pytest
from matplotlib.animation import FuncAnimation

import plot_results
import run_example
from handshake.simulation import Simulation
from sweep import METRICS, run_once, run_sweep


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


def test_run_once_metrics():
    out = run_once("full", size=25, rounds=10, seed=4)
    assert set(out) == set(METRICS)
    assert 1 <= out["rounds_run"] <= 10


def test_run_sweep_writes_csv(tmp_path):
    out_csv = tmp_path / "results.csv"
    df = run_sweep(n_runs=2, seed=1, out_csv=out_csv, size=16, rounds=5,
                   ranges={"infection_chance": [0, 100]})
    assert len(df) == 4
    assert set(METRICS) <= set(df.columns)
    assert len(pd.read_csv(out_csv)) == 4


def test_run_sweep_skips_failed_runs(monkeypatch, caplog):
    def boom(*a, **kw):
        raise RuntimeError("boom")
    monkeypatch.setattr("sweep.run_once", boom)
    df = run_sweep(n_runs=1, seed=1, out_csv=None, ranges={"death_rate": [5]})
    assert df.empty
    assert "Run failed" in caplog.text


def test_make_grid(tmp_path):
    df = run_sweep(n_runs=1, seed=2, out_csv=None, size=9, rounds=3,
                   ranges={"infection_chance": [10, 90]})
    out = plot_results.make_grid(df, out_png=tmp_path / "grid.png")
    assert (tmp_path / "grid.png").exists()
    assert out == tmp_path / "grid.png"


def test_render_population_and_history():
    sim = Simulation(variant="full", size=36, seed=1)
    sim.run(4)
    fig = plot_results.render_population(sim.population, max_size=10)
    assert "Only showing 10" in fig.axes[0].get_title()
    fig = plot_results.render_history(sim.history, sim.tracked_stats)
    assert len(fig.axes[0].get_lines()) == len(sim.tracked_stats)
    table = plot_results.history_table(sim.history, sim.tracked_stats)
    assert len(table) == 4


def test_animate_does_not_step_on_creation():
    sim = Simulation(size=16, seed=1)
    anim = plot_results.animate(sim, interval_ms=500, frames=3)
    assert isinstance(anim, FuncAnimation)
    assert sim.round == 0
    anim.event_source.stop()


def test_cli_end_to_end(tmp_path, restore_root_logging):
    out_csv = tmp_path / "history.csv"
    out_png = tmp_path / "history.png"
    sim = run_example.main([
        "--variant", "full", "--size", "25", "--rounds", "6", "--seed", "3",
        "--out-csv", str(out_csv), "--out-png", str(out_png),
        "--log-dir", str(tmp_path / "logs"),
    ])
    assert sim.round == 6
    assert len(pd.read_csv(out_csv)) == 6
    assert out_png.exists()
    assert (tmp_path / "history_population.png").exists()
    assert list((tmp_path / "logs").glob("run-*.log"))


def test_cli_from_config(tmp_path, restore_root_logging):
    cfg = tmp_path / "run.json"
    cfg.write_text(json.dumps({"variant": "age_banded", "size": 9, "seed": 1, "vaccination_rate": 50}))
    sim = run_example.main(["--config", str(cfg), "--rounds", "2",
                            "--out-csv", "", "--log-dir", str(tmp_path / "logs")])
    assert len(sim.population) == 18
    assert sum(p.vaccinated for p in sim.groups[0]) == 5
    assert sim.round == 2
