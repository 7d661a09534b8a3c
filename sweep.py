import logging
import numpy as np
import pandas as pd
from handshake.params import get_variant
from handshake.simulation import Simulation

logger = logging.getLogger(__name__)

# Baseline overrides on top of the variant defaults
DEFAULTS = dict(
    size=400,
    rounds=100,
)

# One parameter varied at a time
RANGES = {
    "infection_chance": [10, 25, 50, 90],
    "death_rate": [2, 5, 10, 20],
    "recovery_rate": [0, 10, 20, 40],
    "vaccination_chance": [0, 5, 15, 30],
}

METRICS = ["rounds_run", "peak_infected", "final_dead", "final_recovered", "final_vaccinated"]


def run_once(variant, size, rounds, seed, **param_overrides):
    """Run one seeded simulation and reduce its history to final metrics."""
    _, params = get_variant(variant)
    sim = Simulation(variant=variant, size=size, params=params.replace(**param_overrides), seed=seed)
    history = sim.run(rounds, stop_when_extinct=True)
    last = history[-1]
    return {
        "rounds_run": len(history),
        "peak_infected": max(s.infected for s in history),
        "final_dead": last.dead,
        "final_recovered": last.recovered,
        "final_vaccinated": last.vaccinated,
    }


def run_sweep(n_runs=20, seed=0, out_csv="results.csv", variant="full",
              size=DEFAULTS["size"], rounds=DEFAULTS["rounds"], ranges=None):
    ranges = RANGES if ranges is None else ranges
    rows = []
    rs = np.random.RandomState(seed)
    logger.info("Sweep: variant=%s size=%d rounds=%d runs=%d", variant, size, rounds, n_runs)
    for pname, values in ranges.items():
        for val in values:
            for r in range(n_runs):
                run_seed = int(rs.randint(0, 2**31-1))
                try:
                    out = run_once(variant, size, rounds, run_seed, **{pname: val})
                except Exception:
                    logger.exception("Run failed: %s=%s run %d", pname, val, r)
                    continue
                out.update(dict(param_name=pname, param_value=val, run=r, seed=run_seed))
                rows.append(out)
    df = pd.DataFrame(rows)
    if out_csv:
        df.to_csv(out_csv, index=False)
        logger.info("Wrote %d rows to %s", len(df), out_csv)
    return df


if __name__ == "__main__":
    from handshake.log_setup import setup_logging
    setup_logging()
    df = run_sweep(n_runs=8, seed=42, out_csv="results.csv")
    print("Wrote", len(df), "rows to results.csv")
