import argparse
import logging

from handshake.log_setup import setup_logging
from handshake.params import SimulationParameters, get_variant, load_config, VARIANTS
from handshake.simulation import Simulation

logger = logging.getLogger(__name__)


def build_simulation(args):
    if args.config:
        cfg = load_config(args.config)
        return Simulation(variant=cfg["variant"], size=cfg["size"], params=cfg["params"],
                          capabilities=cfg["capabilities"],
                          seed=cfg["seed"] if args.seed is None else args.seed,
                          vaccination_rate=cfg["vaccination_rate"] if args.vaccination_rate is None
                          else args.vaccination_rate)
    _, params = get_variant(args.variant)
    overrides = {k: v for k, v in dict(
        infection_chance=args.infection_chance,
        death_rate=args.death_rate,
    ).items() if v is not None}
    if overrides:
        params = SimulationParameters.from_dict(overrides, base=params)
    return Simulation(variant=args.variant, size=args.size, params=params, seed=args.seed,
                      vaccination_rate=args.vaccination_rate or 0.0)


def main(argv=None):
    ap = argparse.ArgumentParser(description="Ring-contact epidemic toy simulation")
    ap.add_argument("--variant", default="handshake", choices=sorted(VARIANTS))
    ap.add_argument("--size", type=int, default=400, help="population size (a perfect square lays out cleanly)")
    ap.add_argument("--rounds", type=int, default=50)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--config", default=None, help="JSON run config")
    ap.add_argument("--infection-chance", type=float, default=None)
    ap.add_argument("--death-rate", type=float, default=None)
    ap.add_argument("--vaccination-rate", type=float, default=None,
                    help="percent of the healthy group vaccinated before the first round")
    ap.add_argument("--out-csv", default="history.csv")
    ap.add_argument("--out-png", default=None, help="save population + history figure")
    ap.add_argument("--log-dir", default="logs")
    args = ap.parse_args(argv)

    setup_logging(args.log_dir)
    sim = build_simulation(args)
    sim.run(args.rounds)

    from plot_results import history_table, render_history, render_population
    df = history_table(sim.history, sim.tracked_stats)
    if args.out_csv:
        df.to_csv(args.out_csv)
        logger.info("Wrote %d rounds to %s", len(df), args.out_csv)
    if args.out_png:
        fig = render_history(sim.history, sim.tracked_stats)
        fig.savefig(args.out_png, dpi=150, bbox_inches="tight")
        pop_png = args.out_png.rsplit(".", 1)[0] + "_population.png"
        render_population(sim.population).savefig(pop_png, dpi=150, bbox_inches="tight")
        logger.info("Saved %s and %s", args.out_png, pop_png)
    print(df.tail(1).to_string())
    return sim


if __name__ == "__main__":
    main()
