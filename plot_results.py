import pandas as pd
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from handshake.display import COLORS, status_of, visible_subset
from handshake.stats import history_frame
from sweep import METRICS as METRIC_KEYS, RANGES

METRICS = list(zip(METRIC_KEYS, [
    "Rounds run",
    "Peak infected",
    "Dead",
    "Recovered",
    "Vaccinated",
]))

ORDER = RANGES

LABELS = {
    "infection_chance": "Infection\nChance%",
    "death_rate": "Death\nRate%",
    "recovery_rate": "Recovery\nRate%",
    "vaccination_chance": "Vaccination\nChance%",
}


def render_population(population, box_size=500, max_size=1000, ax=None,
                      show_newly_infected=False):
    """Scatter the (visible part of the) population, one colour per display category."""
    shown, notice = visible_subset(population, max_size)
    if ax is None:
        dpi = 100
        fig, ax = plt.subplots(figsize=(box_size / dpi, box_size / dpi), dpi=dpi)
    else:
        fig = ax.figure
        ax.clear()

    cats = [status_of(p, show_newly_infected) for p in shown]
    for cat, color in COLORS.items():
        pts = [(p.x, p.y) for p, c in zip(shown, cats) if c == cat]
        if pts:
            xs, ys = zip(*pts)
            ax.scatter(xs, ys, s=12, c=color, label=cat, marker="s")
    ax.set_xlim(-2, 102)
    ax.set_ylim(102, -2)  # row 0 at the top, like the grid on screen
    ax.set_xticks([])
    ax.set_yticks([])
    if notice:
        ax.set_title(notice, fontsize=8)
    return fig


def history_table(history, tracked=None):
    return history_frame(history, tracked)


def render_history(history, tracked, ax=None):
    """Line chart of every tracked statistic against round."""
    df = history_frame(history, tracked)
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 3.5))
    else:
        fig = ax.figure
        ax.clear()
    for col in df.columns:
        ax.plot(df.index, df[col].values, label=col)
    ax.set_xlabel("Round")
    ax.set_ylabel("Individuals")
    if len(df.columns):
        ax.legend(fontsize=8)
    fig.tight_layout()
    return fig


def animate(simulation, interval_ms=500, box_size=500, max_size=1000, frames=None):
    """
    Live view: one round per frame. Stop with `anim.event_source.stop()`;
    a stopped animation schedules no further rounds.
    """
    fig, (ax_pop, ax_hist) = plt.subplots(1, 2, figsize=(11, 5))

    def _draw():
        render_population(simulation.population, box_size, max_size, ax=ax_pop)
        render_history(simulation.history, simulation.tracked_stats, ax=ax_hist)
        return []

    def _frame(_):
        simulation.run_turn()
        return _draw()

    anim = FuncAnimation(fig, _frame, frames=frames, init_func=_draw, interval=interval_ms,
                         repeat=False, cache_frame_data=False)
    return anim


def make_grid(df, out_png="figure.png"):
    present = list(df["param_name"].unique())
    cols = [c for c in ORDER if c in present] + [c for c in present if c not in ORDER]
    rows = METRICS
    nrows = len(rows)
    ncols = len(cols)

    fig, axes = plt.subplots(nrows, ncols, figsize=(3 * ncols, 9), squeeze=False)

    for c, pname in enumerate(cols):
        values = sorted(df.loc[df["param_name"]==pname, "param_value"].unique())
        for r, (mkey, mlabel) in enumerate(rows):
            ax = axes[r, c]
            data = []
            means = []
            for v in values:
                d = df[(df["param_name"]==pname) & (df["param_value"]==v)][mkey].values
                data.append(d)
                means.append(np.mean(d) if len(d)>0 else np.nan)
            ax.boxplot(data, showfliers=False)
            ax.set_xticks(range(1, len(values)+1))
            ax.set_xticklabels([str(v) for v in values])
            ax.plot(range(1, len(values)+1), means, marker="^", color='red', markersize=5)
            if r == 0:
                ax.set_title(LABELS.get(pname, pname), fontsize=10)
            if c == 0:
                ax.set_ylabel(mlabel, fontsize=9)
            ax.tick_params(axis='both', labelsize=8)

    fig.tight_layout()
    fig.savefig(out_png, dpi=200, bbox_inches="tight")
    return out_png


if __name__ == "__main__":
    df = pd.read_csv("results.csv")
    out = make_grid(df, out_png="figure.png")
    print("Saved", out)
