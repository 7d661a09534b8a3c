"""
stats.py
--------
Per-round counts of each status category and the history table built from them.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Iterable, List, Sequence

import pandas as pd

from handshake.params import Capabilities


@dataclass(frozen=True)
class RoundStatistics:
    round: int
    infected: int = 0
    dead: int = 0
    recovered: int = 0
    vaccinated: int = 0
    immune: int = 0


@dataclass(frozen=True)
class StatDescriptor:
    label: str
    key: str


TRACKED_STATS = (
    StatDescriptor("Total Infected", "infected"),
    StatDescriptor("Total Dead", "dead"),
    StatDescriptor("Total Recovered", "recovered"),
    StatDescriptor("Total Vaccinated", "vaccinated"),
    StatDescriptor("Total Immune", "immune"),
)


def tracked_stats_for(caps: Capabilities) -> List[StatDescriptor]:
    """Descriptors worth charting for a variant, in TRACKED_STATS order."""
    keys = {"infected", "dead"}
    if caps.recovery:
        keys.add("recovered")
    if caps.vaccination:
        keys.update(("vaccinated", "immune"))
    return [d for d in TRACKED_STATS if d.key in keys]


def compute_statistics(population: Iterable, round_number: int) -> RoundStatistics:
    # categories overlap, e.g. vaccinated individuals are also immune
    counts = dict(infected=0, dead=0, recovered=0, vaccinated=0, immune=0)
    for p in population:
        for key in counts:
            if getattr(p, key):
                counts[key] += 1
    return RoundStatistics(round=int(round_number), **counts)


def history_frame(history: Sequence[RoundStatistics], tracked=None) -> pd.DataFrame:
    """History as a DataFrame indexed by round; `tracked` limits and labels the columns."""
    cols = [f.key for f in TRACKED_STATS]
    df = pd.DataFrame([asdict(s) for s in history], columns=["round"] + cols).set_index("round")
    if tracked is not None:
        df = df[[d.key for d in tracked]].rename(columns={d.key: d.label for d in tracked})
    return df
