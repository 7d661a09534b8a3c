"""
population.py
-------------
Individuals and the grid-laid-out population factory.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, asdict, replace
from typing import List, Optional

import numpy as np
import pandas as pd

# Global draw source used when no generator is passed in
_GLOBAL_RNG = np.random.default_rng()


def get_rng(rng=None):
    """Return `rng` if given, an int seed turned into a Generator, else the global generator."""
    if rng is None:
        return _GLOBAL_RNG
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


@dataclass(frozen=True)
class Individual:
    """One simulated person. Values are replaced, never mutated, between rounds."""
    id: int
    x: float
    y: float
    age: int
    infected: bool = False
    dead: bool = False
    recovered: bool = False
    vaccinated: bool = False
    immune: bool = False
    quarantined: bool = False
    newly_infected: bool = False
    days_infected: int = 0
    death_evaluated: bool = False


Population = List[Individual]


def grid_position(index, size):
    """(x, y) in [0, 100) for the `index`-th cell of a floor(sqrt(size)) wide grid."""
    side = int(math.isqrt(size)) if size > 0 else 0
    if side == 0:
        return 0.0, 0.0
    row = (index // side) % side   # overflow rows of non-square sizes wrap onto the grid
    col = index % side
    return 100.0 * col / side, 100.0 * row / side


def create_population(size=1600, initially_infected: Optional[bool] = None, rng=None) -> Population:
    """
    Build `size` individuals with ids 0..size-1 laid out on a square grid.

    initially_infected=None  -> one uniformly chosen patient zero is infected
    initially_infected=True  -> every individual starts infected
    initially_infected=False -> nobody starts infected
    """
    rs = get_rng(rng)
    size = max(0, int(size))
    ages = rs.integers(0, 100, size=size) if size else np.array([], dtype=np.int64)

    population = []
    for i in range(size):
        x, y = grid_position(i, size)
        population.append(Individual(
            id=i,
            x=x,
            y=y,
            age=int(ages[i]),
            infected=bool(initially_infected),
        ))

    if initially_infected is None and size > 0:
        # patient zero
        k = int(rs.integers(0, size))
        population[k] = replace(population[k], infected=True)

    return population


def pre_vaccinate(population: Population, rate) -> Population:
    """
    Mark the first round(rate% of the population) individuals as vaccinated.
    Infected individuals are skipped; vaccinated individuals cannot be infected.
    """
    rate = min(100.0, max(0.0, float(rate)))
    k = int(math.floor(rate / 100.0 * len(population) + 0.5))  # half rounds up
    return [
        replace(p, vaccinated=True) if i < k and not p.infected else p
        for i, p in enumerate(population)
    ]


def population_frame(population: Population) -> pd.DataFrame:
    """One row per individual, indexed by id."""
    cols = [
        "id", "x", "y", "age", "infected", "dead", "recovered", "vaccinated",
        "immune", "quarantined", "newly_infected", "days_infected", "death_evaluated",
    ]
    if not population:
        return pd.DataFrame(columns=cols).set_index("id")
    return pd.DataFrame([asdict(p) for p in population], columns=cols).set_index("id")
