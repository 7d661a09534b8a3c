"""
simulation.py
-------------
Driver that owns the population snapshot(s) and the statistics history for one run,
plus a cancellable auto-play loop that advances one round every `interval` seconds.
"""

from __future__ import annotations
import logging
import threading
from typing import Optional, Tuple

import numpy as np

from handshake.params import Capabilities, SimulationParameters, get_variant
from handshake.population import Population, create_population, pre_vaccinate
from handshake.stats import RoundStatistics, compute_statistics, tracked_stats_for
from handshake.step import update_population

logger = logging.getLogger(__name__)


class Simulation:
    """
    One simulation run.

    The two-population variant keeps a group that starts healthy and a group that
    starts fully infected; each is stepped on its own ring and statistics are
    taken over both together.
    """

    def __init__(self, variant="handshake", size=400,
                 params: Optional[SimulationParameters] = None,
                 capabilities: Optional[Capabilities] = None,
                 seed=None, vaccination_rate=0.0):
        caps, defaults = get_variant(variant)
        self.variant = variant
        self.size = int(size)
        self.params = params if params is not None else defaults
        self.capabilities = capabilities if capabilities is not None else caps
        self.seed = seed
        self.vaccination_rate = float(vaccination_rate)
        self.rng = np.random.default_rng(seed)
        self._lock = threading.Lock()
        self.groups: Tuple[Population, ...] = ()
        self.history: Tuple[RoundStatistics, ...] = ()
        self.reset()

    # ---------- state ----------
    @property
    def population(self) -> Population:
        """All individuals across groups, in group order."""
        return [p for g in self.groups for p in g]

    @property
    def round(self):
        return len(self.history)

    @property
    def tracked_stats(self):
        return tracked_stats_for(self.capabilities)

    def reset(self, size=None, vaccination_rate=None):
        """
        Fresh population(s) of the configured size and an empty history.

        `vaccination_rate` (percent, remembered across resets) pre-vaccinates the
        first part of the healthy group; the infected group starts unvaccinated.
        """
        with self._lock:
            if size is not None:
                self.size = int(size)
            if vaccination_rate is not None:
                self.vaccination_rate = float(vaccination_rate)
            if self.capabilities.two_populations:
                healthy = create_population(self.size, initially_infected=False, rng=self.rng)
                self.groups = (
                    pre_vaccinate(healthy, self.vaccination_rate),
                    create_population(self.size, initially_infected=True, rng=self.rng),
                )
            else:
                pop = create_population(self.size, rng=self.rng)
                self.groups = (pre_vaccinate(pop, self.vaccination_rate),)
            self.history = ()
        logger.info("Reset %s simulation: %d groups x %d individuals, %.1f%% pre-vaccinated",
                    self.variant, len(self.groups), self.size, self.vaccination_rate)

    def set_params(self, **changes):
        """Adjust parameters between rounds (slider-style)."""
        with self._lock:
            self.params = self.params.replace(**changes)

    # ---------- stepping ----------
    def run_turn(self) -> RoundStatistics:
        """Advance exactly one round and record its statistics."""
        with self._lock:
            self.groups = tuple(
                update_population(g, self.params, self.capabilities, self.rng)
                for g in self.groups
            )
            stats = compute_statistics(self.population, len(self.history))
            self.history = self.history + (stats,)
        logger.debug("Round %d: %s", stats.round, stats)
        return stats

    def run(self, rounds, stop_when_extinct=False):
        """Run up to `rounds` rounds; optionally stop once nobody is infected."""
        for _ in range(int(rounds)):
            stats = self.run_turn()
            if stop_when_extinct and stats.infected == 0:
                logger.info("Epidemic ended at round %d", stats.round)
                break
        return self.history


class AutoPlay:
    """
    Calls `simulation.run_turn()` every `interval` seconds until stopped.

    Each timer carries the generation it was scheduled in; `stop()` bumps the
    generation, so a timer that fires afterwards does nothing.
    """

    def __init__(self, simulation: Simulation, interval=0.5, on_round=None):
        self.simulation = simulation
        self.interval = float(interval)
        self.on_round = on_round
        self._generation = 0
        self._timer = None
        self._state_lock = threading.RLock()

    @property
    def running(self):
        return self._timer is not None

    def start(self):
        with self._state_lock:
            if self._timer is not None:
                return
            self._generation += 1
            self._schedule(self._generation)
        logger.info("Auto-play started (interval %.3fs)", self.interval)

    def stop(self):
        with self._state_lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        logger.info("Auto-play stopped at round %d", self.simulation.round)

    def _schedule(self, generation):
        t = threading.Timer(self.interval, self._tick, args=(generation,))
        t.daemon = True
        self._timer = t
        t.start()

    def _tick(self, generation):
        with self._state_lock:
            if generation != self._generation:
                return
            stats = self.simulation.run_turn()
            if self.on_round is not None:
                self.on_round(stats)
            # next round only after this one has fully completed
            if generation == self._generation:
                self._schedule(generation)
