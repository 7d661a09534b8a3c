"""
step.py
-------
One round over the whole population.

Contacts form a fixed ring: the person at position i meets the person at
position (i + 1) mod n. With `shuffle_contacts` the positions are a fresh
uniform permutation each round. Contacts are always read from the pre-round
snapshot, so the result does not depend on visiting order.
"""

from __future__ import annotations
import logging

from handshake.params import Capabilities, SimulationParameters
from handshake.population import Population, get_rng
from handshake.rules import update_individual

logger = logging.getLogger(__name__)


def ring_order(n, caps: Capabilities, rs):
    """Visiting order (indices into the population) for this round."""
    if caps.shuffle_contacts and n > 1:
        return [int(i) for i in rs.permutation(n)]
    return list(range(n))


def update_population(population: Population, params: SimulationParameters,
                      caps: Capabilities = None, rng=None) -> Population:
    """Return the next generation; the input list and its members are left as they were."""
    caps = caps or Capabilities()
    rs = get_rng(rng)
    snapshot = tuple(population)
    n = len(snapshot)
    if n == 0:
        return []

    order = ring_order(n, caps, rs)
    nxt = [None] * n
    for pos, idx in enumerate(order):
        contact = snapshot[order[(pos + 1) % n]]
        nxt[idx] = update_individual(snapshot[idx], contact, params, caps, rs)

    logger.debug("Updated %d individuals", n)
    return nxt
