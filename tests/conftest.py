import logging

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from handshake.params import SimulationParameters

@pytest.fixture
def rng():
    return np.random.default_rng(12345)

@pytest.fixture
def params():
    """Handshake-style parameters with every optional rate off."""
    return SimulationParameters(
        infection_chance=50.0,
        death_rate=10.0,
        recovery_rate=0.0,
        quarantine_chance=0.0,
        vaccination_chance=0.0,
    )


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    before, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        if h not in before:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
