"""
params.py
---------
Simulation parameters, capability switches and per-variant defaults.

Percentages are plain numbers in [0, 100] (fractional values are fine), the same
convention the sliders of the original front end use. Values outside that range
are clamped with a warning instead of raising.
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


# camelCase names accepted from front-end style configs
_ALIASES = {
    "infectionChance": "infection_chance",
    "deathRate": "death_rate",
    "deathRates": "death_rates",
    "recoveryRate": "recovery_rate",
    "recoveryDays": "recovery_days",
    "quarantineChance": "quarantine_chance",
    "vaccinationChance": "vaccination_chance",
}

_PERCENT_FIELDS = (
    "infection_chance",
    "death_rate",
    "recovery_rate",
    "quarantine_chance",
    "vaccination_chance",
)


def clamp_pct(value, name="value"):
    """Clamp a percentage into [0, 100], warning when it had to move."""
    v = float(value)
    clamped = min(100.0, max(0.0, v))
    if clamped != v:
        logger.warning("%s=%s outside [0, 100]; clamped to %s", name, value, clamped)
    return clamped


@dataclass(frozen=True)
class DeathRates:
    """Per-age-band death rates (percent)."""
    young: float = 5.0     # age <= 12
    adult: float = 10.0
    elderly: float = 30.0  # age >= 65

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, clamp_pct(getattr(self, f.name), f"death_rates.{f.name}"))


def _death_rates_from(mapping, base=None):
    """DeathRates from a (possibly partial) mapping, merged onto `base`; unknown bands are ignored."""
    known = {f.name for f in fields(DeathRates)}
    values = asdict(base) if isinstance(base, DeathRates) else dict(base or {})
    for key, val in mapping.items():
        if key not in known:
            logger.warning("Ignoring unknown parameter %r", f"death_rates.{key}")
            continue
        values[key] = val
    return DeathRates(**values)


@dataclass(frozen=True)
class SimulationParameters:
    infection_chance: float = 50.0
    death_rate: float = 10.0
    death_rates: DeathRates = field(default_factory=DeathRates)
    recovery_rate: float = 20.0
    recovery_days: int = 7
    quarantine_chance: float = 10.0
    vaccination_chance: float = 30.0

    def __post_init__(self):
        for name in _PERCENT_FIELDS:
            object.__setattr__(self, name, clamp_pct(getattr(self, name), name))
        if isinstance(self.death_rates, Mapping):
            object.__setattr__(self, "death_rates", _death_rates_from(self.death_rates))
        days = int(self.recovery_days)
        if days < 1:
            logger.warning("recovery_days=%s must be positive; using 1", self.recovery_days)
            days = 1
        object.__setattr__(self, "recovery_days", days)

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any], base: Optional["SimulationParameters"] = None):
        """
        Build parameters from a plain dict, on top of `base` (or the class defaults).
        Accepts snake_case and the camelCase option names; unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        values = asdict(base) if base is not None else {}
        for key, val in mapping.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                logger.warning("Ignoring unknown parameter %r", key)
                continue
            if name == "death_rates" and isinstance(val, Mapping):
                # partial band updates keep the other bands
                val = _death_rates_from(val, values.get("death_rates"))
            values[name] = val
        return cls(**values)

    def replace(self, **changes):
        return SimulationParameters.from_dict(changes, base=self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Capabilities:
    """Which rule features a variant switches on."""
    recovery: bool = False
    quarantine: bool = False                  # cosmetic flag only, never blocks contact
    vaccination: bool = False                 # vaccination also grants immunity
    age_adjusted_rates: bool = False          # +30 points infection/death for age >= 65
    age_banded_death: bool = False            # young/adult/elderly death rates
    death_roll_once_per_episode: bool = False
    shuffle_contacts: bool = False
    clear_newly_infected: bool = False        # reset newly_infected at start of each round
    two_populations: bool = False             # healthy + initially-infected groups

    @classmethod
    def from_dict(cls, mapping: Mapping[str, Any], base: Optional["Capabilities"] = None):
        known = {f.name for f in fields(cls)}
        values = asdict(base) if base is not None else {}
        for key, val in mapping.items():
            if key not in known:
                logger.warning("Ignoring unknown capability %r", key)
                continue
            values[key] = bool(val)
        return cls(**values)


# Variant presets
VARIANTS = {
    "handshake": Capabilities(),
    "full": Capabilities(
        recovery=True,
        quarantine=True,
        vaccination=True,
        age_adjusted_rates=True,
    ),
    "age_banded": Capabilities(
        age_banded_death=True,
        two_populations=True,
    ),
}

# Defaults per variant (what the sliders start at)
DEFAULTS = {
    "handshake": dict(
        infection_chance=50.0,
        death_rate=10.0,
        recovery_rate=0.0,
        quarantine_chance=0.0,
        vaccination_chance=0.0,
    ),
    "full": dict(
        infection_chance=50.0,
        death_rate=10.0,
        recovery_rate=20.0,
        quarantine_chance=10.0,
        recovery_days=7,
        vaccination_chance=30.0,
    ),
    "age_banded": dict(
        infection_chance=50.0,
        death_rates=dict(young=5.0, adult=10.0, elderly=30.0),
        recovery_rate=0.0,
        quarantine_chance=0.0,
        vaccination_chance=0.0,
    ),
}


def get_variant(name):
    """Return (capabilities, default parameters) for a named variant."""
    if name not in VARIANTS:
        raise ValueError(f"Unknown variant {name!r}; expected one of {sorted(VARIANTS)}")
    return VARIANTS[name], SimulationParameters.from_dict(DEFAULTS[name])


def load_config(path):
    """
    Load a JSON run config:
        {"variant": "full", "size": 400, "seed": 1,
         "vaccination_rate": 0, "params": {...}, "capabilities": {...}}
    Returns a dict with keys variant, size, seed, vaccination_rate, params, capabilities.
    """
    with open(Path(path), encoding="utf-8") as fh:
        raw = json.load(fh)

    variant = raw.get("variant", "handshake")
    caps, params = get_variant(variant)
    params = SimulationParameters.from_dict(raw.get("params", {}), base=params)
    caps = Capabilities.from_dict(raw.get("capabilities", {}), base=caps)
    cfg = {
        "variant": variant,
        "size": int(raw.get("size", 400)),
        "seed": raw.get("seed"),
        "vaccination_rate": float(raw.get("vaccination_rate", 0.0)),
        "params": params,
        "capabilities": caps,
    }
    logger.info("Loaded config %s (variant=%s, size=%d)", path, variant, cfg["size"])
    return cfg
