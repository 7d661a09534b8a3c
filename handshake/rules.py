"""
rules.py
--------
Per-individual transition rule for one round.

Step order is fixed and later steps see the changes made by earlier ones:
    1. dead individuals are left alone
    2. infected at the start of the round: day counter, recovery, death
       (death is still rolled in a round that ended in recovery)
    3. transmission from the contact
    4. quarantine flag (cosmetic)
    5. vaccination
"""

from __future__ import annotations
from dataclasses import replace

from handshake.params import Capabilities, SimulationParameters
from handshake.population import Individual, get_rng

ELDERLY_AGE = 65
YOUNG_AGE = 12
ELDERLY_BOOST = 30.0
DEATH_AFTER_DAYS = 5


def _roll(rs, pct):
    """True with probability pct percent."""
    return rs.random() * 100.0 < pct


def infection_chance_for(person, params: SimulationParameters, caps: Capabilities):
    chance = params.infection_chance
    if caps.age_adjusted_rates and person.age >= ELDERLY_AGE:
        chance += ELDERLY_BOOST
    return chance


def death_rate_for(person, params: SimulationParameters, caps: Capabilities):
    if caps.age_banded_death:
        if person.age <= YOUNG_AGE:
            rate = params.death_rates.young
        elif person.age >= ELDERLY_AGE:
            rate = params.death_rates.elderly
        else:
            rate = params.death_rates.adult
    else:
        rate = params.death_rate
    if caps.age_adjusted_rates and person.age >= ELDERLY_AGE:
        rate += ELDERLY_BOOST
    return rate


def update_individual(person: Individual, contact: Individual,
                      params: SimulationParameters, caps: Capabilities = None,
                      rng=None) -> Individual:
    """
    Return `person` after one round of contact with `contact`.
    Neither argument is modified; `contact` is only read for its infected flag.
    """
    if person.dead:
        return person

    caps = caps or Capabilities()
    rs = get_rng(rng)

    infected = person.infected
    dead = False
    recovered = person.recovered
    vaccinated = person.vaccinated
    immune = person.immune
    quarantined = person.quarantined
    newly_infected = person.newly_infected and not caps.clear_newly_infected
    days_infected = person.days_infected
    death_evaluated = person.death_evaluated

    # --- infection course ---
    if person.infected:
        days_infected += 1

        if caps.recovery and days_infected >= params.recovery_days \
                and _roll(rs, params.recovery_rate):
            recovered = True
            infected = False
            quarantined = False

        if days_infected > DEATH_AFTER_DAYS:
            if not (caps.death_roll_once_per_episode and death_evaluated):
                if caps.death_roll_once_per_episode:
                    death_evaluated = True
                if _roll(rs, death_rate_for(person, params, caps)):
                    dead = True
                    infected = False
                    quarantined = False

    # --- transmission ---
    blocked = infected or dead or vaccinated or (caps.vaccination and immune)
    if contact.infected and not blocked:
        if _roll(rs, infection_chance_for(person, params, caps)):
            infected = True
            newly_infected = True
            days_infected = 0
            death_evaluated = False

    # quarantine does not change who can infect whom
    if caps.quarantine and infected and _roll(rs, params.quarantine_chance):
        quarantined = True

    if caps.vaccination and not vaccinated and not dead \
            and _roll(rs, params.vaccination_chance):
        vaccinated = True
        immune = True

    return replace(
        person,
        infected=infected,
        dead=dead,
        recovered=recovered,
        vaccinated=vaccinated,
        immune=immune,
        quarantined=quarantined,
        newly_infected=newly_infected,
        days_infected=days_infected,
        death_evaluated=death_evaluated,
    )
