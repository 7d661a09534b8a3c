"""
display.py
----------
Icon selection and display-cap subsetting for the population view.
"""

from __future__ import annotations

ICONS = {
    "dead": "\U0001F480",           # skull
    "infected": "\U0001F922",       # nauseated face
    "newly_infected": "\U0001F927", # sneezing face
    "immune": "\U0001F642",         # slightly smiling face
    "vaccinated": "\U0001F489",     # syringe
    "elder": "\U0001F9D3",          # older person
    "child": "\U0001F476",          # baby
    "healthy": "\U0001F600",        # grinning face
}

# Category colors for the matplotlib view
COLORS = {
    "dead": "#222222",
    "infected": "#d62728",
    "newly_infected": "#ff7f0e",
    "immune": "#2ca02c",
    "vaccinated": "#1f77b4",
    "elder": "#9467bd",
    "child": "#e377c2",
    "healthy": "#bcbd22",
}


def status_of(p, show_newly_infected=False):
    """Display category: dead > infected > recovered/immune > vaccinated > age band."""
    if p.dead:
        return "dead"
    if p.infected:
        if show_newly_infected and p.newly_infected:
            return "newly_infected"
        return "infected"
    if p.recovered or p.immune:
        return "immune"
    if p.vaccinated:
        return "vaccinated"
    if p.age >= 65:
        return "elder"
    if p.age <= 12:
        return "child"
    return "healthy"


def icon_for(p, show_newly_infected=False):
    return ICONS[status_of(p, show_newly_infected)]


def visible_subset(population, max_size=1000):
    """
    Prefix of at most `max_size` individuals, plus a notice when the rest is hidden.
    """
    n = len(population)
    if n <= max_size:
        return list(population), None
    shown = list(population[:max_size])
    notice = f"Only showing {max_size} ({max_size * 100 / n:.2f}%) of {n} patients..."
    return shown, notice
