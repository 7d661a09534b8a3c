import pytest

from handshake.display import ICONS, icon_for, status_of, visible_subset
from handshake.population import Individual, create_population


def person(**kw):
    base = dict(id=0, x=0.0, y=0.0, age=30)
    base.update(kw)
    return Individual(**base)


@pytest.mark.parametrize("kw,expected", [
    (dict(dead=True, infected=False, vaccinated=True), "dead"),
    (dict(infected=True, immune=True, vaccinated=True), "infected"),
    (dict(recovered=True, vaccinated=True), "immune"),
    (dict(immune=True, vaccinated=True), "immune"),
    (dict(vaccinated=True, age=80), "vaccinated"),
    (dict(age=65), "elder"),
    (dict(age=12), "child"),
    (dict(age=40), "healthy"),
])
def test_status_precedence(kw, expected):
    assert status_of(person(**kw)) == expected


def test_newly_infected_styling_is_optional():
    p = person(infected=True, newly_infected=True)
    assert status_of(p) == "infected"
    assert status_of(p, show_newly_infected=True) == "newly_infected"
    assert icon_for(p, show_newly_infected=True) == ICONS["newly_infected"]


def test_small_population_fully_visible(rng):
    pop = create_population(100, rng=rng)
    shown, notice = visible_subset(pop, max_size=1000)
    assert shown == pop and notice is None


def test_large_population_subset(rng):
    pop = create_population(2000, rng=rng)
    shown, notice = visible_subset(pop, max_size=1000)
    assert [p.id for p in shown] == list(range(1000))
    assert notice == "Only showing 1000 (50.00%) of 2000 patients..."
