import numpy as np
import pytest

from handshake.population import create_population, grid_position, population_frame, pre_vaccinate


@pytest.mark.parametrize("n", [0, 1, 2, 10, 16, 99, 400])
def test_sizes_and_sequential_ids(n, rng):
    pop = create_population(n, rng=rng)
    assert len(pop) == n
    assert [p.id for p in pop] == list(range(n))


@pytest.mark.parametrize("n", [1, 7, 100])
def test_exactly_one_patient_zero(n, rng):
    pop = create_population(n, rng=rng)
    assert sum(p.infected for p in pop) == 1


def test_empty_population_skips_patient_zero(rng):
    assert create_population(0, rng=rng) == []


def test_initially_infected_groups(rng):
    assert all(p.infected for p in create_population(9, initially_infected=True, rng=rng))
    assert not any(p.infected for p in create_population(9, initially_infected=False, rng=rng))


@pytest.mark.parametrize("n", [16, 10, 3])
def test_coordinates_in_range(n, rng):
    for p in create_population(n, rng=rng):
        assert 0 <= p.x < 100
        assert 0 <= p.y < 100


def test_square_grid_layout():
    assert grid_position(0, 16) == (0.0, 0.0)
    assert grid_position(5, 16) == (25.0, 25.0)
    assert grid_position(15, 16) == (75.0, 75.0)


def test_ages_and_fresh_state(rng):
    pop = create_population(200, rng=rng)
    ages = np.array([p.age for p in pop])
    assert ages.min() >= 0 and ages.max() <= 99
    for p in pop:
        assert not p.dead and not p.recovered and not p.vaccinated
        assert p.days_infected == 0


def test_seeded_creation_is_reproducible():
    a = create_population(50, rng=np.random.default_rng(7))
    b = create_population(50, rng=np.random.default_rng(7))
    assert a == b


def test_population_frame(rng):
    df = population_frame(create_population(9, rng=rng))
    assert len(df) == 9
    assert df["infected"].sum() == 1
    assert population_frame([]).empty


def test_pre_vaccinate_prefix(rng):
    pop = create_population(20, initially_infected=False, rng=rng)
    out = pre_vaccinate(pop, 25)
    assert [p.id for p in out if p.vaccinated] == [0, 1, 2, 3, 4]
    assert not any(p.immune for p in out)
    assert not any(p.vaccinated for p in pop)


def test_pre_vaccinate_rounds_half_up_and_skips_infected(rng):
    pop = create_population(10, initially_infected=True, rng=rng)
    assert not any(p.vaccinated for p in pre_vaccinate(pop, 100))
    pop = create_population(2, initially_infected=False, rng=rng)
    assert sum(p.vaccinated for p in pre_vaccinate(pop, 25)) == 1
    assert sum(p.vaccinated for p in pre_vaccinate(pop, 0)) == 0
