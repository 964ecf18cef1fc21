"""Tests for GdpEstimator."""
import random
from decimal import Decimal
from unittest.mock import Mock

import pytest

from countries.gdp import GdpEstimator

from .conftest import FixedRandom


def test_no_currency_gives_zero_gdp(eur_rates):
    rate, gdp = GdpEstimator().estimate(5000, None, eur_rates)
    assert rate is None
    assert gdp == 0


def test_unknown_currency_gives_unknown_gdp(eur_rates):
    rate, gdp = GdpEstimator().estimate(5000, "XYZ", eur_rates)
    assert rate is None
    assert gdp is None


def test_known_currency_uses_multiplier(eur_rates):
    rate, gdp = GdpEstimator(rng=FixedRandom(1500)).estimate(100, "EUR", eur_rates)
    assert rate == Decimal("0.9")
    assert gdp == Decimal("166666.67")


def test_multiplier_range_is_requested_per_record(eur_rates):
    rng = Mock()
    rng.randint.return_value = 1000
    estimator = GdpEstimator(rng=rng)

    estimator.estimate(10, "USD", eur_rates)
    estimator.estimate(20, "USD", eur_rates)

    assert rng.randint.call_count == 2
    rng.randint.assert_called_with(1000, 2000)


@pytest.mark.parametrize("population,code", [(100, "EUR"), (12345678, "NGN"), (0, "USD")])
def test_estimate_stays_within_multiplier_bounds(eur_rates, population, code):
    estimator = GdpEstimator(rng=random.Random(7))
    rate = eur_rates[code]
    lower = Decimal(population) * 1000 / rate
    upper = Decimal(population) * 2000 / rate
    cent = Decimal("0.01")

    for _ in range(50):
        _, gdp = estimator.estimate(population, code, eur_rates)
        assert lower - cent <= gdp <= upper + cent


def test_unseeded_estimates_vary_between_runs(eur_rates):
    estimator = GdpEstimator(rng=random.Random(1))
    values = {estimator.estimate(1000000, "USD", eur_rates)[1] for _ in range(20)}
    assert len(values) > 1
