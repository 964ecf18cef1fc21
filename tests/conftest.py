"""Shared fixtures for the country refresh tests."""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from django.core.cache import cache

from countries.conf import RefreshConfig
from countries.gdp import GdpEstimator
from countries.services import CountryRefreshService

SNAPSHOT = datetime(2025, 10, 27, 12, 0, 0, tzinfo=timezone.utc)

ITALY = {
    "name": "Italy",
    "capital": "Rome",
    "region": "Europe",
    "population": 100,
    "currencies": [{"code": "EUR", "name": "Euro", "symbol": "€"}],
    "flag": "https://flagcdn.com/it.svg",
}


class FakeClient:
    """Stands in for ExternalDataClient; raises whatever it is handed."""

    def __init__(self, countries=None, rates=None):
        self.countries = countries if countries is not None else []
        self.rates = rates if rates is not None else {}
        self.calls = []

    def fetch_countries(self):
        self.calls.append("countries")
        if isinstance(self.countries, Exception):
            raise self.countries
        return self.countries

    def fetch_exchange_rates(self):
        self.calls.append("rates")
        if isinstance(self.rates, Exception):
            raise self.rates
        return self.rates


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def randint(self, a, b):
        return self.value


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def cache_dir(tmp_path, settings):
    path = tmp_path / "cache"
    settings.SUMMARY_CACHE_DIR = str(path)
    return path


@pytest.fixture
def config(cache_dir):
    return RefreshConfig(cache_dir=str(cache_dir), chunk_size=2)


@pytest.fixture
def make_service(config):
    def _make(countries=None, rates=None, multiplier=1500, **kwargs):
        kwargs.setdefault("client", FakeClient(countries, rates))
        kwargs.setdefault("estimator", GdpEstimator(rng=FixedRandom(multiplier)))
        kwargs.setdefault("clock", lambda: SNAPSHOT)
        return CountryRefreshService(config=config, **kwargs)
    return _make


@pytest.fixture
def eur_rates():
    return {"EUR": Decimal("0.9"), "USD": Decimal("1"), "NGN": Decimal("1500.25")}
