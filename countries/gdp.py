import random
from decimal import Decimal, ROUND_HALF_UP

MULTIPLIER_MIN = 1000
MULTIPLIER_MAX = 2000

GDP_QUANTUM = Decimal("0.01")


class GdpEstimator:
    """
    Estimates GDP as ``population * multiplier / exchange_rate``.

    The multiplier is a fresh random integer in [1000, 2000] for every
    record, so two refreshes of the same data give different estimates.
    Pass a seeded ``random.Random`` (or anything with ``randint``) as
    ``rng`` to make the estimate reproducible.
    """

    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def make_multiplier(self):
        return self.rng.randint(MULTIPLIER_MIN, MULTIPLIER_MAX)

    def estimate(self, population, currency_code, rates):
        """Return ``(exchange_rate, estimated_gdp)`` for one record."""
        if currency_code is None:
            return None, Decimal(0)

        exchange_rate = rates.get(currency_code)
        if exchange_rate is None:
            return None, None

        exchange_rate = Decimal(exchange_rate)
        gdp = Decimal(population) * self.make_multiplier() / exchange_rate
        return exchange_rate, gdp.quantize(GDP_QUANTUM, rounding=ROUND_HALF_UP)
