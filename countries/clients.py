import logging
from decimal import Decimal, InvalidOperation

import requests
from requests.exceptions import RequestException

from .conf import RefreshConfig
from .exceptions import SourceUnavailable

logger = logging.getLogger(__name__)

COUNTRIES_SOURCE = "Countries API"
EXCHANGE_SOURCE = "Exchange Rates API"


class ExternalDataClient:
    """
    Read-only client for the two upstream sources.

    Timeouts, connection errors, non-2xx answers and malformed payloads all
    surface as SourceUnavailable; callers never see a requests exception.
    """

    def __init__(self, config: RefreshConfig, session=None):
        self.config = config
        # the requests module itself works as a sessionless default
        self.session = session or requests

    def _get_json(self, url, source):
        try:
            resp = self.session.get(url, timeout=self.config.timeout)
            resp.raise_for_status()
            return resp.json()
        except RequestException as e:
            raise SourceUnavailable(source, str(e)) from e
        except ValueError as e:
            raise SourceUnavailable(source, "response is not valid JSON") from e

    def fetch_countries(self):
        data = self._get_json(self.config.countries_url, COUNTRIES_SOURCE)
        if not isinstance(data, list):
            raise SourceUnavailable(COUNTRIES_SOURCE, "expected a list of countries")
        logger.info("Fetched %d country records", len(data))
        return data

    def fetch_exchange_rates(self):
        data = self._get_json(self.config.exchange_url, EXCHANGE_SOURCE)
        if not isinstance(data, dict):
            raise SourceUnavailable(EXCHANGE_SOURCE, "expected a JSON object")
        raw_rates = data.get("rates") or {}
        if not isinstance(raw_rates, dict):
            raise SourceUnavailable(EXCHANGE_SOURCE, "'rates' is not an object")

        rates = {}
        for code, value in raw_rates.items():
            rate = parse_rate(value)
            if rate is None:
                logger.warning("Dropping unusable exchange rate %s=%r", code, value)
                continue
            rates[code] = rate
        logger.info("Fetched %d exchange rates", len(rates))
        return rates


def parse_rate(value):
    """Return ``value`` as a positive Decimal, or None if it is not one."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        return None
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate
