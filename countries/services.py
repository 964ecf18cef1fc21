import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from django.core.cache import cache

from . import utils
from .clients import ExternalDataClient
from .conf import RefreshConfig
from .exceptions import RecordInvalid, SourceUnavailable
from .gdp import GdpEstimator
from .rendering import SummaryRenderer
from .store import ArtifactStore, CountryStore
from .validators import RecordValidator

logger = logging.getLogger(__name__)

ERROR_UNAVAILABLE = "External data source unavailable"
ERROR_VALIDATION = "Validation failed"
ERROR_INTERNAL = "Internal server error"
ERROR_IN_PROGRESS = "Refresh already in progress"

LOCK_KEY = "countries:refresh:lock"


@dataclass
class RefreshResult:
    """
    Outcome of one refresh.

    ``persisted`` and ``artifact`` are reported separately: a refresh whose
    image failed after the commit has ``persisted=True`` even though it
    carries an error.
    """
    success: bool = False
    last_refreshed_at: Optional[datetime] = None
    error: Optional[str] = None
    details: Any = None
    persisted: bool = False
    artifact: Optional[str] = None
    total: int = 0

    def to_dict(self):
        if self.success:
            return {"success": True, "last_refreshed_at": self.last_refreshed_at.isoformat()}
        data = {"error": self.error}
        if self.details is not None:
            data["details"] = self.details
        if self.persisted:
            data["persisted"] = True
            data["last_refreshed_at"] = self.last_refreshed_at.isoformat()
        return data


class RefreshLock:
    """Single-flight guard shared through the Django cache."""

    def __init__(self, key=LOCK_KEY, timeout=600):
        self.key = key
        self.timeout = timeout
        self.token = None

    def acquire(self):
        token = uuid.uuid4().hex
        if cache.add(self.key, token, self.timeout):
            self.token = token
            return True
        return False

    def release(self):
        if self.token is not None and cache.get(self.key) == self.token:
            cache.delete(self.key)
        self.token = None


class _Abort(Exception):
    """Unwinds the atomic block so the whole batch rolls back."""

    def __init__(self, result):
        self.result = result


class CountryRefreshService:
    """
    Fetches both sources, validates and reconciles every country inside one
    transaction, then renders the summary image.

    Any failure comes back as a RefreshResult; nothing is raised.
    """

    def __init__(self, config=None, client=None, validator=None, estimator=None,
                 store=None, renderer=None, clock=None, lock=None):
        self.config = config or RefreshConfig.from_settings()
        self.client = client or ExternalDataClient(self.config)
        self.validator = validator or RecordValidator()
        self.estimator = estimator or GdpEstimator()
        self.store = store or CountryStore()
        self.renderer = renderer or SummaryRenderer(
            self.store, ArtifactStore(self.config.cache_dir), font_path=self.config.font_path
        )
        self.clock = clock or utils.get_now
        self.lock = lock or RefreshLock(timeout=self.config.lock_timeout)

    def refresh(self) -> RefreshResult:
        if not self.lock.acquire():
            logger.warning("Refresh rejected: another refresh holds the lock")
            return RefreshResult(error=ERROR_IN_PROGRESS)
        try:
            return self._refresh()
        finally:
            self.lock.release()

    def _refresh(self):
        logger.info("Starting country refresh")

        # Step 1: fetch both sources, countries first
        try:
            countries_data = self.client.fetch_countries()
            rates = self.client.fetch_exchange_rates()
        except SourceUnavailable as e:
            logger.warning("Refresh aborted: %s", e)
            return RefreshResult(error=ERROR_UNAVAILABLE, details=e.details)
        except Exception as e:
            logger.exception("Unexpected error while fetching upstream data")
            return RefreshResult(error=ERROR_INTERNAL, details=str(e))

        now = self.clock()

        # Step 2: one unit of work for the whole batch
        try:
            with self.store.atomic():
                total = self._reconcile(countries_data, rates, now)
        except _Abort as abort:
            return abort.result
        except Exception as e:
            logger.exception("Refresh rolled back")
            return RefreshResult(error=ERROR_INTERNAL, details=str(e))

        logger.info("Committed %d countries at %s", total, now.isoformat())

        # Step 3: image after commit; a failure here leaves the data in place
        try:
            artifact = self.renderer.render(now)
        except Exception as e:
            logger.exception("Summary image generation failed after commit")
            return RefreshResult(
                error=ERROR_INTERNAL, details=str(e), persisted=True,
                last_refreshed_at=now, total=total,
            )

        return RefreshResult(
            success=True, last_refreshed_at=now, persisted=True,
            artifact=artifact.path, total=total,
        )

    def _reconcile(self, countries_data, rates, now):
        total = 0
        for chunk in utils.chunked(countries_data, self.config.chunk_size):
            for raw in chunk:
                try:
                    record = self.validator.validate(raw)
                except RecordInvalid as e:
                    logger.warning("Validation failed for record %d: %s", total + 1, e)
                    raise _Abort(RefreshResult(error=ERROR_VALIDATION, details=e.errors))

                exchange_rate, estimated_gdp = self.estimator.estimate(
                    record.population, record.currency_code, rates
                )
                self._upsert(record, exchange_rate, estimated_gdp, now)
                total += 1
        return total

    def _upsert(self, record, exchange_rate, estimated_gdp, now):
        fields = {
            "capital": record.capital,
            "region": record.region,
            "population": record.population,
            "currency_code": record.currency_code,
            "exchange_rate": exchange_rate,
            "estimated_gdp": estimated_gdp,
            "flag_url": record.flag,
            "last_refreshed_at": now,
        }
        existing = self.store.find_by_name(record.name)
        if existing is not None:
            return self.store.update(existing, **fields)
        return self.store.create(record.name, **fields)

    def render_summary(self):
        """Re-render the image from what is already stored."""
        as_of = self.store.max_last_refreshed_at()
        if as_of is None:
            return None
        return self.renderer.render(as_of)
