import os
import tempfile

from django.db import transaction
from django.db.models import F, Max

from .models import Country, normalize_name

UPSERT_FIELDS = [
    "capital", "region", "population", "currency_code",
    "exchange_rate", "estimated_gdp", "flag_url", "last_refreshed_at",
]


class CountryStore:
    """Persistence operations the refresh pipeline and the read API rely on."""

    def atomic(self):
        return transaction.atomic()

    def find_by_name(self, name):
        return Country.objects.filter(name_key=normalize_name(name)).first()

    def create(self, name, **fields):
        return Country.objects.create(name=name, **fields)

    def update(self, country, **fields):
        update_fields = set(fields) | {"updated_at"}
        for field, value in fields.items():
            setattr(country, field, value)
        country.save(update_fields=update_fields)
        return country

    def count(self):
        return Country.objects.count()

    def max_last_refreshed_at(self):
        return Country.objects.aggregate(last=Max("last_refreshed_at"))["last"]

    def delete_by_name(self, name):
        deleted, _ = Country.objects.filter(name_key=normalize_name(name)).delete()
        return deleted > 0

    def top_by_gdp(self, limit=5):
        # Unknown GDP sorts after every known value.
        return list(
            Country.objects.order_by(
                F("estimated_gdp").desc(nulls_last=True), "name"
            )[:limit]
        )


class ArtifactStore:
    """Named files inside one cache directory."""

    def __init__(self, directory):
        self.directory = os.path.abspath(directory)

    def path(self, name):
        return os.path.join(self.directory, name)

    def ensure_directory(self):
        os.makedirs(self.directory, exist_ok=True)
        if not os.access(self.directory, os.W_OK):
            raise PermissionError(f"Cannot write to directory: {self.directory}")
        return self.directory

    def exists(self, name):
        return os.path.isfile(self.path(name))

    def write_bytes(self, name, data):
        """Replace ``name`` with ``data`` without exposing a half-written file."""
        self.ensure_directory()
        target = self.path(name)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=os.path.splitext(name)[1])
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            # mkstemp creates 0600; the image is served by other readers too
            os.chmod(tmp, 0o644)
            os.replace(tmp, target)
        except Exception:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        return target
