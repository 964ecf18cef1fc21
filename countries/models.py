from django.db import models


def normalize_name(name):
    """Canonical form of a country name used as the natural key."""
    return name.strip().casefold()


class Country(models.Model):
    # id — auto-generated
    name = models.CharField(max_length=255)
    # name_key — lowercase natural key; uniqueness is enforced here, not on name
    name_key = models.CharField(max_length=255, unique=True, editable=False)
    capital = models.CharField(max_length=255, null=True, blank=True)
    region = models.CharField(max_length=100, null=True, blank=True)
    population = models.PositiveBigIntegerField(default=0)
    # currency_code — null when the source lists no currency
    currency_code = models.CharField(max_length=10, null=True, blank=True)
    # exchange_rate — null when the currency is missing from the rate table
    exchange_rate = models.DecimalField(max_digits=20, decimal_places=6, null=True, blank=True)
    # estimated_gdp — 0 without a currency, null when the rate is unknown
    estimated_gdp = models.DecimalField(
        max_digits=30, decimal_places=2, null=True, blank=True, db_index=True
    )
    flag_url = models.URLField(max_length=500, null=True, blank=True)
    # last_refreshed_at — batch snapshot time of the refresh that last touched the row
    last_refreshed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "countries"
        ordering = ["id"]

    def save(self, *args, **kwargs):
        self.name_key = normalize_name(self.name)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "name" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"name_key"}
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name
