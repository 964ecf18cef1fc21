from dataclasses import dataclass
from typing import Optional

from .exceptions import RecordInvalid
from .serializers import RawCountrySerializer

# Field checks run in this order; only the first failure is reported.
FIELD_ORDER = ("non_field_errors", "name", "population")


@dataclass(frozen=True)
class NormalizedRecord:
    name: str
    population: int
    capital: Optional[str] = None
    region: Optional[str] = None
    currency_code: Optional[str] = None
    flag: Optional[str] = None


def _optional_str(value):
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _first_currency_code(currencies):
    """
    Return the first currency code, None when there are no currencies.

    Raises RecordInvalid when currencies are listed but the first code
    cannot be read as a string.
    """
    if not currencies:
        return None
    if isinstance(currencies, (list, tuple)):
        first = currencies[0]
        if isinstance(first, dict):
            code = first.get("code")
            if isinstance(code, str):
                return code
    raise RecordInvalid({"currency_code": "is required"})


class RecordValidator:
    """Checks one raw country record and turns it into a NormalizedRecord."""

    def validate(self, raw):
        serializer = RawCountrySerializer(data=raw)
        if not serializer.is_valid():
            raise RecordInvalid(first_error(serializer.errors))

        data = serializer.validated_data
        return NormalizedRecord(
            name=data["name"],
            population=data["population"],
            capital=_optional_str(raw.get("capital")),
            region=_optional_str(raw.get("region")),
            currency_code=_first_currency_code(raw.get("currencies")),
            flag=_optional_str(raw.get("flag")),
        )


def first_error(errors):
    """Reduce DRF's ``{field: [messages]}`` to the first failing field."""
    ordered = [f for f in FIELD_ORDER if f in errors]
    ordered += [f for f in errors if f not in FIELD_ORDER]
    field = ordered[0]
    messages = errors[field]
    message = messages[0] if isinstance(messages, (list, tuple)) and messages else messages
    return {field: str(message)}
