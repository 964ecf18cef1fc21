from rest_framework import serializers
from .models import Country


class CountrySerializer(serializers.ModelSerializer):
    class Meta:
        model = Country
        fields = [
            'id', 'name', 'capital', 'region', 'population',
            'currency_code', 'exchange_rate', 'estimated_gdp',
            'flag_url', 'last_refreshed_at'
        ]
        read_only_fields = fields


class StrictCharField(serializers.CharField):
    """CharField that refuses numbers instead of coercing them to text."""

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('invalid')
        return super().to_internal_value(data)


class RawCountrySerializer(serializers.Serializer):
    """
    Field rules for one record of the countries source.

    Only the fields the refresh cannot do without are checked here; the
    optional ones (capital, region, flag, currencies) are read leniently by
    RecordValidator.
    """
    name = StrictCharField(
        max_length=255,
        error_messages={
            'required': 'is required',
            'null': 'is required',
            'blank': 'is required',
            'invalid': 'must be a string',
            'max_length': 'must be at most {max_length} characters',
        },
    )
    population = serializers.IntegerField(
        min_value=0,
        error_messages={
            'required': 'is required',
            'null': 'is required',
            'invalid': 'must be an integer',
            'min_value': 'must be at least {min_value}',
            'max_string_length': 'must be an integer',
        },
    )
