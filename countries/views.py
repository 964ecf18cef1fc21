import logging

from django.db.models import F
from django.http import FileResponse
from rest_framework import status
from rest_framework.decorators import api_view, throttle_classes
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle

from .conf import RefreshConfig
from .models import Country
from .rendering import SUMMARY_IMAGE_NAME
from .serializers import CountrySerializer
from .services import (
    CountryRefreshService,
    ERROR_IN_PROGRESS,
    ERROR_UNAVAILABLE,
    ERROR_VALIDATION,
)
from .store import ArtifactStore, CountryStore

logger = logging.getLogger(__name__)

ALLOWED_FILTERS = {
    "region": "region__iexact",
    "currency": "currency_code__iexact",
    "currency_code": "currency_code__iexact",
}

SORT_FIELDS = {
    "gdp": "estimated_gdp",
    "name": "name",
    "population": "population",
}

ERROR_STATUS = {
    ERROR_VALIDATION: status.HTTP_400_BAD_REQUEST,
    ERROR_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ERROR_IN_PROGRESS: status.HTTP_409_CONFLICT,
}


class RefreshRateThrottle(UserRateThrottle):
    scope = "refresh"


def get_refresh_service():
    return CountryRefreshService()


@api_view(['POST'])
@throttle_classes([RefreshRateThrottle])
def refresh_countries(request):
    """
    POST /countries/refresh
    Fetch countries and exchange rates, then update or create cached data.
    """
    result = get_refresh_service().refresh()

    if result.error:
        logger.error("Country refresh failed: %s (%s)", result.error, result.details)
        code = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(result.to_dict(), status=code)

    return Response(
        {
            "message": "Countries refreshed successfully",
            "last_refreshed_at": result.last_refreshed_at.isoformat(),
            "total_countries": result.total,
        },
        status=status.HTTP_200_OK,
    )


def _order_by(sort_param):
    """Translate ``<field>_asc`` / ``<field>_desc`` into an ORM ordering."""
    field, _, direction = sort_param.rpartition("_")
    if field not in SORT_FIELDS or direction not in ("asc", "desc"):
        return None
    expr = F(SORT_FIELDS[field])
    # Countries without an estimate always come last
    if direction == "desc":
        return [expr.desc(nulls_last=True), "id"]
    return [expr.asc(nulls_last=True), "id"]


@api_view(['GET'])
def list_countries(request):
    """
    GET /countries
    Filters:
      - region, currency (case-insensitive exact match)
    Sorting:
      - ?sort=gdp_desc | gdp_asc | name_asc | name_desc | population_asc | population_desc
    Default:
      - Ordered by id ascending.
    """
    qs = Country.objects.all()

    for key, value in request.query_params.items():
        if key == "sort":
            continue
        if key not in ALLOWED_FILTERS:
            return Response(
                {"error": "Validation failed", "details": {key: "is not a valid filter"}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not value:
            return Response(
                {"error": "Validation failed", "details": {key: "is required"}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        qs = qs.filter(**{ALLOWED_FILTERS[key]: value})

    sort_param = request.query_params.get("sort")
    if sort_param:
        ordering = _order_by(sort_param)
        if ordering is None:
            return Response(
                {"error": "Validation failed",
                 "details": {"sort": "invalid value (use gdp, name or population with _asc or _desc)"}},
                status=status.HTTP_400_BAD_REQUEST,
            )
        qs = qs.order_by(*ordering)
    else:
        qs = qs.order_by("id")

    if not qs.exists():
        return Response({"error": "Country not found"}, status=status.HTTP_404_NOT_FOUND)

    return Response(CountrySerializer(qs, many=True).data)


@api_view(['GET', 'DELETE'])
def country_detail(request, name):
    """
    GET /countries/:name  -> return 404 JSON if not found
    DELETE /countries/:name -> delete, return 204 or 404
    """
    store = CountryStore()

    if request.method == 'GET':
        country = store.find_by_name(name)
        if country is None:
            return Response({"error": "Country not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(CountrySerializer(country).data)

    if not store.delete_by_name(name):
        return Response({"error": "Country not found"}, status=status.HTTP_404_NOT_FOUND)
    logger.info("Deleted country %s", name)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def get_status(request):
    """
    GET /status -> { total_countries, last_refreshed_at }
    404 until the first refresh has stored something.
    """
    store = CountryStore()
    total = store.count()
    last = store.max_last_refreshed_at()
    if total == 0 or last is None:
        return Response(
            {"error": "No refresh has been performed yet"},
            status=status.HTTP_404_NOT_FOUND,
        )
    return Response({"total_countries": total, "last_refreshed_at": last.isoformat()})


@api_view(['GET'])
def get_summary_image(request):
    """
    GET /countries/image
    Serve summary.png from the cache directory, or a 404 JSON error.
    """
    artifacts = ArtifactStore(RefreshConfig.from_settings().cache_dir)
    if not artifacts.exists(SUMMARY_IMAGE_NAME):
        return Response({"error": "Summary image not found"}, status=status.HTTP_404_NOT_FOUND)
    return FileResponse(open(artifacts.path(SUMMARY_IMAGE_NAME), 'rb'), content_type='image/png')
