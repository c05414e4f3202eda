"""czynaczas.pl API adapters for Warsaw WKD trains and ZTM buses."""

from transfer_advisor.adapters.czynaczas_api.czynaczas_departure_repository import (
    CzynaczasDepartureRepository,
)
from transfer_advisor.adapters.czynaczas_api.czynaczas_trip_repository import (
    CzynaczasTripRepository,
)
from transfer_advisor.adapters.czynaczas_api.http_client import CzynaczasHttpClient

__all__ = [
    "CzynaczasDepartureRepository",
    "CzynaczasHttpClient",
    "CzynaczasTripRepository",
]
