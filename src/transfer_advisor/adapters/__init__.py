"""Adapters layer - external system integrations."""

from transfer_advisor.adapters.cache import TtlCache
from transfer_advisor.adapters.config import AppConfig, RouteTemplateLoader
from transfer_advisor.adapters.czynaczas_api import (
    CzynaczasDepartureRepository,
    CzynaczasHttpClient,
    CzynaczasTripRepository,
)

__all__ = [
    "AppConfig",
    "CzynaczasDepartureRepository",
    "CzynaczasHttpClient",
    "CzynaczasTripRepository",
    "RouteTemplateLoader",
    "TtlCache",
]
