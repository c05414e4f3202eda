"""Configuration adapters."""

from transfer_advisor.adapters.config.app_config import AppConfig
from transfer_advisor.adapters.config.route_template_loader import RouteTemplateLoader

__all__ = ["AppConfig", "RouteTemplateLoader"]
