"""Formatter for transfer options and departures."""

import math

from transfer_advisor.domain.models.departure import Departure
from transfer_advisor.domain.models.transfer_option import RiskLevel, TransferOption

RISK_LABELS: dict[RiskLevel, str] = {
    "LOW": "low risk",
    "MED": "medium risk",
    "HIGH": "high risk",
}


class TransferOptionFormatter:
    """Formats times-of-day, delays, buffers and whole options for display."""

    @staticmethod
    def format_clock(seconds: int) -> str:
        """Format seconds since midnight as HH:MM, wrapping past 24h."""
        hours = (seconds // 3600) % 24
        minutes = (seconds % 3600) // 60
        return f"{hours:02d}:{minutes:02d}"

    @staticmethod
    def format_delay(delay_sec: int | None) -> str:
        """Format a delay as '+N min', '-N min' or 'on time'; empty when unknown.

        Half minutes round up, so 90s late is "+2 min" and 90s early is "-1 min".
        """
        if delay_sec is None:
            return ""
        minutes = math.floor(delay_sec / 60 + 0.5)
        if minutes == 0:
            return "on time"
        return f"+{minutes} min" if minutes > 0 else f"{minutes} min"

    @staticmethod
    def format_buffer(buffer_sec: int) -> str:
        """Format a buffer in whole minutes, rounded down."""
        return f"{buffer_sec // 60} min"

    @staticmethod
    def format_risk(risk: RiskLevel) -> str:
        return RISK_LABELS[risk]

    def format_departure(self, departure: Departure) -> str:
        """One-line description of a departure."""
        clock = self.format_clock(departure.effective_sec)
        delay = self.format_delay(departure.delay_sec)
        live = f" ({delay})" if delay else " (scheduled)"
        return f"{clock}{live} {departure.route_id} -> {departure.headsign}"

    def format_option(self, option: TransferOption) -> str:
        """One-line summary of a transfer option."""
        variant = f" stop {option.bus_stop_variant}" if option.bus_stop_variant else ""
        return (
            f"{self.format_departure(option.train)} | "
            f"ready {self.format_clock(option.ready_sec)} | "
            f"bus {self.format_departure(option.bus)}{variant} | "
            f"buffer {self.format_buffer(option.buffer_sec)}, "
            f"{self.format_risk(option.risk)}, score {option.score}"
        )
