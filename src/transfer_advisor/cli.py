"""Command-line interface for transfer recommendations."""

import asyncio
import json
import logging
import sys
from dataclasses import asdict, dataclass
from typing import Any

import aiohttp

from transfer_advisor.adapters.cache import TtlCache
from transfer_advisor.adapters.config import AppConfig, RouteTemplateLoader
from transfer_advisor.adapters.czynaczas_api import (
    CzynaczasDepartureRepository,
    CzynaczasHttpClient,
    CzynaczasTripRepository,
)
from transfer_advisor.adapters.formatters import TransferOptionFormatter
from transfer_advisor.application.services import RecommendationEngine, TripDetailService
from transfer_advisor.domain.errors import RouteTemplateError
from transfer_advisor.domain.models import Recommendation, RouteTemplate, TripDetail

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired application services sharing one HTTP session and cache set."""

    departure_repository: CzynaczasDepartureRepository
    engine: RecommendationEngine
    trip_service: TripDetailService


def build_services(config: AppConfig, session: aiohttp.ClientSession) -> Services:
    """Wire repositories, caches and services from configuration."""
    http_client = CzynaczasHttpClient(
        session,
        base_url=config.api_base_url,
        timeout_seconds=config.request_timeout_seconds,
        max_attempts=config.max_attempts,
        backoff_seconds=config.retry_backoff_seconds,
    )
    departure_repository = CzynaczasDepartureRepository(
        http_client,
        TtlCache(config.departure_cache_ttl_seconds),
        fetch_size=config.departure_fetch_size,
    )
    trip_repository = CzynaczasTripRepository(http_client, TtlCache(config.trip_cache_ttl_seconds))

    return Services(
        departure_repository=departure_repository,
        engine=RecommendationEngine(
            departure_repository,
            scoring_policy=config.scoring_policy(),
            engine_policy=config.engine_policy(),
        ),
        trip_service=TripDetailService(
            trip_repository,
            departure_repository,
            workers=config.trip_enrichment_workers,
        ),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_template(path: str | None, config: AppConfig) -> RouteTemplate:
    template_path = path or config.template_file
    if not template_path:
        raise RouteTemplateError("No route template given (argument or TEMPLATE_FILE)")
    return RouteTemplateLoader.load(template_path)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def print_recommendation(recommendation: Recommendation) -> None:
    formatter = TransferOptionFormatter()
    live_status = recommendation.meta.live_status
    print(f"\nTemplate: {recommendation.meta.template_id}")
    print(f"Train data: {live_status.train_source}, bus data: {live_status.bus_source}")
    print("=" * 70)

    if not recommendation.options:
        print("No connections found.")
        return

    for option in recommendation.options:
        print(formatter.format_option(option))
        for warning in option.warnings:
            print(f"    ! {warning}")


def print_trip(trip: TripDetail) -> None:
    formatter = TransferOptionFormatter()
    print(f"\nTrip {trip.trip_id} ({len(trip.stops)} stops, {len(trip.shape)} path points)")
    for stop in trip.stops:
        clock = "--:--"
        if stop.scheduled_sec is not None:
            clock = formatter.format_clock(stop.scheduled_sec)
        delay = formatter.format_delay(stop.delay_sec)
        print(f"  {stop.sequence:>3} {clock} {stop.name} ({stop.stop_id}) {delay}".rstrip())


async def _handle_recommend_command(
    config: AppConfig, template_path: str | None, limit: int, as_json: bool
) -> None:
    template = _load_template(template_path, config)
    async with aiohttp.ClientSession() as session:
        services = build_services(config, session)
        recommendation = await services.engine.get_recommendations(template, limit=limit)

    if as_json:
        _print_json(recommendation.to_dict())
    else:
        print_recommendation(recommendation)


async def _handle_departures_command(
    config: AppConfig, stop_id: str, limit: int, as_json: bool
) -> None:
    async with aiohttp.ClientSession() as session:
        services = build_services(config, session)
        departures = await services.departure_repository.get_departures(stop_id, limit=limit)

    if as_json:
        _print_json(
            {
                "stop_id": stop_id,
                "count": len(departures),
                "departures": [asdict(d) for d in departures],
            }
        )
        return

    if not departures:
        print(f"No departures found for stop '{stop_id}'", file=sys.stderr)
        return

    formatter = TransferOptionFormatter()
    print(f"\nStop {stop_id}: {len(departures)} departure(s)\n")
    for departure in departures:
        print(f"  [{departure.mode}] {formatter.format_departure(departure)}")


async def _handle_trip_command(config: AppConfig, trip_id: str, as_json: bool) -> None:
    async with aiohttp.ClientSession() as session:
        services = build_services(config, session)
        trip = await services.trip_service.get_trip_with_delays(trip_id)

    if trip is None:
        print(f"Trip '{trip_id}' not available", file=sys.stderr)
        sys.exit(1)

    if as_json:
        _print_json(asdict(trip))
    else:
        print_trip(trip)


def _handle_validate_command(config: AppConfig, template_path: str | None) -> None:
    template = _load_template(template_path, config)
    errors = template.validation_errors()
    if not errors:
        print(f"Template '{template.template_id}' is valid.")
        return

    print(f"Template '{template.template_id}' has {len(errors)} problem(s):", file=sys.stderr)
    for error in errors:
        print(f"  - {error}", file=sys.stderr)
    sys.exit(1)


def _setup_argparse() -> Any:
    """Set up and configure argument parser."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Train -> bus transfer recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Recommend connections for a route template
  transfer-advisor recommend home-office.toml --limit 3

  # Show normalized departures for a stop
  transfer-advisor departures wkd_wrako

  # Show a trip with live delay per stop
  transfer-advisor trip 12345

  # Check a route template
  transfer-advisor validate home-office.toml
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    recommend_parser = subparsers.add_parser("recommend", help="Recommend transfer options")
    recommend_parser.add_argument(
        "template", nargs="?", help="Route template TOML file (default: TEMPLATE_FILE)"
    )
    recommend_parser.add_argument("--limit", type=int, default=5, help="Train rides to show")
    recommend_parser.add_argument("--json", action="store_true", help="Output as JSON")

    departures_parser = subparsers.add_parser("departures", help="Show departures for a stop")
    departures_parser.add_argument("stop_id", help="Stop ID (e.g., wkd_wrako)")
    departures_parser.add_argument("--limit", type=int, default=10, help="Departures to show")
    departures_parser.add_argument("--json", action="store_true", help="Output as JSON")

    trip_parser = subparsers.add_parser("trip", help="Show a trip with live delays")
    trip_parser.add_argument("trip_id", help="Trip ID")
    trip_parser.add_argument("--json", action="store_true", help="Output as JSON")

    validate_parser = subparsers.add_parser("validate", help="Validate a route template")
    validate_parser.add_argument(
        "template", nargs="?", help="Route template TOML file (default: TEMPLATE_FILE)"
    )

    return parser


async def _execute_command(args: Any, config: AppConfig) -> None:
    """Execute the appropriate command based on args."""
    if args.command == "recommend":
        await _handle_recommend_command(config, args.template, args.limit, args.json)
    elif args.command == "departures":
        await _handle_departures_command(config, args.stop_id, args.limit, args.json)
    elif args.command == "trip":
        await _handle_trip_command(config, args.trip_id, args.json)
    elif args.command == "validate":
        _handle_validate_command(config, args.template)


async def main() -> None:
    """Main CLI entry point."""
    parser = _setup_argparse()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = AppConfig()
    configure_logging(config.log_level)

    try:
        await _execute_command(args, config)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(1)
    except (RouteTemplateError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
