"""
Command-line interface for the domain intelligence engine.

This module provides the main CLI entry point with commands for:
- trust: Score a URL or hostname
- pricing: Collect registrar offers for a domain
- serve: Run the HTTP API
- config: Configuration management
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .audit_logger import AuditLogger
from .config import (
    SystemConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from .exceptions import ConfigError, ValidationError
from .models import PricingReport, TrustReport
from .pricing import PricingCollector
from .trust_analyzer import TrustAnalyzer


DEFAULT_CONFIG_PATH = Path.home() / ".domain_intel" / "config.json"


def resolve_config(config_path: Optional[str], offline: bool = False) -> SystemConfig:
    """
    Load the config file when given, then overlay environment variables.

    Raises:
        ConfigError: If the file or environment holds invalid values
    """
    base = load_config_from_file(Path(config_path)) if config_path else None
    config = load_config_from_env(base=base)
    if offline:
        config.offline = True
    return config


def _build_logger(config: SystemConfig, verbose: bool) -> Optional[AuditLogger]:
    if not verbose:
        return None
    return AuditLogger.from_config(config.logging)


async def run_trust(
    url: str,
    config: SystemConfig,
    logger: Optional[AuditLogger] = None,
) -> TrustReport:
    """Analyze one URL with a short-lived analyzer."""
    async with TrustAnalyzer(config, logger=logger) as analyzer:
        return await analyzer.analyze(url)


def print_trust_report(report: TrustReport) -> None:
    score = report.score
    print(f"Domain: {report.domain}")
    print(f"Trust score: {score.value}/100 ({score.band.name.replace('_', ' ').title()})")
    print(f"SSL: {report.ssl.message}")
    if report.signals.government_country:
        print(f"Government: {report.signals.government_country}")
    if report.signals.domain_age_years is not None:
        print(f"Domain age: {report.signals.domain_age_years:.1f} years")
    if report.registration.registrar:
        print(f"Registrar: {report.registration.registrar}")

    print("Breakdown:")
    for item in report.breakdown:
        print(f"  {item.points:+6.1f}  {item.reason}")

    for line in report.highlights.positive:
        print(f"  + {line}")
    for line in report.highlights.negative:
        print(f"  - {line}")


def print_pricing_report(report: PricingReport) -> None:
    print(f"Offers for {report.domain} (updated {report.updated_at}):")
    for offer in report.offers:
        price = offer.price or "n/a"
        promo = f" [{offer.offer}]" if offer.offer else ""
        print(f"  {offer.provider.value:<10} {price:>8}{promo}")
        print(f"             {offer.url}")


def cmd_trust(args: argparse.Namespace) -> int:
    """Handle the 'trust' command."""
    try:
        config = resolve_config(args.config, offline=args.offline)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    logger = _build_logger(config, args.verbose)
    try:
        report = asyncio.run(run_trust(args.url, config, logger))
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_trust_report(report)
    return 0


def cmd_pricing(args: argparse.Namespace) -> int:
    """Handle the 'pricing' command."""
    try:
        config = resolve_config(args.config)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    logger = _build_logger(config, args.verbose)
    collector = PricingCollector(config, logger=logger)
    try:
        report = asyncio.run(collector.fetch_offers(args.domain))
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_pricing_report(report)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command."""
    try:
        config = resolve_config(args.config)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    from .api import main as serve

    serve(host=args.host, port=args.port, config=config)
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        if not config_path.exists():
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1
        try:
            config = load_config_from_file(config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  Offline: {config.offline}")
        print(f"  HTTP timeout: {config.http.timeout_seconds}s")
        print(f"  Provider timeout: {config.pricing.provider_timeout_seconds}s")
        print(f"  Registration timeout: {config.registration.timeout_seconds}s")
        print(f"  WHOIS fallback: {config.registration.whois_enabled}")
        print(f"  RDAP endpoints: {', '.join(sorted(config.registration.rdap_endpoints))}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        try:
            save_config_to_file(create_default_config(), config_path)
        except OSError as e:
            print(f"Error: Could not write {config_path}: {e}", file=sys.stderr)
            return 1
        print(f"Configuration created at: {config_path}")
        return 0

    elif args.action == "validate":
        try:
            load_config_from_file(config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-intel",
        description="Domain trust scoring and registrar pricing",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'trust' command
    trust_parser = subparsers.add_parser(
        "trust",
        help="Score the trustworthiness of a URL or domain",
    )
    trust_parser.add_argument(
        "url",
        help="URL or hostname (e.g., https://example.com)",
    )
    trust_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON",
    )
    trust_parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip RDAP/WHOIS lookups; score local signals only",
    )
    trust_parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    trust_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log pipeline activity to stderr",
    )
    trust_parser.set_defaults(func=cmd_trust)

    # 'pricing' command
    pricing_parser = subparsers.add_parser(
        "pricing",
        help="Collect registrar prices and offers for a domain",
    )
    pricing_parser.add_argument(
        "domain",
        help="Domain to price (e.g., example.com)",
    )
    pricing_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    pricing_parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    pricing_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log provider failures to stderr",
    )
    pricing_parser.set_defaults(func=cmd_pricing)

    # 'serve' command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Bind address (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port (default: 8000)",
    )
    serve_parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    serve_parser.set_defaults(func=cmd_serve)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
