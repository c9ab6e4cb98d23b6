"""
Exprolution - Command-line Entry Point

This module parses the target number, configures Logfire observability,
runs the expression search and prints the outcome. A run that does not
converge can be retried with ``--retries``; each retry is a fresh search.
"""

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv
import logfire

from src.core.config import Settings
from src.exprolution import (
    ConfigurationError,
    SearchConfig,
    SearchResult,
    describe,
    run_search
)

# Load environment variables
load_dotenv()


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire from application settings."""
    logfire.configure(
        token=settings.logfire_token,
        send_to_logfire="if-token-present" if settings.logfire_send else False,
        service_name=settings.logfire_service_name,
        service_version=settings.app_version,
        environment=settings.logfire_environment,
        console=None if settings.logfire_console else False
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exprolution",
        description="Evolve an arithmetic expression over 0-9 and + - * / that equals TARGET."
    )
    parser.add_argument("target", type=int, help="integer the expression must evaluate to")
    parser.add_argument("--population", type=int, help="chromosomes per generation")
    parser.add_argument("--length", type=int, help="symbols per chromosome")
    parser.add_argument("--generations", type=int, help="generation cap")
    parser.add_argument("--crossover-rate", type=float, help="probability of splicing two parents")
    parser.add_argument("--mutation-rate", type=float, help="per-symbol mutation probability")
    parser.add_argument("--seed", type=int, help="random seed for a reproducible run")
    parser.add_argument("--retries", type=int, default=0,
                        help="fresh runs to attempt after a failed one (default: 0)")
    parser.add_argument("--quiet", action="store_true", help="suppress progress logging")
    return parser


def build_config(args: argparse.Namespace, settings: Settings) -> SearchConfig:
    """Start from EXPR_* environment variables and apply command-line overrides."""
    config = SearchConfig.from_env()

    overrides = {
        "population_size": args.population,
        "chromosome_length": args.length,
        "generations": args.generations,
        "crossover_rate": args.crossover_rate,
        "mutation_rate": args.mutation_rate,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(config.evolution, name, value)

    if args.seed is not None:
        config.random_seed = args.seed
    config.logging.log_level = settings.log_level
    config.logging.enable_logging = not args.quiet

    return config


def format_result(result: SearchResult) -> str:
    if result.found:
        return (
            f"Found a solution in {result.generations} generations:\n"
            f"\t{result.expression_text}\n"
            f"\t= {describe(result.expression_text)}"
        )
    return f"Could not find a solution in {result.generations_exhausted} generations."


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings()

    configure_logfire(settings)

    try:
        config = build_config(args, settings)
    except ValueError as e:
        logfire.error("Invalid configuration", error=str(e))
        parser.error(str(e))

    if args.retries < 0:
        parser.error("--retries cannot be negative")

    base_seed = config.random_seed
    result = None
    for attempt in range(args.retries + 1):
        if base_seed is not None:
            config.random_seed = base_seed + attempt

        with logfire.span("Search attempt", attempt=attempt):
            try:
                result = run_search(args.target, config)
            except ConfigurationError as e:
                logfire.error("Invalid configuration", error=str(e))
                parser.error(str(e))

        print(format_result(result))
        if result.found:
            return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
