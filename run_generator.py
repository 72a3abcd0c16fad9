"""
Interval Generator - Command Line Interface

Generates synthetic smart-meter interval consumption data in the flat
(CSV) or nested (JSON) wire format.

Usage:
    # One office meter, half-hourly, for June 2024 as CSV on stdout
    python run_generator.py --generate --start 2024-06-01 --end 2024-06-30

    # 50 reproducible retail meters, 15-minute data, nested JSON to a file
    python run_generator.py --generate --profile Retail --meters 50 \\
        --granularity 15 --deterministic --seed 7 --format json --pretty --output out.json

    # Estimate the size of a run without generating it
    python run_generator.py --estimate --start 2024-01-01 --end 2024-12-31 --meters 100

    # List available profiles
    python run_generator.py --list-profiles

    # Use custom config file
    python run_generator.py --config config.json --generate
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from types import FrameType
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
# Must happen before settings objects read IG_* variables
load_dotenv()

from interval_generator.config import AppConfig, DEFAULT_CONFIG  # noqa: E402
from interval_generator.encoders import supported_formats  # noqa: E402
from interval_generator.errors import InvalidArgumentError  # noqa: E402
from interval_generator.orchestrator import MultiMeterOrchestrator  # noqa: E402
from interval_generator.runner import GenerationRunner  # noqa: E402

# Configure logging (stderr, so stdout carries only generated data)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Interval Generator - Generate synthetic smart-meter consumption data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    # Mode selection
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument(
        "--generate",
        action="store_true",
        help="Generate readings and write them out",
    )
    mode_group.add_argument(
        "--estimate",
        action="store_true",
        help="Print the expected number of readings and exit",
    )
    mode_group.add_argument(
        "--list-profiles",
        action="store_true",
        help="List registered consumption profiles",
    )
    mode_group.add_argument(
        "--generate-config",
        action="store_true",
        help="Generate a sample configuration file",
    )

    # Configuration options
    parser.add_argument("--config", type=Path, help="Path to configuration JSON file")
    parser.add_argument("--start", type=str, help="Start date (YYYY-MM-DD, inclusive)")
    parser.add_argument("--end", type=str, help="End date (YYYY-MM-DD, inclusive)")
    parser.add_argument(
        "--granularity",
        type=int,
        choices=[5, 15, 30],
        help="Interval length in minutes (default: 30)",
    )
    parser.add_argument("--profile", type=str, help="Consumption profile (default: Office)")
    parser.add_argument(
        "--measurement-class",
        type=str,
        choices=["AI", "AE", "RI", "RE"],
        help="Measurement class (default: AI)",
    )
    parser.add_argument("--meters", type=int, help="Number of meters, 1-1000 (default: 1)")
    parser.add_argument(
        "--deterministic",
        action="store_true",
        default=None,
        help="Make output reproducible",
    )
    parser.add_argument("--seed", type=int, help="Random seed (implies --deterministic)")
    parser.add_argument(
        "--meter-id",
        action="append",
        dest="meter_ids",
        help="Explicit internal meter UUID (repeatable)",
    )
    parser.add_argument("--site", type=str, help="Site label written into the output")
    parser.add_argument(
        "--format",
        type=str,
        choices=supported_formats(),
        help="Output format (default: csv)",
    )
    parser.add_argument("--output", type=Path, help="Output file path (default: stdout)")
    parser.add_argument("--pretty", action="store_true", help="Indent JSON output")

    # Verbosity
    parser.add_argument("--quiet", action="store_true", help="Suppress log output")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Apply command line overrides (only if explicitly provided)."""
    changes = {}
    if args.start is not None:
        changes["start_date"] = args.start
    if args.end is not None:
        changes["end_date"] = args.end
    if args.granularity is not None:
        changes["granularity"] = args.granularity
    if args.profile is not None:
        changes["profile_name"] = args.profile
    if args.measurement_class is not None:
        changes["measurement_class"] = args.measurement_class
    if args.meters is not None:
        changes["entity_count"] = args.meters
    if args.deterministic:
        changes["deterministic"] = True
    if args.seed is not None:
        changes["seed"] = args.seed
        changes["deterministic"] = True
    if args.meter_ids:
        changes["entity_ids"] = args.meter_ids
    if args.site is not None:
        changes["site_name"] = args.site
    if changes:
        config.generation = config.generation.with_changes(**changes)

    if args.format is not None:
        config.output.format = args.format
    if args.output is not None:
        config.output.output_file = str(args.output)
    if args.pretty:
        config.output.indent = 2
    return config


class SignalCancellation:
    """Turns SIGINT/SIGTERM into a cooperative stop of the runner."""

    def __init__(self, runner: GenerationRunner) -> None:
        self.runner = runner

    def install(self) -> None:
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def _handle_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        logger.info("Received signal %d, stopping generation...", signum)
        self.runner.stop()


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging level
    if args.quiet:
        logging.getLogger().setLevel(logging.WARNING)
    elif args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.generate_config:
        output_path = args.config or Path("config.json")
        DEFAULT_CONFIG.to_file(output_path)
        logger.info("Sample config written to %s", output_path)
        return EXIT_OK

    # Load or create configuration
    try:
        if args.config:
            if not args.config.exists():
                parser.error(f"Configuration file not found: {args.config}")
            config = AppConfig.from_file(args.config)
            logger.info("Loaded config from %s", args.config)
        else:
            config = AppConfig()
        config = apply_overrides(config, args)
    except (InvalidArgumentError, RuntimeError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR

    orchestrator = MultiMeterOrchestrator()

    if args.list_profiles:
        for name in orchestrator.registry.available_profiles():
            print(name)
        return EXIT_OK

    if args.estimate:
        try:
            config.generation.validate()
        except InvalidArgumentError as exc:
            logger.error("Invalid configuration: %s", exc)
            return EXIT_CONFIG_ERROR
        print(orchestrator.calculate_expected_reading_count(config.generation))
        return EXIT_OK

    runner = GenerationRunner(orchestrator=orchestrator, settings=config.output)
    SignalCancellation(runner).install()

    try:
        result = runner.run_to_file(config.generation)
    except InvalidArgumentError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR
    except RuntimeError as exc:
        logger.error("Output failed: %s", exc)
        return EXIT_IO_ERROR

    if result.cancelled:
        return EXIT_CANCELLED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
