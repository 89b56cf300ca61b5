"""
Command-line interface for validating records against a rule file.

Usage:
    rulechain check --rules <rules.yaml> --input <records.json> [options]
    rulechain rules
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import yaml

from rulechain.core.errors import RuleBuildError
from rulechain.core.models import DataRecord
from rulechain.core.rules import RuleConfigLoader, default_registry
from rulechain.observability.logger import LOG_FORMATS, get_logger, log_operation, setup_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2


def load_records(input_path: Path) -> list[dict[str, Any]]:
    """
    Load records from a JSON or YAML file.

    The file holds either a single record (a mapping) or a list of records.

    Raises:
        ValueError: If the file cannot be parsed or holds something else
    """
    text = input_path.read_text()
    try:
        if input_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not parse input file {input_path}: {e}") from e

    if isinstance(data, dict):
        return [data]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return data
    raise ValueError("Input must be a record or a list of records")


def check_command(args) -> int:
    """
    Validate every input record and print a JSON report to stdout.

    Returns:
        Process exit code
    """
    if args.log_format or args.log_level:
        setup_logger(__name__, level=args.log_level, format_type=args.log_format)

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return EXIT_CONFIG_ERROR

    try:
        config = RuleConfigLoader(args.rules).load()
        if args.stop_on_first_failure:
            config.stop_on_first_failure = True
        engine = config.build_engine()
        records = load_records(input_path)
    except (RuleBuildError, ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}", exc_info=True)
        return EXIT_CONFIG_ERROR

    results = []
    with log_operation("Validating records", logger=logger, input=str(input_path), records=len(records)):
        for idx, payload in enumerate(records):
            record = DataRecord(record_id=str(payload.get("id", idx)), source_id=input_path.stem, payload=payload)
            result = engine.validate_record(record)
            results.append(result)

    invalid = [result for result in results if not result.passed]

    report = {
        "total_records": len(results),
        "valid_records": len(results) - len(invalid),
        "invalid_records": len(invalid),
        "results": [result.model_dump() for result in results],
    }
    print(json.dumps(report, indent=2, default=str))

    logger.info(
        f"Validated {len(results)} record(s): {len(invalid)} invalid",
        extra={"total_records": len(results), "invalid_records": len(invalid)},
    )
    return EXIT_FAILED if invalid else EXIT_OK


def rules_command(args) -> int:
    """Print the names of all registered rules, one per line."""
    for name in default_registry().names():
        print(name)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rulechain",
        description="Declarative record validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate a JSON list of records
  rulechain check --rules config/rules.yaml --input data/signups.json

  # Stop at the first failing rule in each record
  rulechain check --rules config/rules.yaml --input data/signups.yaml --stop-on-first-failure

  # List the available rules
  rulechain rules
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Validate records against a rule file")
    check_parser.add_argument(
        "--rules",
        required=True,
        help="Path to the rules YAML file"
    )
    check_parser.add_argument(
        "--input",
        required=True,
        help="Path to a JSON or YAML file holding a record or a list of records"
    )
    check_parser.add_argument(
        "--stop-on-first-failure",
        action="store_true",
        help="Halt each record's validation at its first failure"
    )
    check_parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Log output format (default: RULECHAIN_LOG_FORMAT or json)"
    )
    check_parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (default: LOG_LEVEL or INFO)"
    )

    subparsers.add_parser("rules", help="List the available rules")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILED

    if args.command == "check":
        return check_command(args)
    return rules_command(args)


if __name__ == "__main__":
    sys.exit(main())
