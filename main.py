#!/usr/bin/env python3
"""
PRA Systems Model — CLI Runner
================================
Build the EBR-II reference model → check a model document → finalize it.

Usage:
  # Write the EBR-II reference systems analysis
  python main.py build --output ./output/ebr2_systems.json

  # Consistency check (exit code 1 on errors)
  python main.py check ./output/ebr2_systems.json

  # Treat warnings (unresolved loops, shared components) as errors
  python main.py check ./output/ebr2_systems.json --strict

  # Entity counts
  python main.py stats ./output/ebr2_systems.json

  # Gate for submission; warnings need a sign-off note
  python main.py finalize ./output/ebr2_systems.json --sign-off "Loop accepted per review 12"
"""

import sys
import argparse
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from loguru import logger

from systems_model.builder import Ebr2ReferenceBuilder
from systems_model.checker import Severity, ValidationConfig, check_records
from systems_model.documentation import ProcessDocumentation
from systems_model.errors import SubmissionBlockedError, SystemsModelError
from systems_model.registry import SystemsAnalysisModel
from systems_model import serialization


def configure_logging(verbose: bool = False):
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO",
               format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")


def build_reference_model() -> SystemsAnalysisModel:
    """Build the EBR-II reference systems analysis."""
    logger.info("━" * 60)
    logger.info("Building EBR-II Systems Analysis")
    logger.info("━" * 60)

    model = SystemsAnalysisModel()
    Ebr2ReferenceBuilder(model).build_reference_plant()
    log_stats(model.stats())
    return model


def log_stats(stats: dict):
    logger.info("")
    logger.info("Systems Model Statistics:")
    for key, value in stats.items():
        if key in ("total_entities", "documentation_fragments"):
            continue
        logger.info(f"  {key.replace('_', ' ').title(): <28} {value}")
    logger.info(f"  ─────────────────────────")
    logger.info(f"  TOTAL ENTITIES:              {stats['total_entities']}")
    logger.info(f"  DOCUMENTATION FRAGMENTS:     {stats['documentation_fragments']}")
    logger.info("")


def cmd_build(args) -> int:
    model = build_reference_model()
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    model.export_json(str(output))
    return 0


def cmd_check(args) -> int:
    # Read raw records so duplicate ids show up as diagnostics, not a load failure
    data = serialization.loads(Path(args.model).read_text(encoding="utf-8"))
    records = serialization.records_from_dict(data)
    documentation: ProcessDocumentation = serialization.documentation_from_dict(
        data.get("processDocumentation", {}))

    config = ValidationConfig(warnings_as_errors=args.strict)
    report = check_records(records, documentation, config)

    for diagnostic in report.diagnostics:
        if diagnostic.severity == Severity.ERROR:
            logger.error(str(diagnostic))
        else:
            logger.warning(str(diagnostic))
    for cycle in report.cycles:
        logger.info(f"Dependency loop: {' -> '.join(cycle + cycle[:1])}")

    summary = report.summary()
    logger.info(f"Result: {'OK' if report.ok else 'FAILED'} "
                f"({summary['errors']} errors, {summary['warnings']} warnings)")
    return 0 if report.ok else 1


def cmd_stats(args) -> int:
    model = SystemsAnalysisModel.load_json(args.model)
    log_stats(model.stats())
    return 0


def cmd_finalize(args) -> int:
    model = SystemsAnalysisModel.load_json(args.model)
    try:
        model.finalize(sign_off=args.sign_off)
    except SubmissionBlockedError as exc:
        logger.error(str(exc))
        for diagnostic in exc.report.diagnostics:
            logger.error(f"  {diagnostic}")
        return 1
    logger.info(f"Revision {model.revision} is ready for submission")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="PRA Systems Analysis model: EBR-II reference data and consistency checks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py build --output ./output/ebr2_systems.json
  python main.py check ./output/ebr2_systems.json --strict
  python main.py finalize ./output/ebr2_systems.json --sign-off "Reviewed"
        """,
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log debug messages (every registration and diagnostic)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_build = sub.add_parser("build", help="Write the EBR-II reference model to JSON")
    p_build.add_argument("--output", "-o", type=str, default="./output/ebr2_systems.json",
                         help="Output file (default: ./output/ebr2_systems.json)")
    p_build.set_defaults(func=cmd_build)

    p_check = sub.add_parser("check", help="Run the consistency checker on a model file")
    p_check.add_argument("model", type=str, help="Model JSON file")
    p_check.add_argument("--strict", action="store_true",
                         help="Treat warnings as errors")
    p_check.set_defaults(func=cmd_check)

    p_stats = sub.add_parser("stats", help="Print entity counts for a model file")
    p_stats.add_argument("model", type=str, help="Model JSON file")
    p_stats.set_defaults(func=cmd_stats)

    p_final = sub.add_parser("finalize", help="Check a model file for submission")
    p_final.add_argument("model", type=str, help="Model JSON file")
    p_final.add_argument("--sign-off", type=str, default=None,
                         help="Note accepting the remaining warnings")
    p_final.set_defaults(func=cmd_finalize)

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        return args.func(args)
    except (SystemsModelError, OSError) as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
