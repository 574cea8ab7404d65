"""Command line entry point.

Usage::

    econpanel run --config conf/pipeline.yaml [--output DIR] [-v]
"""

from __future__ import annotations

import argparse
import logging
import sys

import yaml

from econpanel.data.config import load_pipeline_config

from .run import run_pipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="econpanel",
        description="Firm and country panel analytics",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the batch pipeline")
    run.add_argument("--config", "-c", default=None, help="Pipeline YAML (defaults only if omitted)")
    run.add_argument("--output", "-o", default=None, help="Override output.dir")
    run.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_pipeline_config(args.config)
        if args.output:
            config["output"]["dir"] = args.output
        result = run_pipeline(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        logger.error(f"Pipeline failed: {exc}")
        return 1

    print(result.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
