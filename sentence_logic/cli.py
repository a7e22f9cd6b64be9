#!/usr/bin/env python3
"""
Convert a file of sentences into logical forms.

Usage:
    sentence-to-logic --config config/sentence_to_logic.yaml
    sentence-to-logic --config config/sentence_to_logic.yaml --keep-errors --workers 16
    sentence-to-logic --sentences data/sentences.tsv --output-file out/logical_forms.tsv

The script:
1. Loads configuration from the YAML file (if given)
2. Applies CLI overrides
3. Runs the pipeline and writes the output file, its params manifest and an
   optional JSONL run log
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sentence_logic.config import build_step_config, load_config
from sentence_logic.errors import ConfigError, OutputWriteError
from sentence_logic.pipeline import run_sentence_to_logic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CliArgs:
    """Parsed CLI arguments."""

    config: Path | None
    sentences: str | None
    output_file: str | None
    keep_errors: bool
    workers: int | None
    unit_timeout: float | None
    verbose: bool


def _parse_args(argv: list[str] | None = None) -> CliArgs:
    parser = argparse.ArgumentParser(
        description="Convert sentences into logical forms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to YAML config file")
    parser.add_argument("--sentences", default=None, help="Input sentences file (overrides config)")
    parser.add_argument("--output-file", default=None, help="Output file (overrides config)")
    parser.add_argument(
        "--keep-errors",
        action="store_true",
        help="Keep failed records with an empty logical form instead of dropping them",
    )
    parser.add_argument("--workers", type=int, default=None, help="Number of partition workers")
    parser.add_argument(
        "--unit-timeout",
        type=float,
        default=None,
        help="Deadline in seconds for parsing + logical form generation of one sentence",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    ns = parser.parse_args(argv)
    return CliArgs(
        config=ns.config,
        sentences=ns.sentences,
        output_file=ns.output_file,
        keep_errors=ns.keep_errors,
        workers=ns.workers,
        unit_timeout=ns.unit_timeout,
        verbose=ns.verbose,
    )


def _load_and_override_config(args: CliArgs) -> dict[str, Any]:
    params: dict[str, Any] = load_config(args.config) if args.config is not None else {}

    if args.sentences is not None:
        params["sentences"] = args.sentences
    if args.output_file is not None:
        params["output file"] = args.output_file
    if args.keep_errors:
        params["drop errors"] = False
    if args.workers is not None:
        params["workers"] = args.workers
    if args.unit_timeout is not None:
        params["unit timeout seconds"] = args.unit_timeout

    return params


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = build_step_config(_load_and_override_config(args))
    except (FileNotFoundError, ConfigError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    try:
        run_sentence_to_logic(config, command=" ".join(sys.argv))
    except FileNotFoundError as e:
        logger.error("Input not found: %s", e)
        return 1
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    except OutputWriteError as e:
        logger.error("Run aborted: %s", e)
        return 1
    except (OSError, UnicodeError) as e:
        logger.error("Run aborted: %s: %s", type(e).__name__, e)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
