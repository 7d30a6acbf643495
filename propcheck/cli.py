#!/usr/bin/env python3
#===- propcheck/cli.py - Command Line Runner -----------------------------====#
# propcheck: Property-Based Testing Engine
# Copyright (C) 2025– propcheck Team
#
# Licensed under the GNU Affero General Public License v3.0 or later (AGPLv3+).
# Distributed without any warranty; see <http://www.gnu.org/licenses/>.
#===---------------------------------------------------------------------===#
#
# Purpose:
#   Run the properties of one or more importable modules.
#
#     python -m propcheck mypkg.props --trials 500 --seed 7 --jsonl runs.jsonl
#
# Exit codes:
#   0  every property passed
#   1  at least one property failed (falsified, error, gave up, bad declaration)
#   2  usage error (bad arguments, unreadable config, unimportable module)
#
#===---------------------------------------------------------------------===#

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import SizePolicy, load_run_config
from .logsetup import init_logging
from .modules import DEFAULT_PREFIX, check_module
from .reporting import ConsoleReporter, JsonlReporter, LoggingReporter, MultiReporter, Reporter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("propcheck", description="Run property-based tests of Python modules")
    p.add_argument("modules", nargs="+", help="importable module names")
    p.add_argument("--trials", type=int, default=None, help="passing trials required per property")
    p.add_argument("--seed", type=int, default=None, help="run seed (default: random, reported)")
    p.add_argument("--prefix", type=str, default=DEFAULT_PREFIX)
    p.add_argument("--config", type=str, default=None, help="YAML run configuration")
    p.add_argument("--jsonl", type=str, default=None, help="append one audit record per property")
    p.add_argument("--size-policy", type=str, default=None, choices=[s.value for s in SizePolicy])
    p.add_argument("--log-level", type=str, default="WARNING")
    p.add_argument("--quiet", action="store_true", help="no progress output, log lines only")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    p = build_parser()
    try:
        args = p.parse_args(argv)
    except SystemExit as exc:
        # --help exits 0, parse errors exit 2
        return int(exc.code or 0)

    try:
        init_logging(args.log_level)
    except ValueError as exc:
        print(f"propcheck: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if args.config and not Path(args.config).is_file():
        print(f"propcheck: config file not found: {args.config}", file=sys.stderr)
        return EXIT_USAGE

    try:
        cfg = load_run_config(
            args.config,
            num_trials=args.trials,
            seed=args.seed,
            size_policy=args.size_policy,
        )
    except (OSError, ValueError) as exc:
        print(f"propcheck: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE

    reporter: Reporter = LoggingReporter() if args.quiet else ConsoleReporter()
    if args.jsonl:
        command = "propcheck " + " ".join(argv if argv is not None else sys.argv[1:])
        run_meta = {"command": command, "config": cfg.to_dict()}
        reporter = MultiReporter(reporter, JsonlReporter(args.jsonl, run_meta=run_meta))

    logger.debug("Run configuration: %s", cfg.to_dict())
    failures = []
    for name in args.modules:
        try:
            result = check_module(name, args.prefix, config=cfg, reporter=reporter)
        except ImportError as exc:
            print(f"propcheck: cannot import {name}: {exc}", file=sys.stderr)
            return EXIT_USAGE
        failures.extend(result.failures())

    if failures:
        print(f"{len(failures)} failing propert{'y' if len(failures) == 1 else 'ies'}:")
        for ref in failures:
            print(f"  {ref}")
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
