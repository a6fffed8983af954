#!/usr/bin/env python
# coding=utf-8
"""Command-line runner: load a netlist, execute commands, print variables."""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from pypan.config import PanConfig
from pypan.engine.executor import CommandExecutor
from pypan.engine.session import EngineSession
from pypan.engine.variables import UndefinedVariable, VariableReader
from pypan.exceptions import PanError

_logger = logging.getLogger("pypan.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pypan",
        description="Run PAN commands against a netlist and print result variables.",
    )
    parser.add_argument("netlist", help="Path to the netlist file")
    parser.add_argument(
        "-e",
        "--engine",
        help="Path to the PAN engine library (default: $PYPAN_ENGINE_LIB)",
    )
    parser.add_argument(
        "--config", help="JSON configuration file", metavar="FILE", default=None
    )
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        default=[],
        dest="commands",
        help="Command to execute, e.g. 'Tr tran tstop=1m mem=[\"time\"]' (repeatable)",
    )
    parser.add_argument(
        "-g",
        "--get",
        action="append",
        default=[],
        dest="variables",
        help="Variable to print after the commands, e.g. Tr.time (repeatable)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = (
            PanConfig.from_file(args.config)
            if args.config
            else PanConfig.from_environment()
        )
        if args.engine:
            config.engine_library = args.engine
        config.verbose = config.verbose or args.verbose

        with EngineSession(config=config) as session:
            session.initialize(args.netlist)

            executor = CommandExecutor(session)
            for command in args.commands:
                executor.execute(command).raise_for_status()

            reader = VariableReader(session)
            failed = False
            for name in args.variables:
                result = reader.get(name)
                if isinstance(result, UndefinedVariable):
                    _logger.error("Undefined variable: %s", name)
                    failed = True
                    continue
                print(f"{name} = {np.array2string(result.values, separator=', ')}")
    except PanError as e:
        _logger.error("Error: %s", e)
        return 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
