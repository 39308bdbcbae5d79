# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

# PYTHON_ARGCOMPLETE_OK

from __future__ import annotations

import argparse
import csv
import io
import json
import os
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from pprint import pprint
from typing import Any

import argcomplete
import exitcode
from pydantic import BaseModel

from schemaopts.commands import registry
from schemaopts.config import Config, load_config_file
from schemaopts.exceptions import SchemaShapeError
from schemaopts.log import Loglevel, get_logger, setup_logging
from schemaopts.options import options_to_dicts
from schemaopts.parser import OptionParser
from schemaopts.validation import Failure, format_violation

logger = get_logger("schemaopts")


def _version() -> str:
    try:
        return version("schemaopts")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemaopts",
        description="""Parses COMMAND options with flags derived from the COMMAND's schema.
        Defaults for each COMMAND can be set in the [schemaopts.COMMAND] table of schemaopts.toml.
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_version()}",
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="show information about the loaded config",
    )
    parser.add_argument(
        "--dump-options",
        action="store_true",
        help="print the options derived for COMMAND as json",
    )
    parser.add_argument("command", metavar="COMMAND", choices=sorted(registry))
    parser.add_argument("args", metavar="ARGS", nargs=argparse.REMAINDER)
    return parser


def cmd_show_config(config: Config, config_path: Path | None) -> None:
    if (p := os.getenv("SCHEMAOPTS_CONFIG")) is not None:
        print(f"path to config set by env variable: {p}", file=sys.stderr)

    if config_path is not None:
        print(f"loaded config: {config_path}", file=sys.stderr)
        pprint(config)
    else:
        print("no config available", file=sys.stderr)


def render(value: BaseModel, output: str | None) -> str:
    data: dict[str, Any] = value.model_dump(mode="json")

    match output:
        case None | "json":
            return json.dumps(data, indent=2)
        case "text":
            return "\n".join(f"{k}: {v}" for k, v in data.items())
        case "csv":
            buf = io.StringIO()
            writer = csv.DictWriter(buf, fieldnames=list(data), lineterminator="\n")
            writer.writeheader()
            writer.writerow(data)
            return buf.getvalue().rstrip("\n")
        case "md":
            lines = ["| option | value |", "| --- | --- |"]
            lines += [f"| {k} | {v} |" for k, v in data.items()]
            return "\n".join(lines)
        case "none":
            return ""
        case _:
            raise ValueError(f"unsupported output format: {output}")


def get_log_level(value: BaseModel) -> Loglevel | None:
    if getattr(value, "debug", False):
        return Loglevel.DEBUG
    if getattr(value, "verbose", False):
        return Loglevel.INFO
    return None


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(argv)

    try:
        setup_logging()
    except ValueError as e:
        print(f"invalid SCHEMAOPTS_LOGLEVEL: {e}", file=sys.stderr)
        sys.exit(exitcode.CONFIG)

    try:
        config, config_path = load_config_file()
    except (ValueError, FileNotFoundError) as e:
        print(f"invalid config: {e}", file=sys.stderr)
        sys.exit(exitcode.CONFIG)

    if args.show_config:
        cmd_show_config(config, config_path)
        sys.exit(exitcode.OK)

    model = registry[args.command]
    try:
        options_parser = OptionParser(model, prog=f"schemaopts {args.command}")
    except SchemaShapeError as e:
        logger.critical("cannot derive options for %s: %s", args.command, e)
        sys.exit(exitcode.SOFTWARE)

    if args.dump_options:
        print(json.dumps(options_to_dicts(options_parser.options), indent=2))
        sys.exit(exitcode.OK)

    try:
        defaults = config.command_defaults(args.command)
    except ValueError as e:
        print(f"invalid config: {e}", file=sys.stderr)
        sys.exit(exitcode.CONFIG)

    result = options_parser.parse(args.args, defaults)
    if isinstance(result, Failure):
        print(format_violation(result.first, options_parser.options), file=sys.stderr)
        sys.exit(exitcode.USAGE)

    if (level := get_log_level(result.value)) is not None:
        setup_logging(level)
    logger.info("parsed %s options", args.command)

    if (out := render(result.value, getattr(result.value, "output", None))) != "":
        print(out)
    sys.exit(exitcode.OK)


if __name__ == "__main__":
    main()
