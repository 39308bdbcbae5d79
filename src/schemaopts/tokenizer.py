# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Splits an argument vector into raw key/value pairs.

The tokenizer only knows the flat option table: which names exist, which
short names they have and whether they take a string, a number or no value at
all. It does not validate anything beyond that; values which do not fit the
schema, as well as unknown options, are passed on for validation.
"""

from __future__ import annotations

import argparse
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, NoReturn

from argcomplete.completers import ChoicesCompleter
from pydantic.alias_generators import to_camel

from schemaopts.exceptions import TokenizeError
from schemaopts.log import get_logger
from schemaopts.options import OptionInfo, OptionType

logger = get_logger(__name__)


@dataclass
class TokenizerConfig:
    """Everything the tokenizer needs to know about the options.

    :param aliases: Short names by option name.
    :param strings: Options taking a string value.
    :param numbers: Options taking a numeric value.
    :param booleans: Flags.
    :param completions: Values offered for shell completion by option name.
    :param strip_aliased: Report values under the option name only, not under
                          the short name as well.
    :param strip_dashed: Accept ``--kebab-case`` and ``--camelCase`` spellings
                         and report them under the option name.
    :param parse_numbers: Convert numeric values in the tokenizer instead of
                          leaving them to schema validation.
    """

    aliases: dict[str, str] = field(default_factory=dict)
    strings: list[str] = field(default_factory=list)
    numbers: list[str] = field(default_factory=list)
    booleans: list[str] = field(default_factory=list)
    completions: dict[str, list[str]] = field(default_factory=dict)
    strip_aliased: bool = True
    strip_dashed: bool = True
    parse_numbers: bool = False


def build_tokenizer_config(
    options: Iterable[OptionInfo],
    strip_aliased: bool = True,
    strip_dashed: bool = True,
    parse_numbers: bool = False,
) -> TokenizerConfig:
    config = TokenizerConfig(
        strip_aliased=strip_aliased,
        strip_dashed=strip_dashed,
        parse_numbers=parse_numbers,
    )

    for option in options:
        if option.alias is not None:
            config.aliases[option.name] = option.alias
        if option.autocomplete is not None:
            config.completions[option.name] = list(option.autocomplete)

        match option.type:
            case OptionType.STRING:
                config.strings.append(option.name)
            case OptionType.NUMBER:
                config.numbers.append(option.name)
            case OptionType.BOOLEAN:
                config.booleans.append(option.name)

    return config


def number(value: str) -> int | float:
    try:
        return int(value)
    except ValueError:
        return float(value)


def boolean(value: str) -> bool:
    match value.lower():
        case "true":
            return True
        case "false":
            return False
        case _:
            raise ValueError(value)


class BooleanAction(argparse.Action):
    """Action for flags taking an optional explicit value.

    Besides the paired ``--x``/``--no-x`` spellings, ``--x true`` and
    ``--x false`` are accepted. Any other value following the flag is an
    error rather than a stray positional argument.
    """

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str,
        default: Any = None,
        required: bool = False,
        help: str | None = None,  # noqa: A002
    ) -> None:
        _option_strings = []

        for option_string in option_strings:
            _option_strings.append(option_string)

            if option_string.startswith("--"):
                _option_strings.append(f"--no-{option_string[2:]}")

        super().__init__(
            option_strings=_option_strings,
            dest=dest,
            nargs="?",
            default=default,
            type=boolean,
            required=required,
            help=help,
        )

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: str | Sequence[Any] | None,
        option_string: str | None = None,
    ) -> None:
        negated = option_string is not None and option_string.startswith("--no-")

        if values is None:
            setattr(namespace, self.dest, not negated)
        elif negated:
            raise argparse.ArgumentError(self, f"ignored explicit argument {values!r}")
        else:
            setattr(namespace, self.dest, values)


def option_strings(name: str, alias: str | None, strip_dashed: bool = True) -> list[str]:
    """Returns the command line spellings of an option, short name first."""
    flags: list[str] = []

    if alias is not None:
        flags.append(f"-{alias}" if len(alias) == 1 else f"--{alias}")

    if strip_dashed:
        flags.append(f"--{name.replace('_', '-')}")
        if "_" in name and (camel := f"--{to_camel(name)}") not in flags:
            flags.append(camel)
    else:
        flags.append(f"--{name}")

    return flags


class _TokenParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise TokenizeError(message)


class Tokenizer:
    def __init__(self, config: TokenizerConfig, prog: str | None = None) -> None:
        self.config = config
        self.parser = _TokenParser(
            prog=prog,
            add_help=False,
            allow_abbrev=False,
            exit_on_error=False,
            argument_default=argparse.SUPPRESS,  # absent options stay absent
        )
        self._dests: dict[str, str] = {}

        for name in config.strings:
            self._add_option(name)
        for name in config.numbers:
            self._add_option(name, type=number if config.parse_numbers else None)
        for name in config.booleans:
            self._add_option(name, action=BooleanAction)

    def _add_option(self, name: str, **kwargs: Any) -> None:
        flags = option_strings(name, self.config.aliases.get(name), self.config.strip_dashed)
        action = self.parser.add_argument(*flags, dest=name, **kwargs)

        if name in self.config.completions:
            action.completer = ChoicesCompleter(self.config.completions[name])  # type: ignore[attr-defined]

        self._dests["/".join(action.option_strings)] = name

    def _unknown_key(self, token: str) -> str:
        key = token.lstrip("-")
        if self.config.strip_dashed:
            key = key.replace("-", "_")
        return key

    def _collect_unknown(self, tokens: Sequence[str]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        i = 0

        while i < len(tokens):
            token = tokens[i]
            i += 1

            if not token.startswith("-") or token == "-":
                logger.debug("ignoring positional argument %r", token)
                continue

            if "=" in token:
                key, value = token.split("=", 1)
                result[self._unknown_key(key)] = value
            elif i < len(tokens) and not tokens[i].startswith("-"):
                result[self._unknown_key(token)] = tokens[i]
                i += 1
            else:
                result[self._unknown_key(token)] = True

        return result

    def tokenize(self, args: Sequence[str]) -> dict[str, Any]:
        """Splits `args` into a mapping from option name to raw value.

        :raises TokenizeError: if an option is malformed, e.g. lacks its value.
        """
        try:
            namespace, rest = self.parser.parse_known_args(list(args))
        except argparse.ArgumentError as e:
            raise TokenizeError(e.message, self._dests.get(e.argument_name or "")) from e

        result = self._collect_unknown(rest)
        result.update(vars(namespace))

        if not self.config.strip_aliased:
            for name, alias in self.config.aliases.items():
                if name in result:
                    result[alias] = result[name]

        return result
