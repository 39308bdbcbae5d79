# SPDX-FileCopyrightText: Hayden Richards
#
# SPDX-License-Identifier: MIT

"""Declarative and Typed Argument Parser.

The `parser` module contains the `OptionParser` class, which ties the pieces
together:

1. Derive the option table from the `pydantic` model
2. Configure the tokenizer from the option table
3. Tokenize the command line and validate the result against the model

The value returned on success is an instance of the model, so the parsed
options are compatible with an IDE, linter or type checker.
"""

import sys
from collections.abc import Mapping, Sequence
from typing import Any, Generic, NoReturn

import argcomplete

from schemaopts.exceptions import TokenizeError
from schemaopts.log import get_logger
from schemaopts.resolver import derive_options
from schemaopts.tokenizer import Tokenizer, TokenizerConfig, build_tokenizer_config
from schemaopts.validation import (
    Failure,
    ModelT,
    ValidationResult,
    Violation,
    format_violation,
    validate_options,
)

logger = get_logger(__name__)


class OptionParser(Generic[ModelT]):
    """Declarative and Typed Argument Parser.

    The options are derived from the `pydantic` model once, on instantiation.
    Deriving fails with `SchemaShapeError` if the model cannot be expressed as
    flat command line options, before anything is parsed.
    """

    # Exit Codes
    EXIT_ERROR = 2

    def __init__(
        self,
        model: type[ModelT],
        prog: str | None = None,
        aliases: Mapping[str, str] | None = None,
        tokenizer_config: TokenizerConfig | None = None,
    ) -> None:
        """Instantiates the parser with its `pydantic` model.

        :param model: Pydantic options model class.
        :param prog: Program name for messages.
        :param aliases: Short names by option name, in addition to the ones
                        declared on the model.
        :param tokenizer_config: Overrides the configuration derived from the
                                 model, e.g. to keep aliased keys.
        """
        self.model = model
        self.prog = prog
        self.options = derive_options(model, aliases)

        if tokenizer_config is None:
            tokenizer_config = build_tokenizer_config(self.options)

        self.tokenizer = Tokenizer(tokenizer_config, prog=prog)

    def parse(
        self,
        args: Sequence[str],
        defaults: Mapping[str, Any] | None = None,
    ) -> ValidationResult[ModelT]:
        """Parses and validates `args`.

        :param args: The command line arguments, without the program name.
        :param defaults: Values used for options absent from `args`, e.g.
                         from a config file.
        """
        try:
            raw = self.tokenizer.tokenize(args)
        except TokenizeError as e:
            path = (e.field,) if e.field is not None else ()
            return Failure((Violation(path, e.message),))

        if defaults is not None:
            raw = {**defaults, **raw}

        logger.debug("validating options %s", ", ".join(sorted(raw)))
        return validate_options(self.model, raw)

    def parse_typed_args(
        self,
        args: Sequence[str] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> ModelT:
        """Parses command line arguments into an instance of the model.

        If `args` are not supplied, they are retrieved from `sys.argv`.
        On failure the first violation is reported and the process exits.
        """
        if args is None:
            args = sys.argv[1:]

        result = self.parse(args, defaults)
        if isinstance(result, Failure):
            self.error(format_violation(result.first, self.options))

        return result.value

    def error(self, message: str) -> NoReturn:
        """Prints `message` to `stderr` and exits."""
        prefix = f"{self.prog}: " if self.prog is not None else ""
        sys.stderr.write(f"{prefix}{message}\n")
        sys.exit(OptionParser.EXIT_ERROR)

    def enable_completion(self) -> None:
        argcomplete.autocomplete(self.tokenizer.parser)
