# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Command line options derived from pydantic models.

The public interface is the `OptionParser` class, which derives the options of
a model, tokenizes a command line and validates it, as well as the building
blocks it is made of.
"""

from schemaopts.alias import collect_aliases, with_alias
from schemaopts.exceptions import SchemaOptsError, SchemaShapeError, SchemaTooDeep, TokenizeError
from schemaopts.options import OptionInfo, OptionType
from schemaopts.parser import OptionParser
from schemaopts.resolver import derive_options
from schemaopts.tokenizer import Tokenizer, TokenizerConfig, build_tokenizer_config
from schemaopts.validation import (
    Failure,
    OptionsModel,
    Rule,
    Success,
    ValidationResult,
    Violation,
    validate_options,
)

__all__ = (
    "Failure",
    "OptionInfo",
    "OptionParser",
    "OptionType",
    "OptionsModel",
    "Rule",
    "SchemaOptsError",
    "SchemaShapeError",
    "SchemaTooDeep",
    "Success",
    "TokenizeError",
    "Tokenizer",
    "TokenizerConfig",
    "ValidationResult",
    "Violation",
    "build_tokenizer_config",
    "collect_aliases",
    "derive_options",
    "validate_options",
    "with_alias",
)
