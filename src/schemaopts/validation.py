# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Validation of tokenized arguments against the options model.

Validation happens in three tiers, each of which only runs if the previous one
passed:

1. the pydantic model itself (types, permitted values, unknown fields,
   field validators),
2. the universal rules, which hold for every command (`OptionsModel.universal_rules`),
3. the command specific rules (`OptionsModel.command_rules`).

All violations of the failing tier are reported, in a stable order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Literal, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_core import ErrorDetails

from schemaopts.log import get_logger
from schemaopts.options import OptionInfo
from schemaopts.tokenizer import option_strings

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Rule:
    """A cross field constraint.

    :param check: Returns True if the validated options satisfy the rule.
    :param message: Reported if the rule is violated.
    :param path: The field the violation is reported for; empty for the
                 options as a whole.
    """

    check: Callable[[Any], Any]
    message: str
    path: tuple[str, ...] = ()


class OptionsModel(BaseModel):
    """Base class for command options.

    Unknown options are rejected. Subclasses add cross field rules by
    extending `universal_rules` or `command_rules`.
    """

    model_config = ConfigDict(extra="forbid")

    universal_rules: ClassVar[tuple[Rule, ...]] = ()
    command_rules: ClassVar[tuple[Rule, ...]] = ()


@dataclass(frozen=True)
class Violation:
    path: tuple[str | int, ...]
    message: str

    def __str__(self) -> str:
        return f"Error in property {'.'.join(str(p) for p in self.path)}: {self.message}"


@dataclass(frozen=True)
class Success(Generic[ModelT]):
    value: ModelT
    ok: Literal[True] = True


@dataclass(frozen=True)
class Failure:
    violations: tuple[Violation, ...]
    ok: Literal[False] = False

    @property
    def first(self) -> Violation:
        return self.violations[0]


ValidationResult: TypeAlias = Success[ModelT] | Failure


def _error_message(error: ErrorDetails) -> str:
    try:
        return str(error["ctx"]["error"])
    except KeyError:
        return error["msg"]


def violations_from_error(error: ValidationError) -> tuple[Violation, ...]:
    return tuple(Violation(tuple(e["loc"]), _error_message(e)) for e in error.errors())


def check_rules(rules: Iterable[Rule], value: BaseModel) -> tuple[Violation, ...]:
    return tuple(Violation(rule.path, rule.message) for rule in rules if not rule.check(value))


def validate_options(model: type[ModelT], raw: Mapping[str, Any]) -> ValidationResult[ModelT]:
    """Validates raw option values against `model` and its rules."""
    try:
        value = model.model_validate(dict(raw))
    except ValidationError as e:
        logger.debug("schema validation failed with %d errors", e.error_count())
        return Failure(violations_from_error(e))

    for tier in ("universal_rules", "command_rules"):
        violations = check_rules(getattr(model, tier, ()), value)
        if len(violations) > 0:
            logger.debug("%d %s violated", len(violations), tier)
            return Failure(violations)

    return Success(value)


def format_violation(violation: Violation, options: Sequence[OptionInfo] | None = None) -> str:
    """Renders a violation as a single line, naming the option by its flags."""
    if len(violation.path) == 0:
        return f"error: {violation.message}"

    argument = violation.path[0]
    flags = [f"--{argument}"]

    if options is not None:
        for option in options:
            if option.name == argument:
                flags = option_strings(option.name, option.alias)
                break

    return f"argument {'/'.join(flags)}: {violation.message}"
