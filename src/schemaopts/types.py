# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, TypeAlias, TypeVar

from pydantic import BeforeValidator

T = TypeVar("T")
EnumType = TypeVar("EnumType", bound=Enum)


def auto_enum(x: Any, enum_type: type[EnumType]) -> EnumType:
    """Looks up an enum member by name, by value or by an integer literal."""
    if isinstance(x, enum_type):
        return x

    if isinstance(x, str):
        try:
            return enum_type[x]
        except KeyError:
            pass

    # bools would match the members valued 0 and 1
    if not isinstance(x, bool):
        try:
            return enum_type(x)
        except (ValueError, TypeError):
            pass

    if isinstance(x, str):
        try:
            return enum_type(int(x, 0))
        except ValueError:
            pass

    raise ValueError(f"{x} is not a valid key or value for {enum_type.__name__}")


if TYPE_CHECKING:
    EnumArg: TypeAlias = Annotated[EnumType, ""]
else:

    class _TrickType:
        def __init__(self, function: Callable[[type[T]], type[T]]):
            self.function = function

        def __getitem__(self, cls: type[T]) -> type[T]:
            return self.function(cls)

    EnumArg = _TrickType(
        lambda cls: Annotated[cls, BeforeValidator(lambda x: auto_enum(x, cls))]
    )
    """
    Enum field which accepts member names as well as values, so that the
    names offered for completion are valid input.

    Usage: x: EnumArg[SomeEnum] = ...
    """
