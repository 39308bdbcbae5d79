# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, unique
from typing import Any


@unique
class OptionType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass
class OptionInfo:
    """Command line metadata of one top level schema field.

    Created with defaults for every field and filled in while the field's
    schema is resolved.
    """

    name: str
    alias: str | None = None
    required: bool = True
    type: OptionType = OptionType.STRING
    autocomplete: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name}
        if self.alias is not None:
            d["alias"] = self.alias
        d["required"] = self.required
        if self.autocomplete is not None:
            d["autocomplete"] = list(self.autocomplete)
        d["type"] = str(self.type)
        return d


def options_to_dicts(options: list[OptionInfo]) -> list[dict[str, Any]]:
    return [option.to_dict() for option in options]
