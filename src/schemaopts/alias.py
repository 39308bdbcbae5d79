# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Short names for command line options.

A short name is attached at model definition time by wrapping the field
annotation with `with_alias`:

```python
class Options(BaseModel):
    user_name: with_alias("u", str | None) = None
```

The alias lives in the field's `Annotated` metadata, which pydantic keeps in
`FieldInfo.metadata` but otherwise ignores. `collect_aliases` reads it back
into a plain mapping which is handed to the option resolver next to the
schema tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import BaseModel


@dataclass(frozen=True)
class ShortAlias:
    alias: str


def with_alias(alias: str, annotation: Any) -> Any:
    """Returns `annotation` annotated with the short name `alias`.

    :param alias: The short name, e.g. ``"u"`` for ``-u``.
    :param annotation: The field type, including any modifiers.
    :return: An ``Annotated`` type validating exactly like `annotation`.
    """
    return Annotated[annotation, ShortAlias(alias)]


def collect_aliases(model: type[BaseModel]) -> dict[str, str]:
    """Maps field names to their short names, for fields that have one.

    If a field carries several short names, the outermost one wins.
    """
    aliases: dict[str, str] = {}

    for name, info in model.model_fields.items():
        for item in info.metadata:
            if isinstance(item, ShortAlias):
                aliases[name] = item.alias

    return aliases
