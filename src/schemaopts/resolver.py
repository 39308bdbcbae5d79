# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Derives command line options from a schema node tree.

`derive_options` is the entry point for pydantic models. It walks the fields
of the root object and, for each field, unwraps the chain of modifiers down to
the leaf type with `resolve`, recording what it sees on the field's
`OptionInfo`:

* optional and default wrappers make the option not required,
* refinements and intersections are looked through,
* the leaf determines the value type and, for enumerations, the values
  offered for completion.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import assert_never

from pydantic import BaseModel

from schemaopts.alias import collect_aliases
from schemaopts.exceptions import SchemaShapeError, SchemaTooDeep
from schemaopts.log import get_logger
from schemaopts.options import OptionInfo, OptionType
from schemaopts.schema import (
    MAX_DEPTH,
    AnyNode,
    BooleanNode,
    DefaultNode,
    EnumNode,
    IntersectionNode,
    NativeEnumNode,
    Node,
    NumberNode,
    ObjectNode,
    OptionalNode,
    RefinementNode,
    StringNode,
    UnknownNode,
    schema_tree,
)

logger = get_logger(__name__)


def _pick_intersection_side(node: IntersectionNode) -> Node | None:
    left_is_marker = isinstance(node.left, AnyNode)
    right_is_marker = isinstance(node.right, AnyNode)

    if left_is_marker == right_is_marker:
        return None
    return node.right if left_is_marker else node.left


def _step(  # noqa: PLR0911
    node: Node,
    options: list[OptionInfo],
    current: OptionInfo | None,
    aliases: Mapping[str, str],
    max_depth: int,
) -> Node | None:
    """Handles one node and returns the node to continue with, if any."""
    match node:
        case ObjectNode():
            if current is not None:
                raise SchemaShapeError(
                    f"field {current.name} is a nested object which cannot be an option"
                )
            project_options(node, options, aliases, max_depth)
            return None
        case OptionalNode(inner=inner):
            if current is not None:
                current.required = False
            return inner
        case DefaultNode(inner=inner):
            if current is not None:
                current.required = False
            return inner
        case RefinementNode(inner=inner):
            return inner
        case IntersectionNode():
            return _pick_intersection_side(node)
        case StringNode():
            if current is not None:
                current.type = OptionType.STRING
            return None
        case NumberNode():
            if current is not None:
                current.type = OptionType.NUMBER
            return None
        case BooleanNode():
            if current is not None:
                current.type = OptionType.BOOLEAN
            return None
        case EnumNode(values=values):
            if current is not None:
                current.type = OptionType.STRING
                current.autocomplete = list(values)
            return None
        case NativeEnumNode(members=members):
            if current is not None:
                current.type = OptionType.STRING
                current.autocomplete = list(members)
            return None
        case AnyNode() | UnknownNode():
            return None
        case _:
            assert_never(node)


def resolve(
    node: Node,
    options: list[OptionInfo],
    current: OptionInfo | None = None,
    aliases: Mapping[str, str] | None = None,
    max_depth: int = MAX_DEPTH,
) -> None:
    """Unwraps `node` until a node without a successor is reached.

    :param node: The node to start with.
    :param options: The option table; object nodes append to it.
    :param current: The option of the field being resolved, None at the root.
    :param aliases: Short names by field name, see `collect_aliases`.
    :param max_depth: Maximum number of unwrap steps.
    :raises SchemaTooDeep: if the chain is longer than `max_depth`.
    :raises SchemaShapeError: if a field holds a nested object.
    """
    if aliases is None:
        aliases = {}

    next_node: Node | None = node
    steps = 0

    while next_node is not None:
        if steps >= max_depth:
            field = current.name if current is not None else "<root>"
            raise SchemaTooDeep(max_depth, f"while resolving {field}")

        logger.trace(
            "%s: resolving %s node",
            current.name if current is not None else "<root>",
            next_node.kind,
        )
        next_node = _step(next_node, options, current, aliases, max_depth)
        steps += 1


def project_options(
    node: ObjectNode,
    options: list[OptionInfo],
    aliases: Mapping[str, str] | None = None,
    max_depth: int = MAX_DEPTH,
) -> None:
    """Appends one option per field of `node`, in declaration order."""
    if aliases is None:
        aliases = {}

    for name, field_node in node.fields.items():
        option = OptionInfo(name=name, alias=aliases.get(name))
        resolve(field_node, options, option, aliases, max_depth)
        options.append(option)


def derive_options(
    model: type[BaseModel],
    aliases: Mapping[str, str] | None = None,
    max_depth: int = MAX_DEPTH,
) -> list[OptionInfo]:
    """Derives the option table of a pydantic model.

    :param model: The model describing the options of a command.
    :param aliases: Short names by field name. They take precedence over the
                    short names declared with `with_alias`.
    :param max_depth: Limit for nesting and unwrap chains.
    """
    all_aliases = collect_aliases(model)
    if aliases is not None:
        all_aliases.update(aliases)

    options: list[OptionInfo] = []
    resolve(schema_tree(model, max_depth), options, aliases=all_aliases, max_depth=max_depth)

    logger.debug("derived %d options from %s", len(options), model.__name__)
    return options
