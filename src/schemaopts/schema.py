# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Structural view of a pydantic validation schema.

Pydantic compiles every model into a core schema, a tree of dicts tagged by
their ``"type"`` key. This module projects that tree onto a small, closed set
of node classes which is all the option resolver needs to know about: objects,
the modifiers wrapping a field (optional, default, refinement, intersection)
and the leaves (string, number, boolean, enumerations).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum, unique
from typing import Any, ClassVar, TypeAlias

from pydantic import BaseModel

from schemaopts.exceptions import SchemaShapeError, SchemaTooDeep

MAX_DEPTH = 64


@unique
class NodeKind(StrEnum):
    OBJECT = "object"
    OPTIONAL = "optional"
    DEFAULT = "default"
    REFINEMENT = "refinement"
    INTERSECTION = "intersection"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"
    NATIVE_ENUM = "native-enum"
    ANY = "any"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ObjectNode:
    kind: ClassVar[NodeKind] = NodeKind.OBJECT

    fields: Mapping[str, Node]


@dataclass(frozen=True)
class OptionalNode:
    kind: ClassVar[NodeKind] = NodeKind.OPTIONAL

    inner: Node


@dataclass(frozen=True)
class DefaultNode:
    kind: ClassVar[NodeKind] = NodeKind.DEFAULT

    inner: Node
    default: Any = None


@dataclass(frozen=True)
class RefinementNode:
    kind: ClassVar[NodeKind] = NodeKind.REFINEMENT

    inner: Node
    function: Callable[..., Any] | None = field(default=None, compare=False)


@dataclass(frozen=True)
class IntersectionNode:
    """Two schemas a value has to satisfy both of.

    In practice one side is an `AnyNode` which only exists to carry
    metadata; the other side is the real constraint.
    """

    kind: ClassVar[NodeKind] = NodeKind.INTERSECTION

    left: Node
    right: Node


@dataclass(frozen=True)
class StringNode:
    kind: ClassVar[NodeKind] = NodeKind.STRING


@dataclass(frozen=True)
class NumberNode:
    kind: ClassVar[NodeKind] = NodeKind.NUMBER

    integer: bool = False


@dataclass(frozen=True)
class BooleanNode:
    kind: ClassVar[NodeKind] = NodeKind.BOOLEAN


@dataclass(frozen=True)
class EnumNode:
    kind: ClassVar[NodeKind] = NodeKind.ENUM

    values: tuple[str, ...]


@dataclass(frozen=True)
class NativeEnumNode:
    kind: ClassVar[NodeKind] = NodeKind.NATIVE_ENUM

    members: Mapping[str, Any]


@dataclass(frozen=True)
class AnyNode:
    kind: ClassVar[NodeKind] = NodeKind.ANY


@dataclass(frozen=True)
class UnknownNode:
    kind: ClassVar[NodeKind] = NodeKind.UNKNOWN

    type_name: str


Node: TypeAlias = (
    ObjectNode
    | OptionalNode
    | DefaultNode
    | RefinementNode
    | IntersectionNode
    | StringNode
    | NumberNode
    | BooleanNode
    | EnumNode
    | NativeEnumNode
    | AnyNode
    | UnknownNode
)


class _CoreSchemaConverter:
    def __init__(self, max_depth: int) -> None:
        self.max_depth = max_depth
        self.definitions: dict[str, dict[str, Any]] = {}

    def convert(self, schema: Any, depth: int = 0) -> Node:  # noqa: PLR0911
        if depth > self.max_depth:
            raise SchemaTooDeep(self.max_depth, "the schema is nested too deeply or recursive")

        if not isinstance(schema, Mapping) or "type" not in schema:
            raise SchemaShapeError(f"not a core schema: {schema!r}")

        type_name = schema["type"]

        def inner(key: str = "schema") -> Node:
            return self.convert(schema[key], depth + 1)

        match type_name:
            case "definitions":
                for definition in schema.get("definitions", []):
                    self.definitions[definition["ref"]] = definition
                return inner()
            case "definition-ref":
                ref = schema["schema_ref"]
                if ref not in self.definitions:
                    raise SchemaShapeError(f"unresolved schema reference {ref}")
                return self.convert(self.definitions[ref], depth + 1)
            case "model" | "model-field":
                return inner()
            case "model-fields":
                return ObjectNode(
                    fields={
                        name: self.convert(field_schema, depth + 1)
                        for name, field_schema in schema["fields"].items()
                    }
                )
            case "nullable":
                return OptionalNode(inner())
            case "default":
                if "default_factory" in schema:
                    default = schema["default_factory"]
                else:
                    default = schema.get("default")
                return DefaultNode(inner(), default)
            case "function-after" | "function-before" | "function-wrap":
                return RefinementNode(inner(), schema["function"].get("function"))
            case "chain" if len(schema["steps"]) == 2:
                left, right = schema["steps"]
                return IntersectionNode(
                    self.convert(left, depth + 1),
                    self.convert(right, depth + 1),
                )
            case "str":
                return StringNode()
            case "int":
                return NumberNode(integer=True)
            case "float" | "decimal":
                return NumberNode()
            case "bool":
                return BooleanNode()
            case "literal":
                return EnumNode(tuple(str(v) for v in schema["expected"]))
            case "enum":
                return NativeEnumNode({m.name: m.value for m in schema["members"]})
            case "any":
                return AnyNode()
            case _:
                return UnknownNode(type_name)


def from_core_schema(schema: Mapping[str, Any], max_depth: int = MAX_DEPTH) -> Node:
    """Converts a pydantic core schema into a node tree.

    Raises:
        SchemaShapeError: if the input is not a core schema or references
            undefined definitions.
        SchemaTooDeep: if the tree is nested deeper than `max_depth`, which
            is always the case for self-referencing models.
    """
    return _CoreSchemaConverter(max_depth).convert(schema)


def schema_tree(model: type[BaseModel], max_depth: int = MAX_DEPTH) -> Node:
    """Returns the node tree for a pydantic model class."""
    return from_core_schema(model.__pydantic_core_schema__, max_depth)
