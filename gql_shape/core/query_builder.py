"""Query builder for shape-driven GraphQL queries.

Walks a shape declaration and writes the matching selection set, with
support for arguments, lists, Relay connections and custom-rendered fields.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from .errors import ShapeError
from .scalars import ScalarRegistry
from .shape import (
    Shape,
    ShapeField,
    is_embedded,
    is_renderable,
    is_shape,
    list_element,
)
from .writer import Writer

logger = logging.getLogger(__name__)


def compile_fields(writer: Writer, fields: tuple[ShapeField, ...]):
    """Write the selections for each field, in declaration order."""
    for f in fields:
        compile_field(writer, f.selection, f.type)


def compile_field(writer: Writer, name: str, field_type: Any):
    """Write the selection for one field.

    Args:
        writer: Writer for the query being compiled
        name: Field selection text (derived name plus arguments)
        field_type: The field's declared type
    """
    if is_embedded(field_type):
        # Connection members sit directly in the enclosing scope
        compile_fields(writer, field_type.fields)
        return

    if is_renderable(field_type):
        # Rendered separately so a failing renderer leaves no partial output
        scratch = Writer(writer.level)
        try:
            field_type.render_graphql(scratch, name)
        except Exception as e:
            logger.debug("Dropping field %s: custom renderer failed: %s", name, e)
            return
        writer.write(scratch.getvalue())
        return

    element = list_element(field_type)
    if element is not None:
        compile_field(writer, name, element)
        return

    if is_shape(field_type):
        writer.scope(name, lambda: compile_fields(writer, field_type.fields))
        return

    writer.println(name)


@dataclass
class QueryVariable:
    """A declared query variable, rendered as ``$name: Type``."""
    name: str
    type_name: str

    def __str__(self) -> str:
        return f"${self.name}: {self.type_name}"


@dataclass
class Query:
    """A named (or anonymous) query over a root shape.

    Examples:
        Query("", HumanQuery).compile()

        (Query("HeroNameAndFriends", HeroQuery)
            .define_variable("episode", "Episode")
            .compile())
    """
    name: str
    root: Any
    variables: list[QueryVariable] = field(default_factory=list)

    def define_variable(self, name: str, type_name: str) -> "Query":
        """Declare a variable in the query signature. Returns self for chaining."""
        self.variables.append(QueryVariable(name, type_name))
        return self

    @property
    def root_type(self) -> Any:
        return type(self.root) if isinstance(self.root, Shape) else self.root

    def signature(self) -> str:
        """The ``query Name($var: Type)`` line, empty for anonymous queries."""
        if not self.name:
            return ""
        s = f"query {self.name}"
        if self.variables:
            s = f"{s}({', '.join(str(v) for v in self.variables)})"
        return s

    def compile(self) -> str:
        """Compile the query text.

        Returns:
            Query text ending with a newline

        Raises:
            ShapeError: If the root is not a shape with at least one field
        """
        root_type = self.root_type
        if not is_shape(root_type) or not root_type.fields:
            raise ShapeError("query object must be a non-empty struct")

        writer = Writer()
        writer.scope(self.signature(), lambda: compile_fields(writer, root_type.fields))
        return writer.getvalue()

    def marshal(self) -> bytes:
        """Compile the query text as UTF-8 bytes."""
        return self.compile().encode("utf-8")

    def request_body(
        self,
        variables: dict[str, Any] | None = None,
        registry: ScalarRegistry | None = None,
    ) -> dict[str, Any]:
        """Build a GraphQL-over-HTTP request body for this query.

        Sending the request is left to the caller's transport.

        Args:
            variables: Variable values; pydantic models are dumped by alias
            registry: Scalar handlers used to serialize other values

        Returns:
            Mapping with ``query`` and, where present, ``variables`` and
            ``operationName``
        """
        body: dict[str, Any] = {"query": self.compile()}
        if variables:
            body["variables"] = _serialize_variables(variables, registry or ScalarRegistry())
        if self.name:
            body["operationName"] = self.name
        return body


def _serialize_variables(variables: dict[str, Any], registry: ScalarRegistry) -> dict[str, Any]:
    """Serialize variable values, skipping None."""
    result = {}
    for key, value in variables.items():
        if value is None:
            continue
        if isinstance(value, list):
            result[key] = [_serialize_value(v, registry) for v in value]
        else:
            result[key] = _serialize_value(value, registry)
    return result


def _serialize_value(value: Any, registry: ScalarRegistry) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    handler = registry.get(type(value))
    if handler is not None:
        return handler.serialize(value)
    return value
