"""Core modules for shape-driven GraphQL queries."""

from .binder import bind, unmarshal
from .errors import (
    DecodeError,
    GlobalIDError,
    ResponseDecodeError,
    ShapeError,
)
from .global_id import ID, decode_global_id
from .naming import field_name, field_selection, to_snake_case
from .query_builder import Query, QueryVariable, compile_field, compile_fields
from .scalars import (
    BooleanHandler,
    DateTimeHandler,
    FloatHandler,
    GlobalIDHandler,
    IntHandler,
    JSONHandler,
    JSONString,
    JSONStringHandler,
    ScalarHandler,
    ScalarRegistry,
    StringHandler,
)
from .shape import (
    Connection,
    HideFields,
    PageInfo,
    Renderable,
    Shape,
    ShapeField,
    shape,
)
from .writer import Writer

__all__ = [
    # Errors
    "DecodeError",
    "GlobalIDError",
    "ResponseDecodeError",
    "ShapeError",
    # Global IDs
    "ID",
    "decode_global_id",
    # Naming
    "field_name",
    "field_selection",
    "to_snake_case",
    # Shapes
    "Connection",
    "HideFields",
    "PageInfo",
    "Renderable",
    "Shape",
    "ShapeField",
    "shape",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    "StringHandler",
    "IntHandler",
    "FloatHandler",
    "BooleanHandler",
    "GlobalIDHandler",
    "JSONString",
    "JSONStringHandler",
    "DateTimeHandler",
    "JSONHandler",
    # Query Builder
    "Query",
    "QueryVariable",
    "Writer",
    "compile_field",
    "compile_fields",
    # Binder
    "bind",
    "unmarshal",
]
