"""Shape declarations shared by query compilation and response binding.

A shape is a ``Shape`` subclass with an explicit, ordered table of
``ShapeField`` descriptors. The same class drives the selection set
written for a query and the decoding of the matching response.

Example:
    class Human(Shape):
        fields = (
            ShapeField("Name", str),
            ShapeField("Height", float, "unit: FOOT"),
        )

    class HumanQuery(Shape):
        fields = (ShapeField("Human", Human, 'id: "1000"'),)
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, get_args, get_origin, runtime_checkable

from .errors import ShapeError
from .naming import field_name, field_selection, to_snake_case
from .scalars import zero_value


@dataclass(frozen=True)
class ShapeField:
    """A declared field of a shape.

    Attributes:
        identifier: Declared identifier the GraphQL name is derived from
        type: Scalar type, Shape subclass, ``list[...]`` or ``Connection``
        args: Argument text attached verbatim as ``(args)``
        attr: Python attribute name on instances (snake_case of identifier)
    """
    identifier: str
    type: Any
    args: str | None = None
    attr: str = ""

    def __post_init__(self):
        if not self.identifier:
            raise ShapeError("field identifier must not be empty")
        if not self.attr:
            object.__setattr__(self, "attr", to_snake_case(self.identifier))

    @property
    def name(self) -> str:
        """GraphQL field name, also the response key."""
        return field_name(self.identifier)

    @property
    def selection(self) -> str:
        """Field name with argument text, as written in query text."""
        return field_selection(self.identifier, self.args)


@runtime_checkable
class Renderable(Protocol):
    """Capability for types that render their own selection.

    ``render_graphql`` is looked up on the field's type and called with the
    writer and the field's selection text. If it raises, the field is left
    out of the query.
    """

    def render_graphql(self, writer, name: str) -> None:
        ...


def is_class(field_type: Any) -> bool:
    """True for plain classes, False for generic aliases like ``list[int]``."""
    return isinstance(field_type, type) and get_origin(field_type) is None


def list_element(field_type: Any) -> Any:
    """Element type of a list type, or None if the type is not list-like."""
    if field_type is list:
        return Any
    if get_origin(field_type) is list:
        args = get_args(field_type)
        return args[0] if args else Any
    return None


def is_shape(field_type: Any) -> bool:
    return is_class(field_type) and issubclass(field_type, Shape)


def is_embedded(field_type: Any) -> bool:
    """Connection members are promoted into the enclosing shape."""
    return field_type is Connection


def is_renderable(field_type: Any) -> bool:
    return is_class(field_type) and isinstance(field_type, Renderable)


def default_value(field_type: Any) -> Any:
    """Zero value for a field of the given type."""
    if list_element(field_type) is not None:
        return []
    if is_shape(field_type):
        return field_type()
    return zero_value(field_type)


class Shape:
    """Base class for shapes.

    Subclasses list their fields in ``fields``; instances start with every
    field at its zero value and are filled in by the response binder.
    Attributes of an embedded ``Connection`` are reachable directly on the
    enclosing instance.
    """

    fields: ClassVar[tuple[ShapeField, ...]] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.fields = tuple(cls.fields)
        seen: set[str] = set()
        for f in cls.fields:
            if not isinstance(f, ShapeField):
                raise ShapeError(f"{cls.__name__}: fields must be ShapeField instances, got {f!r}")
            if f.attr != "fields" and hasattr(cls, f.attr):
                raise ShapeError(f"{cls.__name__}: field attribute {f.attr!r} would hide a class member")
            if f.attr in seen:
                raise ShapeError(f"{cls.__name__}: duplicate field attribute {f.attr!r}")
            seen.add(f.attr)

    def __init__(self, **values: Any):
        # Read through the class: a field may itself be named "fields"
        fields = type(self).fields
        for f in fields:
            setattr(self, f.attr, default_value(f.type))
        known = {f.attr for f in fields}
        for key, value in values.items():
            if key not in known:
                raise TypeError(f"{type(self).__name__} has no field {key!r}")
            setattr(self, key, value)

    def __getattr__(self, item: str) -> Any:
        if item.startswith("__"):
            raise AttributeError(item)
        for f in type(self).fields:
            if is_embedded(f.type):
                embedded = self.__dict__.get(f.attr)
                if embedded is not None and hasattr(embedded, item):
                    return getattr(embedded, item)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {item!r}")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __repr__(self) -> str:
        values = ", ".join(f"{f.attr}={getattr(self, f.attr)!r}" for f in type(self).fields)
        return f"{type(self).__name__}({values})"

    def to_dict(self) -> dict[str, Any]:
        """Render the instance as a mapping keyed by GraphQL field names."""
        result: dict[str, Any] = {}
        for f in type(self).fields:
            value = getattr(self, f.attr)
            if is_embedded(f.type):
                result.update(value.to_dict())
            else:
                result[f.name] = _plain(value)
        return result


def _plain(value: Any) -> Any:
    if isinstance(value, Shape):
        return value.to_dict()
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def shape(name: str, *fields: ShapeField, mixins: tuple[type, ...] = ()) -> type[Shape]:
    """Build a Shape subclass from a field list, without a class statement.

    Example:
        Human = shape("Human", ShapeField("Name", str))
    """
    return type(name, (*mixins, Shape), {"fields": tuple(fields), "__module__": __name__})


class HideFields:
    """Mixin that selects a shape-typed field as a bare leaf name.

    Example:
        class Test(HideFields, Shape):
            fields = (ShapeField("Name", str),)
    """

    @classmethod
    def render_graphql(cls, writer, name: str) -> None:
        writer.println(name)


class PageInfo(Shape):
    """Relay page information."""

    fields = (
        ShapeField("HasNextPage", bool),
        ShapeField("HasPreviousPage", bool),
        ShapeField("StartCursor", str),
        ShapeField("EndCursor", str),
    )


class Connection(Shape):
    """Relay connection members, embedded next to a connection's ``Edges``.

    Example:
        class FriendsConnection(Shape):
            fields = (
                ShapeField("Edges", list[FriendEdge]),
                ShapeField("Connection", Connection),
            )
    """

    fields = (
        ShapeField("TotalCount", int),
        ShapeField("PageInfo", PageInfo),
    )
