"""Scalar handlers for binding GraphQL response values.

Maps the Python types used in shape declarations to handlers that decode
raw JSON values (and serialize variable values for requests).

Example usage:
    from gql_shape.core.scalars import ScalarRegistry

    registry = ScalarRegistry()

    class MoneyHandler:
        python_type = Decimal

        def serialize(self, value):
            return str(value)

        def deserialize(self, value):
            return Decimal(value)

    registry.register(MoneyHandler())
"""

import json
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from .errors import DecodeError
from .global_id import ID


class JSONString:
    """Marker type for string fields whose content is itself JSON."""


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for scalar handlers.

    Attributes:
        python_type: The Python type used in shape declarations (e.g. ``int``)
    """

    python_type: Any

    def serialize(self, value: Any) -> Any:
        """Convert a Python value to a JSON-serializable value."""
        ...

    def deserialize(self, value: Any) -> Any:
        """Convert a raw JSON value from a response to the Python type."""
        ...


def _expect(value: Any, expected: type | tuple[type, ...], label: str):
    if isinstance(value, bool) and expected is not bool:
        raise DecodeError(f"cannot decode bool into {label}")
    if not isinstance(value, expected):
        raise DecodeError(f"cannot decode {type(value).__name__} into {label}")


class StringHandler:
    """Handler for String scalars."""

    python_type = str

    def serialize(self, value: str) -> str:
        return value

    def deserialize(self, value: Any) -> str:
        _expect(value, str, "str")
        return value


class IntHandler:
    """Handler for Int scalars. Floats are rejected, even integral ones."""

    python_type = int

    def serialize(self, value: int) -> int:
        return value

    def deserialize(self, value: Any) -> int:
        _expect(value, int, "int")
        return value


class FloatHandler:
    """Handler for Float scalars."""

    python_type = float

    def serialize(self, value: float) -> float:
        return value

    def deserialize(self, value: Any) -> float:
        _expect(value, (int, float), "float")
        return float(value)


class BooleanHandler:
    """Handler for Boolean scalars."""

    python_type = bool

    def serialize(self, value: bool) -> bool:
        return value

    def deserialize(self, value: Any) -> bool:
        _expect(value, bool, "bool")
        return value


class GlobalIDHandler:
    """Handler for opaque global IDs bound onto numeric ``ID`` fields."""

    python_type = ID

    def serialize(self, value: ID) -> int:
        return int(value)

    def deserialize(self, value: Any) -> ID:
        return ID.from_global_id(value)


class JSONStringHandler:
    """Handler for strings carrying JSON-encoded content."""

    python_type = JSONString

    def serialize(self, value: Any) -> str:
        return json.dumps(value)

    def deserialize(self, value: Any) -> Any:
        _expect(value, str, "JSON string")
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise DecodeError(f"invalid JSON string content: {e}") from e


class DateTimeHandler:
    """Handler for DateTime scalars using ISO 8601 format."""

    python_type = datetime

    def serialize(self, value: datetime) -> str:
        """Convert datetime to ISO 8601 string."""
        return value.isoformat()

    def deserialize(self, value: Any) -> datetime:
        """Parse ISO 8601 string to datetime."""
        _expect(value, str, "datetime")
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise DecodeError(str(e)) from e


class JSONHandler:
    """Handler for untyped JSON values (pass-through)."""

    python_type = Any

    def serialize(self, value: Any) -> Any:
        return value

    def deserialize(self, value: Any) -> Any:
        return value


class ScalarRegistry:
    """Registry of scalar handlers keyed by Python type.

    Example:
        registry = ScalarRegistry()
        registry.get(int).deserialize(3)  # 3
    """

    def __init__(self):
        self._handlers: dict[Any, ScalarHandler] = {}
        self._register_defaults()

    def _register_defaults(self):
        """Register built-in default handlers."""
        for handler in (
            StringHandler(),
            IntHandler(),
            FloatHandler(),
            BooleanHandler(),
            GlobalIDHandler(),
            JSONStringHandler(),
            DateTimeHandler(),
            JSONHandler(),
        ):
            self.register(handler)

    def register(self, handler: ScalarHandler, python_type: Any = None):
        """Register a handler, by default under its own ``python_type``."""
        key = python_type if python_type is not None else handler.python_type
        self._handlers[key] = handler

    def get(self, python_type: Any) -> ScalarHandler | None:
        """Get the handler for a type, or None if not registered."""
        return self._handlers.get(python_type)

    def has(self, python_type: Any) -> bool:
        """Check if a handler is registered for a type."""
        return python_type in self._handlers


def zero_value(python_type: Any) -> Any:
    """Default value a scalar field holds before binding."""
    if python_type is ID:
        return ID(0)
    if python_type in (str, int, float, bool):
        return python_type()
    return None
