"""Binding of GraphQL JSON responses onto shape instances.

The ``data`` object of a response is matched against the shape's declared
fields by derived GraphQL name. Fields absent from the response keep their
zero value; the first value that cannot be decoded aborts the bind.
"""

import json
import logging
from typing import Any, TypeVar

from .errors import ResponseDecodeError
from .scalars import ScalarRegistry
from .shape import Shape, default_value, is_embedded, is_shape, list_element

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=Shape)


def unmarshal(data: bytes | str | dict[str, Any], obj: S, registry: ScalarRegistry | None = None) -> S:
    """Bind a ``{"data": {...}}`` response onto a shape instance in place.

    Args:
        data: Response body as JSON text, or an already-parsed mapping
        obj: Shape instance to populate
        registry: Scalar handlers, defaults to a fresh ``ScalarRegistry``

    Returns:
        The populated ``obj``

    Raises:
        ResponseDecodeError: If the payload is not valid JSON, is not shaped
            as a response, or a present field cannot be decoded
    """
    if isinstance(data, (bytes, bytearray, str)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(f"invalid JSON response: {e}") from e

    if data is None:
        return obj
    if not isinstance(data, dict):
        raise ResponseDecodeError(f"expected response object, got {type(data).__name__}")

    payload = data.get("data")
    if payload is None:
        return obj
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"expected object under 'data', got {type(payload).__name__}")

    return bind(payload, obj, registry)


def bind(payload: dict[str, Any], obj: S, registry: ScalarRegistry | None = None) -> S:
    """Bind a field-name mapping onto a shape instance, without the envelope."""
    _Binder(registry or ScalarRegistry()).bind_shape(payload, obj, "")
    return obj


class _Binder:
    """Decodes raw values by declared field type."""

    def __init__(self, registry: ScalarRegistry):
        self.registry = registry

    def bind_shape(self, payload: Any, obj: Shape, path: str):
        if not isinstance(payload, dict):
            raise ResponseDecodeError(
                f"cannot decode {type(payload).__name__} into {type(obj).__name__}", path
            )

        for f in type(obj).fields:
            if is_embedded(f.type):
                self.bind_shape(payload, getattr(obj, f.attr), path)
                continue

            field_path = f"{path}.{f.name}" if path else f.name
            if f.name not in payload:
                logger.debug("No value for %s in response", field_path)
                continue

            raw = payload[f.name]
            if raw is None:
                continue
            setattr(obj, f.attr, self.decode(raw, f.type, field_path))

    def decode(self, raw: Any, field_type: Any, path: str) -> Any:
        element = list_element(field_type)
        if element is not None:
            if not isinstance(raw, list):
                raise ResponseDecodeError(f"cannot decode {type(raw).__name__} into list", path)
            return [
                default_value(element) if item is None else self.decode(item, element, f"{path}[{i}]")
                for i, item in enumerate(raw)
            ]

        if is_shape(field_type):
            value = field_type()
            self.bind_shape(raw, value, path)
            return value

        return self.decode_scalar(raw, field_type, path)

    def decode_scalar(self, raw: Any, field_type: Any, path: str) -> Any:
        handler = self.registry.get(field_type)
        try:
            if handler is not None:
                return handler.deserialize(raw)
            if hasattr(field_type, "from_graphql"):
                return field_type.from_graphql(raw)
        except (ValueError, TypeError) as e:
            raise ResponseDecodeError(str(e), path) from e
        raise ResponseDecodeError(f"no scalar handler for {field_type!r}", path)
