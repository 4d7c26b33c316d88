"""Opaque global ID decoding.

Servers following the opaque-cursor convention issue identifiers of the
form ``base64("{typename}:{id}")``, e.g. ``SHVtYW46MTAwMA==`` for
``Human:1000``. Only decoding is supported.
"""

import base64
import binascii
import re

from .errors import GlobalIDError

_INTEGER = re.compile(r"[+-]?[0-9]+")


def decode_global_id(token: str) -> int:
    """Decode an opaque global ID token into its numeric identifier.

    Raises:
        GlobalIDError: If the token is not a string, is not valid base64,
            does not decode to exactly ``typename:id`` or the id part is not
            an integer.
    """
    if not isinstance(token, str):
        raise GlobalIDError(f"expected string, got {type(token).__name__}", token)

    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise GlobalIDError(f"invalid base64 id {token!r}: {e}", token) from e
    # The type name part need not be UTF-8; only the id part is checked
    payload = raw.decode("utf-8", errors="surrogateescape")

    parts = payload.split(":")
    if len(parts) != 2:
        raise GlobalIDError(f"unexpected decoded id: {payload} ({parts!r})", token)

    if not _INTEGER.fullmatch(parts[1]):
        raise GlobalIDError(f'invalid id in "{payload}": {parts[1]!r} is not an integer', token)
    return int(parts[1])


class ID(int):
    """Numeric identifier bound from an opaque global ID token."""

    @classmethod
    def from_global_id(cls, token: str) -> "ID":
        return cls(decode_global_id(token))

    def __repr__(self) -> str:
        return f"ID({int(self)})"
