"""Indentation-aware text writer used to emit query text."""

import io
from typing import Any, Callable

INDENT = "  "


class Writer:
    """Append-only text buffer with a current nesting level.

    A writer belongs to a single compilation pass and is not safe to share.

    Example:
        w = Writer()
        w.scope("hero", lambda: w.println("name"))
        w.getvalue()  # 'hero {\\n  name\\n}\\n'
    """

    def __init__(self, level: int = 0):
        self._buffer = io.StringIO()
        self.level = level

    def write(self, text: str):
        """Append raw text without indentation."""
        self._buffer.write(text)

    def indent(self):
        """Write the indentation for the current level."""
        self._buffer.write(INDENT * self.level)

    def println(self, *tokens: Any):
        """Write one indented line, tokens joined by a single space."""
        self.indent()
        self._buffer.write(" ".join(str(t) for t in tokens))
        self._buffer.write("\n")

    def scope(self, label: str, body: Callable[[], None]):
        """Write ``label {``, run body one level deeper, then ``}``."""
        if label:
            self.println(label, "{")
        else:
            self.println("{")
        self.level += 1
        try:
            body()
        finally:
            self.level -= 1
        self.println("}")

    def getvalue(self) -> str:
        return self._buffer.getvalue()

    def bytes(self) -> bytes:
        return self.getvalue().encode("utf-8")

    def __str__(self) -> str:
        return self.getvalue()
