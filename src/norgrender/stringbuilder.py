"""Output buffer for inline composition.

Parts are collected in a list and joined once, so composing a paragraph
with many segments stays linear in the output size.

"""

from __future__ import annotations


class StringBuilder:
    """Append-only string buffer.

    Usage:
        >>> sb = StringBuilder()
        >>> _ = sb.append('<a href="x.norg">').append("x").append("</a>")
        >>> sb.build()
        '<a href="x.norg">x</a>'

    A buffer is owned by a single composition; when composition fails the
    caller discards the buffer instead of rolling it back.

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append ``s``, skipping empty strings; returns self for chaining."""
        if s:
            self._parts.append(s)
        return self

    def build(self) -> str:
        """Join all parts into the final string."""
        return "".join(self._parts)
