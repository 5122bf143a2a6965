"""Inline segment composition.

Walks the inline segments of a paragraph or heading title and appends
their HTML to a StringBuilder. Plain text is appended verbatim: escaping
is left to the templates that receive the composed buffer.

"""

from __future__ import annotations

import re
from collections.abc import Iterable

from norgrender.errors import CompositionError
from norgrender.nodes import Inline, Link, Text
from norgrender.renderers.links import LinkResolver
from norgrender.stringbuilder import StringBuilder
from norgrender.utils.text import escape_attribute

# Line breaks and other C0/C1 controls cannot appear in a usable href.
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def compose_inline(
    segments: Iterable[Inline],
    out: StringBuilder,
    resolver: LinkResolver,
) -> None:
    """Append the HTML for ``segments`` to ``out`` in order.

    Args:
        segments: Inline segments to compose
        out: Buffer receiving the output
        resolver: Resolver used for link hrefs

    Raises:
        CompositionError: A link target is malformed or a segment type is
            not supported. ``out`` may hold partial output; callers discard it.

    """
    for segment in segments:
        match segment:
            case Text():
                out.append(segment.content)
            case Link():
                _compose_link(segment, out, resolver)
            case _:
                raise CompositionError(
                    f"Unsupported inline segment {type(segment).__name__} "
                    f"at {getattr(segment, 'location', '?')}"
                )


def _compose_link(link: Link, out: StringBuilder, resolver: LinkResolver) -> None:
    if _CONTROL_CHARS.search(link.target):
        raise CompositionError(f"Malformed link target {link.target!r} at {link.location}")

    href = resolver.resolve(link.target)
    out.append(f'<a href="{escape_attribute(href)}">')
    if link.label:
        compose_inline(link.label, out, resolver)
    else:
        out.append(link.target)
    out.append("</a>")


def plain_text(segments: Iterable[Inline]) -> str:
    """Return the visible text of ``segments`` without markup.

    Links contribute their label, or their target when unlabeled.

    """
    parts: list[str] = []
    for segment in segments:
        match segment:
            case Text():
                parts.append(segment.content)
            case Link():
                parts.append(plain_text(segment.label) if segment.label else segment.target)
    return "".join(parts)
