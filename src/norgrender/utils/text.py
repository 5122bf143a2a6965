"""Text helpers: heading slugs and attribute escaping.

Example:
    >>> from norgrender.utils.text import slugify
    >>> slugify("Getting Started!")
    'getting-started'
"""

from __future__ import annotations

import html as html_module
import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[-\s]+")


def slugify(text: str, separator: str = "-") -> str:
    """Convert heading text to an anchor slug.

    Unicode word characters are kept so non-English titles still produce
    readable anchors.

    Args:
        text: Text to slugify
        separator: Character placed between words

    Returns:
        Lowercase slug, empty for empty or punctuation-only input

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Café & Crème")
        'café-crème'
        >>> slugify("???")
        ''
    """
    if not text:
        return ""

    text = html_module.unescape(text).lower().strip()
    text = _NON_WORD.sub("", text)
    text = _SEPARATORS.sub(separator, text)
    return text.strip(separator)


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted HTML attribute.

    Only ``&``, ``<``, ``>`` and ``"`` are replaced; single quotes are left
    alone since attributes are always emitted with double quotes.

    Examples:
        >>> escape_attribute('a"b&c')
        'a&quot;b&amp;c'
    """
    if not value:
        return ""
    return html_module.escape(value, quote=False).replace('"', "&quot;")
