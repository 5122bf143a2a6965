"""Link target resolution.

Turns the target of a Norg link into an href. Internal document references
become relative links to the rendered document; external URLs pass through.

    >>> resolver = LinkResolver()
    >>> resolver.resolve("abc/def")
    'abc/def.norg'
    >>> resolver.resolve("abc/def#intro")
    'abc/def.norg#intro'
    >>> resolver.resolve("https://example.com")
    'https://example.com'

"""

from __future__ import annotations

import re

from norgrender.config import RenderConfig, get_render_config

_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


class LinkResolver:
    """Resolve link targets to hrefs.

    Rules, applied in order:

    - empty target -> ``""``
    - recognized external scheme or protocol-relative ``//`` -> unchanged
    - fragment-only or query-only target (``#intro``) -> unchanged
    - path part already ending in the document extension -> unchanged
    - path part ending in ``/`` -> unchanged
    - otherwise the extension is inserted after the path part, before any
      ``?query`` or ``#fragment``

    Thread Safety:
        Holds only immutable config. Safe to share.

    """

    __slots__ = ("_extension", "_schemes")

    def __init__(self, config: RenderConfig | None = None) -> None:
        config = config or get_render_config()
        self._extension = config.document_extension
        self._schemes = frozenset(s.lower() for s in config.external_schemes)

    def is_external(self, target: str) -> bool:
        """Return True if ``target`` starts with a recognized external scheme."""
        if target.startswith("//"):
            return True
        match = _SCHEME.match(target)
        return match is not None and match.group(1).lower() in self._schemes

    def resolve(self, target: str) -> str:
        """Return the href for ``target``."""
        if not target or self.is_external(target):
            return target

        split_at = len(target)
        for marker in ("?", "#"):
            index = target.find(marker)
            if index != -1:
                split_at = min(split_at, index)

        path, suffix = target[:split_at], target[split_at:]
        if not path or path.endswith("/") or path.endswith(self._extension):
            return target
        return f"{path}{self._extension}{suffix}"
