"""Template helper registration.

The renderer asks for ``paragraph`` and for heading templates keyed by
level (``heading-1`` .. ``heading-6``). ``register_helpers`` must run once
before the first render so every name the renderer can ask for is bound.

"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from norgrender.config import RenderConfig, get_render_config
from norgrender.utils.logger import get_logger

if TYPE_CHECKING:
    from norgrender.engine import TemplateEngine

logger = get_logger(__name__)

PARAGRAPH_BINDING = '{% extends "paragraph.html" %}'
HEADING_BASE_TEMPLATE = "heading.html"
HEADING_LEVEL_TEMPLATE = '{% extends "heading.html" %}'


def heading_template_name(level: int) -> str:
    """Template name for heading ``level``."""
    return f"heading-{level}"


def make_heading_tag(max_level: int) -> Callable[[int], str]:
    """Build the ``heading_tag`` helper, clamping levels to ``1..max_level``.

    HTML only has ``h1`` to ``h6``, so the tag never goes past ``h6`` even
    when ``max_level`` is larger.
    """
    top = min(max_level, 6)

    def heading_tag(level: int) -> str:
        return f"h{max(1, min(int(level), top))}"

    return heading_tag


def register_helpers(engine: TemplateEngine, config: RenderConfig | None = None) -> None:
    """Register the heading helper and the paragraph and per-level heading templates.

    Idempotent. Bindings that already exist are left alone so a caller can
    override the paragraph template or a single heading level before
    calling this.

    Args:
        engine: Template engine to populate
        config: Render config (defaults to the active config)

    """
    config = config or get_render_config()
    engine.register_helper("heading_tag", make_heading_tag(config.max_heading_level))
    if not engine.has_template("paragraph"):
        engine.register_template("paragraph", PARAGRAPH_BINDING)

    for level in range(1, config.max_heading_level + 1):
        name = heading_template_name(level)
        if engine.has_template(name):
            continue
        engine.register_template(name, HEADING_LEVEL_TEMPLATE)
        logger.debug("Bound %s to %s", name, HEADING_BASE_TEMPLATE)
