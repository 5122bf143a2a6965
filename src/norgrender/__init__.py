"""
norgrender: Norg to HTML fragments through templates

Renders a parsed Norg document into an HTML fragment. Each supported node
kind becomes a small render context handed to a named Jinja2 template:
paragraphs go to ``paragraph``, headings to ``heading-<level>``. Headings
nest: their child blocks are rendered first and spliced into the parent.
Internal links such as ``{:abc/def:}`` become relative links to
``abc/def.norg``.

Quick Start:
    >>> from norgrender import JinjaTemplateEngine, render_body
    >>> engine = JinjaTemplateEngine.with_defaults()
    >>> render_body("{:abc/def:}[link to def]", engine)
    '<p><a href="abc/def.norg">link to def</a></p>'

Custom templates:
    >>> engine = JinjaTemplateEngine.with_defaults("my_templates/")
    >>> engine.register_template("heading-2", "<h2>{{ title }}</h2>{{ content }}")

Only paragraphs, headings and links are rendered. Other constructs are
parsed but dropped with a logged warning; see ``HtmlRenderer.get_warnings``.
"""

from collections.abc import Iterable

from norgrender.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from norgrender.debug import dump_ast
from norgrender.engine import JinjaTemplateEngine, TemplateEngine
from norgrender.errors import (
    CompositionError,
    DepthLimitError,
    NorgRenderError,
    ParseError,
    RenderError,
    TemplateError,
)
from norgrender.helpers import register_helpers
from norgrender.location import SourceLocation
from norgrender.nodes import (
    Block,
    CarryoverTag,
    Document,
    Heading,
    HorizontalRule,
    InfirmTag,
    Inline,
    Link,
    NestableDetachedModifier,
    Node,
    Paragraph,
    RangeableDetachedModifier,
    RangedTag,
    Text,
    VerbatimRangedTag,
)
from norgrender.parser import Parser, parse
from norgrender.renderers.html import HtmlRenderer, RenderWarning
from norgrender.renderers.links import LinkResolver

__version__ = "0.1.0"


def render(
    nodes: Document | Iterable[Block],
    engine: TemplateEngine,
    *,
    config: RenderConfig | None = None,
) -> str:
    """Render a Document (or a sequence of blocks) to an HTML fragment.

    Args:
        nodes: Document AST or top-level blocks
        engine: Template engine with helpers registered
        config: Render configuration (defaults to the active config)

    Returns:
        HTML fragment

    Raises:
        RenderError: The first failure encountered

    """
    return HtmlRenderer(engine, config).render(nodes)


def render_body(
    source: str,
    engine: TemplateEngine,
    *,
    source_file: str | None = None,
    config: RenderConfig | None = None,
) -> str:
    """Parse Norg source and render it to an HTML fragment.

    Raises:
        ParseError: The source could not be parsed; nothing is rendered
        RenderError: Rendering failed

    """
    doc = parse(source, source_file=source_file)
    return render(doc, engine, config=config)


__all__ = [
    # API
    "dump_ast",
    "parse",
    "render",
    "render_body",
    "register_helpers",
    # Classes
    "HtmlRenderer",
    "JinjaTemplateEngine",
    "LinkResolver",
    "Parser",
    "RenderWarning",
    "TemplateEngine",
    # Config
    "RenderConfig",
    "get_render_config",
    "render_config_context",
    "reset_render_config",
    "set_render_config",
    # Errors
    "CompositionError",
    "DepthLimitError",
    "NorgRenderError",
    "ParseError",
    "RenderError",
    "TemplateError",
    # Nodes
    "Block",
    "CarryoverTag",
    "Document",
    "Heading",
    "HorizontalRule",
    "InfirmTag",
    "Inline",
    "Link",
    "NestableDetachedModifier",
    "Node",
    "Paragraph",
    "RangeableDetachedModifier",
    "RangedTag",
    "SourceLocation",
    "Text",
    "VerbatimRangedTag",
]
