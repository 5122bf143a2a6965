"""HTML renderer driven by templates.

Each supported node kind is mapped to a small render context and handed to
a named template:

- ``Paragraph`` -> ``"paragraph"`` with ``{para}``
- ``Heading``   -> ``"heading-<level>"`` with ``{level, title, content,
  extensions, slug}``

Headings are the only recursive kind. Their content is rendered first and
the resulting fragments are spliced, in order and untouched, into the
heading template.

Every other node kind is skipped: a warning is logged, a RenderWarning is
recorded for the caller, and the node contributes an empty string.

Thread Safety:
All per-render state lives in a _RenderState created for each render()
call. The renderer also keeps the state of its most recent call so
get_warnings() can report it; a renderer shared between threads should
use render_with_warnings(), which returns the warnings of that call only.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass, field

from norgrender.config import RenderConfig, get_render_config
from norgrender.engine import TemplateEngine
from norgrender.errors import (
    CompositionError,
    DepthLimitError,
    RenderError,
    TemplateError,
)
from norgrender.helpers import heading_template_name
from norgrender.location import SourceLocation
from norgrender.nodes import (
    Block,
    CarryoverTag,
    Document,
    Heading,
    HorizontalRule,
    InfirmTag,
    Inline,
    NestableDetachedModifier,
    Node,
    Paragraph,
    RangeableDetachedModifier,
    RangedTag,
    VerbatimRangedTag,
)
from norgrender.renderers.inline import compose_inline, plain_text
from norgrender.renderers.links import LinkResolver
from norgrender.stringbuilder import StringBuilder
from norgrender.utils.logger import get_logger
from norgrender.utils.text import slugify

logger = get_logger(__name__)

PARAGRAPH_TEMPLATE = "paragraph"


@dataclass(frozen=True, slots=True)
class ParagraphContext:
    """Context for the ``paragraph`` template."""

    para: str


@dataclass(frozen=True, slots=True)
class HeadingContext:
    """Context for ``heading-<level>`` templates.

    Attributes:
        level: Heading level as written in the source
        title: Composed title HTML
        content: Rendered child fragments, concatenated in order
        extensions: Detached modifier extensions (TODO states)
        slug: Anchor id derived from the title text
    """

    level: int
    title: str
    content: str
    extensions: tuple[str, ...]
    slug: str


@dataclass(frozen=True, slots=True)
class RenderWarning:
    """A node that was dropped from the output."""

    kind: str
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.location}: rendering is not implemented for {self.kind}"


@dataclass(slots=True)
class _RenderState:
    warnings: list[RenderWarning] = field(default_factory=list)
    seen_slugs: set[str] = field(default_factory=set)


class HtmlRenderer:
    """Render Norg AST nodes to an HTML fragment through a template engine.

    Usage:
        >>> from norgrender import JinjaTemplateEngine, parse
        >>> engine = JinjaTemplateEngine.with_defaults()
        >>> renderer = HtmlRenderer(engine)
        >>> renderer.render(parse("{:abc/def:}[link to def]"))
        '<p><a href="abc/def.norg">link to def</a></p>'

    The engine must already have its helpers registered (see
    ``norgrender.helpers.register_helpers``); rendering against an engine
    without them fails with TemplateError.

    """

    __slots__ = ("_engine", "_config", "_resolver", "_last_state")

    def __init__(
        self,
        engine: TemplateEngine,
        config: RenderConfig | None = None,
        *,
        resolver: LinkResolver | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            engine: Template engine with paragraph and heading templates
            config: Render configuration (defaults to the active config)
            resolver: Link resolver (defaults to one built from ``config``)
        """
        self._engine = engine
        self._config = config or get_render_config()
        self._resolver = resolver or LinkResolver(self._config)
        self._last_state: _RenderState | None = None

    def render(self, nodes: Document | Iterable[Block]) -> str:
        """Render a document or a sequence of blocks, concatenated in order.

        Raises:
            RenderError: The first failure encountered. No partial output is
                returned.
        """
        html, _ = self.render_with_warnings(nodes)
        return html

    def render_with_warnings(
        self, nodes: Document | Iterable[Block]
    ) -> tuple[str, list[RenderWarning]]:
        """Like render(), also returning the nodes skipped by this call."""
        state = _RenderState()
        self._last_state = state
        children = nodes.children if isinstance(nodes, Document) else nodes

        sb = StringBuilder()
        for child in children:
            sb.append(self._render_node(child, state, depth=1))
        return sb.build(), state.warnings.copy()

    def render_node(self, node: Block) -> str:
        """Render a single node with fresh per-render state."""
        state = _RenderState()
        self._last_state = state
        return self._render_node(node, state, depth=1)

    def get_warnings(self) -> list[RenderWarning]:
        """Nodes skipped during the most recent render call on this instance."""
        if self._last_state is None:
            return []
        return self._last_state.warnings.copy()

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _render_node(self, node: Block, state: _RenderState, depth: int) -> str:
        if depth > self._config.max_depth:
            raise DepthLimitError(depth, self._config.max_depth)

        match node:
            case Paragraph():
                return self._render_paragraph(node)
            case Heading():
                return self._render_heading_node(node, state, depth)
            case Document():
                return "".join(self._render_node(child, state, depth + 1) for child in node.children)
            case (
                NestableDetachedModifier()
                | RangeableDetachedModifier()
                | VerbatimRangedTag()
                | RangedTag()
                | InfirmTag()
                | CarryoverTag()
                | HorizontalRule()
            ):
                return self._skip(node, state)
            case Node():
                # Inline nodes in block position
                return self._skip(node, state)
            case _:
                raise RenderError(f"Expected an AST node, got {type(node).__name__}")

    def _skip(self, node: Node, state: _RenderState) -> str:
        kind = type(node).__name__
        logger.warning("Rendering is not implemented for %s at %s", kind, node.location)
        state.warnings.append(RenderWarning(kind=kind, location=node.location))
        return ""

    # =========================================================================
    # Paragraphs
    # =========================================================================

    def _render_paragraph(self, para: Paragraph) -> str:
        sb = StringBuilder()
        try:
            compose_inline(para.children, sb, self._resolver)
        except CompositionError as e:
            raise CompositionError(f"Failed to construct paragraph at {para.location}") from e

        context = ParagraphContext(para=sb.build())
        try:
            return self._engine.render_template(PARAGRAPH_TEMPLATE, asdict(context))
        except TemplateError as e:
            raise RenderError(f"Failed to render paragraph at {para.location}") from e

    # =========================================================================
    # Headings
    # =========================================================================

    def _render_heading_node(self, heading: Heading, state: _RenderState, depth: int) -> str:
        label = f"heading '{plain_text(heading.title)}' at {heading.location}"
        # Claim the slug before descending so anchors follow document order.
        slug = self._unique_slug(slugify(plain_text(heading.title)), state)
        try:
            rendered_children = [
                self._render_node(child, state, depth + 1) for child in heading.content
            ]
            return self.render_heading(
                heading.level,
                heading.title,
                heading.extensions,
                rendered_children,
                slug=slug,
            )
        except RenderError as e:
            raise RenderError(f"Failed to render {label}") from e

    def render_heading(
        self,
        level: int,
        title: Sequence[Inline],
        extensions: Sequence[str],
        rendered_children: Sequence[str],
        *,
        slug: str | None = None,
    ) -> str:
        """Render one heading around already-rendered child fragments.

        Args:
            level: Heading level (>= 1)
            title: Inline segments of the title
            extensions: Detached modifier extensions
            rendered_children: Child fragments in document order; spliced
                verbatim
            slug: Anchor id (derived from the title when omitted)

        Raises:
            CompositionError: Invalid level or title composition failure
            TemplateError: The heading template failed

        """
        template_level = self._template_level(level)

        sb = StringBuilder()
        compose_inline(title, sb, self._resolver)

        context = HeadingContext(
            level=level,
            title=sb.build(),
            content="".join(rendered_children),
            extensions=tuple(extensions),
            slug=slug if slug is not None else slugify(plain_text(title)),
        )
        return self._engine.render_template(heading_template_name(template_level), asdict(context))

    def _template_level(self, level: int) -> int:
        if level < 1:
            raise CompositionError(f"Heading level must be at least 1, got {level}")
        max_level = self._config.max_heading_level
        if level > max_level:
            if self._config.heading_level_policy == "error":
                raise CompositionError(f"Heading level {level} exceeds maximum of {max_level}")
            level = max_level
        if self._config.heading_level_policy == "clamp":
            # The engine may have been prepared with a lower max_heading_level.
            while level > 1 and not self._engine.has_template(heading_template_name(level)):
                level -= 1
        return level

    def _unique_slug(self, slug: str, state: _RenderState) -> str:
        if not slug:
            return slug
        original_slug = slug
        counter = 1
        while slug in state.seen_slugs:
            slug = f"{original_slug}-{counter}"
            counter += 1
        state.seen_slugs.add(slug)
        return slug
