"""Error propagation tests.

Every failure is fail-fast: the first error aborts the enclosing node and
all ancestors, no partial HTML is returned, and the caller gets one error
whose cause chain explains what failed where.
"""

import pytest

from norgrender.config import RenderConfig
from norgrender.engine import JinjaTemplateEngine
from norgrender.errors import (
    CompositionError,
    DepthLimitError,
    NorgRenderError,
    ParseError,
    RenderError,
    TemplateError,
)
from norgrender.location import SourceLocation
from norgrender.nodes import Heading, Link, Paragraph, Text
from norgrender.renderers.html import HtmlRenderer

LOC = SourceLocation(3, 1)


def para(text: str) -> Paragraph:
    return Paragraph(location=LOC, children=(Text(location=LOC, content=text),))


def bad_para() -> Paragraph:
    return Paragraph(location=LOC, children=(Link(location=LOC, target="bad\ntarget"),))


def nest(depth: int) -> Heading | Paragraph:
    node: Heading | Paragraph = para("leaf")
    for level in range(depth, 0, -1):
        node = Heading(
            location=LOC,
            level=min(level, 6),
            title=(Text(location=LOC, content=f"h{level}"),),
            content=(node,),
        )
    return node


# =========================================================================
# Error classes
# =========================================================================


class TestErrorFormatting:
    """Messages and hierarchy."""

    def test_parse_error_location(self) -> None:
        err = ParseError("missing @end", lineno=4, col_offset=2, source_file="a.norg")
        assert str(err) == "a.norg:4:2 missing @end"

    def test_parse_error_message_only(self) -> None:
        err = ParseError("oops")
        assert str(err) == "oops"
        assert err.lineno is None

    def test_template_error(self) -> None:
        err = TemplateError("heading-3", "template not found")
        assert str(err) == "Template 'heading-3': template not found"
        assert err.template_name == "heading-3"

    def test_depth_limit_error(self) -> None:
        err = DepthLimitError(5, 4)
        assert (err.depth, err.limit) == (5, 4)
        assert "exceeds limit of 4" in str(err)

    def test_hierarchy(self) -> None:
        assert issubclass(ParseError, NorgRenderError)
        assert issubclass(CompositionError, RenderError)
        assert issubclass(TemplateError, RenderError)
        assert issubclass(DepthLimitError, RenderError)
        assert not issubclass(ParseError, RenderError)

    def test_context_chain_and_root_cause(self) -> None:
        root = ValueError("root")
        middle = CompositionError("middle")
        middle.__cause__ = root
        top = RenderError("top")
        top.__cause__ = middle
        assert top.context_chain() == ["top", "middle", "root"]
        assert top.root_cause() is root


# =========================================================================
# Paragraph failures
# =========================================================================


class TestParagraphFailures:
    """Composition and template failures inside a paragraph."""

    def test_composition_failure_is_wrapped(self, renderer: HtmlRenderer) -> None:
        with pytest.raises(CompositionError) as excinfo:
            renderer.render_node(bad_para())
        chain = excinfo.value.context_chain()
        assert chain[0] == "Failed to construct paragraph at 3:1"
        assert "Malformed link target" in chain[1]

    def test_missing_paragraph_template(self) -> None:
        renderer = HtmlRenderer(JinjaTemplateEngine())
        with pytest.raises(RenderError) as excinfo:
            renderer.render_node(para("x"))
        assert str(excinfo.value) == "Failed to render paragraph at 3:1"
        assert isinstance(excinfo.value.__cause__, TemplateError)

    def test_first_failure_aborts_siblings(self, recording_engine) -> None:
        renderer = HtmlRenderer(recording_engine)
        with pytest.raises(CompositionError):
            renderer.render([para("before"), bad_para(), para("after")])
        rendered = [ctx["para"] for name, ctx in recording_engine.calls]
        assert rendered == ["before"]


# =========================================================================
# Heading failures
# =========================================================================


class TestHeadingFailures:
    """Failures inside headings propagate through every ancestor."""

    def test_child_failure_aborts_heading(self, recording_engine) -> None:
        node = Heading(
            location=LOC,
            level=1,
            title=(Text(location=LOC, content="Intro"),),
            content=(para("ok"), bad_para(), para("never")),
        )
        with pytest.raises(RenderError) as excinfo:
            HtmlRenderer(recording_engine).render_node(node)
        assert str(excinfo.value) == "Failed to render heading 'Intro' at 3:1"
        assert isinstance(excinfo.value.root_cause(), CompositionError)
        assert [name for name, _ in recording_engine.calls] == ["paragraph"]

    def test_chain_names_every_ancestor(self, renderer: HtmlRenderer) -> None:
        node = Heading(
            location=LOC,
            level=1,
            title=(Text(location=LOC, content="Outer"),),
            content=(
                Heading(
                    location=LOC,
                    level=2,
                    title=(Text(location=LOC, content="Inner"),),
                    content=(bad_para(),),
                ),
            ),
        )
        with pytest.raises(RenderError) as excinfo:
            renderer.render_node(node)
        chain = excinfo.value.context_chain()
        assert chain[0].startswith("Failed to render heading 'Outer'")
        assert chain[1].startswith("Failed to render heading 'Inner'")
        assert chain[2].startswith("Failed to construct paragraph")

    def test_malformed_title(self, renderer: HtmlRenderer) -> None:
        node = Heading(location=LOC, level=1, title=(Link(location=LOC, target="a\x07b"),))
        with pytest.raises(RenderError) as excinfo:
            renderer.render_node(node)
        assert isinstance(excinfo.value.__cause__, CompositionError)


# =========================================================================
# Depth guard
# =========================================================================


class TestDepthGuard:
    """Nesting deeper than max_depth is rejected."""

    def test_within_limit(self, engine: JinjaTemplateEngine) -> None:
        renderer = HtmlRenderer(engine, RenderConfig(max_depth=4))
        assert "leaf" in renderer.render_node(nest(3))

    def test_exceeds_limit(self, engine: JinjaTemplateEngine) -> None:
        renderer = HtmlRenderer(engine, RenderConfig(max_depth=4))
        with pytest.raises(RenderError) as excinfo:
            renderer.render_node(nest(4))
        cause = excinfo.value.root_cause()
        assert isinstance(cause, DepthLimitError)
        assert (cause.depth, cause.limit) == (5, 4)

    def test_deep_document_does_not_exhaust_stack(self, engine: JinjaTemplateEngine) -> None:
        renderer = HtmlRenderer(engine)
        with pytest.raises(RenderError):
            renderer.render_node(nest(500))
