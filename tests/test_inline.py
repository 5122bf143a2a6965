"""Tests for inline segment composition."""

from __future__ import annotations

import pytest

from norgrender.errors import CompositionError
from norgrender.location import SourceLocation
from norgrender.nodes import Link, Paragraph, Text
from norgrender.renderers.inline import compose_inline, plain_text
from norgrender.renderers.links import LinkResolver
from norgrender.stringbuilder import StringBuilder


def compose(segments) -> str:
    sb = StringBuilder()
    compose_inline(segments, sb, LinkResolver())
    return sb.build()


class TestComposeInline:
    """compose_inline appends segment HTML in order."""

    def test_text_is_verbatim(self, loc: SourceLocation) -> None:
        """Text is not escaped at this layer."""
        assert compose([Text(loc, "a < b & <em>c</em>")]) == "a < b & <em>c</em>"

    def test_segments_in_order(self, loc: SourceLocation) -> None:
        segments = [Text(loc, "one "), Text(loc, "two "), Text(loc, "three")]
        assert compose(segments) == "one two three"

    def test_link_with_label(self, loc: SourceLocation) -> None:
        link = Link(loc, target="abc/def", label=(Text(loc, "link to def"),))
        assert compose([link]) == '<a href="abc/def.norg">link to def</a>'

    def test_link_without_label_shows_target(self, loc: SourceLocation) -> None:
        link = Link(loc, target="abc/def")
        assert compose([link]) == '<a href="abc/def.norg">abc/def</a>'

    def test_external_link(self, loc: SourceLocation) -> None:
        link = Link(loc, target="https://example.com", label=(Text(loc, "site"),))
        assert compose([link]) == '<a href="https://example.com">site</a>'

    def test_label_is_composed_recursively(self, loc: SourceLocation) -> None:
        inner = Link(loc, target="https://example.com", label=(Text(loc, "inner"),))
        outer = Link(loc, target="page", label=(Text(loc, "see "), inner))
        assert compose([outer]) == (
            '<a href="page.norg">see <a href="https://example.com">inner</a></a>'
        )

    def test_href_quotes_are_escaped(self, loc: SourceLocation) -> None:
        link = Link(loc, target='https://example.com/?q="x"&y=1', label=(Text(loc, "q"),))
        assert compose([link]) == (
            '<a href="https://example.com/?q=&quot;x&quot;&amp;y=1">q</a>'
        )

    def test_appends_to_existing_buffer(self, loc: SourceLocation) -> None:
        sb = StringBuilder()
        sb.append("prefix:")
        compose_inline([Text(loc, "x")], sb, LinkResolver())
        assert sb.build() == "prefix:x"


class TestCompositionFailures:
    """Malformed segments raise CompositionError."""

    @pytest.mark.parametrize("target", ["abc\ndef", "abc\tdef", "abc\x00"])
    def test_control_characters_in_target(self, loc: SourceLocation, target: str) -> None:
        with pytest.raises(CompositionError, match="Malformed link target"):
            compose([Link(loc, target=target)])

    def test_malformed_label_link(self, loc: SourceLocation) -> None:
        bad = Link(loc, target="x\ny")
        with pytest.raises(CompositionError):
            compose([Link(loc, target="ok", label=(bad,))])

    def test_block_node_is_not_inline(self, loc: SourceLocation) -> None:
        with pytest.raises(CompositionError, match="Unsupported inline segment Paragraph"):
            compose([Paragraph(loc, children=())])


class TestPlainText:
    """plain_text extracts visible text."""

    def test_text_and_links(self, loc: SourceLocation) -> None:
        segments = (
            Text(loc, "Read "),
            Link(loc, target="guide", label=(Text(loc, "the guide"),)),
            Text(loc, " or "),
            Link(loc, target="faq"),
        )
        assert plain_text(segments) == "Read the guide or faq"

    def test_empty(self) -> None:
        assert plain_text(()) == ""
