"""Line-oriented parser for the Norg subset norgrender understands.

Produces the typed AST in ``norgrender.nodes``. Headings and paragraphs are
parsed fully; lists, quotes, definitions, tags and other detached modifiers
are recognized and kept as their own node kinds so the renderer can decide
what to do with them.

Grammar (one construct per line, leading whitespace ignored):

    * Title                heading, level = number of stars
    * (x) Title            heading with a TODO status extension
    ---                    close the innermost open heading
    ===                    close every open heading
    ___                    horizontal rule
    - item / ~ item        unordered / ordered list item
    > quote                quote
    $ term / ^ note / : c  definition / footnote / table cell
    @name params ... @end  verbatim ranged tag
    |name params ... |end  ranged tag
    .name params           infirm tag
    #name / +name          strong / weak carryover tag
    anything else          paragraph text, until a blank line

Inline links: ``{:path:}[label]``, ``{:path:* Heading}``, ``{* Heading}``,
``{https://example.com}[label]``.

Thread Safety:
A Parser instance holds per-parse state; create one per document.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from norgrender.errors import ParseError
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
    Paragraph,
    RangeableDetachedModifier,
    RangedTag,
    Text,
    VerbatimRangedTag,
)
from norgrender.utils.logger import get_logger
from norgrender.utils.text import slugify

logger = get_logger(__name__)

_HEADING = re.compile(r"(\*+)\s+(.*)")
_STATUS = re.compile(r"\(([ x\-=_!+?])\)\s+(.*)")
_DELIMITER = re.compile(r"-{3,}|={3,}|_{3,}")
_NESTABLE = re.compile(r"(-+|~+|>+)\s+(.*)")
_RANGEABLE = re.compile(r"([$^:])\s+(.*)")
_VERBATIM = re.compile(r"@([A-Za-z][\w.-]*)(.*)")
_RANGED = re.compile(r"\|([A-Za-z][\w.-]*)(.*)")
_INFIRM = re.compile(r"\.([A-Za-z][\w.-]*)(.*)")
_CARRYOVER = re.compile(r"([#+])([A-Za-z][\w.-]*)(.*)")
_FILE_LINK = re.compile(r":([^:]+):(.*)")
_LINK_MARKER = re.compile(r"[*#$^]+\s*")
_ESCAPE = re.compile(r"\\([{}\[\]\\])")

TODO_STATUSES: dict[str, str] = {
    " ": "undone",
    "x": "done",
    "-": "pending",
    "=": "on_hold",
    "_": "cancelled",
    "!": "urgent",
    "+": "recurring",
    "?": "uncertain",
}

_NESTABLE_TYPES = {"-": "unordered_list", "~": "ordered_list", ">": "quote"}
_RANGEABLE_TYPES = {"$": "definition", "^": "footnote", ":": "table_cell"}


@dataclass(slots=True)
class _OpenHeading:
    """A heading whose content is still being collected."""

    level: int
    title: tuple[Inline, ...]
    extensions: tuple[str, ...]
    location: SourceLocation
    content: list[Block] = field(default_factory=list)

    def close(self, end_lineno: int) -> Heading:
        loc = SourceLocation(
            lineno=self.location.lineno,
            col_offset=self.location.col_offset,
            end_lineno=end_lineno,
            source_file=self.location.source_file,
        )
        return Heading(
            location=loc,
            level=self.level,
            title=self.title,
            extensions=self.extensions,
            content=tuple(self.content),
        )


class Parser:
    """Parse Norg source into a list of top-level blocks.

    Usage:
        >>> blocks = Parser("* Intro\\nHello").parse()
        >>> blocks[0].level, len(blocks[0].content)
        (1, 1)

    """

    __slots__ = ("_lines", "_pos", "_first_lineno", "_source_file", "_root", "_stack")

    def __init__(
        self,
        source: str,
        *,
        source_file: str | None = None,
        first_lineno: int = 1,
    ) -> None:
        """Initialize parser.

        Args:
            source: Norg source text
            source_file: Path used in locations and error messages
            first_lineno: Line number of the first line of ``source``; used
                when parsing the body of a ranged tag
        """
        self._lines = source.splitlines()
        self._pos = 0
        self._first_lineno = first_lineno
        self._source_file = source_file
        self._root: list[Block] = []
        self._stack: list[_OpenHeading] = []

    def parse(self) -> list[Block]:
        """Parse the whole source.

        Raises:
            ParseError: A ranged tag is unterminated or an ``@end`` /
                ``|end`` appears without an opening tag.
        """
        while self._pos < len(self._lines):
            raw = self._lines[self._pos]
            line = raw.strip()
            if not line:
                self._pos += 1
                continue

            loc = self._location(raw)
            heading = _HEADING.fullmatch(line)
            if heading:
                self._open_heading(len(heading.group(1)), heading.group(2), loc)
                self._pos += 1
            elif _DELIMITER.fullmatch(line):
                self._delimit(line[0], loc)
                self._pos += 1
            else:
                self._emit(self._parse_block(line, loc))

        self._close_headings(0)
        return self._root

    # =========================================================================
    # Heading structure
    # =========================================================================

    def _open_heading(self, level: int, rest: str, loc: SourceLocation) -> None:
        self._close_headings(level)
        extensions: tuple[str, ...] = ()
        status = _STATUS.fullmatch(rest)
        if status:
            extensions = (TODO_STATUSES[status.group(1)],)
            rest = status.group(2)
        self._stack.append(
            _OpenHeading(
                level=level,
                title=parse_inline(rest.strip(), loc),
                extensions=extensions,
                location=loc,
            )
        )

    def _close_headings(self, level: int) -> None:
        """Close open headings whose level is >= ``level``."""
        while self._stack and self._stack[-1].level >= level:
            self._close_innermost()

    def _close_innermost(self) -> None:
        heading = self._stack.pop().close(self._current_lineno() - 1)
        self._emit(heading)

    def _delimit(self, char: str, loc: SourceLocation) -> None:
        if char == "-":
            if self._stack:
                self._close_innermost()
        elif char == "=":
            self._close_headings(0)
        else:
            self._emit(HorizontalRule(location=loc))

    def _emit(self, block: Block) -> None:
        if self._stack:
            self._stack[-1].content.append(block)
        else:
            self._root.append(block)

    # =========================================================================
    # Blocks
    # =========================================================================

    def _parse_block(self, line: str, loc: SourceLocation) -> Block:
        """Parse the block starting at the current line and advance past it."""
        match = _NESTABLE.fullmatch(line)
        if match:
            marker = match.group(1)
            self._pos += 1
            return NestableDetachedModifier(
                location=loc,
                modifier_type=_NESTABLE_TYPES[marker[0]],
                level=len(marker),
                content=self._inline_content(match.group(2), loc),
            )

        match = _RANGEABLE.fullmatch(line)
        if match:
            self._pos += 1
            return RangeableDetachedModifier(
                location=loc,
                modifier_type=_RANGEABLE_TYPES[match.group(1)],
                title=parse_inline(match.group(2).strip(), loc),
                content=self._inline_content("", loc),
            )

        match = _VERBATIM.fullmatch(line)
        if match:
            name, params = match.group(1), _split_params(match.group(2))
            body = self._collect_until("@", name, loc)
            return VerbatimRangedTag(
                location=loc, name=name, parameters=params, content="\n".join(body)
            )

        match = _RANGED.fullmatch(line)
        if match:
            name, params = match.group(1), _split_params(match.group(2))
            body_lineno = loc.lineno + 1
            body = self._collect_until("|", name, loc)
            inner = Parser(
                "\n".join(body), source_file=self._source_file, first_lineno=body_lineno
            ).parse()
            return RangedTag(location=loc, name=name, parameters=params, content=tuple(inner))

        match = _INFIRM.fullmatch(line)
        if match:
            self._pos += 1
            return InfirmTag(
                location=loc, name=match.group(1), parameters=_split_params(match.group(2))
            )

        match = _CARRYOVER.fullmatch(line)
        if match:
            self._pos += 1
            return CarryoverTag(
                location=loc,
                tag_type="strong" if match.group(1) == "#" else "weak",
                name=match.group(2),
                parameters=_split_params(match.group(3)),
            )

        return self._parse_paragraph(loc)

    def _parse_paragraph(self, loc: SourceLocation) -> Paragraph:
        lines = [self._lines[self._pos].strip()]
        self._pos += 1
        lines.extend(self._continuation_lines())
        return Paragraph(location=loc, children=parse_inline(" ".join(lines), loc))

    def _inline_content(self, first: str, loc: SourceLocation) -> tuple[Block, ...]:
        """Paragraph made of ``first`` plus continuation lines, if any."""
        lines = [first.strip()] if first.strip() else []
        lines.extend(self._continuation_lines())
        if not lines:
            return ()
        return (Paragraph(location=loc, children=parse_inline(" ".join(lines), loc)),)

    def _continuation_lines(self) -> list[str]:
        lines: list[str] = []
        while self._pos < len(self._lines):
            line = self._lines[self._pos].strip()
            if not line or _is_structural(line):
                break
            lines.append(line)
            self._pos += 1
        return lines

    def _collect_until(self, prefix: str, name: str, loc: SourceLocation) -> list[str]:
        """Collect raw lines up to the matching ``@end`` / ``|end``.

        Standard ranged tags nest, so inner ``|name`` openers must be closed
        before the outer ``|end`` counts. Verbatim bodies are raw and never
        nest.
        """
        if name == "end":
            raise ParseError(
                f"'{prefix}end' without an opening tag",
                lineno=loc.lineno,
                col_offset=loc.col_offset,
                source_file=self._source_file,
            )

        terminator = f"{prefix}end"
        self._pos += 1
        body: list[str] = []
        depth = 0
        while self._pos < len(self._lines):
            raw = self._lines[self._pos]
            self._pos += 1
            stripped = raw.strip()
            if stripped == terminator:
                if depth == 0:
                    return body
                depth -= 1
            elif prefix == "|":
                opener = _RANGED.fullmatch(stripped)
                if opener and opener.group(1) != "end":
                    depth += 1
            body.append(raw)

        raise ParseError(
            f"Unterminated ranged tag '{prefix}{name}' (expected '{terminator}')",
            lineno=loc.lineno,
            col_offset=loc.col_offset,
            source_file=self._source_file,
        )

    # =========================================================================
    # Locations
    # =========================================================================

    def _current_lineno(self) -> int:
        return self._pos + self._first_lineno

    def _location(self, raw: str) -> SourceLocation:
        return SourceLocation(
            lineno=self._current_lineno(),
            col_offset=len(raw) - len(raw.lstrip()) + 1,
            source_file=self._source_file,
        )


def _is_structural(line: str) -> bool:
    """True if ``line`` starts a construct other than paragraph text."""
    return any(
        pattern.fullmatch(line)
        for pattern in (
            _HEADING,
            _DELIMITER,
            _NESTABLE,
            _RANGEABLE,
            _VERBATIM,
            _RANGED,
            _INFIRM,
            _CARRYOVER,
        )
    )


def _split_params(text: str) -> tuple[str, ...]:
    return tuple(text.split())


# =============================================================================
# Inline
# =============================================================================


def parse_inline(text: str, loc: SourceLocation) -> tuple[Inline, ...]:
    """Split ``text`` into Text and Link segments.

    A ``{`` that has no closing ``}`` or encloses nothing is kept as text.
    ``\\{``, ``\\}``, ``\\[`` and ``\\]`` produce literal characters, also
    inside link targets and labels.

    Examples:
        >>> loc = SourceLocation.unknown()
        >>> [type(s).__name__ for s in parse_inline("see {:a/b:}[b] now", loc)]
        ['Text', 'Link', 'Text']

    """
    segments: list[Inline] = []
    buffer: list[str] = []
    i = 0
    n = len(text)

    def flush() -> None:
        if buffer:
            segments.append(Text(location=loc, content="".join(buffer)))
            buffer.clear()

    while i < n:
        char = text[i]
        if char == "\\" and i + 1 < n and text[i + 1] in "{}[]\\":
            buffer.append(text[i + 1])
            i += 2
            continue

        if char == "{":
            close = _find_closer(text, i + 1, "}")
            raw_target = _unescape(text[i + 1 : close]).strip() if close != -1 else ""
            if raw_target:
                label: tuple[Inline, ...] = ()
                end = close + 1
                if end < n and text[end] == "[":
                    label_close = _find_closer(text, end + 1, "]")
                    if label_close != -1:
                        label = parse_inline(text[end + 1 : label_close], loc)
                        end = label_close + 1
                flush()
                segments.append(Link(location=loc, target=normalize_target(raw_target), label=label))
                i = end
                continue

        buffer.append(char)
        i += 1

    flush()
    return tuple(segments)


def normalize_target(raw: str) -> str:
    """Strip Norg link syntax from a target.

    Examples:
        >>> normalize_target(":abc/def:")
        'abc/def'
        >>> normalize_target(":abc/def:* Getting Started")
        'abc/def#getting-started'
        >>> normalize_target("* Getting Started")
        '#getting-started'
        >>> normalize_target("https://example.com")
        'https://example.com'

    """
    file_link = _FILE_LINK.fullmatch(raw)
    if file_link:
        path, anchor = file_link.group(1).strip(), file_link.group(2).strip()
        if anchor:
            return f"{path}#{_anchor(anchor)}"
        return path

    if _LINK_MARKER.match(raw):
        return f"#{_anchor(raw)}"
    return raw


def _find_closer(text: str, start: int, closer: str) -> int:
    """Index of the first unescaped ``closer`` at or after ``start``, or -1."""
    i = start
    n = len(text)
    while i < n:
        char = text[i]
        if char == "\\" and i + 1 < n:
            i += 2
            continue
        if char == closer:
            return i
        i += 1
    return -1


def _unescape(text: str) -> str:
    return _ESCAPE.sub(r"\1", text)


def _anchor(text: str) -> str:
    return slugify(_LINK_MARKER.sub("", text, count=1))


def parse(source: str, *, source_file: str | None = None) -> Document:
    """Parse Norg source into a Document.

    Args:
        source: Norg source text
        source_file: Optional source path for locations and errors

    Returns:
        Document AST root node

    Raises:
        ParseError: The source could not be parsed

    """
    blocks = Parser(source, source_file=source_file).parse()
    logger.debug("Parsed %d top-level blocks from %s", len(blocks), source_file or "<string>")
    loc = SourceLocation(
        lineno=1,
        col_offset=1,
        end_lineno=max(1, len(source.splitlines())),
        source_file=source_file,
    )
    return Document(location=loc, children=tuple(blocks), source_file=source_file)
