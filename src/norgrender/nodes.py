"""Typed AST nodes for Norg documents.

All AST nodes are frozen dataclasses with slots, so a parsed tree can be
shared freely and matched with ``match`` statements.

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Document
│   ├── Heading
│   ├── Paragraph
│   ├── NestableDetachedModifier
│   ├── RangeableDetachedModifier
│   ├── VerbatimRangedTag
│   ├── RangedTag
│   ├── InfirmTag
│   ├── CarryoverTag
│   └── HorizontalRule
└── Inline (inline segments)
    ├── Text
    └── Link

Only Paragraph and Heading are rendered. The remaining block kinds are
produced by the parser so that nothing in the source is lost silently at
parse time; the renderer decides what to do with them.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from norgrender.location import SourceLocation


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes."""

    location: SourceLocation


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text, emitted verbatim."""

    content: str


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    Norg: {:path/to/file:}[label], {https://example.com}[label]

    ``target`` holds the reference without Norg delimiters: ``path/to/file``
    for a file link, ``https://example.com`` for a URL. An empty ``label``
    means the target itself is shown.

    """

    target: str
    label: tuple[Inline, ...] = ()


type Inline = Text | Link


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block.

    HTML: <p>text</p>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """Heading with the blocks it owns.

    Norg: ``* Title`` through ``****** Title``. A heading owns every block
    up to the next heading of the same or a lower level, so nested headings
    appear in ``content``.

    ``extensions`` holds detached modifier extensions such as TODO states
    (``"done"``, ``"pending"``, ...).

    """

    level: int
    title: tuple[Inline, ...]
    extensions: tuple[str, ...] = ()
    content: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True)
class NestableDetachedModifier(Node):
    """List item or quote.

    Norg: ``- item``, ``~ item``, ``> quote``

    """

    modifier_type: Literal["unordered_list", "ordered_list", "quote"]
    level: int
    content: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True)
class RangeableDetachedModifier(Node):
    """Definition, footnote or table cell.

    Norg: ``$ term``, ``^ note``, ``: cell``

    """

    modifier_type: Literal["definition", "footnote", "table_cell"]
    title: tuple[Inline, ...]
    content: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True)
class VerbatimRangedTag(Node):
    """Verbatim block such as ``@code python ... @end``."""

    name: str
    parameters: tuple[str, ...]
    content: str


@dataclass(frozen=True, slots=True)
class RangedTag(Node):
    """Standard ranged tag such as ``|example ... |end``."""

    name: str
    parameters: tuple[str, ...]
    content: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True)
class InfirmTag(Node):
    """Single-line tag such as ``.image path/to/file.png``."""

    name: str
    parameters: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CarryoverTag(Node):
    """Tag that applies to the next block.

    Norg: ``#name params`` (strong) or ``+name params`` (weak)

    """

    tag_type: Literal["strong", "weak"]
    name: str
    parameters: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class HorizontalRule(Node):
    """Horizontal rule (``___``)."""


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root node produced by the parser."""

    children: tuple[Block, ...]
    source_file: str | None = None


type Block = (
    Document
    | Heading
    | Paragraph
    | NestableDetachedModifier
    | RangeableDetachedModifier
    | VerbatimRangedTag
    | RangedTag
    | InfirmTag
    | CarryoverTag
    | HorizontalRule
)
