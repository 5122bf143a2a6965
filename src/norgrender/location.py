"""Source location tracking for AST nodes and parse errors.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Position of a node in the Norg source.

    All positions are 1-indexed.

    Attributes:
        lineno: Starting line number
        col_offset: Starting column
        end_lineno: Last line covered by the node (optional)
        source_file: Source file path (optional)

    Examples:
        >>> loc = SourceLocation(3, 1, source_file="notes/index.norg")
        >>> str(loc)
        'notes/index.norg:3:1'
    """

    lineno: int
    col_offset: int
    end_lineno: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Placeholder location for synthetic nodes."""
        return cls(lineno=0, col_offset=0)
