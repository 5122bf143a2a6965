"""Exception classes for norgrender.

Every failure is fail-fast: the first error aborts the enclosing node and
every ancestor. Each layer wraps the error it caught with ``raise ... from``
so the top-level caller receives one exception whose ``__cause__`` chain
describes the full context.
"""

from __future__ import annotations


class NorgRenderError(Exception):
    """Base exception for all norgrender errors.

    Subclass this for specific error categories.
    """

    def context_chain(self) -> list[str]:
        """Return messages from this error down through its causes.

        Returns:
            Outermost message first, root cause last.

        Example:
            >>> try:
            ...     try:
            ...         raise ValueError("bad target")
            ...     except ValueError as e:
            ...         raise CompositionError("Failed to construct paragraph") from e
            ... except CompositionError as err:
            ...     err.context_chain()
            ['Failed to construct paragraph', 'bad target']
        """
        chain: list[str] = []
        current: BaseException | None = self
        while current is not None:
            chain.append(str(current))
            current = current.__cause__
        return chain

    def root_cause(self) -> BaseException:
        """Return the innermost exception of the ``__cause__`` chain."""
        current: BaseException = self
        while current.__cause__ is not None:
            current = current.__cause__
        return current


class ParseError(NorgRenderError):
    """Error while parsing Norg source.

    Reported before rendering ever starts.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class RenderError(NorgRenderError):
    """Error during HTML rendering."""

    pass


class CompositionError(RenderError):
    """An inline segment, paragraph or heading could not be composed.

    Raised for malformed link targets, unknown inline segments and
    unusable heading levels.
    """

    pass


class TemplateError(RenderError):
    """The template engine could not render a context."""

    def __init__(self, template_name: str, message: str) -> None:
        """Initialize template error.

        Args:
            template_name: Name of the template that failed (e.g. "paragraph")
            message: Description of the failure
        """
        self.template_name = template_name
        super().__init__(f"Template '{template_name}': {message}")


class DepthLimitError(RenderError):
    """AST nesting exceeded the configured render depth."""

    def __init__(self, depth: int, limit: int) -> None:
        self.depth = depth
        self.limit = limit
        super().__init__(f"Nesting depth {depth} exceeds limit of {limit}")
