"""ContextVar-based render configuration for norgrender.

Config is an immutable value read by the renderer and link resolver. A
renderer constructed without an explicit config picks up whatever is active
in the current context.

Usage:
    from norgrender.config import RenderConfig, render_config_context

    with render_config_context(RenderConfig(document_extension=".html")):
        html = render_body("{:guide:}[Guide]", engine)

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Literal

DEFAULT_EXTERNAL_SCHEMES: tuple[str, ...] = ("http", "https", "mailto", "ftp", "file", "tel")


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable render configuration.

    Attributes:
        document_extension: Suffix appended to internal document links
        external_schemes: URL schemes whose links are emitted unchanged
        max_depth: Deepest AST nesting the renderer will descend into
        max_heading_level: Highest heading level with its own template
        heading_level_policy: What to do with levels above max_heading_level;
            "clamp" renders them with the highest heading template the engine
            has, "error" raises CompositionError

    """

    document_extension: str = ".norg"
    external_schemes: tuple[str, ...] = DEFAULT_EXTERNAL_SCHEMES
    max_depth: int = 64
    max_heading_level: int = 6
    heading_level_policy: Literal["clamp", "error"] = "clamp"

    def __post_init__(self) -> None:
        if self.heading_level_policy not in ("clamp", "error"):
            raise ValueError(
                f"heading_level_policy must be 'clamp' or 'error', "
                f"got {self.heading_level_policy!r}"
            )
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_heading_level < 1:
            raise ValueError(
                f"max_heading_level must be positive, got {self.max_heading_level}"
            )

    @classmethod
    def from_dict(cls, config_dict: dict) -> "RenderConfig":
        """Create RenderConfig from dictionary.

        Unknown keys are ignored. Lists are accepted for
        ``external_schemes`` and converted to tuples.

        Example:
            >>> config = RenderConfig.from_dict({
            ...     "document_extension": ".html",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.document_extension
            '.html'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "external_schemes" in filtered:
            filtered["external_schemes"] = tuple(filtered["external_schemes"])
        return cls(**filtered)


_DEFAULT_CONFIG: RenderConfig = RenderConfig()

_render_config: ContextVar[RenderConfig] = ContextVar(
    "render_config",
    default=_DEFAULT_CONFIG,
)


def get_render_config() -> RenderConfig:
    """Get the render configuration active in this context."""
    return _render_config.get()


def set_render_config(config: RenderConfig) -> None:
    """Set render configuration for the current context."""
    _render_config.set(config)


def reset_render_config() -> None:
    """Reset to the default configuration."""
    _render_config.set(_DEFAULT_CONFIG)


@contextmanager
def render_config_context(config: RenderConfig) -> Iterator[None]:
    """Temporarily activate ``config``, restoring the previous one on exit.

    Example:
        >>> with render_config_context(RenderConfig(max_depth=8)):
        ...     get_render_config().max_depth
        8

    """
    previous = _render_config.get()
    _render_config.set(config)
    try:
        yield
    finally:
        _render_config.set(previous)


__all__ = [
    "DEFAULT_EXTERNAL_SCHEMES",
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
]
