"""Shared fixtures for norgrender tests."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from norgrender.engine import JinjaTemplateEngine
from norgrender.errors import TemplateError
from norgrender.helpers import register_helpers
from norgrender.location import SourceLocation
from norgrender.renderers.html import HtmlRenderer


class RecordingEngine:
    """In-memory TemplateEngine using ``str.format`` templates.

    Records every render call so tests can assert on the exact context a
    template received.
    """

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        self.templates: dict[str, str] = dict(templates or {})
        self.helpers: dict[str, Callable[..., Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def register_template(self, name: str, source: str) -> None:
        self.templates[name] = source

    def register_helper(self, name: str, func: Callable[..., Any]) -> None:
        self.helpers[name] = func

    def has_template(self, name: str) -> bool:
        return name in self.templates

    def render_template(self, name: str, context: Mapping[str, Any]) -> str:
        if name not in self.templates:
            raise TemplateError(name, "template not found")
        self.calls.append((name, dict(context)))
        return self.templates[name].format(**context)


FORMAT_TEMPLATES = {
    "paragraph": "<p>{para}</p>",
    **{f"heading-{n}": "<h{level}>{title}</h{level}>{content}" for n in range(1, 7)},
}


@pytest.fixture
def loc() -> SourceLocation:
    return SourceLocation(1, 1)


@pytest.fixture
def engine() -> JinjaTemplateEngine:
    """Jinja engine with bundled templates and helpers registered."""
    return JinjaTemplateEngine.with_defaults()


@pytest.fixture
def renderer(engine: JinjaTemplateEngine) -> HtmlRenderer:
    return HtmlRenderer(engine)


@pytest.fixture
def recording_engine() -> RecordingEngine:
    engine = RecordingEngine(FORMAT_TEMPLATES)
    register_helpers(engine)
    return engine
