"""Template engine boundary.

The renderer only needs two things from a template engine: a way to
register named templates and helpers, and a way to render a named template
with a mapping. ``TemplateEngine`` captures that contract so tests can swap
in an in-memory fake; ``JinjaTemplateEngine`` is the production adapter.

Example:
    >>> engine = JinjaTemplateEngine()
    >>> engine.register_template("paragraph", "<p>{{ para }}</p>")
    >>> engine.render_template("paragraph", {"para": "Hello"})
    '<p>Hello</p>'

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

import jinja2

from norgrender.config import RenderConfig
from norgrender.errors import TemplateError
from norgrender.helpers import register_helpers
from norgrender.utils.logger import get_logger

logger = get_logger(__name__)


class TemplateEngine(Protocol):
    """Protocol for the template service used by the renderer."""

    def register_template(self, name: str, source: str) -> None:
        """Register (or replace) template ``name`` with ``source``."""
        ...

    def register_helper(self, name: str, func: Callable[..., Any]) -> None:
        """Expose ``func`` to every template under ``name``."""
        ...

    def has_template(self, name: str) -> bool:
        """Return True if ``name`` can be rendered."""
        ...

    def render_template(self, name: str, context: Mapping[str, Any]) -> str:
        """Render template ``name`` with ``context``.

        Raises:
            TemplateError: The template is missing or failed to render.

        """
        ...


class JinjaTemplateEngine:
    """Jinja2-backed TemplateEngine.

    Templates are looked up in order: templates registered at runtime,
    then ``template_dir`` (if given), then the templates bundled with
    norgrender (if ``include_defaults``).

    Autoescaping is off. Rendered child fragments and composed inline
    buffers are already HTML and are spliced into parent templates as-is.
    Undefined template variables raise instead of rendering as empty.

    Thread Safety:
        Register everything before rendering starts. Rendering afterwards
        only reads the environment and is safe to share.

    """

    __slots__ = ("_sources", "_env")

    def __init__(
        self,
        template_dir: str | Path | None = None,
        *,
        include_defaults: bool = False,
    ) -> None:
        self._sources: dict[str, str] = {}
        loaders: list[jinja2.BaseLoader] = [jinja2.DictLoader(self._sources)]
        if template_dir is not None:
            loaders.append(jinja2.FileSystemLoader(str(template_dir)))
        if include_defaults:
            loaders.append(jinja2.PackageLoader("norgrender", "templates"))

        self._env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=False,
        )

    @classmethod
    def with_defaults(
        cls,
        template_dir: str | Path | None = None,
        config: RenderConfig | None = None,
    ) -> JinjaTemplateEngine:
        """Create an engine with bundled templates and all helpers registered.

        Args:
            template_dir: Optional directory whose templates take precedence
                over the bundled ones
            config: RenderConfig used for helper registration (defaults to
                the active config)

        """
        engine = cls(template_dir, include_defaults=True)
        register_helpers(engine, config)
        return engine

    def register_template(self, name: str, source: str) -> None:
        logger.debug("Registering template %r", name)
        self._sources[name] = source

    def register_helper(self, name: str, func: Callable[..., Any]) -> None:
        logger.debug("Registering helper %r", name)
        self._env.globals[name] = func

    def has_template(self, name: str) -> bool:
        if name in self._sources:
            return True
        try:
            self._env.loader.get_source(self._env, name)
        except jinja2.TemplateNotFound:
            return False
        return True

    def render_template(self, name: str, context: Mapping[str, Any]) -> str:
        try:
            template = self._env.get_template(name)
        except jinja2.TemplateNotFound as e:
            raise TemplateError(name, "template not found") from e
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(name, f"syntax error on line {e.lineno}: {e.message}") from e

        try:
            return template.render(dict(context))
        except jinja2.TemplateNotFound as e:
            raise TemplateError(name, f"template not found: {e.name}") from e
        except jinja2.TemplateError as e:
            raise TemplateError(name, str(e)) from e
