"""AST dump for inspecting what the parser produced."""

from __future__ import annotations

import pprint
from pathlib import Path

from norgrender.errors import NorgRenderError
from norgrender.parser import parse
from norgrender.utils.logger import get_logger

logger = get_logger(__name__)


def dump_ast(path: str | Path) -> str:
    """Parse the Norg file at ``path`` and return a readable dump of its AST.

    The dump is also logged at DEBUG level.

    Raises:
        NorgRenderError: The file could not be read
        ParseError: The file could not be parsed

    """
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as e:
        raise NorgRenderError(f"Couldn't read {path}") from e

    doc = parse(source, source_file=str(path))
    dump = pprint.pformat(doc.children, sort_dicts=False)
    logger.debug("AST for %s:\n%s", path, dump)
    return dump
