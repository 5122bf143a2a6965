"""Tests for the AST dump utility."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from norgrender import dump_ast
from norgrender.errors import NorgRenderError, ParseError


class TestDumpAst:
    """dump_ast reads, parses and pretty-prints a file."""

    def test_dump(self, tmp_path: Path) -> None:
        path = tmp_path / "index.norg"
        path.write_text("* Intro\n{:abc/def:}[link to def]\n", encoding="utf-8")

        dump = dump_ast(path)

        assert "Heading(" in dump
        assert "Link(" in dump
        assert "target='abc/def'" in dump
        assert str(path) in dump

    def test_logged_at_debug(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        path = tmp_path / "a.norg"
        path.write_text("Hello", encoding="utf-8")
        with caplog.at_level(logging.DEBUG, logger="norgrender"):
            dump_ast(str(path))
        assert "AST for" in caplog.text
        assert "Paragraph(" in caplog.text

    def test_missing_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "nope.norg"
        with pytest.raises(NorgRenderError, match="Couldn't read") as excinfo:
            dump_ast(missing)
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.norg"
        path.write_text("@code\nno end\n", encoding="utf-8")
        with pytest.raises(ParseError) as excinfo:
            dump_ast(path)
        assert excinfo.value.source_file == str(path)
