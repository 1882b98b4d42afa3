"""
Tests for the bfasm error hierarchy and message formatting.
"""

import pytest

from bfasm.errors import (
    BfasmError,
    CompileError,
    CompilerConfigError,
    SourceLocation,
    UnbalancedLoopError,
    source_line_at,
)
from bfasm.lexer import lex


class TestHierarchy:
    """Every error can be caught as BfasmError."""

    def test_unbalanced_is_compile_error(self):
        assert issubclass(UnbalancedLoopError, CompileError)
        assert issubclass(CompileError, BfasmError)

    def test_config_error_is_bfasm_error(self):
        assert issubclass(CompilerConfigError, BfasmError)
        assert not issubclass(CompilerConfigError, CompileError)

    def test_catch_as_base(self):
        with pytest.raises(BfasmError):
            lex("[")


class TestSourceLocation:
    """Offset to line/column conversion."""

    def test_str(self):
        assert str(SourceLocation("a.bf", 3, 7)) == "a.bf:3:7"

    def test_first_character(self):
        assert SourceLocation.from_offset("+]", 0) == SourceLocation("<input>", 1, 1)

    def test_after_newlines(self):
        loc = SourceLocation.from_offset("++\n\n-]", 5, "x.bf")
        assert (loc.line, loc.column) == (3, 2)

    def test_source_line_at(self):
        assert source_line_at("one\ntwo\nthree", 5) == "two"
        assert source_line_at("last", 2) == "last"


class TestMessageFormat:
    """Compile errors render like compiler diagnostics."""

    def test_unmatched_close_message(self):
        with pytest.raises(UnbalancedLoopError) as exc_info:
            lex("++\n+]", "t.bf")
        assert str(exc_info.value) == (
            "t.bf:2:2: error: unmatched ']'\n"
            "    +]\n"
            "     ^\n"
            "hint: remove the ']' or add a matching '[' before it"
        )

    def test_unterminated_message(self):
        with pytest.raises(UnbalancedLoopError) as exc_info:
            lex("[[", "t.bf")
        message = str(exc_info.value)
        assert message.startswith("t.bf:1:2: error: unterminated loop '['")
        assert "hint: add a matching ']' to close the loop" in message

    def test_caret_keeps_tabs(self):
        """Tabs before the error column are kept in the caret line."""
        with pytest.raises(UnbalancedLoopError) as exc_info:
            lex("\t\t]", "t.bf")
        lines = str(exc_info.value).splitlines()
        assert lines[0] == "t.bf:1:3: error: unmatched ']'"
        assert lines[1] == "    \t\t]"
        assert lines[2] == "    \t\t^"

    def test_without_location(self):
        error = UnbalancedLoopError(4, "]")
        assert str(error).startswith("error: unmatched ']' at position 4")

    def test_plain_compile_error(self):
        assert str(CompileError("bad")) == "error: bad"
