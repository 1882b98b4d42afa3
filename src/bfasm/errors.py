"""
bfasm Error Hierarchy
=====================

This module defines the exception hierarchy for the Brainfuck compiler.
All exceptions inherit from BfasmError, allowing callers to catch every
compiler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
BfasmError (base)
├── CompileError (source-level errors)
│   └── UnbalancedLoopError - unmatched '[' or ']'
└── CompilerConfigError - invalid compiler options

Error Message Format
--------------------
Compile errors include source location information and follow this format:

    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing

Example:
    hello.bf:3:7: error: unmatched ']'
        ++>--]
             ^
    hint: remove the ']' or add a matching '[' before it
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class BfasmError(Exception):
    """
    Base exception for all bfasm errors.

        try:
            compile_bf(source)
        except BfasmError as e:
            print(f"Error: {e}")
    """
    pass


class CompilerConfigError(BfasmError):
    """Invalid compiler configuration (tape size, symbol names)."""
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"

    @classmethod
    def from_offset(cls, source: str, offset: int, filename: str = "<input>") -> "SourceLocation":
        """
        Build a location from a 0-based character offset into source.

        Args:
            source: The full source text
            offset: Character index of the location
            filename: Source filename for display
        """
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(filename, line, offset - line_start + 1)


def source_line_at(source: str, offset: int) -> str:
    """Return the text of the line containing offset (without newline)."""
    line_start = source.rfind("\n", 0, offset) + 1
    line_end = source.find("\n", offset)
    if line_end == -1:
        line_end = len(source)
    return source[line_start:line_end]


# =============================================================================
# Compile Errors
# =============================================================================

class CompileError(BfasmError):
    """
    Base exception for errors found in Brainfuck source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.bf:1:2: error: unterminated loop '['
                [[
                 ^
            hint: add a matching ']' to close the loop
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                # Keep tabs so the caret lines up however tabs are rendered
                prefix = self.source_line[:self.location.column - 1]
                padding = "".join("\t" if c == "\t" else " " for c in prefix)
                parts.append(f"    {padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnbalancedLoopError(CompileError):
    """
    Unmatched loop bracket.

    Raised when a ']' has no open '[' before it, or when a '[' is
    still open at the end of the program.

    Attributes:
        position: 0-based offset of the offending bracket
        bracket: The offending character, '[' or ']'
    """

    def __init__(
        self,
        position: int,
        bracket: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.position = position
        self.bracket = bracket

        if bracket == "]":
            message = "unmatched ']'"
            hint = "remove the ']' or add a matching '[' before it"
        else:
            message = "unterminated loop '['"
            hint = "add a matching ']' to close the loop"

        if location is None:
            message = f"{message} at position {position}"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )
