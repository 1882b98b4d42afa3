"""
Brainfuck Lexer and Bracket Validator
=====================================

This module converts Brainfuck source text into an InstructionSequence.

Comments
--------
Every character outside the eight-symbol alphabet ``> < + - . , [ ]``
is a comment and is dropped. There are no lexical errors: letters,
digits, whitespace and any other characters are simply skipped, which
keeps the lexer compatible with the usual Brainfuck test corpora.

Bracket Validation
------------------
The lexer checks loop balance while scanning:

- A ']' with no open '[' raises UnbalancedLoopError at the ']'.
- A '[' still open at the end of input raises UnbalancedLoopError at
  the innermost unclosed '['.

Example Usage
-------------
>>> from bfasm.lexer import lex
>>> program = lex("+[-]. the rest is a comment")
>>> program.to_source()
'+[-].'
>>> program.positions
(0, 1, 2, 3, 4)
"""

import logging

from bfasm.errors import SourceLocation, UnbalancedLoopError, source_line_at
from bfasm.instructions import Instruction, InstructionSequence


logger = logging.getLogger(__name__)


class BrainfuckLexer:
    """
    Tokenizes Brainfuck source code.

    Usage:
        lexer = BrainfuckLexer(source_text, filename)
        program = lexer.tokenize()

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

    def tokenize(self) -> InstructionSequence:
        """
        Scan the whole source and return its instructions.

        Returns:
            InstructionSequence in source order, with source offsets

        Raises:
            UnbalancedLoopError: If the loop brackets do not match
        """
        instructions: list[Instruction] = []
        positions: list[int] = []

        # Offsets of '[' not yet closed
        open_loops: list[int] = []

        for offset, char in enumerate(self.source):
            instruction = Instruction.from_char(char)
            if instruction is None:
                continue

            if instruction is Instruction.LOOP_START:
                open_loops.append(offset)
            elif instruction is Instruction.LOOP_END:
                if not open_loops:
                    raise self._unbalanced(offset, "]")
                open_loops.pop()

            instructions.append(instruction)
            positions.append(offset)

        if open_loops:
            raise self._unbalanced(open_loops[-1], "[")

        logger.debug(
            f"Lexed {len(instructions)} instructions from {self.filename} "
            f"({len(self.source) - len(instructions)} comment characters)"
        )
        return InstructionSequence(
            instructions,
            positions,
            source=self.source,
            filename=self.filename,
        )

    def _unbalanced(self, offset: int, bracket: str) -> UnbalancedLoopError:
        """Create an UnbalancedLoopError pointing at offset."""
        logger.debug(f"Unbalanced '{bracket}' at offset {offset} in {self.filename}")
        return UnbalancedLoopError(
            offset,
            bracket,
            location=SourceLocation.from_offset(self.source, offset, self.filename),
            source_line=source_line_at(self.source, offset),
        )


def lex(source: str, filename: str = "<input>") -> InstructionSequence:
    """
    Convert Brainfuck source text into an InstructionSequence.

    Args:
        source: Brainfuck source (any text; non-alphabet chars are comments)
        filename: Source filename for error messages

    Returns:
        The instructions in source order

    Raises:
        UnbalancedLoopError: If the loop brackets do not match
    """
    return BrainfuckLexer(source, filename).tokenize()
