"""
Brainfuck Instruction Definitions
=================================

The eight Brainfuck instructions and the immutable sequence type that
carries them from the lexer to the code generator.

| Char | Instruction  | Effect                              |
|------|--------------|-------------------------------------|
| >    | MOVE_RIGHT   | move the tape pointer one cell right |
| <    | MOVE_LEFT    | move the tape pointer one cell left  |
| +    | INCREMENT    | add one to the current cell          |
| -    | DECREMENT    | subtract one from the current cell   |
| .    | OUTPUT       | write the current cell as a char     |
| ,    | INPUT        | read one char into the current cell  |
| [    | LOOP_START   | skip past the loop if cell is zero   |
| ]    | LOOP_END     | repeat the loop if cell is non-zero  |
"""

from collections.abc import Sequence
from enum import Enum
from typing import Iterable, Iterator, Optional, overload


class Instruction(Enum):
    """A single Brainfuck instruction. The value is its source character."""

    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_START = "["
    LOOP_END = "]"

    @property
    def char(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, char: str) -> Optional["Instruction"]:
        """Return the instruction for char, or None for a comment character."""
        return _CHAR_TO_INSTRUCTION.get(char)


# Map source characters to instructions (built once, enum is fixed)
_CHAR_TO_INSTRUCTION: dict[str, Instruction] = {i.value: i for i in Instruction}

#: The Brainfuck alphabet, in canonical order
ALPHABET = "".join(_CHAR_TO_INSTRUCTION)


class InstructionSequence(Sequence):
    """
    Ordered, immutable sequence of instructions in source order.

    Each instruction remembers the 0-based offset of its character in the
    original source so later stages can report errors against the text
    the user wrote. A sequence built without positions uses the
    instruction index instead.

    Two sequences compare equal when their instructions are equal;
    positions and filenames are diagnostic metadata only.

    Attributes:
        source: The original source text (empty if built from instructions)
        filename: Source filename for error messages
    """

    def __init__(
        self,
        instructions: Iterable[Instruction] = (),
        positions: Optional[Iterable[int]] = None,
        source: str = "",
        filename: str = "<input>",
    ):
        self._instructions: tuple[Instruction, ...] = tuple(instructions)
        if positions is None:
            self._positions: tuple[int, ...] = tuple(range(len(self._instructions)))
        else:
            self._positions = tuple(positions)
            if len(self._positions) != len(self._instructions):
                raise ValueError("positions must match instructions one-to-one")
        self.source = source
        self.filename = filename

    @classmethod
    def from_instructions(cls, instructions: Iterable[Instruction]) -> "InstructionSequence":
        """Wrap bare instructions, passing an existing sequence through."""
        if isinstance(instructions, cls):
            return instructions
        return cls(instructions)

    @overload
    def __getitem__(self, index: int) -> Instruction: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Instruction, ...]: ...

    def __getitem__(self, index):
        return self._instructions[index]

    def __len__(self) -> int:
        return len(self._instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._instructions)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InstructionSequence):
            return self._instructions == other._instructions
        if isinstance(other, (list, tuple)):
            return list(self._instructions) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._instructions)

    def __repr__(self) -> str:
        return f"InstructionSequence({self.to_source()!r})"

    @property
    def positions(self) -> tuple[int, ...]:
        return self._positions

    def position_of(self, index: int) -> int:
        """Return the source offset of the instruction at index."""
        return self._positions[index]

    def to_source(self) -> str:
        """Render the sequence back to alphabet-only Brainfuck text."""
        return "".join(i.value for i in self._instructions)

    def count(self, instruction: Instruction) -> int:
        return self._instructions.count(instruction)
