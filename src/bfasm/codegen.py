"""
x86-64 Windows Code Generator for Brainfuck
===========================================

This module emits NASM (Intel syntax) assembly for 64-bit Windows from
an InstructionSequence. The output links against the C runtime.

Code Generation Strategy
------------------------
Generation is a single forward pass. Each instruction expands to a
fixed template; only loops are parameterized, by a label number taken
from a counter owned by the pass.

Register and Memory Usage
-------------------------
| Resource | Usage                                            |
|----------|--------------------------------------------------|
| tape     | ``resb`` buffer in .bss, zeroed by the loader    |
| rbx      | Tape pointer (callee-saved, survives CRT calls)  |
| ecx      | First argument to putchar                        |
| al       | Result of _getch                                 |

Instruction Templates
---------------------
| BF | Assembly                                              |
|----|-------------------------------------------------------|
| >  | inc rbx                                               |
| <  | dec rbx                                               |
| +  | inc byte [rbx]                                        |
| -  | dec byte [rbx]                                        |
| .  | movzx ecx, byte [rbx] / call putchar                  |
| ,  | call _getch / mov [rbx], al                           |
| [  | cmp byte [rbx], 0 / je LOOP_END_n / LOOP_BODY_n:      |
| ]  | cmp byte [rbx], 0 / jne LOOP_BODY_n / LOOP_END_n:     |

The tape pointer is not bounds checked. Moving outside the tape is
undefined behaviour at run time, not a compile error.

Stack Frame
-----------
The Windows x64 ABI requires 16-byte stack alignment at each call and
32 bytes of shadow space for the callee:

    +----------------+ <- RSP on entry (8 mod 16)
    | Saved RBP      |
    +----------------+ <- RBP
    | Saved RBX      |
    +----------------+
    | 40 bytes       |  (32 shadow + 8 alignment)
    +----------------+ <- RSP during body (0 mod 16)

Usage
-----
>>> from bfasm.lexer import lex
>>> from bfasm.codegen import CodeGenerator
>>> asm = CodeGenerator().generate(lex("+[-]"), "clear")
"""

import logging
import re
from typing import Iterable, Optional, Union

from bfasm.errors import (
    CompilerConfigError,
    SourceLocation,
    UnbalancedLoopError,
    source_line_at,
)
from bfasm.instructions import Instruction, InstructionSequence


logger = logging.getLogger(__name__)


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_TAPE_SIZE = 30000
DEFAULT_ENTRY_SYMBOL = "main"
DEFAULT_PUTCHAR_SYMBOL = "putchar"
DEFAULT_GETCHAR_SYMBOL = "_getch"

TAPE_SYMBOL = "tape"
TAPE_POINTER = "rbx"

# 32 bytes shadow space + 8 to restore 16-byte alignment after push rbx
FRAME_SIZE = 40

# Labels the generator defines itself
LOOP_BODY_PREFIX = "LOOP_BODY_"
LOOP_END_PREFIX = "LOOP_END_"

# NASM identifier: letters, digits, _ $ # @ ~ . ?; starts with a letter or _.
# A leading '.' is a local label and cannot be exported.
_SYMBOL_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#@~.?]*$")
_RESERVED_RE = re.compile(rf"^(?:{TAPE_SYMBOL}|{LOOP_BODY_PREFIX}\d+|{LOOP_END_PREFIX}\d+)$")

# x86-64 general purpose, segment and instruction pointer registers
_REGISTERS = frozenset(
    [f"{p}{r}" for r in ("ax", "bx", "cx", "dx", "si", "di", "bp", "sp") for p in ("r", "e", "")]
    + ["al", "ah", "bl", "bh", "cl", "ch", "dl", "dh", "sil", "dil", "bpl", "spl"]
    + [f"r{n}{s}" for n in range(8, 16) for s in ("", "d", "w", "b")]
    + ["cs", "ds", "es", "fs", "gs", "ss", "rip", "eip", "ip"]
)

# Directives, size keywords and mnemonics that appear in the generated code
_KEYWORDS = frozenset([
    "bits", "default", "rel", "abs", "segment", "section", "global", "extern",
    "common", "align", "alignb", "times", "equ", "incbin", "seg", "wrt", "strict",
    "resb", "resw", "resd", "resq", "rest", "reso", "db", "dw", "dd", "dq", "dt", "do",
    "byte", "word", "dword", "qword", "tword", "oword",
    "push", "pop", "mov", "movzx", "lea", "sub", "add", "inc", "dec", "cmp",
    "xor", "call", "ret", "je", "jne", "jmp",
])


def validate_tape_size(tape_size: int) -> int:
    """Check that tape_size is a positive integer and return it."""
    if isinstance(tape_size, bool) or not isinstance(tape_size, int):
        raise CompilerConfigError(f"tape size must be an integer, got {tape_size!r}")
    if tape_size <= 0:
        raise CompilerConfigError(f"tape size must be positive, got {tape_size}")
    return tape_size


def validate_symbol(name: str, role: str) -> str:
    """
    Check that name can be used as an assembler symbol.

    Args:
        name: The symbol name
        role: What the symbol is for, used in the error message

    Raises:
        CompilerConfigError: If the name is not a valid NASM identifier,
            is a register or assembler keyword, or collides with a
            symbol the generator defines itself
    """
    if not isinstance(name, str) or not _SYMBOL_RE.match(name):
        raise CompilerConfigError(f"invalid {role} symbol {name!r}")
    # NASM matches registers and keywords case-insensitively
    if name.lower() in _REGISTERS or name.lower() in _KEYWORDS:
        raise CompilerConfigError(f"{role} symbol {name!r} is a register or assembler keyword")
    if _RESERVED_RE.match(name):
        raise CompilerConfigError(f"{role} symbol {name!r} is reserved by the code generator")
    return name


def validate_symbols(entry_symbol: str, putchar_symbol: str, getchar_symbol: str) -> None:
    """Validate the entry and runtime symbols, which must all differ."""
    validate_symbol(entry_symbol, "entry")
    validate_symbol(putchar_symbol, "putchar")
    validate_symbol(getchar_symbol, "getchar")
    if len({entry_symbol, putchar_symbol, getchar_symbol}) != 3:
        raise CompilerConfigError(
            "entry, putchar and getchar symbols must all be different"
        )


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator:
    """
    Generates x86-64 Windows assembly from Brainfuck instructions.

    Each call to generate() starts from a clean state, so one generator
    can be reused for several programs and label numbers always start
    at 1.

    Attributes:
        tape_size: Tape length in bytes
        entry_symbol: Name of the exported entry point
        putchar_symbol: C runtime function that writes one character
        getchar_symbol: C runtime function that reads one character
        output_comments: Annotate each block with its Brainfuck character
        label_count: Number of loop label pairs used by the last pass
    """

    def __init__(
        self,
        tape_size: int = DEFAULT_TAPE_SIZE,
        entry_symbol: str = DEFAULT_ENTRY_SYMBOL,
        putchar_symbol: str = DEFAULT_PUTCHAR_SYMBOL,
        getchar_symbol: str = DEFAULT_GETCHAR_SYMBOL,
        output_comments: bool = False,
    ):
        self.tape_size = validate_tape_size(tape_size)
        validate_symbols(entry_symbol, putchar_symbol, getchar_symbol)
        self.entry_symbol = entry_symbol
        self.putchar_symbol = putchar_symbol
        self.getchar_symbol = getchar_symbol
        self.output_comments = output_comments

        self._output: list[str] = []
        self._label_counter: int = 0
        self._loop_stack: list[tuple[int, int]] = []  # (label, instruction index)
        self.label_count: int = 0

    def generate(
        self,
        instructions: Union[InstructionSequence, Iterable[Instruction]],
        program_name: str = "program",
    ) -> str:
        """
        Generate a complete assembly source file.

        Args:
            instructions: The program, usually the output of lex()
            program_name: Name shown in the header comment

        Returns:
            NASM source text

        Raises:
            UnbalancedLoopError: If the loop brackets do not match
        """
        program = InstructionSequence.from_instructions(instructions)

        self._output = []
        self._label_counter = 0
        self._loop_stack = []
        self.label_count = 0

        self._emit_header(program_name)

        for index, instruction in enumerate(program):
            self._generate_instruction(instruction, index, program)

        if self._loop_stack:
            _, index = self._loop_stack[-1]
            raise self._unbalanced(program, index, "[")

        self._emit_footer()

        self.label_count = self._label_counter
        logger.debug(
            f"Generated {len(self._output)} lines for '{program_name}' "
            f"({len(program)} instructions, {self.label_count} loops)"
        )
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        """Emit a line of assembly."""
        self._output.append(line)

    def _emit_comment(self, comment: str) -> None:
        self._emit(f"        ; {comment}")

    def _emit_label(self, label: str) -> None:
        """Emit a label definition."""
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operand: str = "") -> None:
        """Emit an instruction with optional operand."""
        if operand:
            self._emit(f"        {mnemonic:<8}{operand}")
        else:
            self._emit(f"        {mnemonic}")

    def _new_label(self) -> int:
        """Allocate the next loop label number."""
        self._label_counter += 1
        return self._label_counter

    # =========================================================================
    # Header and Footer Generation
    # =========================================================================

    def _emit_header(self, program_name: str) -> None:
        """Emit tape reservation, externs and the entry prologue."""
        # Keep the name on the comment line
        name = " ".join(str(program_name).split()) or "program"

        self._emit("; =============================================================================")
        self._emit(f"; {name} - Brainfuck program compiled by bfasm")
        self._emit("; Target: x86-64 Windows, NASM (Intel syntax)")
        self._emit(f"; Tape: {self.tape_size} bytes at '{TAPE_SYMBOL}', pointer in {TAPE_POINTER}")
        self._emit("; =============================================================================")
        self._emit("")
        self._emit("bits 64")
        self._emit("default rel")
        self._emit("")
        self._emit("segment .bss")
        self._emit_instruction(TAPE_SYMBOL, f"resb {self.tape_size}")
        self._emit("")
        self._emit("segment .text")
        self._emit(f"global {self.entry_symbol}")
        self._emit("")
        self._emit(f"extern {self.getchar_symbol}")
        self._emit(f"extern {self.putchar_symbol}")
        self._emit("")
        self._emit_label(self.entry_symbol)
        self._emit_instruction("push", "rbp")
        self._emit_instruction("mov", "rbp, rsp")
        self._emit_instruction("push", TAPE_POINTER)
        self._emit_instruction("sub", f"rsp, {FRAME_SIZE}")
        self._emit_instruction("lea", f"{TAPE_POINTER}, [{TAPE_SYMBOL}]")
        self._emit("")

    def _emit_footer(self) -> None:
        """Emit the epilogue returning exit status 0."""
        self._emit("")
        self._emit_instruction("xor", "eax, eax")
        self._emit_instruction("add", f"rsp, {FRAME_SIZE}")
        self._emit_instruction("pop", TAPE_POINTER)
        self._emit_instruction("pop", "rbp")
        self._emit_instruction("ret")

    # =========================================================================
    # Instruction Generation
    # =========================================================================

    def _generate_instruction(
        self,
        instruction: Instruction,
        index: int,
        program: InstructionSequence,
    ) -> None:
        """Emit the template for one instruction."""
        if self.output_comments:
            self._emit_comment(instruction.char)

        if instruction is Instruction.MOVE_RIGHT:
            self._emit_instruction("inc", TAPE_POINTER)
        elif instruction is Instruction.MOVE_LEFT:
            self._emit_instruction("dec", TAPE_POINTER)
        elif instruction is Instruction.INCREMENT:
            self._emit_instruction("inc", f"byte [{TAPE_POINTER}]")
        elif instruction is Instruction.DECREMENT:
            self._emit_instruction("dec", f"byte [{TAPE_POINTER}]")
        elif instruction is Instruction.OUTPUT:
            self._emit_instruction("movzx", f"ecx, byte [{TAPE_POINTER}]")
            self._emit_instruction("call", self.putchar_symbol)
        elif instruction is Instruction.INPUT:
            self._emit_instruction("call", self.getchar_symbol)
            self._emit_instruction("mov", f"[{TAPE_POINTER}], al")
        elif instruction is Instruction.LOOP_START:
            self._generate_loop_start(index)
        elif instruction is Instruction.LOOP_END:
            self._generate_loop_end(index, program)
        else:
            raise TypeError(f"not a Brainfuck instruction: {instruction!r}")

    def _generate_loop_start(self, index: int) -> None:
        """Skip the loop when the current cell is zero."""
        label = self._new_label()
        self._loop_stack.append((label, index))

        self._emit_instruction("cmp", f"byte [{TAPE_POINTER}], 0")
        self._emit_instruction("je", f"{LOOP_END_PREFIX}{label}")
        self._emit_label(f"{LOOP_BODY_PREFIX}{label}")

    def _generate_loop_end(self, index: int, program: InstructionSequence) -> None:
        """Jump back to the loop body while the current cell is non-zero."""
        if not self._loop_stack:
            raise self._unbalanced(program, index, "]")
        label, _ = self._loop_stack.pop()

        self._emit_instruction("cmp", f"byte [{TAPE_POINTER}], 0")
        self._emit_instruction("jne", f"{LOOP_BODY_PREFIX}{label}")
        self._emit_label(f"{LOOP_END_PREFIX}{label}")

    def _unbalanced(
        self,
        program: InstructionSequence,
        index: int,
        bracket: str,
    ) -> UnbalancedLoopError:
        """Create an UnbalancedLoopError for the instruction at index."""
        position = program.position_of(index)
        location: Optional[SourceLocation] = None
        source_line: Optional[str] = None
        if program.source:
            location = SourceLocation.from_offset(program.source, position, program.filename)
            source_line = source_line_at(program.source, position)
        return UnbalancedLoopError(position, bracket, location=location, source_line=source_line)


def generate(
    instructions: Union[InstructionSequence, Iterable[Instruction]],
    program_name: str = "program",
    **options,
) -> str:
    """
    Generate assembly for instructions with a fresh CodeGenerator.

    Args:
        instructions: The program, usually the output of lex()
        program_name: Name shown in the header comment
        **options: Keyword arguments for CodeGenerator

    Returns:
        NASM source text

    Raises:
        UnbalancedLoopError: If the loop brackets do not match
    """
    return CodeGenerator(**options).generate(instructions, program_name)
