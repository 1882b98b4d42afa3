"""
bfasm Compiler Main Module
==========================

This module provides the main compiler interface. It runs the two
compilation stages:

    Source → Lex (and validate loops) → Generate → Assembly

Usage
-----
Command line:
    $ bfasm hello.bf -o hello.asm

Programmatic:
    >>> from bfasm import compile_bf
    >>> asm = compile_bf('++++++++[>++++++++<-]>+.')

Building an Executable
----------------------
The output is NASM source for 64-bit Windows. Assemble and link it
against the C runtime, for example:

    $ nasm -f win64 hello.asm -o hello.obj
    $ gcc hello.obj -o hello.exe
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from bfasm.codegen import (
    CodeGenerator,
    DEFAULT_ENTRY_SYMBOL,
    DEFAULT_GETCHAR_SYMBOL,
    DEFAULT_PUTCHAR_SYMBOL,
    DEFAULT_TAPE_SIZE,
    validate_symbols,
    validate_tape_size,
)
from bfasm.instructions import Instruction
from bfasm.lexer import BrainfuckLexer


logger = logging.getLogger(__name__)

# Source suffixes replaced by .asm when deriving an output filename
SOURCE_SUFFIXES = (".bf", ".b")


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        tape_size: Tape length in bytes, reserved in .bss (zero-filled)
        entry_symbol: Exported entry point the C runtime calls
        putchar_symbol: C runtime function used for '.'
        getchar_symbol: C runtime function used for ','. The default,
                        _getch, reads unbuffered from the console.
        output_comments: Annotate each emitted block with its Brainfuck
                         character
    """
    tape_size: int = DEFAULT_TAPE_SIZE
    entry_symbol: str = DEFAULT_ENTRY_SYMBOL
    putchar_symbol: str = DEFAULT_PUTCHAR_SYMBOL
    getchar_symbol: str = DEFAULT_GETCHAR_SYMBOL
    output_comments: bool = False

    def __post_init__(self):
        validate_tape_size(self.tape_size)
        validate_symbols(self.entry_symbol, self.putchar_symbol, self.getchar_symbol)


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        program_name: Name written into the assembly header
        success: True if compilation succeeded
        assembly: Generated assembly code
        instruction_count: Number of Brainfuck instructions
        loop_count: Number of loops (label pairs) emitted
    """
    filename: str = ""
    program_name: str = ""
    success: bool = False
    assembly: str = ""
    instruction_count: int = 0
    loop_count: int = 0


class BrainfuckCompiler:
    """
    Brainfuck to x86-64 Windows assembly compiler.

    Example:
        compiler = BrainfuckCompiler()
        result = compiler.compile_file("hello.bf")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(
        self,
        source: str,
        filename: str = "<input>",
        program_name: Optional[str] = None,
    ) -> CompilerResult:
        """
        Compile Brainfuck source code to assembly.

        Args:
            source: Brainfuck source text
            filename: Source filename for error messages
            program_name: Name for the assembly header (default: file stem)

        Returns:
            CompilerResult containing the assembly

        Raises:
            UnbalancedLoopError: If the loop brackets do not match
        """
        if program_name is None:
            program_name = program_name_for(filename)

        logger.debug(f"Compiling {filename} as '{program_name}'")

        program = BrainfuckLexer(source, filename).tokenize()

        generator = CodeGenerator(
            tape_size=self.options.tape_size,
            entry_symbol=self.options.entry_symbol,
            putchar_symbol=self.options.putchar_symbol,
            getchar_symbol=self.options.getchar_symbol,
            output_comments=self.options.output_comments,
        )
        assembly = generator.generate(program, program_name)

        return CompilerResult(
            filename=filename,
            program_name=program_name,
            success=True,
            assembly=assembly,
            instruction_count=len(program),
            loop_count=program.count(Instruction.LOOP_START),
        )

    def compile_file(self, filepath: Union[str, Path]) -> CompilerResult:
        """
        Compile a Brainfuck source file to assembly.

        Raises:
            UnbalancedLoopError: If the loop brackets do not match
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8", errors="replace")
        return self.compile_source(source, str(filepath), program_name_for(path))


# =============================================================================
# Utility Functions
# =============================================================================

def program_name_for(filename: Union[str, Path]) -> str:
    """Return the program name for a source file: its stem, or 'program'."""
    if str(filename).startswith("<"):
        return "program"
    return Path(filename).stem or "program"


def default_output_path(input_path: Union[str, Path]) -> Path:
    """
    Derive the assembly filename for a source file.

    A .bf or .b suffix is replaced by .asm; any other name gets .asm
    appended so the source is never overwritten.

    Example:
        >>> default_output_path("hello.bf")
        PosixPath('hello.asm')
        >>> default_output_path("notes.txt")
        PosixPath('notes.txt.asm')
    """
    path = Path(input_path)
    if path.suffix.lower() in SOURCE_SUFFIXES:
        return path.with_suffix(".asm")
    return path.with_name(path.name + ".asm")


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_bf(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile Brainfuck source code to x86-64 Windows assembly.

    This is the primary high-level interface.

    Args:
        source: Brainfuck source text
        filename: Source filename for error messages
        options: Compiler configuration (uses defaults if None)

    Returns:
        Generated assembly code

    Raises:
        UnbalancedLoopError: If the loop brackets do not match
    """
    compiler = BrainfuckCompiler(options)
    return compiler.compile_source(source, filename).assembly


def compile_file(
    filepath: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile a Brainfuck source file, optionally writing the assembly.

    Example:
        >>> asm = compile_file("hello.bf", "hello.asm")
    """
    compiler = BrainfuckCompiler(options)
    result = compiler.compile_file(filepath)

    if output_path:
        Path(output_path).write_text(result.assembly, encoding="utf-8")
        logger.info(f"Wrote {len(result.assembly)} bytes to {output_path}")

    return result.assembly
