"""
bfasm - Brainfuck to x86-64 Assembly Compiler
=============================================

This package compiles Brainfuck programs to NASM assembly for 64-bit
Windows. The generated code keeps a byte tape in .bss, holds the tape
pointer in RBX and calls the C runtime (putchar, _getch) for I/O.

Main Components
---------------
- **lexer**: strips comment characters and validates loop brackets
- **codegen**: emits one assembly block per instruction
- **compiler**: options, results and convenience functions
- **cli**: the ``bfasm`` command

Quick Start
-----------
    >>> from bfasm import compile_bf
    >>> asm = compile_bf("++++++++[>++++++++<-]>+.")

Or use the command-line tool:
    $ bfasm hello.bf
    $ nasm -f win64 hello.asm -o hello.obj
    $ gcc hello.obj -o hello.exe
"""

__version__ = "1.0.0"

from bfasm.errors import (
    BfasmError,
    CompileError,
    CompilerConfigError,
    SourceLocation,
    UnbalancedLoopError,
)
from bfasm.instructions import ALPHABET, Instruction, InstructionSequence
from bfasm.lexer import BrainfuckLexer, lex
from bfasm.codegen import CodeGenerator, generate
from bfasm.compiler import (
    BrainfuckCompiler,
    CompilerOptions,
    CompilerResult,
    compile_bf,
    compile_file,
    default_output_path,
)

__all__ = [
    "__version__",
    # Errors
    "BfasmError",
    "CompileError",
    "CompilerConfigError",
    "SourceLocation",
    "UnbalancedLoopError",
    # Instructions
    "ALPHABET",
    "Instruction",
    "InstructionSequence",
    # Lexer
    "BrainfuckLexer",
    "lex",
    # Code Generator
    "CodeGenerator",
    "generate",
    # Compiler
    "BrainfuckCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_bf",
    "compile_file",
    "default_output_path",
]
