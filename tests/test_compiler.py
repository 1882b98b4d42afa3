# =============================================================================
# test_compiler.py - Compiler Facade Tests
# =============================================================================
# Tests for BrainfuckCompiler, CompilerOptions and the convenience
# functions that read and write files.
# =============================================================================

from pathlib import Path

import pytest
from bfasm import (
    BrainfuckCompiler,
    CompilerConfigError,
    CompilerOptions,
    UnbalancedLoopError,
    compile_bf,
    compile_file,
    default_output_path,
    generate,
    lex,
)
from bfasm.compiler import program_name_for


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>"
    "---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


# =============================================================================
# Compiler Options
# =============================================================================

class TestCompilerOptions:
    """Option defaults and validation."""

    def test_defaults(self):
        options = CompilerOptions()
        assert options.tape_size == 30000
        assert options.entry_symbol == "main"
        assert options.putchar_symbol == "putchar"
        assert options.getchar_symbol == "_getch"
        assert options.output_comments is False

    def test_invalid_tape_size(self):
        with pytest.raises(CompilerConfigError):
            CompilerOptions(tape_size=0)

    def test_invalid_symbol(self):
        with pytest.raises(CompilerConfigError):
            CompilerOptions(getchar_symbol="get char")

    def test_symbols_must_differ(self):
        """Entry and runtime symbols may not share a name."""
        with pytest.raises(CompilerConfigError):
            CompilerOptions(entry_symbol="putchar")

    def test_register_symbol(self):
        with pytest.raises(CompilerConfigError):
            CompilerOptions(entry_symbol="rbx")

    def test_options_reach_generator(self):
        options = CompilerOptions(tape_size=1024, entry_symbol="start")
        asm = compile_bf("+", options=options)
        assert "resb 1024" in asm
        assert "global start" in asm


# =============================================================================
# Compiling Source
# =============================================================================

class TestCompileSource:
    """BrainfuckCompiler.compile_source()."""

    def test_result_fields(self):
        result = BrainfuckCompiler().compile_source(HELLO_WORLD, "hello.bf")
        assert result.success
        assert result.filename == "hello.bf"
        assert result.program_name == "hello"
        assert result.instruction_count == len(HELLO_WORLD)
        assert result.loop_count == 3
        assert "LOOP_END_3:" in result.assembly

    def test_explicit_program_name(self):
        result = BrainfuckCompiler().compile_source("+", program_name="demo")
        assert result.program_name == "demo"
        assert "; demo - Brainfuck program" in result.assembly

    def test_default_program_name(self):
        result = BrainfuckCompiler().compile_source("+")
        assert result.program_name == "program"

    def test_matches_lex_and_generate(self):
        """compile_bf is lex followed by generate."""
        assert compile_bf("+[-].") == generate(lex("+[-]."), "program")

    def test_comments_ignored(self):
        assert compile_bf("a+b-") == compile_bf("+-")

    def test_unbalanced_raises(self):
        with pytest.raises(UnbalancedLoopError):
            compile_bf("+[")

    def test_deterministic(self):
        assert compile_bf(HELLO_WORLD) == compile_bf(HELLO_WORLD)


# =============================================================================
# File Handling
# =============================================================================

class TestFiles:
    """compile_file() and output naming."""

    def test_compile_file_writes_output(self, tmp_path):
        source = tmp_path / "hello.bf"
        source.write_text(HELLO_WORLD)
        output = tmp_path / "hello.asm"

        asm = compile_file(source, output)

        assert output.read_text() == asm
        assert "; hello - Brainfuck program" in asm

    def test_compile_file_without_output(self, tmp_path):
        source = tmp_path / "x.bf"
        source.write_text("+.")
        compile_file(source)
        assert not (tmp_path / "x.asm").exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            BrainfuckCompiler().compile_file(tmp_path / "missing.bf")

    def test_error_names_file(self, tmp_path):
        source = tmp_path / "bad.bf"
        source.write_text("+\n]")
        with pytest.raises(UnbalancedLoopError) as exc_info:
            BrainfuckCompiler().compile_file(source)
        assert exc_info.value.location.filename == str(source)
        assert exc_info.value.location.line == 2

    @pytest.mark.parametrize("name,expected", [
        ("hello.bf", "hello.asm"),
        ("hello.b", "hello.asm"),
        ("HELLO.BF", "HELLO.asm"),
        ("notes.txt", "notes.txt.asm"),
        ("noext", "noext.asm"),
    ])
    def test_default_output_path(self, name, expected):
        assert default_output_path(Path("dir") / name) == Path("dir") / expected

    def test_program_name_for(self):
        assert program_name_for("src/hello.bf") == "hello"
        assert program_name_for("<input>") == "program"
