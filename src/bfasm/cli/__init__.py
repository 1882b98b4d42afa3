"""
bfasm Command-Line Interface
============================

- **bfasm**: Brainfuck to x86-64 Windows assembly compiler

Implemented as a Click application with help and error reporting.
"""

__all__ = ["bfasm"]
