"""
natc - Small Native-Code Compiler
=================================

natc compiles a small statement language to HD6303 assembly suitable
for the psasm assembler.

Main Components
---------------
- **compiler**: lexer, statement and expression parsers, code generator
- **cli**: the natcc command-line tool

Quick Start
-----------
    >>> from natc import compile_source
    >>> print(compile_source("int x = (1 + 2) * 3"))

Or from the command line:
    $ natcc calc.nc -o calc.asm
"""

__version__ = "1.0.0"

from natc.errors import NatcError, SourceFileError, SourceLocation
from natc.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_files,
    compile_source,
)

__all__ = [
    "__version__",
    "NatcError",
    "SourceFileError",
    "SourceLocation",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_files",
    "compile_source",
]
