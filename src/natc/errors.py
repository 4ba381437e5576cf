"""
natc Error Hierarchy
====================

This module defines the root of the exception hierarchy for natc.
All exceptions inherit from NatcError, allowing callers to catch every
compiler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
NatcError (base)
├── SourceFileError - source file rejected before compilation
└── CompilerError (see natc.compiler.errors)
    ├── ExpressionError - expression parsing failures
    ├── LexicalError - tokenization failures
    ├── DeclarationError - statement-level declaration failures
    └── CodeGenError - instruction emission failures

Design Philosophy
-----------------
Compiler errors capture source location information (filename, line,
column). Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class NatcError(Exception):
    """
    Base exception for all natc errors.

        try:
            Compiler().compile_files(["program.nc"])
        except NatcError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Statements carry one of these from the lexer through parsing and
    code generation unchanged. Frozen so it can be shared freely.

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


# =============================================================================
# Source File Exceptions
# =============================================================================

class SourceFileError(NatcError):
    """
    A source file was rejected before any parsing took place.

    Raised when an input path does not carry the required extension
    or cannot be read.

    Attributes:
        path: The offending path as given by the caller
        reason: Short description of the problem
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason}: {path}")
