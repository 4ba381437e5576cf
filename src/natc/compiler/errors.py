"""
Compiler Error Hierarchy
========================

This module defines the exception hierarchy for the natc compiler.
All exceptions inherit from CompilerError, which itself inherits from
NatcError for consistent error handling across the package.

Every failure path in the compiler ends by raising one of these with the
statement's source location attached. There are no warnings: each
condition below aborts compilation.

Exception Hierarchy
-------------------
CompilerError (base for all compiler errors)
├── ExpressionError - expression parsing errors
│   ├── MismatchedParenthesesError - unbalanced '(' or ')'
│   ├── InvalidAssignmentError - '=' without a single variable before it
│   ├── InvalidValueError - operand is neither literal nor variable
│   ├── MalformedExpressionError - no operator splits the range
│   └── ExpressionDepthError - nesting exceeds the configured limit
├── LexicalError - tokenization errors
│   ├── InvalidCharacterError - unexpected character
│   └── UnterminatedLiteralError - missing closing quote
├── DeclarationError - declaration statement errors
│   ├── UnknownTypeError - type name not recognised
│   ├── InvalidSymbolError - variable name is not an identifier
│   ├── DuplicateDeclarationError - variable declared twice
│   └── MissingTokenError - required token absent
└── CodeGenError - code generation errors

Error Message Format
--------------------
    calc.nc:3:1: error: invalid value 'totl'
        total = totl + 1
        ^
    hint: did you mean 'total'?
"""

from typing import Optional, List

from natc.errors import NatcError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompilerError(NatcError):
    """
    Base exception for all compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
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
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Expression Errors
# =============================================================================

class ExpressionError(CompilerError):
    """
    Error while turning a statement's token range into an AST.
    """
    pass


class MismatchedParenthesesError(ExpressionError):
    """
    Unmatched opening or closing parenthesis.

    Examples:
        ( a + b      // opener never closed
        a + b )      // closer without opener
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        unmatched: str = ")",
    ):
        self.unmatched = unmatched
        if unmatched == "(":
            hint = "add a closing ')'"
        else:
            hint = "remove the extra ')' or add a matching '('"
        super().__init__(
            "mismatched parentheses",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidAssignmentError(ExpressionError):
    """
    Assignment whose left-hand side is not exactly one variable.

    Examples:
        x + y = a    // two tokens before '='
        3 = a        // literal is not assignable
    """

    def __init__(
        self,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "invalid assignment",
            location=location,
            hint="left side of '=' must be a single variable at the start of the statement",
            source_line=source_line,
        )


class InvalidValueError(ExpressionError):
    """
    Operand that is neither a recognised literal nor a declared variable.

    Similar declared names are offered as a hint to catch typos.
    """

    def __init__(
        self,
        value: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.value = value
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"invalid value '{value}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MalformedExpressionError(ExpressionError):
    """
    Multi-token range with no operator to split it.

    Raised when the scan exhausts every precedence tier without a split
    point, or when an operator is missing one of its operands.
    """
    pass


class ExpressionDepthError(ExpressionError):
    """
    Expression deeper than the configured recursion limit.

    Depth counts every split as well as every stripped pair of
    parentheses, so a long chain like "1 + 1 + ... + 1" reaches the limit
    without any nesting.
    """

    def __init__(
        self,
        max_depth: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.max_depth = max_depth
        super().__init__(
            f"expression too deep or complex (limit {max_depth})",
            location=location,
            hint="split long operator chains or deep parentheses across several statements",
            source_line=source_line,
        )


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(CompilerError):
    """
    Error while splitting source text into tokens.
    """
    pass


class InvalidCharacterError(LexicalError):
    """
    Character that cannot start any token.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class UnterminatedLiteralError(LexicalError):
    """
    String or character literal missing its closing quote.
    """

    def __init__(
        self,
        quote: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.quote = quote
        kind = "string" if quote == '"' else "character"
        super().__init__(
            f"unterminated {kind} literal",
            location=location,
            hint=f"add closing {quote} to complete the literal",
            source_line=source_line,
        )


# =============================================================================
# Declaration Errors
# =============================================================================

class DeclarationError(CompilerError):
    """
    Error in a variable declaration statement.
    """
    pass


class UnknownTypeError(DeclarationError):
    """
    Declaration names a type the compiler does not know.
    """

    def __init__(
        self,
        type_name: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        known_types: Optional[List[str]] = None,
    ):
        self.type_name = type_name
        hint = None
        if known_types:
            hint = "known types: " + ", ".join(known_types)
        super().__init__(
            f"unknown type '{type_name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidSymbolError(DeclarationError):
    """
    Declared name is not a valid identifier or is a reserved word.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        super().__init__(
            f"invalid variable name '{symbol}'",
            location=location,
            hint="names start with a letter or '_' and are not type keywords",
            source_line=source_line,
        )


class DuplicateDeclarationError(DeclarationError):
    """
    Variable declared more than once.
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(DeclarationError):
    """
    Required token is missing from a statement.
    """

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            f"expected {expected}",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(CompilerError):
    """
    Error during instruction emission.

    Only reachable with a hand-built AST that bypassed the parser's
    checks, such as a variable node for an undeclared name.
    """
    pass
