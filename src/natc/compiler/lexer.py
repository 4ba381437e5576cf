"""
natc Lexer (Tokenizer)
======================

Splits line-oriented source text into statements of tokens. Every
non-blank line is one statement; tokens keep their exact source
spelling so literal inference and error messages see what was written.

Token Categories
----------------
- Identifiers: letters, digits and underscores, not starting with a digit
- Numbers: a digit followed by letters, digits or underscores (0x1F, 42)
- Characters: 'single quoted', with backslash escapes
- Strings: "double quoted", with backslash escapes
- Operators: = + - * / %
- Delimiters: ( )

Comments
--------
- Single-line: // comment

Example Usage
-------------
>>> lexer = Lexer("int x = (1 + 2) * 3  // seven? nine", "calc.nc")
>>> [s.texts for s in lexer.statements()]
[('int', 'x', '=', '(', '1', '+', '2', ')', '*', '3')]
"""

import string
from dataclasses import dataclass
from typing import Iterator

from natc.errors import SourceLocation
from natc.compiler.errors import InvalidCharacterError, UnterminatedLiteralError


# =============================================================================
# Token Data Classes
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token.

    Attributes:
        text: The token exactly as written
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    text: str
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        return f"Token({self.text!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column)


@dataclass(frozen=True)
class Statement:
    """
    The tokens of one source line.

    Attributes:
        tokens: Tokens in source order (never empty)
        source_line: The full line text, for error context
    """
    tokens: tuple[Token, ...]
    source_line: str

    @property
    def location(self) -> SourceLocation:
        """Location of the statement's first token."""
        return self.tokens[0].location

    @property
    def texts(self) -> tuple[str, ...]:
        """Token texts, the form the expression parser consumes."""
        return tuple(token.text for token in self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes natc source code.

    Usage:
        lexer = Lexer(source_text, filename)
        for statement in lexer.statements():
            ...

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Single-character operators and delimiters
    OPERATORS = "=+-*/%()"

    QUOTES = "'\""

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        # Scan state for the current line
        self._text = ""
        self._pos = 0
        self._line = 0

    def statements(self) -> Iterator[Statement]:
        """
        Yield one Statement per non-blank line.

        Raises:
            LexicalError: If a line cannot be tokenized
        """
        for line_number, line_text in enumerate(self.source.splitlines(), start=1):
            tokens = tuple(self._tokenize_line(line_text, line_number))
            if tokens:
                yield Statement(tokens, line_text)

    # =========================================================================
    # Character Access
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _peek(self, offset: int = 0) -> str:
        pos = self._pos + offset
        if pos >= len(self._text):
            return ""
        return self._text[pos]

    def _advance(self) -> str:
        char = self._text[self._pos]
        self._pos += 1
        return char

    def _location(self, pos: int) -> SourceLocation:
        return SourceLocation(self.filename, self._line, pos + 1)

    def _make_token(self, start: int) -> Token:
        return Token(self._text[start:self._pos], self._line, start + 1, self.filename)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _tokenize_line(self, text: str, line_number: int) -> Iterator[Token]:
        """Scan one line into tokens."""
        self._text = text
        self._pos = 0
        self._line = line_number

        while not self._at_end():
            char = self._peek()

            if char in " \t\r":
                self._advance()
                continue

            # Single-line comment runs to end of line
            if char == "/" and self._peek(1) == "/":
                return

            start = self._pos
            if char in self.IDENT_CHARS:
                self._scan_word()
            elif char in self.QUOTES:
                self._scan_quoted(char)
            elif char in self.OPERATORS:
                self._advance()
            else:
                raise InvalidCharacterError(char, self._location(start), text)

            yield self._make_token(start)

    def _scan_word(self) -> None:
        """
        Scan an identifier or number.

        Both are runs of identifier characters; numbers are told apart by
        literal inference later, so a malformed number like '12ab' becomes
        one token that fails to resolve.
        """
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()

    def _scan_quoted(self, quote: str) -> None:
        """Scan a character or string literal, escapes included."""
        start = self._pos
        self._advance()  # opening quote

        while not self._at_end():
            char = self._advance()
            if char == "\\":
                if self._at_end():
                    break
                self._advance()
            elif char == quote:
                return

        raise UnterminatedLiteralError(quote, self._location(start), self._text)
