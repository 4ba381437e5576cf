"""
Parenthesis Matching
====================

Pairs every closing parenthesis in a statement with its opener in a
single left-to-right pass, so the expression parser can jump over a
parenthesized span in one step while scanning right to left.

Indices in the table are relative to the start of the matched range
(the statement's expression start).
"""

from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from natc.errors import SourceLocation
from natc.compiler.errors import MismatchedParenthesesError

PAREN_OPEN = "("
PAREN_CLOSE = ")"


class ParenMatchTable:
    """
    Read-only map from closing-paren offset to opening-paren offset.

    Attributes:
        start: Absolute index the offsets are relative to
    """

    def __init__(self, start: int, matches: Mapping[int, int]):
        self.start = start
        self._matches = MappingProxyType(dict(matches))

    def opener_of(self, index: int) -> int:
        """
        Return the absolute index of the '(' matching the ')' at index.

        Raises:
            KeyError: If index does not hold a matched ')'
        """
        return self._matches[index - self.start] + self.start

    def __len__(self) -> int:
        return len(self._matches)

    def as_dict(self) -> dict[int, int]:
        """Return the relative offsets as a plain dict."""
        return dict(self._matches)


def match_parentheses(
    tokens: Sequence[str],
    start: int,
    end: int,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> ParenMatchTable:
    """
    Match the parentheses in tokens[start:end].

    Args:
        tokens: Token texts for the whole statement
        start: First index to scan
        end: One past the last index to scan
        location: Statement location for error reporting
        source_line: Statement source text for error reporting

    Returns:
        The match table for the range

    Raises:
        MismatchedParenthesesError: On a ')' with no pending '(' or a '('
            still open at the end of the range
    """
    open_parens: list[int] = []
    matches: dict[int, int] = {}

    for i in range(start, end):
        token = tokens[i]
        if token == PAREN_OPEN:
            open_parens.append(i - start)
        elif token == PAREN_CLOSE:
            if not open_parens:
                raise MismatchedParenthesesError(location, source_line, unmatched=PAREN_CLOSE)
            matches[i - start] = open_parens.pop()

    if open_parens:
        raise MismatchedParenthesesError(location, source_line, unmatched=PAREN_OPEN)

    return ParenMatchTable(start, matches)
