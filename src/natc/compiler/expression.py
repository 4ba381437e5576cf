"""
Expression Parser
=================

Builds the AST for one statement's expression from a range of token
texts, by recursively splitting the range at its loosest-binding
operator.

Algorithm
---------
For a range [start, end):

1. One token: resolve it as a literal or variable (the base case).
2. Whole range wrapped in one matching pair of parentheses: strip the
   pair and parse the interior with the same tier.
3. For each precedence tier, loosest first, scan the range right to
   left. A ')' jumps straight to its matching '(' so nothing inside
   parentheses is ever taken as a split point. The first token the tier
   recognises is the split point.
4. Split at i: parse [start, i) and [i+1, end) as operands, each from
   the loosest tier again, and join them in a binary node.

Scanning right to left makes the rightmost of several same-tier
operators the root, so "a - b - c" groups as "(a - b) - c". Scanning
loosest tier first makes "a + b * c" group as "a + (b * c)".

Assignment is only accepted when exactly one token (the variable)
precedes the '=' counting from the start of the statement.

Example
-------
>>> ns = Namespace()
>>> ns.declare("x", TYPE_INT)
>>> tree = parse_expression(["x", "=", "1", "+", "2"], loc, 0, 5, ns)
>>> ASTPrinter().expr_str(tree)
'(x = (1 + 2))'
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from natc.errors import SourceLocation
from natc.compiler.ast import (
    BinaryOperator,
    Expression,
    binary_operation,
    variable_node,
)
from natc.compiler.errors import (
    ExpressionDepthError,
    InvalidAssignmentError,
    InvalidValueError,
    MalformedExpressionError,
)
from natc.compiler.namespace import Namespace, is_identifier
from natc.compiler.operators import DEFAULT_PRECEDENCE, PrecedenceTable
from natc.compiler.parens import PAREN_CLOSE, PAREN_OPEN, ParenMatchTable, match_parentheses
from natc.compiler.types import infer_literal_type
from natc.compiler.values import resolve_value

logger = logging.getLogger(__name__)

# Default limit on recursive descent depth for one expression
DEFAULT_MAX_DEPTH = 256

# Highest accepted limit. Each level of descent takes up to two interpreter
# frames, which must stay under the default recursion limit of 1000 with
# room left for the callers.
MAX_EXPRESSION_DEPTH = 300


@dataclass(frozen=True)
class _ParseContext:
    """
    State shared read-only by every recursive call of one parse.

    Attributes:
        expr_start: Index of the statement's first token
        matches: Parenthesis match table for the statement
    """
    expr_start: int
    matches: ParenMatchTable


class ExpressionParser:
    """
    Recursive expression parser over one statement's tokens.

    The parser holds only read-only collaborators; each parse() builds
    its own match table and passes range bounds down explicitly, so
    repeated parses of the same range produce equal trees.

    Usage:
        parser = ExpressionParser(tokens, location, namespace)
        tree = parser.parse(0, len(tokens))

    Attributes:
        tokens: Token texts for the statement
        location: Statement location attached to nodes and errors
        namespace: Variables visible to the expression
        precedence: Operator tiers, loosest first
        max_depth: Recursion limit
        source_line: Statement text for error context
    """

    def __init__(
        self,
        tokens: Sequence[str],
        location: SourceLocation,
        namespace: Namespace,
        precedence: PrecedenceTable = DEFAULT_PRECEDENCE,
        max_depth: int = DEFAULT_MAX_DEPTH,
        source_line: Optional[str] = None,
    ):
        if not 1 <= max_depth <= MAX_EXPRESSION_DEPTH:
            raise ValueError(
                f"max_depth must be between 1 and {MAX_EXPRESSION_DEPTH}, got {max_depth}"
            )

        self.tokens = tokens
        self.location = location
        self.namespace = namespace
        self.precedence = precedence
        self.max_depth = max_depth
        self.source_line = source_line

    def parse(self, start: int = 0, end: Optional[int] = None) -> Expression:
        """
        Parse tokens[start:end] into a single expression tree.

        Raises:
            MismatchedParenthesesError: Unbalanced parentheses in range
            InvalidAssignmentError: Badly shaped assignment
            InvalidValueError: Operand is neither literal nor variable
            MalformedExpressionError: No operator splits a range
            ExpressionDepthError: Depth exceeds max_depth
        """
        if end is None:
            end = len(self.tokens)

        matches = match_parentheses(
            self.tokens, start, end, self.location, self.source_line
        )
        if len(matches):
            logger.debug(f"Matched {len(matches)} parenthesis pair(s): {matches.as_dict()}")
        context = _ParseContext(expr_start=start, matches=matches)
        return self._parse_range(context, start, end, 0, 1)

    # =========================================================================
    # Range Parsing
    # =========================================================================

    def _parse_range(
        self,
        context: _ParseContext,
        start: int,
        end: int,
        tier: int,
        depth: int,
    ) -> Expression:
        """Parse [start, end) starting the operator search at tier."""
        if depth > self.max_depth:
            raise ExpressionDepthError(self.max_depth, self.location, self.source_line)

        if start >= end:
            raise MalformedExpressionError(
                "expected an operand",
                self.location,
                source_line=self.source_line,
            )

        if start + 1 == end:
            return resolve_value(
                self.tokens[start], self.namespace, self.location, self.source_line
            )

        if self._is_wrapped(context, start, end):
            return self._parse_range(context, start + 1, end - 1, tier, depth + 1)

        for tier_index in range(tier, len(self.precedence)):
            split = self._find_split(context, start, end, tier_index)
            if split is None:
                continue

            op = self.precedence.match(tier_index, self.tokens[split])
            logger.debug(
                f"Split [{start}, {end}) at {split} on '{op.symbol}' "
                f"(tier {self.precedence.tiers[tier_index].name})"
            )
            if op is BinaryOperator.ASSIGN:
                return self._parse_assignment(context, start, end, split, depth)
            return self._parse_binary(context, start, end, split, op, depth)

        span = " ".join(self.tokens[start:end])
        raise MalformedExpressionError(
            f"malformed expression '{span}'",
            self.location,
            hint="operands must be separated by an operator",
            source_line=self.source_line,
        )

    def _is_wrapped(self, context: _ParseContext, start: int, end: int) -> bool:
        """True if one matching pair of parentheses encloses the whole range."""
        return (
            self.tokens[start] == PAREN_OPEN
            and self.tokens[end - 1] == PAREN_CLOSE
            and context.matches.opener_of(end - 1) == start
        )

    def _find_split(
        self,
        context: _ParseContext,
        start: int,
        end: int,
        tier: int,
    ) -> Optional[int]:
        """
        Return the index of the rightmost top-level operator of tier.

        Parenthesized spans are skipped in one jump.
        """
        index = end - 1
        while index >= start:
            token = self.tokens[index]
            if token == PAREN_CLOSE:
                index = context.matches.opener_of(index)
            elif self.precedence.match(tier, token) is not None:
                return index
            index -= 1
        return None

    # =========================================================================
    # Operator Sub-Parsers
    # =========================================================================

    def _parse_binary(
        self,
        context: _ParseContext,
        start: int,
        end: int,
        split: int,
        op: BinaryOperator,
        depth: int,
    ) -> Expression:
        """Parse both operands of a non-assignment operator."""
        left = self._parse_range(context, start, split, 0, depth + 1)
        right = self._parse_range(context, split + 1, end, 0, depth + 1)
        return binary_operation(op, left, right, self.location)

    def _parse_assignment(
        self,
        context: _ParseContext,
        start: int,
        end: int,
        split: int,
        depth: int,
    ) -> Expression:
        """
        Parse 'name = value'.

        The variable must be the single token before '=' and must be the
        first token of the statement.
        """
        if split - context.expr_start != 1 or split - 1 < start:
            raise InvalidAssignmentError(self.location, self.source_line)

        name = self.tokens[split - 1]
        if infer_literal_type(name) is not None or not is_identifier(name):
            raise InvalidAssignmentError(self.location, self.source_line)

        var = self.namespace.lookup(name)
        if var is None:
            raise InvalidValueError(
                name,
                location=self.location,
                source_line=self.source_line,
                similar_identifiers=self.namespace.similar_names(name),
            )

        target = variable_node(var.declared_type, name, self.location)
        value = self._parse_range(context, split + 1, end, 0, depth + 1)
        return binary_operation(BinaryOperator.ASSIGN, target, value, self.location)


def parse_expression(
    tokens: Sequence[str],
    location: SourceLocation,
    start: int,
    end: int,
    namespace: Namespace,
    *,
    precedence: PrecedenceTable = DEFAULT_PRECEDENCE,
    max_depth: int = DEFAULT_MAX_DEPTH,
    source_line: Optional[str] = None,
) -> Expression:
    """
    Convenience function to parse tokens[start:end] into an AST.

    Args:
        tokens: Token texts for the statement
        location: Statement location for nodes and errors
        start: First token of the expression (the statement start)
        end: One past the last token
        namespace: Declared variables
        precedence: Operator tiers, loosest first
        max_depth: Recursion limit
        source_line: Statement text for error context

    Returns:
        The root expression node
    """
    parser = ExpressionParser(
        tokens,
        location,
        namespace,
        precedence=precedence,
        max_depth=max_depth,
        source_line=source_line,
    )
    return parser.parse(start, end)
