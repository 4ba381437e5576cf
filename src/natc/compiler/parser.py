"""
natc Statement Parser
=====================

Turns the statements produced by the lexer into AST statement nodes.
Statements decide their own shape from their leading tokens and hand
expression ranges to the expression parser.

Grammar
-------
statement     ::= declaration | expression
declaration   ::= TYPE IDENTIFIER ('=' expression)?
TYPE          ::= 'int' | 'char' | 'string'

A declaration with an initializer is compiled as the assignment
'IDENTIFIER = expression', with the statement's expression starting at
the identifier.

Example Usage
-------------
>>> parser = StatementParser()
>>> program = parser.parse(Lexer("int x = 2\\nx = x * 3").statements())
>>> print(ASTPrinter().print(program))
Program
  Variable: int x = (x = 2)
  Expr: (x = (x * 3)) : int
"""

import logging
from typing import Iterable, Optional

from natc.errors import SourceLocation
from natc.compiler.ast import (
    ExpressionStatement,
    ProgramNode,
    Statement as StatementNode,
    VariableDeclaration,
)
from natc.compiler.errors import (
    InvalidSymbolError,
    MissingTokenError,
    UnknownTypeError,
)
from natc.compiler.expression import DEFAULT_MAX_DEPTH, parse_expression
from natc.compiler.lexer import Lexer, Statement
from natc.compiler.namespace import Namespace, is_identifier
from natc.compiler.operators import DEFAULT_PRECEDENCE, PrecedenceTable
from natc.compiler.types import TYPE_NAMES, lookup_type_name

logger = logging.getLogger(__name__)


class StatementParser:
    """
    Parses statements against a namespace that grows as declarations
    are seen.

    Attributes:
        namespace: Declared variables
        precedence: Operator tiers passed to the expression parser
        max_depth: Expression recursion limit
    """

    def __init__(
        self,
        namespace: Optional[Namespace] = None,
        precedence: PrecedenceTable = DEFAULT_PRECEDENCE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.namespace = namespace if namespace is not None else Namespace()
        self.precedence = precedence
        self.max_depth = max_depth

    def parse(self, statements: Iterable[Statement], filename: str = "<input>") -> ProgramNode:
        """
        Parse statements into a program.

        Raises:
            CompilerError: On the first invalid statement
        """
        program = ProgramNode(location=SourceLocation(filename, 1, 1))
        for statement in statements:
            program.statements.append(self.parse_statement(statement))
        return program

    def parse_statement(self, statement: Statement) -> StatementNode:
        """Parse one statement."""
        texts = statement.texts

        if lookup_type_name(texts[0]) is not None:
            return self._parse_declaration(statement)

        # Two names in a row can only be a declaration with a bad type
        if (len(texts) >= 2 and is_identifier(texts[0]) and is_identifier(texts[1])
                and texts[0] not in self.namespace):
            raise UnknownTypeError(
                texts[0],
                statement.location,
                statement.source_line,
                known_types=list(TYPE_NAMES),
            )

        expression = self._parse_expression(statement, 0)
        return ExpressionStatement(location=statement.location, expression=expression)

    def _parse_declaration(self, statement: Statement) -> VariableDeclaration:
        """Parse 'TYPE NAME' or 'TYPE NAME = expression'."""
        texts = statement.texts
        var_type = lookup_type_name(texts[0])

        if len(texts) < 2:
            raise MissingTokenError(
                f"variable name after '{texts[0]}'",
                statement.location,
                statement.source_line,
            )

        name_token = statement.tokens[1]
        name = name_token.text
        if not is_identifier(name) or name in TYPE_NAMES:
            raise InvalidSymbolError(name, name_token.location, statement.source_line)

        if len(texts) > 2 and texts[2] != "=":
            raise MissingTokenError(
                "'=' after variable name",
                statement.tokens[2].location,
                statement.source_line,
            )

        self.namespace.declare(name, var_type, statement.location, statement.source_line)
        logger.debug(f"Declared {var_type} {name} at {statement.location}")

        initializer = None
        if len(texts) > 2:
            initializer = self._parse_expression(statement, 1)

        return VariableDeclaration(
            location=statement.location,
            name=name,
            var_type=var_type,
            initializer=initializer,
        )

    def _parse_expression(self, statement: Statement, start: int):
        return parse_expression(
            statement.texts,
            statement.location,
            start,
            len(statement),
            self.namespace,
            precedence=self.precedence,
            max_depth=self.max_depth,
            source_line=statement.source_line,
        )


def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Convenience function to lex and parse source text.

    Args:
        source: Source code string
        filename: Filename for error messages

    Returns:
        The program AST
    """
    return StatementParser().parse(Lexer(source, filename).statements(), filename)
