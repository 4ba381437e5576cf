"""
natc Compiler
=============

Compiles a small line-oriented language to HD6303 assembly.

Pipeline
--------
    Source → Lexer → Statement parser → Expression parser → AST → Code generator

The expression parser is the heart of the compiler: it splits a token
range at its loosest-binding top-level operator, recursing into both
operands, with parentheses matched once per statement and skipped in a
single jump during the right-to-left scan.

Usage
-----
>>> from natc.compiler import compile_source
>>> asm = compile_source('''
... int total = 2
... total = (total + 3) * 4
... ''')

Language
--------
- Types: int (16-bit), char (8-bit), string (char pointer)
- Declarations: int x, int x = expression
- Operators, loosest first: =, then + -, then * / %
- Parentheses for grouping
- // comments
"""

from natc.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_files,
    compile_source,
)
from natc.compiler.errors import (
    CompilerError,
    ExpressionError,
    MismatchedParenthesesError,
    InvalidAssignmentError,
    InvalidValueError,
    MalformedExpressionError,
    ExpressionDepthError,
    LexicalError,
    DeclarationError,
    CodeGenError,
)
from natc.compiler.expression import ExpressionParser, parse_expression
from natc.compiler.lexer import Lexer, Statement, Token
from natc.compiler.namespace import Namespace, VariableInfo
from natc.compiler.operators import DEFAULT_PRECEDENCE, OperatorTier, PrecedenceTable
from natc.compiler.parens import ParenMatchTable, match_parentheses
from natc.compiler.parser import StatementParser, parse_source
from natc.compiler.codegen import CodeGenerator
from natc.compiler.ast import (
    ASTNode,
    ASTPrinter,
    BinaryOperation,
    BinaryOperator,
    ExpressionStatement,
    LiteralNode,
    ProgramNode,
    VariableDeclaration,
    VariableNode,
)

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_files",
    # Errors
    "CompilerError",
    "ExpressionError",
    "MismatchedParenthesesError",
    "InvalidAssignmentError",
    "InvalidValueError",
    "MalformedExpressionError",
    "ExpressionDepthError",
    "LexicalError",
    "DeclarationError",
    "CodeGenError",
    # Front end
    "Lexer",
    "Statement",
    "Token",
    "StatementParser",
    "parse_source",
    "ExpressionParser",
    "parse_expression",
    "ParenMatchTable",
    "match_parentheses",
    "Namespace",
    "VariableInfo",
    "OperatorTier",
    "PrecedenceTable",
    "DEFAULT_PRECEDENCE",
    # Back end
    "CodeGenerator",
    # AST
    "ASTNode",
    "ASTPrinter",
    "BinaryOperation",
    "BinaryOperator",
    "ExpressionStatement",
    "LiteralNode",
    "ProgramNode",
    "VariableDeclaration",
    "VariableNode",
]
