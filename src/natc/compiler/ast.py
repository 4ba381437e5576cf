"""
natc Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the AST node types produced by the statement and
expression parsers, together with the node builder functions used by
the expression parser.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node containing all statements
├── Statements
│   ├── VariableDeclaration - variable declaration, optional initializer
│   └── ExpressionStatement - expression as statement
└── Expressions
    ├── LiteralNode - literal leaf (number, character, string)
    ├── VariableNode - variable reference leaf
    └── BinaryOperation - operator applied to two owned operands

Design Notes
------------
- All nodes are dataclasses; equality is structural, so two parses of the
  same tokens compare equal
- Each node stores its statement's source location for error reporting
- A binary node exclusively owns its two children; trees never share
  subtrees and have no back references
- BinaryOperation.operator selects the node's instruction emission
  handler in the code generator
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from natc.errors import SourceLocation
from natc.compiler.types import CType


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation


@dataclass
class Expression(ASTNode):
    """
    Base class for all expression nodes.

    Attributes:
        location: Source location
        resolved_type: The type of value this expression produces
    """
    resolved_type: Optional[CType] = None


@dataclass
class Statement(ASTNode):
    """
    Base class for all statement nodes.
    """
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """
    Binary operator kinds.

    The value of each member is its source symbol.
    """
    ASSIGN = "="
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["BinaryOperator"]:
        """Return the operator spelled by symbol, or None."""
        for op in cls:
            if op.value == symbol:
                return op
        return None


@dataclass
class LiteralNode(Expression):
    """
    Literal value leaf.

    Attributes:
        text: The literal exactly as written (quotes included)
    """
    text: str = ""


@dataclass
class VariableNode(Expression):
    """
    Variable reference leaf.

    Attributes:
        name: The variable name
    """
    name: str = ""


@dataclass
class BinaryOperation(Expression):
    """
    Binary operation (left op right).

    For ASSIGN, left is always a VariableNode.

    Attributes:
        operator: The operator kind
        left: Left operand, owned by this node
        right: Right operand, owned by this node
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class VariableDeclaration(Statement):
    """
    Variable declaration.

    Represents declarations like:
        int x
        char c = 'a'

    Attributes:
        name: Variable name
        var_type: The declared type
        initializer: Assignment node storing the initial value, if any
    """
    name: str = ""
    var_type: CType = None
    initializer: Optional[BinaryOperation] = None


@dataclass
class ExpressionStatement(Statement):
    """
    Expression evaluated for its effect.

    Attributes:
        expression: The root of the statement's expression tree
    """
    expression: Expression = None


@dataclass
class ProgramNode(ASTNode):
    """
    Root node of a compiled program.

    Attributes:
        statements: Statements in source order
    """
    statements: list[Statement] = field(default_factory=list)


# =============================================================================
# Node Builders
# =============================================================================

def literal_node(literal_type: CType, text: str, location: SourceLocation) -> LiteralNode:
    """Build a literal leaf carrying its inferred type."""
    return LiteralNode(location=location, resolved_type=literal_type, text=text)


def variable_node(declared_type: CType, name: str, location: SourceLocation) -> VariableNode:
    """Build a variable leaf carrying its declared type."""
    return VariableNode(location=location, resolved_type=declared_type, name=name)


def binary_operation(
    operator: BinaryOperator,
    left: Expression,
    right: Expression,
    location: SourceLocation,
) -> BinaryOperation:
    """
    Build a binary node.

    The result type is taken from the right operand. For assignment that
    is the assigned value's type.
    """
    return BinaryOperation(
        location=location,
        resolved_type=right.resolved_type,
        operator=operator,
        left=left,
        right=right,
    )


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care
    about. Unhandled nodes fall back to generic_visit, which walks
    child nodes.

    Usage:
        class NameCollector(ASTVisitor):
            def visit_VariableNode(self, node):
                self.names.append(node.name)
    """

    def visit(self, node: ASTNode):
        """Dispatch to visit_<ClassName>."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Binary operations are shown fully parenthesized, so grouping decided
    by precedence and associativity is visible:

        Program
          Variable: int x = (x = (1 + (2 * 3)))
          Expr: ((a - b) - c) : int
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self.indent_level += 1
        for stmt in node.statements:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_VariableDeclaration(self, node: VariableDeclaration):
        init = f" = {self.expr_str(node.initializer)}" if node.initializer else ""
        self._emit(f"Variable: {node.var_type} {node.name}{init}")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        expr = node.expression
        self._emit(f"Expr: {self.expr_str(expr)} : {expr.resolved_type}")

    def visit_LiteralNode(self, node: LiteralNode):
        self._emit(f"Literal: {node.text} : {node.resolved_type}")

    def visit_VariableNode(self, node: VariableNode):
        self._emit(f"Variable: {node.name} : {node.resolved_type}")

    def visit_BinaryOperation(self, node: BinaryOperation):
        self._emit(f"Binary: {self.expr_str(node)} : {node.resolved_type}")

    def expr_str(self, expr: Expression) -> str:
        """Convert an expression to a fully parenthesized string."""
        if isinstance(expr, LiteralNode):
            return expr.text
        if isinstance(expr, VariableNode):
            return expr.name
        if isinstance(expr, BinaryOperation):
            return f"({self.expr_str(expr.left)} {expr.operator.symbol} {self.expr_str(expr.right)})"
        return f"<{type(expr).__name__}>"
