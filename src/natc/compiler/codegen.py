"""
HD6303 Code Generator
=====================

This module generates HD6303 assembly from the natc AST, in the syntax
accepted by the psasm assembler.

Code Generation Strategy
------------------------
The generator uses a simple stack-based evaluation model:

1. Every expression leaves its result in the D register (A:B)
2. For binary operations the right operand is evaluated and pushed,
   then the left operand is evaluated into D and combined with the
   pushed word through X
3. Variables are globals, accessed by extended addressing

Each binary node's operator selects its emission handler: one method
per operator, chosen by _emitter_for().

Register Usage
--------------
| Register | Usage                                    |
|----------|------------------------------------------|
| D (A:B)  | Expression results                       |
| X        | Access to the pushed right operand       |
| SP       | Operand stack                            |

Runtime Helpers
---------------
Multiplication, division and modulo call runtime routines with the left
operand in D and the right operand in X; the result comes back in D:

    __mul16, __div16, __mod16

Example output for "int x = 2 + 3":
    _main:
    ; int x = 2 + 3
            LDD     #3
            PSHB
            PSHA
            LDD     #2
            TSX
            ADDD    0,X
            INS
            INS
            STD     _x
            RTS
"""

import logging
from typing import Callable, Optional

from natc.compiler.ast import (
    BinaryOperation,
    BinaryOperator,
    Expression,
    ExpressionStatement,
    LiteralNode,
    ProgramNode,
    Statement,
    VariableDeclaration,
    VariableNode,
)
from natc.compiler.errors import CodeGenError
from natc.compiler.types import CType, TYPE_STRING, literal_value

logger = logging.getLogger(__name__)


class CodeGenerator:
    """
    Generates HD6303 assembly from a program AST.

    Usage:
        gen = CodeGenerator()
        asm = gen.generate(program)

    Attributes:
        output_comments: Emit each statement's source line as a comment
    """

    def __init__(self, output_comments: bool = True):
        self.output_comments = output_comments

        # Assembly output lines
        self._output: list[str] = []

        # Declared variables: name -> type
        self._globals: dict[str, CType] = {}

        # Label generation
        self._label_counter: int = 0

        # String literal pool
        self._strings: list[tuple[str, str]] = []  # (label, value)

        # Source lines keyed by (filename, line) for comments
        self._source_lines: dict[tuple[str, int], str] = {}

    def generate(
        self,
        program: ProgramNode,
        source_lines: Optional[dict[tuple[str, int], str]] = None,
    ) -> str:
        """
        Generate assembly code from AST.

        Args:
            program: The root AST node
            source_lines: Optional source text per (filename, line),
                used for statement comments

        Returns:
            Complete HD6303 assembly source
        """
        self._output = []
        self._globals = {}
        self._strings = []
        self._label_counter = 0
        self._source_lines = source_lines or {}

        for stmt in program.statements:
            if isinstance(stmt, VariableDeclaration):
                self._globals[stmt.name] = stmt.var_type

        self._emit_header()

        self._emit_label("_main")
        for stmt in program.statements:
            self._generate_statement(stmt)
        self._emit_instruction("RTS")

        self._emit("")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("; Runtime Library")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("        INCLUDE \"runtime.inc\"")

        self._emit_globals()
        self._emit_strings()
        self._emit_footer()

        logger.debug(
            f"Generated {len(self._output)} lines for {len(program.statements)} statements"
        )
        return "\n".join(self._output)

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_comment(self, comment: str) -> None:
        self._emit(f"; {comment}")

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operand: str = "") -> None:
        if operand:
            self._emit(f"        {mnemonic:<8}{operand}")
        else:
            self._emit(f"        {mnemonic}")

    def _new_label(self, prefix: str = "L") -> str:
        """Generate a unique label."""
        self._label_counter += 1
        return f"_{prefix}{self._label_counter}"

    # =========================================================================
    # Header, Footer and Data
    # =========================================================================

    def _emit_header(self) -> None:
        self._emit("; =============================================================================")
        self._emit("; natc Generated Assembly for HD6303")
        self._emit("; =============================================================================")
        self._emit("")

    def _emit_footer(self) -> None:
        self._emit("")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("; End of generated code")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("        END")

    def _emit_globals(self) -> None:
        """Reserve storage for every declared variable."""
        if not self._globals:
            return

        self._emit("")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("; Global Variables")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("")

        for name, var_type in self._globals.items():
            self._emit_label(f"_{name}")
            self._emit_instruction("RMB", str(var_type.size))

    def _emit_strings(self) -> None:
        """Emit string literal pool."""
        if not self._strings:
            return

        self._emit("")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("; String Literals")
        self._emit("; -----------------------------------------------------------------------------")
        self._emit("")

        for label, value in self._strings:
            self._emit_label(label)
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            self._emit_instruction("FCC", f'"{escaped}"')
            self._emit_instruction("FCB", "0")  # Null terminator

    # =========================================================================
    # Statement Code Generation
    # =========================================================================

    def _generate_statement(self, stmt: Statement) -> None:
        if self.output_comments:
            key = (stmt.location.filename, stmt.location.line)
            source = self._source_lines.get(key)
            if source is not None:
                self._emit_comment(source.strip())

        if isinstance(stmt, VariableDeclaration):
            if stmt.initializer is not None:
                self._generate_expression(stmt.initializer)
        elif isinstance(stmt, ExpressionStatement):
            self._generate_expression(stmt.expression)
        else:
            raise CodeGenError(f"unsupported statement {type(stmt).__name__}", stmt.location)


    # =========================================================================
    # Expression Code Generation
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> None:
        """
        Generate code leaving the expression's value in D.

        Trees are walked with an explicit work stack rather than by
        recursion, so a long operator chain costs list entries, not
        interpreter frames. Each entry is either a node still to be
        evaluated or a step to emit once the nodes above it are done.
        """
        work: list[Expression | Callable[[], None]] = [expr]
        while work:
            item = work.pop()
            if isinstance(item, LiteralNode):
                self._generate_literal(item)
            elif isinstance(item, VariableNode):
                self._generate_variable(item)
            elif isinstance(item, BinaryOperation):
                # Pushed in reverse of execution order
                work.extend(reversed(self._binary_steps(item)))
            elif isinstance(item, Expression):
                raise CodeGenError(f"unsupported expression {type(item).__name__}", item.location)
            else:
                item()

    def _binary_steps(self, expr: BinaryOperation) -> list[Expression | Callable[[], None]]:
        """
        Return the evaluation steps for a binary node.

        Assignment evaluates its value and stores it. Every other
        operator evaluates the right operand and pushes it, evaluates the
        left operand into D, points X at the pushed word, applies the
        operator and releases the word.
        """
        emit = self._emitter_for(expr.operator)

        if expr.operator is BinaryOperator.ASSIGN:
            if not isinstance(expr.left, VariableNode):
                raise CodeGenError("assignment target is not a variable", expr.location)
            return [expr.right, lambda: emit(expr)]

        def apply() -> None:
            self._emit_instruction("TSX")
            emit(expr)
            self._emit_pop_operand()

        return [expr.right, self._emit_push_operand, expr.left, apply]

    def _generate_literal(self, expr: LiteralNode) -> None:
        value = literal_value(expr.text)

        if expr.resolved_type == TYPE_STRING:
            # '__S' prefix keeps pool labels clear of '_name' variables
            label = self._new_label("_S")
            self._strings.append((label, value))
            self._emit_instruction("LDD", f"#{label}")
        elif expr.resolved_type.size == 1:
            self._emit_instruction("LDAB", f"#{value & 0xFF}")
            self._emit_instruction("CLRA")
        else:
            self._emit_instruction("LDD", f"#{value & 0xFFFF}")

    def _generate_variable(self, expr: VariableNode) -> None:
        var_type = self._lookup(expr)
        if var_type.size == 1:
            self._emit_instruction("LDAB", f"_{expr.name}")
            self._emit_instruction("CLRA")
        else:
            self._emit_instruction("LDD", f"_{expr.name}")

    def _lookup(self, expr: VariableNode) -> CType:
        var_type = self._globals.get(expr.name)
        if var_type is None:
            raise CodeGenError(f"undefined variable '{expr.name}'", expr.location)
        return var_type

    def _emit_push_operand(self) -> None:
        self._emit_instruction("PSHB")
        self._emit_instruction("PSHA")

    def _emit_pop_operand(self) -> None:
        self._emit_instruction("INS")
        self._emit_instruction("INS")

    # =========================================================================
    # Operator Emission Handlers
    # =========================================================================
    #
    # Each handler runs with both operands already evaluated: the left
    # operand in D and X pointing at the pushed right operand. For
    # assignment, D holds the value being stored.

    def _emitter_for(self, op: BinaryOperator) -> Callable[[BinaryOperation], None]:
        """Select the emission handler for an operator."""
        if op is BinaryOperator.ASSIGN:
            return self._emit_assignment
        elif op is BinaryOperator.ADD:
            return self._emit_add
        elif op is BinaryOperator.SUBTRACT:
            return self._emit_subtract
        elif op is BinaryOperator.MULTIPLY:
            return self._emit_multiply
        elif op is BinaryOperator.DIVIDE:
            return self._emit_divide
        elif op is BinaryOperator.MODULO:
            return self._emit_modulo
        raise CodeGenError(f"no emission handler for operator {op}")

    def _emit_runtime_call(self, routine: str) -> None:
        self._emit_instruction("LDX", "0,X")
        self._emit_instruction("JSR", routine)

    def _emit_assignment(self, expr: BinaryOperation) -> None:
        """Store D in the variable; the value stays in D."""
        target = expr.left
        if self._lookup(target).size == 1:
            self._emit_instruction("STAB", f"_{target.name}")
        else:
            self._emit_instruction("STD", f"_{target.name}")

    def _emit_add(self, expr: BinaryOperation) -> None:
        self._emit_instruction("ADDD", "0,X")

    def _emit_subtract(self, expr: BinaryOperation) -> None:
        self._emit_instruction("SUBD", "0,X")

    def _emit_multiply(self, expr: BinaryOperation) -> None:
        self._emit_runtime_call("__mul16")

    def _emit_divide(self, expr: BinaryOperation) -> None:
        self._emit_runtime_call("__div16")

    def _emit_modulo(self, expr: BinaryOperation) -> None:
        self._emit_runtime_call("__mod16")
