# =============================================================================
# test_codegen.py - HD6303 Code Generator Unit Tests
# =============================================================================
# Tests for assembly emission from the natc AST.
#
# Test coverage includes:
#   - Literal and variable loads by type
#   - One emission handler per operator
#   - Operand evaluation order and stack discipline
#   - Global storage and the string pool
#   - Source line comments
#   - Errors for hand-built trees the parser would reject
# =============================================================================

import pytest

from natc.errors import SourceLocation
from natc.compiler.ast import (
    BinaryOperation,
    BinaryOperator,
    ExpressionStatement,
    LiteralNode,
    ProgramNode,
    VariableNode,
    binary_operation,
    literal_node,
)
from natc.compiler.codegen import CodeGenerator
from natc.compiler.errors import CodeGenError
from natc.compiler.parser import parse_source
from natc.compiler.types import TYPE_INT


LOC = SourceLocation("test.nc", 1, 1)


# =============================================================================
# Helper Functions
# =============================================================================

def generate(source: str, **kwargs) -> str:
    """Compile source text to assembly."""
    return CodeGenerator(**kwargs).generate(parse_source(source, "test.nc"))


def instructions(asm: str) -> list[str]:
    """Return the instruction lines with whitespace normalised."""
    return [
        " ".join(line.split())
        for line in asm.splitlines()
        if line.startswith("        ")
    ]


def main_body(asm: str) -> list[str]:
    """Return the instructions of _main up to its RTS."""
    ops = instructions(asm)
    return ops[:ops.index("RTS")]


# =============================================================================
# Program Layout Tests
# =============================================================================

class TestLayout:
    """Test the overall shape of the output."""

    def test_empty_program(self):
        """An empty program still has an entry point and END."""
        asm = generate("")
        assert "_main:" in asm
        assert instructions(asm) == ["RTS", 'INCLUDE "runtime.inc"', "END"]

    def test_sections_in_order(self):
        """Code, runtime include, globals, strings, end."""
        asm = generate('string s = "hi"')
        positions = [asm.index(marker) for marker in (
            "_main:", "INCLUDE", "; Global Variables", "; String Literals", "END",
        )]
        assert positions == sorted(positions)

    def test_globals_reserved(self):
        """Each variable gets storage sized by its type."""
        asm = generate("int n\nchar c\nstring s")
        lines = asm.splitlines()
        for label, size in (("_n:", "2"), ("_c:", "1"), ("_s:", "2")):
            index = lines.index(label)
            assert lines[index + 1].split() == ["RMB", size]

    def test_bare_declaration_emits_no_code(self):
        """Declaring without a value only reserves storage."""
        assert main_body(generate("int n")) == []


# =============================================================================
# Load Tests
# =============================================================================

class TestLoads:
    """Test literal and variable loads."""

    def test_int_literal(self):
        """Int literals load D immediately."""
        assert main_body(generate("int x = 42")) == ["LDD #42", "STD _x"]

    def test_hex_literal(self):
        """Hex literals are emitted as decimal values."""
        assert main_body(generate("int x = 0x10")) == ["LDD #16", "STD _x"]

    def test_literal_truncated_to_16_bits(self):
        """Values wider than a word are masked."""
        assert main_body(generate("int x = 70000")) == ["LDD #4464", "STD _x"]

    def test_char_literal(self):
        """Char literals load B and clear A."""
        assert main_body(generate("char c = 'a'")) == ["LDAB #97", "CLRA", "STAB _c"]

    def test_escaped_char_literal(self):
        """Escapes decode before emission."""
        assert main_body(generate(r"char c = '\n'"))[0] == "LDAB #10"

    def test_string_literal(self):
        """String literals load the pool label address."""
        asm = generate('string s = "hi"')
        assert main_body(asm) == ["LDD #__S1", "STD _s"]
        lines = asm.splitlines()
        index = lines.index("__S1:")
        assert lines[index + 1].split(None, 1) == ["FCC", '"hi"']
        assert lines[index + 2].split() == ["FCB", "0"]

    def test_char_variable_load(self):
        """Char variables widen into D."""
        body = main_body(generate("char c = 'a'\nint x = c"))
        assert body[-3:] == ["LDAB _c", "CLRA", "STD _x"]

    def test_int_variable_load(self):
        """Int variables load D directly."""
        body = main_body(generate("int a = 1\nint x = a"))
        assert body[-2:] == ["LDD _a", "STD _x"]


# =============================================================================
# Operator Emission Tests
# =============================================================================

class TestOperators:
    """Test each operator's emission handler."""

    def test_add(self):
        """Right pushed, left in D, added through X."""
        assert main_body(generate("int x = 2 + 3")) == [
            "LDD #3", "PSHB", "PSHA",
            "LDD #2", "TSX", "ADDD 0,X",
            "INS", "INS",
            "STD _x",
        ]

    def test_subtract(self):
        """Subtraction keeps left minus right order."""
        body = main_body(generate("int x = 9 - 4"))
        assert body[:6] == ["LDD #4", "PSHB", "PSHA", "LDD #9", "TSX", "SUBD 0,X"]

    @pytest.mark.parametrize("op,routine", [
        ("*", "__mul16"),
        ("/", "__div16"),
        ("%", "__mod16"),
    ])
    def test_runtime_operators(self, op, routine):
        """Multiplicative operators call runtime helpers."""
        body = main_body(generate(f"int x = 6 {op} 7"))
        assert body == [
            "LDD #7", "PSHB", "PSHA",
            "LDD #6", "TSX", "LDX 0,X", f"JSR {routine}",
            "INS", "INS",
            "STD _x",
        ]

    def test_nested_grouping(self):
        """The right subtree is evaluated before the left."""
        body = main_body(generate("int x = ( 1 + 2 ) * 3"))
        assert body[0] == "LDD #3"
        assert body.index("ADDD 0,X") < body.index("JSR __mul16")

    def test_stack_balanced(self):
        """Every push pair is matched by an INS pair."""
        body = main_body(generate("int a = 1\nint x = a * ( a + 2 ) - a / 3 % 4"))
        assert body.count("PSHB") == body.count("PSHA")
        assert body.count("INS") == 2 * body.count("PSHB")

    def test_long_chain_needs_no_recursion(self):
        """Trees far deeper than the parser allows still generate."""
        tree = literal_node(TYPE_INT, "1", LOC)
        for _ in range(2000):
            tree = binary_operation(
                BinaryOperator.ADD, tree, literal_node(TYPE_INT, "2", LOC), LOC
            )
        program = ProgramNode(location=LOC, statements=[
            ExpressionStatement(location=LOC, expression=tree),
        ])
        body = main_body(CodeGenerator().generate(program))
        assert body[0] == "LDD #2"
        assert body.count("PSHB") == 2000
        assert body.count("ADDD 0,X") == 2000
        assert body.count("INS") == 4000

    def test_every_operator_has_a_handler(self):
        """The operator kind always selects an emission method."""
        gen = CodeGenerator()
        for op in BinaryOperator:
            assert callable(gen._emitter_for(op))


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Test source line comments."""

    def test_source_comment(self):
        """The statement's source precedes its code."""
        program = parse_source("int x = 1", "test.nc")
        asm = CodeGenerator().generate(program, {("test.nc", 1): "int x = 1"})
        lines = asm.splitlines()
        index = lines.index("; int x = 1")
        assert lines[index + 1].split() == ["LDD", "#1"]

    def test_comments_disabled(self):
        """output_comments=False drops source comments."""
        program = parse_source("int x = 1", "test.nc")
        asm = CodeGenerator(output_comments=False).generate(
            program, {("test.nc", 1): "int x = 1"}
        )
        assert "; int x = 1" not in asm


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Test trees the parser would never build."""

    def test_undeclared_variable(self):
        """A variable with no declaration cannot be loaded."""
        program = ProgramNode(location=LOC, statements=[
            ExpressionStatement(
                location=LOC,
                expression=VariableNode(location=LOC, resolved_type=TYPE_INT, name="ghost"),
            ),
        ])
        with pytest.raises(CodeGenError, match="ghost"):
            CodeGenerator().generate(program)

    def test_assignment_to_literal(self):
        """An assignment target must be a variable."""
        one = LiteralNode(location=LOC, resolved_type=TYPE_INT, text="1")
        program = ProgramNode(location=LOC, statements=[
            ExpressionStatement(
                location=LOC,
                expression=BinaryOperation(
                    location=LOC,
                    resolved_type=TYPE_INT,
                    operator=BinaryOperator.ASSIGN,
                    left=one,
                    right=LiteralNode(location=LOC, resolved_type=TYPE_INT, text="2"),
                ),
            ),
        ])
        with pytest.raises(CodeGenError, match="not a variable"):
            CodeGenerator().generate(program)
