"""
natc Compiler Main Module
=========================

This module provides the main compiler interface. It orchestrates the
complete compilation process:

    Source → Lex → Parse (statements, expressions) → Generate → Assembly

Usage
-----
Command line:
    $ natcc calc.nc -o calc.asm

Programmatic:
    >>> from natc.compiler import compile_source
    >>> asm = compile_source('int x = 1 + 2 * 3')

Several source files can be compiled as one program; they share one
namespace, in the order given.

Error Handling
--------------
The first error aborts compilation. Source files are all validated
(extension, readability) before any of them is parsed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from natc.errors import SourceFileError
from natc.compiler.ast import ProgramNode
from natc.compiler.codegen import CodeGenerator
from natc.compiler.expression import DEFAULT_MAX_DEPTH, MAX_EXPRESSION_DEPTH
from natc.compiler.lexer import Lexer, Statement
from natc.compiler.namespace import Namespace
from natc.compiler.operators import DEFAULT_PRECEDENCE, PrecedenceTable
from natc.compiler.parser import StatementParser

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".nc"


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        output_comments: Include source lines as comments in assembly
        max_expression_depth: Recursion limit for one expression
            (1 to MAX_EXPRESSION_DEPTH)
        precedence: Operator precedence tiers, loosest first
        source_extension: Required suffix for source files
    """
    output_comments: bool = True
    max_expression_depth: int = DEFAULT_MAX_DEPTH
    precedence: PrecedenceTable = DEFAULT_PRECEDENCE
    source_extension: str = SOURCE_EXTENSION

    def __post_init__(self):
        if not 1 <= self.max_expression_depth <= MAX_EXPRESSION_DEPTH:
            raise ValueError(
                f"max_expression_depth must be between 1 and {MAX_EXPRESSION_DEPTH}"
            )


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filenames: Source files compiled, in order
        assembly: Generated assembly code
        ast: The program AST
        token_count: Number of tokens lexed
        statement_count: Number of statements parsed
    """
    filenames: list[str] = field(default_factory=list)
    assembly: str = ""
    ast: Optional[ProgramNode] = None
    token_count: int = 0
    statement_count: int = 0


class Compiler:
    """
    Compiles natc source to HD6303 assembly.

    Example:
        compiler = Compiler()
        result = compiler.compile_files(["calc.nc"])
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile one source string.

        Raises:
            CompilerError: If compilation fails
        """
        return self._compile([(source, filename)])

    def compile_files(self, paths: Iterable[str | Path]) -> CompilerResult:
        """
        Compile source files as a single program.

        Raises:
            SourceFileError: If any file has the wrong extension or
                cannot be read; raised before any parsing
            CompilerError: If compilation fails
        """
        sources = [(self._read_source(Path(p)), str(p)) for p in paths]
        if not sources:
            raise SourceFileError("<none>", "no input files")
        return self._compile(sources)

    def _read_source(self, path: Path) -> str:
        if path.suffix != self.options.source_extension:
            raise SourceFileError(str(path), "Invalid file")
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise SourceFileError(str(path), "File not found") from None
        except (OSError, UnicodeDecodeError) as e:
            raise SourceFileError(str(path), f"Failed to read from file ({e})") from e

    def _compile(self, sources: list[tuple[str, str]]) -> CompilerResult:
        result = CompilerResult(filenames=[name for _, name in sources])

        statements: list[Statement] = []
        for source, filename in sources:
            statements.extend(self._lex(source, filename))
        result.statement_count = len(statements)
        result.token_count = sum(len(s) for s in statements)
        logger.info(
            f"Lexed {result.token_count} tokens in {result.statement_count} statements"
        )

        namespace = Namespace()
        parser = StatementParser(
            namespace,
            precedence=self.options.precedence,
            max_depth=self.options.max_expression_depth,
        )
        result.ast = parser.parse(statements, result.filenames[0])
        logger.info(f"Parsed {result.statement_count} statements, {len(namespace)} variables")

        source_lines = {
            (s.location.filename, s.location.line): s.source_line for s in statements
        }
        generator = CodeGenerator(output_comments=self.options.output_comments)
        result.assembly = generator.generate(result.ast, source_lines)
        return result

    def _lex(self, source: str, filename: str) -> list[Statement]:
        return list(Lexer(source, filename).statements())


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(
    source: str,
    filename: str = "<input>",
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile source text to assembly.

    Returns:
        Generated HD6303 assembly
    """
    return Compiler(options).compile_source(source, filename).assembly


def compile_files(
    paths: Iterable[str | Path],
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile source files as one program.

    Returns:
        Generated HD6303 assembly
    """
    return Compiler(options).compile_files(paths).assembly
