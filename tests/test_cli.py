# =============================================================================
# test_cli.py - natcc Command-Line Tests
# =============================================================================
# Tests for the natcc command, run through click's CliRunner in an
# isolated filesystem.
#
# Exit codes:
#   0 - success
#   1 - compilation error
#   2 - bad arguments or unusable source files
# =============================================================================

from pathlib import Path

from click.testing import CliRunner

from natc import __version__
from natc.cli.natcc import main
from natc.compiler.expression import DEFAULT_MAX_DEPTH, MAX_EXPRESSION_DEPTH


PROGRAM = "int x = 2\nx = ( x + 1 ) * 3\n"


class TestNatccSuccess:
    """Test successful compilations."""

    def test_default_output(self):
        """Output defaults to the first source with .asm suffix."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(main, ["calc.nc"])

            assert result.exit_code == 0, f"Compile failed: {result.output}"
            assert "Compiled calc.nc -> calc.asm" in result.output
            asm = Path("calc.asm").read_text()
            assert "_main:" in asm
            assert "; x = ( x + 1 ) * 3" in asm

    def test_explicit_output(self):
        """-o names the output file."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(main, ["calc.nc", "-o", "out.asm"])

            assert result.exit_code == 0
            assert Path("out.asm").exists()
            assert not Path("calc.asm").exists()

    def test_multiple_sources(self):
        """Several files compile into one output."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("decls.nc").write_text("int total\n")
            Path("main.nc").write_text("total = 4 % 3\n")
            result = runner.invoke(main, ["decls.nc", "main.nc"])

            assert result.exit_code == 0, f"Compile failed: {result.output}"
            asm = Path("decls.asm").read_text()
            assert "JSR     __mod16" in asm

    def test_no_comments(self):
        """--no-comments drops source comments."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(main, ["--no-comments", "calc.nc"])

            assert result.exit_code == 0
            assert "; int x = 2" not in Path("calc.asm").read_text()

    def test_ast_dump(self):
        """--ast prints the tree and writes nothing."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(main, ["--ast", "calc.nc"])

            assert result.exit_code == 0
            assert "Program" in result.output
            assert "Expr: (x = ((x + 1) * 3)) : int" in result.output
            assert not Path("calc.asm").exists()

    def test_verbose(self):
        """-v reports progress."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(main, ["-v", "calc.nc"])

            assert result.exit_code == 0
            assert "Tokenized: 13 tokens" in result.output
            assert "Parsed: 2 statements" in result.output

    def test_version(self):
        """--version prints the package version."""
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestNatccErrors:
    """Test failure exit codes."""

    def test_compile_error(self):
        """Compiler errors exit with 1 and show the location."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text("int x\nx = y + 1\n")
            result = runner.invoke(main, ["calc.nc"])

            assert result.exit_code == 1
            assert "calc.nc:2:1: error: invalid value 'y'" in result.output
            assert not Path("calc.asm").exists()

    def test_wrong_extension(self):
        """Non-.nc inputs exit with 2."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.c").write_text(PROGRAM)
            result = runner.invoke(main, ["calc.c"])

            assert result.exit_code == 2
            assert "natcc: fatal error: Invalid file: calc.c" in result.output

    def test_missing_file(self):
        """Missing inputs exit with 2."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["nowhere.nc"])

            assert result.exit_code == 2
            assert "File not found: nowhere.nc" in result.output

    def test_no_sources(self):
        """At least one source is required."""
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 2

    def test_depth_limit(self):
        """--max-depth is applied to expressions."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text("int x = ((((1))))\n")
            result = runner.invoke(main, ["--max-depth", "3", "calc.nc"])

            assert result.exit_code == 1
            assert "expression too deep" in result.output

    def test_depth_must_be_positive(self):
        """--max-depth 0 is rejected by option parsing."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(main, ["--max-depth", "0", "calc.nc"])

            assert result.exit_code == 2

    def test_depth_above_maximum(self):
        """--max-depth is capped at MAX_EXPRESSION_DEPTH."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("calc.nc").write_text(PROGRAM)
            result = runner.invoke(
                main, ["--max-depth", str(MAX_EXPRESSION_DEPTH + 1), "calc.nc"]
            )

            assert result.exit_code == 2
            assert not Path("calc.asm").exists()

    def test_long_chain_at_default_limit(self):
        """The longest product the default limit accepts compiles."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            chain = " * ".join(["2"] * (DEFAULT_MAX_DEPTH - 1))
            Path("calc.nc").write_text(f"int x = {chain}\n")
            result = runner.invoke(main, ["calc.nc"])

            assert result.exit_code == 0, f"Compile failed: {result.output}"
            assert Path("calc.asm").read_text().count("JSR     __mul16") == DEFAULT_MAX_DEPTH - 2

    def test_long_chain_past_default_limit(self):
        """One more term is a compile error, not an internal one."""
        runner = CliRunner()
        with runner.isolated_filesystem():
            chain = " * ".join(["2"] * DEFAULT_MAX_DEPTH)
            Path("calc.nc").write_text(f"int x = {chain}\n")
            result = runner.invoke(main, ["calc.nc"])

            assert result.exit_code == 1
            assert "expression too deep or complex" in result.output
