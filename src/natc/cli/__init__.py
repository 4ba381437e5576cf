"""
natc Command-Line Interface
===========================

- **natcc**: the natc compiler

The tool is a Click-based CLI application with help and error
reporting shared through natc.cli.errors.
"""

__all__ = ["natcc"]
