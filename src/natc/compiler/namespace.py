"""
Variable Namespace
==================

Symbol table mapping declared variable names to their types.

The expression parser only ever calls lookup(); declarations are added
by the statement parser before the expression that initializes them is
parsed.
"""

import difflib
import re
from dataclasses import dataclass
from typing import Optional

from natc.errors import SourceLocation
from natc.compiler.types import CType
from natc.compiler.errors import DuplicateDeclarationError

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(text: str) -> bool:
    """Return True if text is shaped like a variable name."""
    return _IDENTIFIER_RE.fullmatch(text) is not None


@dataclass(frozen=True)
class VariableInfo:
    """
    Information about a declared variable.

    Attributes:
        name: Variable name
        declared_type: The type given at declaration
        location: Where the variable was declared
    """
    name: str
    declared_type: CType
    location: Optional[SourceLocation] = None


class Namespace:
    """
    Flat table of declared variables, in declaration order.

    Example:
        ns = Namespace()
        ns.declare("count", TYPE_INT)
        ns.lookup("count").declared_type   # TYPE_INT
    """

    def __init__(self):
        self._variables: dict[str, VariableInfo] = {}

    def lookup(self, name: str) -> Optional[VariableInfo]:
        """Return the variable called name, or None if undeclared."""
        return self._variables.get(name)

    def declare(
        self,
        name: str,
        declared_type: CType,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> VariableInfo:
        """
        Add a variable.

        Raises:
            DuplicateDeclarationError: If name is already declared
        """
        existing = self._variables.get(name)
        if existing is not None:
            raise DuplicateDeclarationError(
                name,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        info = VariableInfo(name, declared_type, location)
        self._variables[name] = info
        return info

    def similar_names(self, name: str, limit: int = 3) -> list[str]:
        """Return declared names close to name, for typo hints."""
        return difflib.get_close_matches(name, list(self._variables), n=limit)

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    def __len__(self) -> int:
        return len(self._variables)
