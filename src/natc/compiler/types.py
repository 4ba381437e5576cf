"""
natc Type System
================

This module implements the value types understood by the compiler and
the literal-type inference used when resolving expression operands.

Supported Types
---------------
| Type   | Representation   | Size (bytes) |
|--------|------------------|--------------|
| char   | 8-bit integer    | 1            |
| int    | 16-bit integer   | 2            |
| string | pointer to char  | 2            |

Literal Forms
-------------
| Literal      | Example          | Inferred type |
|--------------|------------------|---------------|
| Decimal      | 42               | int           |
| Hexadecimal  | 0x2A             | int           |
| Binary       | 0b101010         | int           |
| Character    | 'a', '\\n'       | char          |
| String       | "hello"          | string        |

Literal tokens keep their source spelling (quotes included); the code
generator asks literal_value() for the decoded value.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Base Type Enumeration
# =============================================================================

class BaseType(Enum):
    """
    Fundamental data types.

    Note: The HD6303 is an 8-bit processor with 16-bit address bus.
    Pointers are 16-bit regardless of what they point to.
    """
    CHAR = auto()       # 8-bit
    INT = auto()        # 16-bit

    def __str__(self) -> str:
        return self.name.lower()


# =============================================================================
# Type Representation
# =============================================================================

@dataclass(frozen=True)
class CType:
    """
    Represents a value type.

    Attributes:
        base_type: The fundamental type (CHAR, INT)
        is_pointer: True for pointer types (strings are char pointers)

    Examples:
        - int     : CType(INT)
        - char    : CType(CHAR)
        - string  : CType(CHAR, is_pointer=True)
    """
    base_type: BaseType
    is_pointer: bool = False

    @property
    def size(self) -> int:
        """Return the storage size in bytes."""
        if self.is_pointer:
            return 2
        if self.base_type == BaseType.CHAR:
            return 1
        return 2

    def __str__(self) -> str:
        if self.is_pointer and self.base_type == BaseType.CHAR:
            return "string"
        if self.is_pointer:
            return f"{self.base_type} *"
        return str(self.base_type)


# =============================================================================
# Predefined Types
# =============================================================================

TYPE_CHAR = CType(BaseType.CHAR)
TYPE_INT = CType(BaseType.INT)
TYPE_STRING = CType(BaseType.CHAR, is_pointer=True)

# Type keywords accepted in declarations
TYPE_NAMES: dict[str, CType] = {
    "int": TYPE_INT,
    "char": TYPE_CHAR,
    "string": TYPE_STRING,
}


def lookup_type_name(name: str) -> Optional[CType]:
    """Return the type named by a declaration keyword, or None."""
    return TYPE_NAMES.get(name)


# =============================================================================
# Literal Inference
# =============================================================================

_DECIMAL_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"0[xX][0-9A-Fa-f]+")
_BINARY_RE = re.compile(r"0[bB][01]+")

# Escape sequences in character and string literals
ESCAPE_SEQUENCES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
    "\\": "\\",
    "'": "'",
    '"': '"',
}


def infer_literal_type(text: str) -> Optional[CType]:
    """
    Classify a token as a literal.

    Args:
        text: The token text as it appeared in source

    Returns:
        The literal's type, or None if the token is not a literal
    """
    if _DECIMAL_RE.fullmatch(text) or _HEX_RE.fullmatch(text) or _BINARY_RE.fullmatch(text):
        return TYPE_INT

    if len(text) >= 3 and text[0] == "'" and text[-1] == "'":
        body = text[1:-1]
        if len(body) == 1 and body != "\\":
            return TYPE_CHAR
        if len(body) == 2 and body[0] == "\\" and body[1] in ESCAPE_SEQUENCES:
            return TYPE_CHAR
        return None

    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        try:
            _unescape(text[1:-1])
        except ValueError:
            return None
        return TYPE_STRING

    return None


def literal_value(text: str) -> int | str:
    """
    Decode a literal token into its value.

    Integers and characters decode to int (characters to their code
    point); strings decode to their unescaped contents.

    Raises:
        ValueError: If text is not a literal
    """
    literal_type = infer_literal_type(text)
    if literal_type is None:
        raise ValueError(f"not a literal: {text!r}")

    if literal_type == TYPE_STRING:
        return _unescape(text[1:-1])
    if literal_type == TYPE_CHAR:
        return ord(_unescape(text[1:-1]))

    lowered = text.lower()
    if lowered.startswith("0x"):
        return int(text[2:], 16)
    if lowered.startswith("0b"):
        return int(text[2:], 2)
    return int(text, 10)


def _unescape(body: str) -> str:
    """Replace escape sequences in a literal body."""
    chars = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\":
            if i + 1 >= len(body) or body[i + 1] not in ESCAPE_SEQUENCES:
                raise ValueError(f"invalid escape in {body!r}")
            chars.append(ESCAPE_SEQUENCES[body[i + 1]])
            i += 2
            continue
        chars.append(char)
        i += 1
    return "".join(chars)
