"""
Value Resolution
================

Turns a single operand token into a leaf node: a literal when the type
inference recognises it, otherwise a reference to a declared variable.
"""

from typing import Optional

from natc.errors import SourceLocation
from natc.compiler.ast import Expression, literal_node, variable_node
from natc.compiler.errors import InvalidValueError
from natc.compiler.namespace import Namespace
from natc.compiler.types import infer_literal_type


def resolve_value(
    token: str,
    namespace: Namespace,
    location: SourceLocation,
    source_line: Optional[str] = None,
) -> Expression:
    """
    Resolve one token to a LiteralNode or VariableNode.

    Raises:
        InvalidValueError: If token is neither a literal nor declared
    """
    literal_type = infer_literal_type(token)
    if literal_type is not None:
        return literal_node(literal_type, token, location)

    var = namespace.lookup(token)
    if var is not None:
        return variable_node(var.declared_type, token, location)

    raise InvalidValueError(
        token,
        location=location,
        source_line=source_line,
        similar_identifiers=namespace.similar_names(token),
    )
