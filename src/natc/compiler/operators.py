"""
Operator Precedence Table
=========================

Binary operators grouped into precedence tiers, loosest binding first.

Default Tiers
-------------
| Tier | Name           | Operators |
|------|----------------|-----------|
| 0    | assignment     | =         |
| 1    | additive       | + -       |
| 2    | multiplicative | * / %     |

The expression parser takes a table as a parameter, so tests can drive
it with alternate orderings. DEFAULT_PRECEDENCE is built once at import
and never mutated.
"""

from dataclasses import dataclass
from typing import Optional

from natc.compiler.ast import BinaryOperator


@dataclass(frozen=True)
class OperatorTier:
    """
    Operators sharing one binding strength.

    Attributes:
        name: Tier name for diagnostics
        operators: Operators in this tier
    """
    name: str
    operators: frozenset[BinaryOperator]

    def match(self, token: str) -> Optional[BinaryOperator]:
        """Return the operator spelled exactly by token, or None."""
        op = BinaryOperator.from_symbol(token)
        if op is not None and op in self.operators:
            return op
        return None


@dataclass(frozen=True)
class PrecedenceTable:
    """
    Ordered precedence tiers, lowest binding strength first.

    Raises:
        ValueError: If an operator appears in more than one tier
    """
    tiers: tuple[OperatorTier, ...]

    def __post_init__(self):
        seen: set[BinaryOperator] = set()
        for tier in self.tiers:
            overlap = seen & tier.operators
            if overlap:
                names = ", ".join(sorted(op.symbol for op in overlap))
                raise ValueError(f"operator(s) {names} appear in more than one tier")
            seen |= tier.operators

    def match(self, tier_index: int, token: str) -> Optional[BinaryOperator]:
        """
        Return the operator token spells if it belongs to the given tier.

        None means "no match here" and is not an error.
        """
        return self.tiers[tier_index].match(token)

    def __len__(self) -> int:
        return len(self.tiers)


DEFAULT_PRECEDENCE = PrecedenceTable((
    OperatorTier("assignment", frozenset({BinaryOperator.ASSIGN})),
    OperatorTier("additive", frozenset({BinaryOperator.ADD, BinaryOperator.SUBTRACT})),
    OperatorTier("multiplicative", frozenset({
        BinaryOperator.MULTIPLY,
        BinaryOperator.DIVIDE,
        BinaryOperator.MODULO,
    })),
))
