r"""
arrayblock/boolean.py
═════════════════════

Three-valued booleans used as the result of abstract comparisons.

            ⊤
          /   \
       True  False
          \   /
            ⊥

``EqualOrder`` turns a three-valued *equality* test into the outcome of
an arbitrary comparison: it records what the comparison yields when the
two operands are equal and when they are not.  ``EqualOrder.EQ`` is
``==``, ``EqualOrder.NE`` is ``!=``, ``EqualOrder.STRICT_CMP`` covers
``<``/``>`` (false on equal operands, unknown otherwise) and
``EqualOrder.LOOSE_CMP`` covers ``<=``/``>=``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class Boolean(Enum):
    BOTTOM = "⊥"
    TRUE = "true"
    FALSE = "false"
    TOP = "⊤"

    @classmethod
    def of_bool(cls, b: bool) -> Boolean:
        return cls.TRUE if b else cls.FALSE

    def is_bottom(self) -> bool:
        return self is Boolean.BOTTOM

    def is_top(self) -> bool:
        return self is Boolean.TOP

    def is_true(self) -> bool:
        return self is Boolean.TRUE

    def is_false(self) -> bool:
        return self is Boolean.FALSE

    def leq(self, other: Boolean) -> bool:
        if self.is_bottom() or other.is_top():
            return True
        return self is other

    def join(self, other: Boolean) -> Boolean:
        if self.is_bottom():
            return other
        if other.is_bottom():
            return self
        if self is other:
            return self
        return Boolean.TOP

    # ---- Abstract logical operations -------------------------------------

    def not_(self) -> Boolean:
        if self is Boolean.TRUE:
            return Boolean.FALSE
        if self is Boolean.FALSE:
            return Boolean.TRUE
        return self

    def and_(self, other: Boolean) -> Boolean:
        if self.is_bottom() or other.is_bottom():
            return Boolean.BOTTOM
        # False ∧ anything = False
        if self.is_false() or other.is_false():
            return Boolean.FALSE
        if self.is_true() and other.is_true():
            return Boolean.TRUE
        return Boolean.TOP

    def or_(self, other: Boolean) -> Boolean:
        if self.is_bottom() or other.is_bottom():
            return Boolean.BOTTOM
        if self.is_true() or other.is_true():
            return Boolean.TRUE
        if self.is_false() and other.is_false():
            return Boolean.FALSE
        return Boolean.TOP

    def __repr__(self) -> str:
        return f"Boolean({self.value})"


@dataclass(frozen=True)
class EqualOrder:
    """Outcomes of a comparison on equal and on non-equal operands."""
    on_equal: Boolean
    on_not_equal: Boolean

    EQ: ClassVar[EqualOrder]
    NE: ClassVar[EqualOrder]
    STRICT_CMP: ClassVar[EqualOrder]
    LOOSE_CMP: ClassVar[EqualOrder]
    TOP: ClassVar[EqualOrder]

    def of_equal(self, eq: Boolean) -> Boolean:
        if eq is Boolean.TRUE:
            return self.on_equal
        if eq is Boolean.FALSE:
            return self.on_not_equal
        return eq


EqualOrder.EQ = EqualOrder(on_equal=Boolean.TRUE, on_not_equal=Boolean.FALSE)
EqualOrder.NE = EqualOrder(on_equal=Boolean.FALSE, on_not_equal=Boolean.TRUE)
EqualOrder.STRICT_CMP = EqualOrder(on_equal=Boolean.FALSE, on_not_equal=Boolean.TOP)
EqualOrder.LOOSE_CMP = EqualOrder(on_equal=Boolean.TRUE, on_not_equal=Boolean.TOP)
EqualOrder.TOP = EqualOrder(on_equal=Boolean.TOP, on_not_equal=Boolean.TOP)


__all__ = ["Boolean", "EqualOrder"]
