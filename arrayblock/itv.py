"""
arrayblock/itv.py
═════════════════

Interval domain over symbolic bounds.

    γ([l, u]) = { z ∈ ℤ | l ≤ z ≤ u }   for every valuation of the symbols

The lattice has INFINITE height, so widening is mandatory.  Widening is
the standard Cousot & Cousot operator, refined with thresholds: a bound
that keeps moving jumps to the nearest configured threshold before it
jumps to ±∞ (see ``DomainConfig.widening_thresholds``).

Bottom is any interval whose emptiness is provable; operations always
hand back the canonical ``Itv.bottom()``.

Examples
--------
>>> a = Itv.of_range(0, 10)
>>> a.join(Itv.of_range(5, 20))
[0, 20]
>>> a.prune_comp(CmpOp.LT, Itv.of_int(5))
[0, 4]
>>> Itv.of_range(2, 4).mult(Itv.of_int(8))
[16, 32]
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from arrayblock.boolean import Boolean
from arrayblock.bounds import MINF, PINF, Bound, BoundEnd, EvalSym, Symbol, SymbolSet
from arrayblock.config import DomainConfig, get_config

logger = logging.getLogger(__name__)


class CmpOp(Enum):
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="


_ONE = Bound.of_int(1)
_MINUS_ONE = Bound.of_int(-1)


@dataclass(frozen=True)
class Itv:
    """
    Interval  [lb, ub]  with ``Bound`` endpoints.

    Representation:
        ub < lb (provably)  ⟹  ⊥
        lb = -∞, ub = +∞    ⟹  ⊤
    """
    lb: Bound
    ub: Bound

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def bottom(cls) -> Itv:
        return _BOT

    @classmethod
    def top(cls) -> Itv:
        return _TOP

    @classmethod
    def zero(cls) -> Itv:
        return cls.of_int(0)

    @classmethod
    def one(cls) -> Itv:
        return cls.of_int(1)

    @classmethod
    def nat(cls) -> Itv:
        """[0, +∞]"""
        return cls(Bound.of_int(0), PINF)

    @classmethod
    def of_int(cls, n: int) -> Itv:
        b = Bound.of_int(n)
        return cls(b, b)

    @classmethod
    def of_range(cls, lo: int, hi: int) -> Itv:
        return cls.of_bounds(Bound.of_int(lo), Bound.of_int(hi))

    @classmethod
    def of_bounds(cls, lb: Bound, ub: Bound) -> Itv:
        return cls(lb, ub).normalize()

    @classmethod
    def of_sym(cls, sym: Symbol) -> Itv:
        b = Bound.of_sym(sym)
        return cls(b, b)

    # ---- Predicates ------------------------------------------------------

    def is_bottom(self) -> bool:
        return self.lb.is_pinf() or self.ub.is_minf() or self.ub.lt(self.lb)

    def is_top(self) -> bool:
        return self.lb.is_minf() and self.ub.is_pinf()

    def is_const(self) -> Optional[int]:
        """Return the integer value if this is a constant singleton."""
        lo = self.lb.is_const()
        if lo is not None and lo == self.ub.is_const():
            return lo
        return None

    def get_symbols(self) -> SymbolSet:
        if self.is_bottom():
            return frozenset()
        return self.lb.get_symbols() | self.ub.get_symbols()

    def normalize(self) -> Itv:
        if self.is_bottom():
            return _BOT
        return self

    # ---- Lattice operations ----------------------------------------------

    def leq(self, other: Itv) -> bool:
        """[a,b] ⊑ [c,d]  ⟺  c ≤ a  ∧  b ≤ d  (or self = ⊥)."""
        if self.is_bottom():
            return True
        if other.is_bottom():
            return False
        return other.lb.le(self.lb) and self.ub.le(other.ub)

    def eq(self, other: Itv) -> bool:
        return self.leq(other) and other.leq(self)

    def join(self, other: Itv) -> Itv:
        if self.is_bottom():
            return other.normalize()
        if other.is_bottom():
            return self
        return Itv(Bound.min_l(self.lb, other.lb), Bound.max_u(self.ub, other.ub))

    def meet(self, other: Itv) -> Itv:
        if self.is_bottom() or other.is_bottom():
            return _BOT
        return Itv.of_bounds(
            Bound.max_l(self.lb, other.lb), Bound.min_u(self.ub, other.ub)
        )

    def widen(
        self,
        other: Itv,
        num_iters: int = 0,
        thresholds: Optional[Sequence[int]] = None,
        config: Optional[DomainConfig] = None,
    ) -> Itv:
        """
        Widening  self ∇ other, with *self* the previous iterate.

        The first ``widening_delay`` iterations are plain joins.  After
        that an unstable bound jumps to the closest threshold that is
        below (above) both iterates, or to -∞ (+∞) when there is none.

        Delay and thresholds come from *config*, or from the active
        configuration when it is omitted.  An explicit *thresholds*
        takes precedence over the configured ones.
        """
        if self.is_bottom():
            return other.normalize()
        if other.is_bottom():
            return self
        if config is None:
            config = get_config()
        if num_iters < config.widening_delay:
            return self.join(other)
        if thresholds is None:
            thresholds = config.widening_thresholds
        lb = self.lb if self.lb.le(other.lb) else _widen_lower(self.lb, other.lb, thresholds)
        ub = self.ub if other.ub.le(self.ub) else _widen_upper(self.ub, other.ub, thresholds)
        return Itv(lb, ub)

    # ---- Abstract arithmetic ---------------------------------------------

    def plus(self, other: Itv) -> Itv:
        """[a,b] + [c,d] = [a+c, b+d]."""
        if self.is_bottom() or other.is_bottom():
            return _BOT
        return Itv(
            self.lb.plus(other.lb, BoundEnd.LOWER),
            self.ub.plus(other.ub, BoundEnd.UPPER),
        )

    def minus(self, other: Itv) -> Itv:
        """[a,b] - [c,d] = [a-d, b-c]."""
        return self.plus(other.neg())

    def neg(self) -> Itv:
        if self.is_bottom():
            return _BOT
        return Itv(self.ub.neg(), self.lb.neg())

    def mult_const(self, k: int) -> Itv:
        if self.is_bottom():
            return _BOT
        if k == 0:
            return Itv.zero()
        if k > 0:
            return Itv(self.lb.mult_const(k), self.ub.mult_const(k))
        return Itv(self.ub.mult_const(k), self.lb.mult_const(k))

    def div_const(self, k: int) -> Itv:
        """Floor division by a non-zero constant."""
        if self.is_bottom():
            return _BOT
        if k == 0:
            logger.debug("Division of %r by zero; result is ⊤", self)
            return _TOP
        if k < 0:
            return self.neg().div_const(-k)
        return Itv(
            self.lb.div_const(k, BoundEnd.LOWER),
            self.ub.div_const(k, BoundEnd.UPPER),
        )

    def mult(self, other: Itv) -> Itv:
        """
        [a,b] × [c,d] = [min(ac,ad,bc,bd), max(ac,ad,bc,bd)].

        Symbolic operands are only supported against a constant factor;
        anything else is ⊤.
        """
        if self.is_bottom() or other.is_bottom():
            return _BOT
        k = other.is_const()
        if k is not None:
            return self.mult_const(k)
        k = self.is_const()
        if k is not None:
            return other.mult_const(k)
        ends = [self.lb.to_number(), self.ub.to_number(),
                other.lb.to_number(), other.ub.to_number()]
        if any(e is None for e in ends):
            return _TOP
        products = []
        for a in ends[:2]:
            for b in ends[2:]:
                p = a * b
                if math.isnan(p):
                    p = 0  # inf * 0 = 0 in interval arithmetic
                products.append(p)
        return Itv(Bound.of_number(min(products)), Bound.of_number(max(products)))

    # ---- Substitution ----------------------------------------------------

    def subst(self, eval_sym: EvalSym) -> Itv:
        if self.is_bottom():
            return _BOT
        return Itv.of_bounds(
            self.lb.subst(eval_sym, BoundEnd.LOWER),
            self.ub.subst(eval_sym, BoundEnd.UPPER),
        )

    # ---- Comparison refinement -------------------------------------------
    #
    #   if (x < y)  →  x ⊓ [-∞, ub(y) - 1]   in the true branch

    def prune_comp(self, op: CmpOp, other: Itv) -> Itv:
        """Refine self assuming ``self <op> other``."""
        if self.is_bottom() or other.is_bottom():
            return _BOT
        if op is CmpOp.LT:
            bound = Itv(MINF, other.ub.plus(_MINUS_ONE, BoundEnd.UPPER))
        elif op is CmpOp.LE:
            bound = Itv(MINF, other.ub)
        elif op is CmpOp.GT:
            bound = Itv(other.lb.plus(_ONE, BoundEnd.LOWER), PINF)
        else:
            bound = Itv(other.lb, PINF)
        return self.meet(bound)

    def prune_eq(self, other: Itv) -> Itv:
        """Refine self assuming ``self == other``."""
        return self.meet(other)

    def prune_ne(self, other: Itv) -> Itv:
        """Refine self assuming ``self != other``.

        Only an endpoint equal to a constant *other* can be shaved off.
        """
        if self.is_bottom() or other.is_bottom():
            return _BOT
        c = other.is_const()
        if c is None:
            return self
        lb, ub = self.lb, self.ub
        if lb.is_const() == c:
            lb = lb.plus(_ONE, BoundEnd.LOWER)
        if ub.is_const() == c:
            ub = ub.plus(_MINUS_ONE, BoundEnd.UPPER)
        return Itv.of_bounds(lb, ub)

    # ---- Comparison semantics (three-valued) -----------------------------

    def lt_sem(self, other: Itv) -> Boolean:
        if self.is_bottom() or other.is_bottom():
            return Boolean.BOTTOM
        if self.ub.lt(other.lb):
            return Boolean.TRUE
        if other.ub.le(self.lb):
            return Boolean.FALSE
        return Boolean.TOP

    def le_sem(self, other: Itv) -> Boolean:
        if self.is_bottom() or other.is_bottom():
            return Boolean.BOTTOM
        if self.ub.le(other.lb):
            return Boolean.TRUE
        if other.ub.lt(self.lb):
            return Boolean.FALSE
        return Boolean.TOP

    def gt_sem(self, other: Itv) -> Boolean:
        return other.lt_sem(self)

    def ge_sem(self, other: Itv) -> Boolean:
        return other.le_sem(self)

    def eq_sem(self, other: Itv) -> Boolean:
        if self.is_bottom() or other.is_bottom():
            return Boolean.BOTTOM
        if (self.lb == self.ub == other.lb == other.ub) and self.lb.is_finite():
            return Boolean.TRUE
        if self.ub.lt(other.lb) or other.ub.lt(self.lb):
            return Boolean.FALSE
        return Boolean.TOP

    def ne_sem(self, other: Itv) -> Boolean:
        return self.eq_sem(other).not_()

    def __repr__(self) -> str:
        if self.is_bottom():
            return "⊥"
        return f"[{self.lb!r}, {self.ub!r}]"


def _widen_lower(prev: Bound, nxt: Bound, thresholds: Sequence[int]) -> Bound:
    for t in sorted(thresholds, reverse=True):
        b = Bound.of_int(t)
        if b.le(prev) and b.le(nxt):
            return b
    logger.debug("Widening lower bound %r -> %r to -∞", prev, nxt)
    return MINF


def _widen_upper(prev: Bound, nxt: Bound, thresholds: Sequence[int]) -> Bound:
    for t in sorted(thresholds):
        b = Bound.of_int(t)
        if prev.le(b) and nxt.le(b):
            return b
    logger.debug("Widening upper bound %r -> %r to +∞", prev, nxt)
    return PINF


_BOT = Itv(PINF, MINF)
_TOP = Itv(MINF, PINF)


__all__ = ["CmpOp", "Itv"]
