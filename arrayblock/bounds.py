"""
arrayblock/bounds.py
════════════════════

Symbolic interval bounds.

A bound is one of

    -∞,   +∞,   c + k₁·s₁ + … + kₙ·sₙ

where ``c`` and the ``kᵢ`` are integers and the ``sᵢ`` are symbols that
stand for caller-provided values (a parameter's array length, say).
Symbols are only resolved when a procedure summary is instantiated at a
call site, through an ``EvalSym`` callback (see ``Bound.subst``).

Comparison is *provable* comparison: ``a.le(b)`` holds only when
``a ≤ b`` for every valuation of the symbols.  Two linear forms are
comparable exactly when they share the same symbolic part, in which case
the constants decide.  Everything else is treated as undecidable, and
lattice operations fall back to the matching infinity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional, Tuple, Union


class BoundEnd(Enum):
    LOWER = "lower"
    UPPER = "upper"

    def neg(self) -> BoundEnd:
        return BoundEnd.UPPER if self is BoundEnd.LOWER else BoundEnd.LOWER


@dataclass(frozen=True, order=True)
class Symbol:
    """A symbolic value, e.g. the length of the array a parameter points to."""
    name: str

    def __repr__(self) -> str:
        return self.name


SymbolSet = FrozenSet[Symbol]

_Number = Union[int, float]


@dataclass(frozen=True)
class Bound:
    """
    Linear symbolic bound, or an infinity.

    Representation:
        inf = -1                 →  -∞
        inf = +1                 →  +∞
        inf =  0                 →  const + Σ coeff·sym
    ``terms`` is sorted by symbol and never holds a zero coefficient.
    """
    const: int = 0
    terms: Tuple[Tuple[Symbol, int], ...] = ()
    inf: int = 0

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def of_int(cls, n: int) -> Bound:
        return cls(const=n)

    @classmethod
    def of_sym(cls, sym: Symbol, coeff: int = 1, const: int = 0) -> Bound:
        return cls._linear(const, {sym: coeff})

    @classmethod
    def minf(cls) -> Bound:
        return MINF

    @classmethod
    def pinf(cls) -> Bound:
        return PINF

    @classmethod
    def of_number(cls, x: _Number) -> Bound:
        if x == math.inf:
            return PINF
        if x == -math.inf:
            return MINF
        return cls(const=int(x))

    @classmethod
    def _linear(cls, const: int, coeffs: Dict[Symbol, int]) -> Bound:
        terms = tuple(sorted((s, k) for s, k in coeffs.items() if k != 0))
        return cls(const=const, terms=terms)

    # ---- Predicates ------------------------------------------------------

    def is_minf(self) -> bool:
        return self.inf < 0

    def is_pinf(self) -> bool:
        return self.inf > 0

    def is_infinite(self) -> bool:
        return self.inf != 0

    def is_finite(self) -> bool:
        return self.inf == 0

    def is_symbolic(self) -> bool:
        return bool(self.terms)

    def is_const(self) -> Optional[int]:
        """Return the integer value if the bound is a finite constant."""
        if self.is_finite() and not self.terms:
            return self.const
        return None

    def to_number(self) -> Optional[_Number]:
        """±inf or the constant; ``None`` for symbolic bounds."""
        if self.is_minf():
            return -math.inf
        if self.is_pinf():
            return math.inf
        return self.is_const()

    def get_symbols(self) -> SymbolSet:
        return frozenset(s for s, _ in self.terms)

    # ---- Provable comparison ---------------------------------------------

    def le(self, other: Bound) -> bool:
        if self.is_minf() or other.is_pinf():
            return True
        if self.is_pinf() or other.is_minf():
            return False
        return self.terms == other.terms and self.const <= other.const

    def lt(self, other: Bound) -> bool:
        return self.le(other) and not other.le(self)

    @staticmethod
    def min_l(a: Bound, b: Bound) -> Bound:
        """Lower bound of a join: the smaller one, or -∞ if incomparable."""
        if a.le(b):
            return a
        if b.le(a):
            return b
        return MINF

    @staticmethod
    def max_u(a: Bound, b: Bound) -> Bound:
        """Upper bound of a join: the larger one, or +∞ if incomparable."""
        if a.le(b):
            return b
        if b.le(a):
            return a
        return PINF

    @staticmethod
    def max_l(a: Bound, b: Bound) -> Bound:
        """Lower bound of a meet; keeps *a* when incomparable."""
        if a.le(b):
            return b
        return a

    @staticmethod
    def min_u(a: Bound, b: Bound) -> Bound:
        """Upper bound of a meet; keeps *a* when incomparable."""
        if b.le(a):
            return b
        return a

    # ---- Arithmetic ------------------------------------------------------

    def plus(self, other: Bound, end: BoundEnd) -> Bound:
        if self.is_finite() and other.is_finite():
            coeffs: Dict[Symbol, int] = dict(self.terms)
            for s, k in other.terms:
                coeffs[s] = coeffs.get(s, 0) + k
            return Bound._linear(self.const + other.const, coeffs)
        signs = {b.inf for b in (self, other) if b.is_infinite()}
        if len(signs) == 1:
            return PINF if signs.pop() > 0 else MINF
        # -∞ + +∞: pick the infinity that keeps the bound sound
        return MINF if end is BoundEnd.LOWER else PINF

    def neg(self) -> Bound:
        if self.is_infinite():
            return MINF if self.is_pinf() else PINF
        return Bound._linear(-self.const, {s: -k for s, k in self.terms})

    def mult_const(self, k: int) -> Bound:
        if k == 0:
            return ZERO
        if self.is_infinite():
            return self if k > 0 else self.neg()
        return Bound._linear(self.const * k, {s: c * k for s, c in self.terms})

    def div_const(self, k: int, end: BoundEnd) -> Bound:
        """Floor division by a positive constant."""
        if k <= 0:
            raise ValueError(f"div_const expects a positive divisor, got {k}")
        if self.is_infinite():
            return self
        if not self.terms:
            return Bound.of_int(self.const // k)
        if self.const % k == 0 and all(c % k == 0 for _, c in self.terms):
            return Bound._linear(self.const // k, {s: c // k for s, c in self.terms})
        return MINF if end is BoundEnd.LOWER else PINF

    # ---- Substitution ----------------------------------------------------

    def subst(self, eval_sym: EvalSym, end: BoundEnd) -> Bound:
        """Replace every symbol by the bound *eval_sym* gives for it.

        A symbol with a negative coefficient contributes its opposite end.
        """
        if self.is_infinite() or not self.terms:
            return self
        result = Bound.of_int(self.const)
        for sym, coeff in self.terms:
            sym_end = end if coeff > 0 else end.neg()
            result = result.plus(eval_sym(sym, sym_end).mult_const(coeff), end)
        return result

    def __repr__(self) -> str:
        if self.is_minf():
            return "-∞"
        if self.is_pinf():
            return "+∞"
        parts = []
        for sym, coeff in self.terms:
            if coeff == 1:
                parts.append(f"{sym}")
            elif coeff == -1:
                parts.append(f"-{sym}")
            else:
                parts.append(f"{coeff}*{sym}")
        if self.const or not parts:
            parts.append(str(self.const))
        text = " + ".join(parts)
        return text.replace("+ -", "- ")


EvalSym = Callable[[Symbol, BoundEnd], Bound]

MINF: Bound = Bound(inf=-1)
PINF: Bound = Bound(inf=1)
ZERO: Bound = Bound(const=0)


__all__ = [
    "BoundEnd",
    "Symbol",
    "SymbolSet",
    "Bound",
    "EvalSym",
    "MINF",
    "PINF",
    "ZERO",
]
