# tests/test_itv.py
"""
Tests for the interval domain over symbolic bounds.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from arrayblock.boolean import Boolean
from arrayblock.bounds import MINF, PINF, Bound, BoundEnd, Symbol
from arrayblock.config import DomainConfig, set_config
from arrayblock.itv import CmpOp, Itv
from tests.strategies import SYMBOLS, itvs

N = Symbol("n")


class TestConstruction:

    def test_canonical_bottom(self):
        """Every empty interval is the same bottom."""
        assert Itv.of_range(3, 1) is Itv.bottom()
        assert Itv.of_range(3, 1).is_bottom()
        assert Itv(PINF, PINF).is_bottom()

    def test_top_and_nat(self):
        assert Itv.top().is_top()
        assert Itv.nat() == Itv(Bound.of_int(0), PINF)

    def test_is_const(self):
        assert Itv.of_int(4).is_const() == 4
        assert Itv.of_range(0, 1).is_const() is None
        assert Itv.of_sym(N).is_const() is None

    def test_symbolic_not_bottom(self):
        """Intervals with unordered symbolic bounds are not bottom."""
        itv = Itv.of_bounds(Bound.of_sym(N), Bound.of_int(0))
        assert not itv.is_bottom()

    def test_repr(self):
        assert repr(Itv.of_range(0, 4)) == "[0, 4]"
        assert repr(Itv.top()) == "[-∞, +∞]"
        assert repr(Itv.bottom()) == "⊥"


class TestLattice:

    def test_join(self):
        assert Itv.of_range(0, 10).join(Itv.of_range(5, 20)) == Itv.of_range(0, 20)
        assert Itv.bottom().join(Itv.of_int(3)) == Itv.of_int(3)

    def test_join_incomparable_bounds(self):
        """Incomparable bounds join to infinity."""
        joined = Itv.of_sym(N).join(Itv.of_int(0))
        assert joined.is_top()

    def test_meet(self):
        assert Itv.of_range(0, 10).meet(Itv.of_range(5, 20)) == Itv.of_range(5, 10)
        assert Itv.of_range(0, 1).meet(Itv.of_range(5, 6)).is_bottom()

    def test_leq(self):
        assert Itv.of_range(1, 2).leq(Itv.of_range(0, 5))
        assert not Itv.of_range(0, 5).leq(Itv.of_range(1, 2))
        assert Itv.bottom().leq(Itv.of_int(0))
        assert not Itv.of_int(0).leq(Itv.bottom())

    @given(itvs(symbolic=True), itvs(symbolic=True))
    def test_join_commutative(self, a, b):
        assert a.join(b).eq(b.join(a))

    @given(itvs(symbolic=True), itvs(symbolic=True), itvs(symbolic=True))
    def test_join_associative(self, a, b, c):
        assert a.join(b).join(c).eq(a.join(b.join(c)))

    @given(itvs(symbolic=True), itvs(symbolic=True))
    def test_join_upper_bound(self, a, b):
        """The join is above both intervals."""
        j = a.join(b)
        assert a.leq(j)
        assert b.leq(j)

    @given(itvs(symbolic=True))
    def test_leq_reflexive(self, a):
        assert a.leq(a)
        assert a.join(a).eq(a)


class TestWiden:

    def test_unstable_upper_bound_jumps(self):
        """A growing upper bound goes to +inf."""
        assert Itv.of_range(0, 1).widen(Itv.of_range(0, 2)) == Itv.nat()

    def test_stable_bounds_kept(self):
        prev = Itv.of_range(0, 10)
        assert prev.widen(Itv.of_range(2, 8)) == prev

    def test_thresholds(self):
        """Unstable bounds stop at the nearest threshold."""
        widened = Itv.of_range(0, 1).widen(Itv.of_range(0, 2), thresholds=(0, 16, 64))
        assert widened == Itv.of_range(0, 16)
        widened = Itv.of_range(-1, 0).widen(Itv.of_range(-3, 0), thresholds=(0, 16))
        assert widened == Itv(MINF, Bound.of_int(0))

    def test_thresholds_from_config(self):
        set_config(DomainConfig(widening_thresholds=(0, 100)))
        assert Itv.of_range(0, 1).widen(Itv.of_range(0, 2)) == Itv.of_range(0, 100)

    def test_delay_joins_first(self):
        """Iterations before the delay are plain joins."""
        set_config(DomainConfig(widening_delay=2))
        prev, nxt = Itv.of_range(0, 1), Itv.of_range(0, 2)
        assert prev.widen(nxt, num_iters=1) == Itv.of_range(0, 2)
        assert prev.widen(nxt, num_iters=2) == Itv.nat()

    @given(itvs(symbolic=True), itvs(symbolic=True), st.integers(min_value=0, max_value=5))
    def test_widen_sound(self, prev, nxt, n):
        """The widened interval covers both iterates."""
        w = prev.widen(nxt, num_iters=n)
        assert prev.leq(w)
        assert nxt.leq(w)


class TestArithmetic:

    def test_plus_minus(self):
        assert Itv.of_range(0, 0).plus(Itv.of_range(1, 3)) == Itv.of_range(1, 3)
        assert Itv.of_range(0, 0).minus(Itv.of_range(2, 2)) == Itv.of_int(-2)
        assert Itv.of_range(1, 5).minus(Itv.of_range(0, 2)) == Itv.of_range(-1, 5)

    def test_mult(self):
        assert Itv.of_range(2, 4).mult(Itv.of_int(8)) == Itv.of_range(16, 32)
        assert Itv.of_range(-2, 3).mult(Itv.of_range(1, 4)) == Itv.of_range(-8, 12)
        assert Itv.nat().mult(Itv.of_range(0, 2)) == Itv.nat()

    def test_mult_symbolic_by_constant(self):
        assert Itv.of_sym(N).mult(Itv.of_int(2)) == Itv(
            Bound.of_sym(N, coeff=2), Bound.of_sym(N, coeff=2)
        )
        assert Itv.of_sym(N).mult(Itv.of_range(1, 2)).is_top()

    def test_mult_const_negative(self):
        """A negative factor swaps the bounds."""
        assert Itv.of_range(1, 3).mult_const(-2) == Itv.of_range(-6, -2)
        assert Itv.top().mult_const(0) == Itv.zero()

    def test_div_const(self):
        assert Itv.of_range(0, 16).div_const(4) == Itv.of_range(0, 4)
        assert Itv.of_range(1, 7).div_const(2) == Itv.of_range(0, 3)
        assert Itv.of_range(2, 6).div_const(-2) == Itv.of_range(-3, -1)
        assert Itv.of_int(1).div_const(0).is_top()


class TestPrune:

    @pytest.mark.parametrize("op, other, expected", [
        (CmpOp.LT, Itv.of_int(5), Itv.of_range(0, 4)),
        (CmpOp.LE, Itv.of_int(5), Itv.of_range(0, 5)),
        (CmpOp.GT, Itv.of_int(5), Itv.of_range(6, 10)),
        (CmpOp.GE, Itv.of_int(5), Itv.of_range(5, 10)),
        (CmpOp.LT, Itv.of_int(0), Itv.bottom()),
    ])
    def test_prune_comp(self, op, other, expected):
        assert Itv.of_range(0, 10).prune_comp(op, other) == expected

    def test_prune_eq(self):
        assert Itv.of_range(0, 10).prune_eq(Itv.of_range(4, 20)) == Itv.of_range(4, 10)

    def test_prune_ne(self):
        """Only a constant endpoint is shaved."""
        assert Itv.of_range(0, 10).prune_ne(Itv.of_int(0)) == Itv.of_range(1, 10)
        assert Itv.of_range(0, 10).prune_ne(Itv.of_int(10)) == Itv.of_range(0, 9)
        assert Itv.of_range(0, 10).prune_ne(Itv.of_int(5)) == Itv.of_range(0, 10)
        assert Itv.of_int(3).prune_ne(Itv.of_int(3)).is_bottom()

    def test_prune_bottom(self):
        assert Itv.of_range(0, 10).prune_comp(CmpOp.LT, Itv.bottom()).is_bottom()

    @given(itvs(symbolic=True), itvs(symbolic=True),
           st.sampled_from(list(CmpOp)))
    def test_prune_never_widens(self, a, b, op):
        """Pruning only ever shrinks the interval."""
        assert a.prune_comp(op, b).leq(a)
        assert a.prune_eq(b).leq(a)
        assert a.prune_ne(b).leq(a)


class TestSemantics:

    def test_lt_sem(self):
        assert Itv.of_range(0, 4).lt_sem(Itv.of_int(5)) is Boolean.TRUE
        assert Itv.of_range(5, 6).lt_sem(Itv.of_int(5)) is Boolean.FALSE
        assert Itv.of_range(0, 6).lt_sem(Itv.of_int(5)) is Boolean.TOP

    def test_le_ge_gt(self):
        assert Itv.of_int(5).le_sem(Itv.of_int(5)) is Boolean.TRUE
        assert Itv.of_int(6).gt_sem(Itv.of_int(5)) is Boolean.TRUE
        assert Itv.of_int(4).ge_sem(Itv.of_int(5)) is Boolean.FALSE

    def test_eq_ne(self):
        assert Itv.zero().eq_sem(Itv.zero()) is Boolean.TRUE
        assert Itv.zero().ne_sem(Itv.zero()) is Boolean.FALSE
        assert Itv.of_range(0, 1).eq_sem(Itv.of_int(1)) is Boolean.TOP
        assert Itv.of_int(0).ne_sem(Itv.of_int(2)) is Boolean.TRUE

    def test_bottom(self):
        """Comparisons involving bottom are bottom."""
        assert Itv.bottom().lt_sem(Itv.zero()) is Boolean.BOTTOM


class TestSubst:

    def test_subst_symbol(self):
        itv = Itv.of_bounds(Bound.of_int(0), Bound.of_sym(N, const=-1))

        def eval_sym(sym, end):
            return Bound.of_int(8 if end is BoundEnd.UPPER else 4)

        assert itv.subst(eval_sym) == Itv.of_range(0, 7)

    @given(itvs(symbolic=True), st.integers(-20, 20), st.integers(0, 20))
    def test_subst_eliminates_symbols(self, itv, lo, width):
        """Substituting constants removes every symbol."""
        def eval_sym(sym, end):
            return Bound.of_int(lo if end is BoundEnd.LOWER else lo + width)

        result = itv.subst(eval_sym)
        assert not (result.get_symbols() & frozenset(SYMBOLS))

    def test_get_symbols(self):
        itv = Itv.of_bounds(Bound.of_int(0), Bound.of_sym(N))
        assert itv.get_symbols() == frozenset({N})
        assert Itv.bottom().get_symbols() == frozenset()
