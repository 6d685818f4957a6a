# tests/test_boolean.py
"""
Tests for three-valued booleans and EqualOrder.
"""

import warnings
from pathlib import Path

import pytest

from arrayblock import boolean
from arrayblock.boolean import Boolean, EqualOrder


class TestBoolean:

    def test_of_bool(self):
        assert Boolean.of_bool(True) is Boolean.TRUE
        assert Boolean.of_bool(False) is Boolean.FALSE

    def test_join(self):
        assert Boolean.TRUE.join(Boolean.FALSE) is Boolean.TOP
        assert Boolean.BOTTOM.join(Boolean.FALSE) is Boolean.FALSE
        assert Boolean.TRUE.join(Boolean.TRUE) is Boolean.TRUE

    def test_leq(self):
        assert Boolean.BOTTOM.leq(Boolean.TRUE)
        assert Boolean.TRUE.leq(Boolean.TOP)
        assert not Boolean.TRUE.leq(Boolean.FALSE)

    def test_not(self):
        assert Boolean.TRUE.not_() is Boolean.FALSE
        assert Boolean.TOP.not_() is Boolean.TOP

    def test_and_or(self):
        """Conjunction and disjunction follow three-valued logic."""
        assert Boolean.FALSE.and_(Boolean.TOP) is Boolean.FALSE
        assert Boolean.TRUE.and_(Boolean.TOP) is Boolean.TOP
        assert Boolean.TRUE.or_(Boolean.TOP) is Boolean.TRUE
        assert Boolean.FALSE.or_(Boolean.FALSE) is Boolean.FALSE
        assert Boolean.BOTTOM.or_(Boolean.TRUE) is Boolean.BOTTOM


class TestEqualOrder:

    @pytest.mark.parametrize("order, eq, expected", [
        (EqualOrder.EQ, Boolean.TRUE, Boolean.TRUE),
        (EqualOrder.EQ, Boolean.FALSE, Boolean.FALSE),
        (EqualOrder.NE, Boolean.FALSE, Boolean.TRUE),
        (EqualOrder.STRICT_CMP, Boolean.TRUE, Boolean.FALSE),
        (EqualOrder.STRICT_CMP, Boolean.FALSE, Boolean.TOP),
        (EqualOrder.LOOSE_CMP, Boolean.TRUE, Boolean.TRUE),
        (EqualOrder.EQ, Boolean.TOP, Boolean.TOP),
        (EqualOrder.EQ, Boolean.BOTTOM, Boolean.BOTTOM),
    ])
    def test_of_equal(self, order, eq, expected):
        """Each order maps the equality outcome to its own result."""
        assert order.of_equal(eq) is expected

    def test_custom_outcomes(self):
        order = EqualOrder(on_equal=Boolean.FALSE, on_not_equal=Boolean.TRUE)
        assert order == EqualOrder.NE


class TestModuleSource:

    def test_compiles_without_warnings(self):
        """The module source compiles with warnings treated as errors."""
        source = Path(boolean.__file__).read_text(encoding="utf-8")
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            compile(source, boolean.__file__, "exec")
