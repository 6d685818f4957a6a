# tests/strategies.py
"""
Hypothesis strategies for bounds, intervals, shapes and site maps.
"""

from hypothesis import strategies as st

from arrayblock.array_blk import ArrayBlk, ArrInfo
from arrayblock.bounds import MINF, PINF, Bound, Symbol
from arrayblock.itv import Itv
from arrayblock.locations import AllocSite

SYMBOLS = [Symbol("n"), Symbol("m")]
SITES = [AllocSite.known(label) for label in ("A", "B", "C")]

small_ints = st.integers(min_value=-50, max_value=50)


@st.composite
def const_itvs(draw):
    """Finite, non-empty constant intervals."""
    lo = draw(small_ints)
    hi = draw(st.integers(min_value=lo, max_value=lo + 50))
    return Itv.of_range(lo, hi)


@st.composite
def lower_bounds(draw, symbolic=False):
    kind = draw(st.sampled_from(["const", "minf", "sym"] if symbolic else ["const", "minf"]))
    if kind == "minf":
        return MINF
    if kind == "sym":
        return Bound.of_sym(draw(st.sampled_from(SYMBOLS)), const=draw(small_ints))
    return Bound.of_int(draw(small_ints))


@st.composite
def itvs(draw, symbolic=False):
    """Intervals, including ⊥, ⊤ and half-open ones."""
    kind = draw(st.sampled_from(["bot", "top", "range", "range", "range"]))
    if kind == "bot":
        return Itv.bottom()
    if kind == "top":
        return Itv.top()
    lb = draw(lower_bounds(symbolic=symbolic))
    if lb.is_const() is not None and draw(st.booleans()):
        ub = Bound.of_int(lb.const + draw(st.integers(min_value=0, max_value=50)))
    elif draw(st.booleans()):
        ub = PINF
    elif symbolic:
        ub = Bound.of_sym(draw(st.sampled_from(SYMBOLS)), const=draw(small_ints))
    else:
        ub = PINF
    return Itv.of_bounds(lb, ub)


@st.composite
def arr_infos(draw, symbolic=False):
    kind = draw(st.sampled_from(["native", "native", "managed", "top"]))
    if kind == "top":
        return ArrInfo.top()
    if kind == "managed":
        return ArrInfo.make_managed(draw(itvs(symbolic=symbolic)))
    stride = Itv.of_int(draw(st.sampled_from([1, 2, 4, 8])))
    return ArrInfo.make_native(
        draw(itvs(symbolic=symbolic)), draw(itvs(symbolic=symbolic)), stride
    )


@st.composite
def native_infos(draw):
    """Native shapes with constant offset/size and an exact stride."""
    return ArrInfo.make_native(
        draw(const_itvs()),
        draw(const_itvs()),
        Itv.of_int(draw(st.sampled_from([1, 2, 4, 8]))),
    )


@st.composite
def array_blks(draw, infos=None):
    infos = infos if infos is not None else arr_infos()
    keys = draw(st.lists(st.sampled_from(SITES), unique=True, max_size=3))
    return ArrayBlk({k: draw(infos) for k in keys})
