"""
arrayblock/array_blk.py
═══════════════════════

Abstract array blocks.

┌───────────────────────────────────────────────────────────────────────┐
│  ArrayBlk  =  AllocSite  ↦  ArrInfo                                   │
│                                                                       │
│  ArrInfo   =  NATIVE  { offset, size, stride }   (element units,      │
│                                                   stride in bytes)    │
│            |  MANAGED { length }                 (reference arrays)   │
│            |  TOP                                (any shape)          │
└───────────────────────────────────────────────────────────────────────┘

An abstract pointer value carries an ``ArrayBlk``: the allocation sites
it may point into, and for each one the shape of the block and where
in it the pointer sits.  ``ArrayBlk.bot()`` is "no array at all";
``ArrayBlk.unknown()`` is "some array, shape unknown".

Cross-shape merges are total and go to TOP.  Pointer arithmetic, byte
sizing and casts on a MANAGED array are caller bugs and abort with an
``InternalError``.

Examples
--------
>>> a = AllocSite.known("buf")
>>> blk = ArrayBlk.make_native(a, Itv.zero(), Itv.of_int(10), Itv.of_int(4))
>>> blk.plus_offset(Itv.of_range(1, 3)).offsetof()
[1, 3]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from arrayblock.boolean import Boolean, EqualOrder
from arrayblock.bounds import EvalSym, SymbolSet
from arrayblock.config import DomainConfig
from arrayblock.errors import DegenerateStrideError, VariantMismatchError, die
from arrayblock.itv import CmpOp, Itv
from arrayblock.locations import UNKNOWN_SITE, AllocSite, EvalLocPath, Loc, PowLoc
from arrayblock.map_domain import MapDomain

logger = logging.getLogger(__name__)

CmpItv = Callable[[Itv, Itv], Boolean]


# ═══════════════════════════════════════════════════════════════════════════
#  PART 1: PER-SITE SHAPE
# ═══════════════════════════════════════════════════════════════════════════

class ArrKind(Enum):
    NATIVE = "native"
    MANAGED = "managed"
    TOP = "top"


@dataclass(frozen=True)
class ArrInfo:
    """
    Shape of one array block.

    Only the fields of the active kind are set:
    NATIVE uses ``offset``/``size``/``stride``, MANAGED uses ``length``.
    """
    kind: ArrKind
    offset: Optional[Itv] = None
    size: Optional[Itv] = None
    stride: Optional[Itv] = None
    length: Optional[Itv] = None

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def make_native(cls, offset: Itv, size: Itv, stride: Itv) -> ArrInfo:
        return cls(ArrKind.NATIVE, offset=offset, size=size, stride=stride)

    @classmethod
    def make_managed(cls, length: Itv) -> ArrInfo:
        return cls(ArrKind.MANAGED, length=length)

    @classmethod
    def top(cls) -> ArrInfo:
        return _TOP_INFO

    def is_native(self) -> bool:
        return self.kind is ArrKind.NATIVE

    def is_managed(self) -> bool:
        return self.kind is ArrKind.MANAGED

    def is_top(self) -> bool:
        return self.kind is ArrKind.TOP

    # ---- Lattice operations ----------------------------------------------

    def join(self, other: ArrInfo) -> ArrInfo:
        if self is other:
            return other
        if self.is_native() and other.is_native():
            return ArrInfo.make_native(
                self.offset.join(other.offset),
                self.size.join(other.size),
                self.stride.join(other.stride),
            )
        if self.is_managed() and other.is_managed():
            return ArrInfo.make_managed(self.length.join(other.length))
        if not (self.is_top() or other.is_top()):
            logger.debug("Joining %s and %s array shapes gives ⊤",
                         self.kind.value, other.kind.value)
        return _TOP_INFO

    def widen(self, other: ArrInfo, num_iters: int = 0,
              config: Optional[DomainConfig] = None) -> ArrInfo:
        """Widening with *self* the previous iterate and *other* the next."""
        if self is other:
            return other
        if self.is_native() and other.is_native():
            return ArrInfo.make_native(
                self.offset.widen(other.offset, num_iters, config=config),
                self.size.widen(other.size, num_iters, config=config),
                self.stride.widen(other.stride, num_iters, config=config),
            )
        if self.is_managed() and other.is_managed():
            return ArrInfo.make_managed(
                self.length.widen(other.length, num_iters, config=config)
            )
        if not (self.is_top() or other.is_top()):
            logger.debug("Widening %s into %s array shape gives ⊤",
                         self.kind.value, other.kind.value)
        return _TOP_INFO

    def leq(self, other: ArrInfo) -> bool:
        if self is other or other.is_top():
            return True
        if self.is_native() and other.is_native():
            return (self.offset.leq(other.offset)
                    and self.size.leq(other.size)
                    and self.stride.leq(other.stride))
        if self.is_managed() and other.is_managed():
            return self.length.leq(other.length)
        return False

    # ---- Pointer arithmetic ----------------------------------------------

    def _map_offset(self, f: Callable[[Itv], Itv]) -> ArrInfo:
        if self.is_native():
            return ArrInfo.make_native(f(self.offset), self.size, self.stride)
        if self.is_managed():
            die(VariantMismatchError, "Unexpected pointer arithmetic on managed array")
        return self

    def plus_offset(self, i: Itv) -> ArrInfo:
        return self._map_offset(lambda offset: offset.plus(i))

    def minus_offset(self, i: Itv) -> ArrInfo:
        return self._map_offset(lambda offset: offset.minus(i))

    def diff(self, other: ArrInfo) -> Itv:
        """Pointer subtraction ``self - other`` in elements."""
        if self.is_native() and other.is_native():
            return self.offset.minus(other.offset)
        if self.is_top() or other.is_top():
            return Itv.top()
        die(VariantMismatchError, "Unexpected pointer arithmetic on managed array")

    # ---- Symbols ---------------------------------------------------------

    def subst(self, eval_sym: EvalSym) -> ArrInfo:
        """Instantiate symbols in offset, size and length.  Stride is kept."""
        if self.is_native():
            return ArrInfo.make_native(
                self.offset.subst(eval_sym), self.size.subst(eval_sym), self.stride
            )
        if self.is_managed():
            return ArrInfo.make_managed(self.length.subst(eval_sym))
        return self

    def get_symbols(self) -> SymbolSet:
        if self.is_native():
            return (self.offset.get_symbols() | self.size.get_symbols()
                    | self.stride.get_symbols())
        if self.is_managed():
            return self.length.get_symbols()
        return frozenset()

    def normalize(self) -> ArrInfo:
        if self.is_native():
            return ArrInfo.make_native(
                self.offset.normalize(), self.size.normalize(), self.stride.normalize()
            )
        if self.is_managed():
            return ArrInfo.make_managed(self.length.normalize())
        return self

    # ---- Pruning ---------------------------------------------------------
    #
    # Only the offset of a NATIVE block is refined, and only against the
    # offset of another NATIVE block.

    def _prune_offset(self, f: Callable[[Itv, Itv], Itv], other: ArrInfo) -> ArrInfo:
        if self.is_native() and other.is_native():
            return ArrInfo.make_native(f(self.offset, other.offset), self.size, self.stride)
        return self

    def prune_comp(self, op: CmpOp, other: ArrInfo) -> ArrInfo:
        return self._prune_offset(lambda o1, o2: o1.prune_comp(op, o2), other)

    def prune_eq(self, other: ArrInfo) -> ArrInfo:
        return self._prune_offset(Itv.prune_eq, other)

    def prune_ne(self, other: ArrInfo) -> ArrInfo:
        return self._prune_offset(Itv.prune_ne, other)

    # ---- Size and stride -------------------------------------------------

    def set_length(self, length: Itv) -> ArrInfo:
        if self.is_native():
            return ArrInfo.make_native(self.offset, length, self.stride)
        if self.is_managed():
            return ArrInfo.make_managed(length)
        return self

    def transform_length(self, f: Callable[[Itv], Itv]) -> ArrInfo:
        if self.is_native():
            return ArrInfo.make_native(self.offset, f(self.size), self.stride)
        if self.is_managed():
            return ArrInfo.make_managed(f(self.length))
        return self

    def set_stride(self, new_stride: int) -> ArrInfo:
        """
        Reinterpret the block with elements of *new_stride* bytes.

        Offset and size are rescaled by ``old_stride / new_stride``.  This
        only happens when the current stride is a known constant.
        """
        if self.is_managed():
            die(VariantMismatchError, "Unexpected cast on managed array")
        if self.is_top():
            return self
        old_stride = self.stride.is_const()
        if old_stride is None:
            logger.debug("Stride %r is not constant; cast to stride %d ignored",
                         self.stride, new_stride)
            return self
        if old_stride == 0 or new_stride == 0:
            die(DegenerateStrideError,
                "Stride conversion from %d to %d", old_stride, new_stride)
        if old_stride == new_stride:
            return self

        def rescale(itv: Itv) -> Itv:
            return itv.mult_const(old_stride).div_const(new_stride)

        return ArrInfo.make_native(
            rescale(self.offset), rescale(self.size), Itv.of_int(new_stride)
        )

    # ---- Queries ---------------------------------------------------------

    def offsetof(self) -> Itv:
        if self.is_native():
            return self.offset
        if self.is_managed():
            return Itv.zero()
        return Itv.top()

    def sizeof(self) -> Itv:
        if self.is_native():
            return self.size
        if self.is_managed():
            return self.length
        return Itv.top()

    def byte_size(self) -> Itv:
        if self.is_native():
            return self.size.mult(self.stride)
        if self.is_managed():
            die(VariantMismatchError, "Unexpected byte-size operation on managed array")
        return Itv.top()

    def lift_cmp_itv(self, other: ArrInfo, cmp_itv: CmpItv) -> Boolean:
        """
        Compare two pointers into blocks of the same site.

        Decided only when the blocks have the same shape apart from the
        offset; anything else is ⊤.
        """
        if (self.is_native() and other.is_native()
                and self.stride.eq(other.stride) and self.size.eq(other.size)):
            return cmp_itv(self.offset, other.offset)
        if (self.is_managed() and other.is_managed()
                and self.length.eq(other.length)):
            return cmp_itv(Itv.zero(), Itv.zero())
        return Boolean.TOP

    def __repr__(self) -> str:
        if self.is_native():
            return f"offset : {self.offset!r}, size : {self.size!r}"
        if self.is_managed():
            return f"length : {self.length!r}"
        return "⊤"


_TOP_INFO = ArrInfo(ArrKind.TOP)


# ═══════════════════════════════════════════════════════════════════════════
#  PART 2: SITE MAP
# ═══════════════════════════════════════════════════════════════════════════

class ArrayBlk(MapDomain[AllocSite, ArrInfo]):
    """
    Map from allocation site to array shape.

    An absent site contributes nothing: join is key union and the empty
    map is bottom.
    """

    __slots__ = ()

    @classmethod
    def bot(cls) -> ArrayBlk:
        return cls()

    @classmethod
    def unknown(cls) -> ArrayBlk:
        return cls.singleton(UNKNOWN_SITE, ArrInfo.top())

    @classmethod
    def make_native(cls, site: AllocSite, offset: Itv, size: Itv, stride: Itv) -> ArrayBlk:
        return cls.singleton(site, ArrInfo.make_native(offset, size, stride))

    @classmethod
    def make_managed(cls, site: AllocSite, length: Itv) -> ArrayBlk:
        return cls.singleton(site, ArrInfo.make_managed(length))

    def is_bot(self) -> bool:
        return self.is_empty()

    # ---- Interval summaries ----------------------------------------------

    def _join_itv(self, f: Callable[[ArrInfo], Itv]) -> Itv:
        return self.fold(lambda _site, info, acc: acc.join(f(info)), Itv.bottom())

    def offsetof(self) -> Itv:
        return self._join_itv(ArrInfo.offsetof)

    def sizeof(self) -> Itv:
        return self._join_itv(ArrInfo.sizeof)

    def sizeof_byte(self) -> Itv:
        return self._join_itv(ArrInfo.byte_size)

    # ---- Pointwise transfer functions ------------------------------------

    def plus_offset(self, i: Itv) -> ArrayBlk:
        return self.map(lambda info: info.plus_offset(i))

    def minus_offset(self, i: Itv) -> ArrayBlk:
        return self.map(lambda info: info.minus_offset(i))

    def normalize(self) -> ArrayBlk:
        return self.map(ArrInfo.normalize)

    def set_length(self, length: Itv) -> ArrayBlk:
        return self.map(lambda info: info.set_length(length))

    def set_stride(self, new_stride: int) -> ArrayBlk:
        return self.map(lambda info: info.set_stride(new_stride))

    def transform_length(self, f: Callable[[Itv], Itv]) -> ArrayBlk:
        return self.map(lambda info: info.transform_length(f))

    def diff(self, other: ArrayBlk) -> Itv:
        """
        Pointer subtraction ``self - other``.

        Every site of *other* contributes; a site *self* cannot point into
        makes the result ⊤.
        """
        result = Itv.bottom()
        for site, info2 in other.items():
            info1 = self.get(site)
            if info1 is None:
                logger.debug("Pointer difference against %r, absent from %r", site, self)
                result = result.join(Itv.top())
            else:
                result = result.join(info1.diff(info2))
        return result

    # ---- Locations and symbols -------------------------------------------

    def get_pow_loc(self) -> PowLoc:
        return frozenset(Loc.of_allocsite(site) for site in self.keys())

    def subst(self, eval_sym: EvalSym, eval_locpath: EvalLocPath) -> ArrayBlk:
        """
        Instantiate a callee summary in the caller's context.

        Parameter sites are replaced by the caller's allocation sites
        *eval_locpath* resolves them to.  Several shapes landing on the
        same caller site are joined.
        """
        result: ArrayBlk = ArrayBlk.bot()
        for site, info in self.items():
            info2 = info.subst(eval_sym)
            path = site.get_param_path()
            if path is None:
                result = result.join(ArrayBlk.singleton(site, info2))
                continue
            for loc in eval_locpath(path):
                actual = loc.get_allocsite()
                if actual is None:
                    logger.debug("Dropping %r resolved from %s: not an allocation site",
                                 loc, path)
                    continue
                result = result.join(ArrayBlk.singleton(actual, info2))
        return result

    def get_symbols(self) -> SymbolSet:
        return self.fold(lambda _site, info, acc: acc | info.get_symbols(), frozenset())

    # ---- Pruning ---------------------------------------------------------

    def _do_prune(self, prune: Callable[[ArrInfo, ArrInfo], ArrInfo],
                  other: ArrayBlk) -> ArrayBlk:
        binding = other.singleton_binding()
        if binding is None:
            logger.debug("Pruning skipped: %r is not a single site", other)
            return self
        site, info2 = binding
        return self.update(
            site, lambda info1: None if info1 is None else prune(info1, info2)
        )

    def prune_comp(self, op: CmpOp, other: ArrayBlk) -> ArrayBlk:
        return self._do_prune(lambda a1, a2: a1.prune_comp(op, a2), other)

    def prune_eq(self, other: ArrayBlk) -> ArrayBlk:
        return self._do_prune(ArrInfo.prune_eq, other)

    def prune_ne(self, other: ArrayBlk) -> ArrayBlk:
        return self._do_prune(ArrInfo.prune_ne, other)

    # ---- Comparison ------------------------------------------------------

    def lift_cmp_itv(self, other: ArrayBlk, cmp_itv: CmpItv,
                     cmp_loc: EqualOrder) -> Boolean:
        """
        Three-valued comparison of two pointers.

        *cmp_itv* compares offsets within one block; *cmp_loc* supplies the
        outcome for pointers into different blocks.  Only single-site
        operands are compared.
        """
        b1 = self.singleton_binding()
        b2 = other.singleton_binding()
        if b1 is None or b2 is None:
            return Boolean.TOP
        (site1, info1), (site2, info2) = b1, b2
        order = EqualOrder(
            on_equal=info1.lift_cmp_itv(info2, cmp_itv),
            on_not_equal=cmp_loc.on_not_equal,
        )
        return order.of_equal(site1.eq(site2))


__all__ = ["ArrKind", "ArrInfo", "ArrayBlk", "CmpItv"]
