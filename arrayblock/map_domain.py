"""
arrayblock/map_domain.py
════════════════════════

Finite-map abstract domain.

    MapDomain[K, V]   with V a lattice (``join``/``leq``/``widen``)

A key that is absent is equivalent to the key being bound to the value
domain's bottom.  Hence

    join      = union of keys, pointwise join on shared keys
    leq       = every lhs key is in rhs, with lhs[k] ⊑ rhs[k]
    widen     = union of keys, pointwise widen on shared keys

Maps are immutable: every update returns a new map and never touches
the receiver.  Operations that build maps go through ``type(self)`` so a
subclass gets instances of itself back.
"""

from __future__ import annotations

from enum import Enum
from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
)

from arrayblock.config import DomainConfig


class _Lattice(Protocol):
    def join(self, other): ...
    def leq(self, other) -> bool: ...
    def widen(self, other, num_iters: int = 0, config=None): ...


K = TypeVar("K")
V = TypeVar("V", bound=_Lattice)
A = TypeVar("A")
M = TypeVar("M", bound="MapDomain")


class Multiplicity(Enum):
    EMPTY = "empty"
    SINGLETON = "singleton"
    MORE = "more"


class MapDomain(Generic[K, V]):
    """
    Immutable mapping K → V ordered pointwise.
    """

    __slots__ = ("_map", "_hash_cache")

    def __init__(self, mapping: Optional[Dict[K, V]] = None):
        self._map: Dict[K, V] = dict(mapping) if mapping else {}
        self._hash_cache: Optional[int] = None

    # -- Constructors ----------------------------------------------------------

    @classmethod
    def empty(cls: type[M]) -> M:
        return cls()

    @classmethod
    def singleton(cls: type[M], key: K, value: V) -> M:
        return cls({key: value})

    @classmethod
    def of_items(cls: type[M], items: Iterable[Tuple[K, V]]) -> M:
        return cls(dict(items))

    # -- Read / Write ----------------------------------------------------------

    def find(self, key: K) -> V:
        """Value bound to *key*; raises ``KeyError`` if unbound."""
        return self._map[key]

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        return self._map.get(key, default)

    def add(self: M, key: K, value: V) -> M:
        """Return a new map with *key* bound to *value*."""
        new_map = dict(self._map)
        new_map[key] = value
        return type(self)(new_map)

    def remove(self: M, key: K) -> M:
        if key not in self._map:
            return self
        new_map = dict(self._map)
        del new_map[key]
        return type(self)(new_map)

    def update(self: M, key: K, f: Callable[[Optional[V]], Optional[V]]) -> M:
        """
        Rebind *key* to ``f(current)``.

        *f* receives ``None`` for an unbound key; returning ``None`` removes
        the binding.
        """
        old = self._map.get(key)
        new = f(old)
        if new is None:
            return self.remove(key)
        if new is old:
            return self
        return self.add(key, new)

    def map(self: M, f: Callable[[V], V]) -> M:
        """Apply *f* to every value; keys unchanged."""
        return type(self)({k: f(v) for k, v in self._map.items()})

    def fold(self, f: Callable[[K, V, A], A], init: A) -> A:
        acc = init
        for k, v in self._map.items():
            acc = f(k, v, acc)
        return acc

    # -- Lattice operations ----------------------------------------------------

    def join(self: M, other: M) -> M:
        """Union of keys; values of shared keys are joined."""
        if self is other:
            return self
        result = dict(self._map)
        for k, v in other._map.items():
            mine = result.get(k)
            result[k] = v if mine is None else mine.join(v)
        return type(self)(result)

    def leq(self, other: MapDomain[K, V]) -> bool:
        """Partial order: self ⊑ other (pointwise, absent = bottom)."""
        if self is other:
            return True
        for k, v in self._map.items():
            v2 = other._map.get(k)
            if v2 is None or not v.leq(v2):
                return False
        return True

    def widen(self: M, other: M, num_iters: int = 0,
              config: Optional[DomainConfig] = None) -> M:
        """
        Widening with *self* the previous iterate.

        Keys bound on one side only keep their value.  *config* is handed
        to every pointwise widening.
        """
        if self is other:
            return self
        result = dict(self._map)
        for k, v in other._map.items():
            prev = result.get(k)
            result[k] = v if prev is None else prev.widen(v, num_iters, config=config)
        return type(self)(result)

    # -- Cardinality -----------------------------------------------------------

    def is_empty(self) -> bool:
        return not self._map

    def is_singleton_or_more(self) -> Multiplicity:
        if not self._map:
            return Multiplicity.EMPTY
        if len(self._map) == 1:
            return Multiplicity.SINGLETON
        return Multiplicity.MORE

    def singleton_binding(self) -> Optional[Tuple[K, V]]:
        """The only binding of a singleton map; ``None`` otherwise."""
        if len(self._map) != 1:
            return None
        return next(iter(self._map.items()))

    # -- Iteration / introspection ---------------------------------------------

    def items(self) -> Iterator[Tuple[K, V]]:
        return iter(self._map.items())

    def keys(self) -> Iterator[K]:
        return iter(self._map.keys())

    def values(self) -> Iterator[V]:
        return iter(self._map.values())

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __iter__(self) -> Iterator[K]:
        return iter(self._map)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapDomain):
            return NotImplemented
        return self._map == other._map

    def __hash__(self) -> int:
        if self._hash_cache is None:
            self._hash_cache = hash(frozenset(self._map.items()))
        return self._hash_cache

    def __repr__(self) -> str:
        entries = ", ".join(f"{k!r} -> {v!r}" for k, v in sorted(
            self._map.items(), key=lambda kv: repr(kv[0])
        ))
        return f"{type(self).__name__}({{{entries}}})"


__all__ = ["Multiplicity", "MapDomain"]
