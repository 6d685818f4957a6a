"""
arrayblock/locations.py
═══════════════════════

Allocation sites and abstract memory locations.

An allocation site identifies where a memory block may have been
created.  All blocks created at the same program point are collapsed
into one abstract site.  Two special kinds exist:

  * the UNKNOWN site, standing for "some block we know nothing about";
  * PARAM sites, placeholders for "whatever the caller passes for this
    formal parameter".  They only appear in procedure summaries and are
    replaced by the caller's real sites when the summary is applied.

Locations (``Loc``) are what the rest of the analysis reads and writes:
program variables, allocation sites, and fields of either.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, Optional, Tuple

from arrayblock.boolean import Boolean


# ---------------------------------------------------------------------------
# 1. Parameter paths
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParamPath:
    """
    Access path rooted at a formal parameter: ``x``, ``*x``, ``x->f``.

    ``accessors`` holds ``"*"`` for a dereference and a field name otherwise.
    """
    param: str
    accessors: Tuple[str, ...] = ()

    def deref(self) -> ParamPath:
        return ParamPath(self.param, self.accessors + ("*",))

    def field(self, name: str) -> ParamPath:
        return ParamPath(self.param, self.accessors + (name,))

    def __str__(self) -> str:
        text = self.param
        pending_deref = 0
        for acc in self.accessors:
            if acc == "*":
                pending_deref += 1
            elif pending_deref:
                text = "*" * (pending_deref - 1) + f"{text}->{acc}"
                pending_deref = 0
            else:
                text = f"{text}.{acc}"
        return "*" * pending_deref + text


# ---------------------------------------------------------------------------
# 2. Allocation sites
# ---------------------------------------------------------------------------

class AllocSiteKind(Enum):
    KNOWN = "known"
    PARAM = "param"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AllocSite:
    """
    Identifies where a memory block was created.

    Sites are immutable and hashable so they can key an ``ArrayBlk``.
    """
    label: str
    file: Optional[str] = None
    line: Optional[int] = None
    param_path: Optional[ParamPath] = None
    kind: AllocSiteKind = AllocSiteKind.KNOWN

    @classmethod
    def known(cls, label: str, file: Optional[str] = None,
              line: Optional[int] = None) -> AllocSite:
        return cls(label, file=file, line=line)

    @classmethod
    def of_param_path(cls, path: ParamPath) -> AllocSite:
        return cls(str(path), param_path=path, kind=AllocSiteKind.PARAM)

    def is_unknown(self) -> bool:
        return self.kind is AllocSiteKind.UNKNOWN

    def get_param_path(self) -> Optional[ParamPath]:
        """The parameter path this site stands for, if it is a PARAM site."""
        if self.kind is AllocSiteKind.PARAM:
            return self.param_path
        return None

    def eq(self, other: AllocSite) -> Boolean:
        """Three-valued site equality.

        Distinct parameter sites may still alias the same caller block, and
        the unknown site may alias anything.
        """
        if self.is_unknown() or other.is_unknown():
            return Boolean.TOP
        if self == other:
            return Boolean.TRUE
        if self.kind is AllocSiteKind.PARAM or other.kind is AllocSiteKind.PARAM:
            return Boolean.TOP
        return Boolean.FALSE

    def __repr__(self) -> str:
        if self.kind is AllocSiteKind.UNKNOWN:
            return "AllocSite(?)"
        if self.kind is AllocSiteKind.PARAM:
            return f"AllocSite(param {self.label})"
        if self.file:
            return f"AllocSite({self.label}@{self.file}:{self.line})"
        return f"AllocSite({self.label})"


UNKNOWN_SITE = AllocSite("unknown", kind=AllocSiteKind.UNKNOWN)


# ---------------------------------------------------------------------------
# 3. Abstract locations
# ---------------------------------------------------------------------------

class LocKind(Enum):
    VAR = "var"
    ALLOCSITE = "allocsite"
    FIELD = "field"


@dataclass(frozen=True)
class Loc:
    """Abstract memory location."""
    kind: LocKind
    name: Optional[str] = None
    allocsite: Optional[AllocSite] = None
    parent: Optional[Loc] = None
    field_name: Optional[str] = None

    @classmethod
    def of_var(cls, name: str) -> Loc:
        return cls(LocKind.VAR, name=name)

    @classmethod
    def of_allocsite(cls, site: AllocSite) -> Loc:
        return cls(LocKind.ALLOCSITE, allocsite=site)

    def field(self, name: str) -> Loc:
        return Loc(LocKind.FIELD, parent=self, field_name=name)

    def get_allocsite(self) -> Optional[AllocSite]:
        """The site of an ALLOCSITE location; ``None`` for variables and fields."""
        if self.kind is LocKind.ALLOCSITE:
            return self.allocsite
        return None

    def __repr__(self) -> str:
        if self.kind is LocKind.VAR:
            return f"Loc({self.name})"
        if self.kind is LocKind.ALLOCSITE:
            return f"Loc({self.allocsite!r})"
        return f"Loc({self.parent!r}.{self.field_name})"


PowLoc = FrozenSet[Loc]
EvalLocPath = Callable[[ParamPath], PowLoc]


__all__ = [
    "ParamPath",
    "AllocSiteKind",
    "AllocSite",
    "UNKNOWN_SITE",
    "LocKind",
    "Loc",
    "PowLoc",
    "EvalLocPath",
]
