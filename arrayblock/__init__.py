"""
arrayblock: Abstract Array-Block Domain for Buffer-Overrun Analysis
==================================================================

For every abstract pointer value, this package tracks which allocation
sites it may point into and, per site, the offset, size and stride of
the block (or the length of a managed array).  It is the piece of a
buffer-access analysis that decides whether an access may run out of
bounds.

Core modules
------------
errors
    Error codes and the fatal ``InternalError`` hierarchy.
config
    Widening thresholds/delay and TOML configuration loading.
boolean
    Three-valued booleans and the ``EqualOrder`` combinator.
bounds
    Linear symbolic bounds with ±∞.
itv
    Interval domain over symbolic bounds.
locations
    Allocation sites, parameter paths and abstract locations.
map_domain
    Generic finite-map lattice.
array_blk
    Per-site shapes (``ArrInfo``) and the site map (``ArrayBlk``).

Quick start
-----------
>>> from arrayblock import AllocSite, ArrayBlk, Itv
>>> buf = AllocSite.known("buf")
>>> blk = ArrayBlk.make_native(buf, Itv.zero(), Itv.of_range(2, 4), Itv.of_int(8))
>>> print(blk.sizeof_byte())
[16, 32]

Package layout
--------------
::

    arrayblock/
    ├── __init__.py            ← this file
    ├── errors.py
    ├── config.py
    ├── boolean.py
    ├── bounds.py
    ├── itv.py
    ├── locations.py
    ├── map_domain.py
    └── array_blk.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "arrayblock contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated incrementally below

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Internal registry: module_name -> names re-exported at package level.
# Listed leaves first; every module is required.
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "ErrorSeverity",
        "ErrorCode",
        "ErrorCodes",
        "ArrayBlockError",
        "ConfigError",
        "InternalError",
        "VariantMismatchError",
        "DegenerateStrideError",
    ],
    "config": [
        "DomainConfig",
        "get_config",
        "set_config",
        "load_config",
        "configure_logging",
    ],
    "boolean": [
        "Boolean",
        "EqualOrder",
    ],
    "bounds": [
        "Bound",
        "BoundEnd",
        "Symbol",
    ],
    "itv": [
        "Itv",
        "CmpOp",
    ],
    "locations": [
        "ParamPath",
        "AllocSite",
        "UNKNOWN_SITE",
        "Loc",
    ],
    "map_domain": [
        "MapDomain",
        "Multiplicity",
    ],
    "array_blk": [
        "ArrKind",
        "ArrInfo",
        "ArrayBlk",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"arrayblock: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            raise AttributeError(f"arrayblock.{module_rel_name} does not export '{name}'")
        setattr(current_module, name, obj)
        __all__.append(name)

    setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names

# ---------------------------------------------------------------------------
# Package-level utilities
# ---------------------------------------------------------------------------

def list_submodules() -> List[str]:
    """Return the names of all submodules in the package."""
    return sorted(_CORE_MODULES)


def domain_info() -> dict:
    """Return a dict of metadata about the package and its active config.

    Useful for logging/diagnostics in an embedding analyzer.
    """
    loaded = [m for m in list_submodules() if f"{__name__}.{m}" in sys.modules]
    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "loaded_submodules": loaded,
        "config": get_config().to_dict(),  # noqa: F821  (bound dynamically above)
        "all_exports": list(__all__),
    }


__all__ += ["list_submodules", "domain_info", "__version__"]

# ---------------------------------------------------------------------------
# TYPE_CHECKING block: re-declarations for static type checkers
# ---------------------------------------------------------------------------

if TYPE_CHECKING:
    from .errors import (
        ErrorSeverity as ErrorSeverity,
        ErrorCode as ErrorCode,
        ErrorCodes as ErrorCodes,
        ArrayBlockError as ArrayBlockError,
        ConfigError as ConfigError,
        InternalError as InternalError,
        VariantMismatchError as VariantMismatchError,
        DegenerateStrideError as DegenerateStrideError,
    )
    from .config import (
        DomainConfig as DomainConfig,
        get_config as get_config,
        set_config as set_config,
        load_config as load_config,
        configure_logging as configure_logging,
    )
    from .boolean import (
        Boolean as Boolean,
        EqualOrder as EqualOrder,
    )
    from .bounds import (
        Bound as Bound,
        BoundEnd as BoundEnd,
        Symbol as Symbol,
    )
    from .itv import (
        Itv as Itv,
        CmpOp as CmpOp,
    )
    from .locations import (
        ParamPath as ParamPath,
        AllocSite as AllocSite,
        UNKNOWN_SITE as UNKNOWN_SITE,
        Loc as Loc,
    )
    from .map_domain import (
        MapDomain as MapDomain,
        Multiplicity as Multiplicity,
    )
    from .array_blk import (
        ArrKind as ArrKind,
        ArrInfo as ArrInfo,
        ArrayBlk as ArrayBlk,
    )
