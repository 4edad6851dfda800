"""
Numeric domains for the bounded stepper.

A domain is the set of values a fixed-width representation can hold.
The stepper never hard-codes a range: it asks the domain for its
``min`` and ``max`` every time it needs them.

Two kinds of domain are provided:

  * ``DtypeDomain`` - backed by a NumPy scalar type.  The range comes
    straight from ``numpy.iinfo`` / ``numpy.finfo``, so every signed,
    unsigned and floating-point width NumPy supports is available.
  * ``IntervalDomain`` - an inclusive ``[lo, hi]`` interval over Python
    ints, useful for small domains that can be checked exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import numpy as np

T = TypeVar("T")


class UnknownDomainError(KeyError):
    """Raised when a domain name is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown numeric domain: {name}")


class NumericDomain(Protocol[T]):
    """What the stepper needs to know about a numeric representation."""

    @property
    def name(self) -> str: ...

    @property
    def min(self) -> T: ...

    @property
    def max(self) -> T: ...

    @property
    def zero(self) -> T: ...

    @property
    def is_integral(self) -> bool: ...

    @property
    def width(self) -> int | None: ...

    def contains(self, value: Any) -> bool: ...

    def cast(self, value: Any) -> T: ...


def _is_whole(value: Any) -> bool:
    """True for finite values with no fractional part."""
    if isinstance(value, (int, np.integer)):
        return True
    try:
        return bool(np.isfinite(value)) and bool(value == int(value))
    except (TypeError, ValueError, OverflowError):
        return False


def _unrepresentable(domain: NumericDomain, value: Any) -> OverflowError:
    if domain.is_integral and not _is_whole(value):
        return OverflowError(
            f"{value} is not a whole number for {domain.name}"
        )
    return OverflowError(
        f"{value} is outside bounds [{domain.min}, {domain.max}] of {domain.name}"
    )


# ---------------------------------------------------------------------------
# NumPy-backed domains
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DtypeDomain:
    """
    The representable range of a NumPy scalar type.

    For floating-point types ``min`` is the most negative finite value
    (``finfo.min``), not the smallest positive one and never ``-inf``.
    """

    dtype: np.dtype
    label: str | None = None

    def __post_init__(self):
        dtype = np.dtype(self.dtype)
        if dtype.kind not in "iuf":
            raise ValueError(f"{dtype} is not an integer or floating-point type")
        object.__setattr__(self, "dtype", dtype)

    @property
    def name(self) -> str:
        return self.label or self.dtype.name

    @property
    def type(self) -> type:
        return self.dtype.type

    @property
    def is_integral(self) -> bool:
        return self.dtype.kind in "iu"

    def _info(self):
        if self.is_integral:
            return np.iinfo(self.dtype)
        return np.finfo(self.dtype)

    @property
    def max(self):
        return self.type(self._info().max)

    @property
    def min(self):
        return self.type(self._info().min)

    @property
    def zero(self):
        return self.type(0)

    @property
    def width(self) -> int | None:
        """Number of representable values, or None for floating point."""
        if not self.is_integral:
            return None
        info = self._info()
        return int(info.max) - int(info.min) + 1

    def contains(self, value: Any) -> bool:
        if self.is_integral:
            if not _is_whole(value):
                return False
            return int(self.min) <= int(value) <= int(self.max)
        # compare at the widest float precision available; nan compares false
        wide = np.longdouble(value)
        return bool(np.longdouble(self.min) <= wide <= np.longdouble(self.max))

    def cast(self, value: Any):
        """Convert ``value`` to this domain's scalar type.

        Raises OverflowError when the value is not representable, rather
        than letting NumPy wrap it, round it to infinity or truncate a
        fraction.
        """
        if not self.contains(value):
            raise _unrepresentable(self, value)
        return self.type(value)


# ---------------------------------------------------------------------------
# Pure integer intervals
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IntervalDomain:
    """An inclusive integer domain [lo, hi]."""

    lo: int
    hi: int
    label: str | None = None

    def __post_init__(self):
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    @property
    def name(self) -> str:
        return self.label or f"interval[{self.lo}, {self.hi}]"

    @property
    def min(self) -> int:
        return self.lo

    @property
    def max(self) -> int:
        return self.hi

    @property
    def zero(self) -> int:
        return 0

    @property
    def is_integral(self) -> bool:
        return True

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return self.hi - self.lo + 1

    def all_values(self) -> range:
        return range(self.lo, self.hi + 1)

    def contains(self, value: Any) -> bool:
        return _is_whole(value) and self.lo <= value <= self.hi

    def cast(self, value: Any) -> int:
        if not self.contains(value):
            raise _unrepresentable(self, value)
        return int(value)


# ---------------------------------------------------------------------------
# Common domain presets
# ---------------------------------------------------------------------------

INT8 = DtypeDomain(np.int8)
INT16 = DtypeDomain(np.int16)
INT32 = DtypeDomain(np.int32)
INT64 = DtypeDomain(np.int64)
UINT8 = DtypeDomain(np.uint8)
UINT16 = DtypeDomain(np.uint16)
UINT32 = DtypeDomain(np.uint32)
UINT64 = DtypeDomain(np.uint64)
FLOAT32 = DtypeDomain(np.float32)
FLOAT64 = DtypeDomain(np.float64)
LONGDOUBLE = DtypeDomain(np.longdouble, label="longdouble")

# Small intervals useful for exhaustive verification
TINY = IntervalDomain(lo=-8, hi=7, label="tiny")
PERCENT = IntervalDomain(lo=0, hi=100, label="percent")

# C primitive types, keyed by their C spelling.  NumPy character codes
# follow the platform's C ABI, so "long" is whatever a C long is here.
C_TYPES: dict[str, DtypeDomain] = {
    "char": DtypeDomain("b", label="char"),
    "short int": DtypeDomain("h", label="short int"),
    "int": DtypeDomain("i", label="int"),
    "long": DtypeDomain("l", label="long"),
    "long long": DtypeDomain("q", label="long long"),
    "unsigned char": DtypeDomain("B", label="unsigned char"),
    "unsigned short int": DtypeDomain("H", label="unsigned short int"),
    "unsigned int": DtypeDomain("I", label="unsigned int"),
    "unsigned long": DtypeDomain("L", label="unsigned long"),
    "unsigned long long": DtypeDomain("Q", label="unsigned long long"),
    "float": DtypeDomain("f", label="float"),
    "double": DtypeDomain("d", label="double"),
    "long double": DtypeDomain("g", label="long double"),
}

DOMAINS: dict[str, NumericDomain] = {
    d.name: d
    for d in (
        INT8, INT16, INT32, INT64,
        UINT8, UINT16, UINT32, UINT64,
        FLOAT32, FLOAT64, LONGDOUBLE,
        TINY, PERCENT,
    )
}


def get_domain(name: str) -> NumericDomain:
    """Look up a domain by NumPy name, preset name or C type name."""
    key = " ".join(name.split())
    if key in DOMAINS:
        return DOMAINS[key]
    if key in C_TYPES:
        return C_TYPES[key]
    raise UnknownDomainError(name)


def domain_names() -> list[str]:
    return list(DOMAINS) + list(C_TYPES)
