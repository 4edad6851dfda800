"""
The bounded stepper.

``accumulate`` adds a fixed step ``count`` times; ``deplete`` subtracts
it.  Before every step the stepper checks whether the step would leave
the domain's representable range.  If it would, the run stops and the
last in-range value is returned with ``completed=False``.  The arithmetic itself therefore
never overflows, wraps or rounds to infinity.

Running out of range is an ordinary outcome, not an error: it is
reported through ``StepResult.completed`` and never through an exception
or a sentinel value (``-1`` is a perfectly good value in most domains).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Generic

import numpy as np

from bounds import NumericDomain, T

logger = logging.getLogger(__name__)


class StepState(Enum):
    """Where a run is in its lifecycle."""

    RUNNING = auto()
    STOPPED_UNSAFE = auto()  # the next step would have left the range
    COMPLETED_ALL = auto()


@dataclass(frozen=True)
class StepResult(Generic[T]):
    """
    Outcome of one bounded run.

    ``value`` is the fully computed result when ``completed`` is true,
    otherwise the last value that was safely within range.  ``applied``
    counts the steps that were actually taken.
    """

    value: T
    completed: bool
    applied: int = 0

    @property
    def state(self) -> StepState:
        if self.completed:
            return StepState.COMPLETED_ALL
        return StepState.STOPPED_UNSAFE


# ---------------------------------------------------------------------------
# Range checks
# ---------------------------------------------------------------------------

def _lands_in_range(domain: NumericDomain[T], value: T, step: T, sign: int) -> bool:
    """Exact follow-up check for floating-point domains.

    ``max - step`` is itself rounded, so a sum that passed the operand
    check can still round past ``max`` (to infinity).  The candidate is
    computed with overflow warnings silenced and kept only if it is a
    finite value of the domain.
    """
    with np.errstate(over="ignore"):
        candidate = value + step if sign > 0 else value - step
    return domain.contains(candidate)


def add_is_safe(domain: NumericDomain[T], value: T, step: T) -> bool:
    """True if ``value + step`` stays within the domain."""
    zero = domain.zero
    if step > zero:
        if value > domain.max - step:
            return False
    elif step < zero:
        if value < domain.min - step:
            return False
    else:
        return True
    return domain.is_integral or _lands_in_range(domain, value, step, +1)


def sub_is_safe(domain: NumericDomain[T], value: T, step: T) -> bool:
    """True if ``value - step`` stays within the domain."""
    zero = domain.zero
    if step > zero:
        if value < domain.min + step:
            return False
    elif step < zero:
        # subtracting a negative step moves toward max
        if value > domain.max + step:
            return False
    else:
        return True
    return domain.is_integral or _lands_in_range(domain, value, step, -1)


def _run(
    domain: NumericDomain[T],
    start: Any,
    step: Any,
    count: int,
    is_safe: Callable[[NumericDomain[T], T, T], bool],
    apply: Callable[[T, T], T],
    op_name: str,
) -> StepResult[T]:
    value = domain.cast(start)
    step = domain.cast(step)

    for i in range(count):
        if not is_safe(domain, value, step):
            logger.debug(
                "%s stopped on %s after %d of %d steps at %s (step %s)",
                op_name, domain.name, i, count, value, step,
            )
            return StepResult(value=value, completed=False, applied=i)
        value = apply(value, step)

    return StepResult(value=value, completed=True, applied=max(count, 0))


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def accumulate(
    domain: NumericDomain[T], start: Any, step: Any, count: int
) -> StepResult[T]:
    """Add ``step`` to ``start`` ``count`` times, stopping before ``max``/``min``."""
    return _run(
        domain, start, step, count,
        add_is_safe, lambda v, s: v + s, "accumulate",
    )


def deplete(
    domain: NumericDomain[T], start: Any, step: Any, count: int
) -> StepResult[T]:
    """Subtract ``step`` from ``start`` ``count`` times, stopping before ``min``/``max``."""
    return _run(
        domain, start, step, count,
        sub_is_safe, lambda v, s: v - s, "deplete",
    )


@dataclass(frozen=True)
class BoundedStepper(Generic[T]):
    """A stepper bound to a single numeric domain."""

    domain: NumericDomain[T]

    def accumulate(self, start: Any, step: Any, count: int) -> StepResult[T]:
        return accumulate(self.domain, start, step, count)

    def deplete(self, start: Any, step: Any, count: int) -> StepResult[T]:
        return deplete(self.domain, start, step, count)
