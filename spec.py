"""
Specification layer for the bounded stepper.

A Spec defines the *contract* a stepper operation must satisfy.
It is purely declarative - it says WHAT must be true, not HOW.

Every property predicate has the same shape::

    predicate(op, start, step, count) -> bool

where ``op`` is ``stepper.accumulate`` or ``stepper.deplete`` and the
remaining arguments are values of the domain the spec was built for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from bounds import NumericDomain
from stepper import StepResult


# ---------------------------------------------------------------------------
# Core spec primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Property:
    """A single verifiable property of a stepper operation."""

    name: str
    description: str
    predicate: Callable[..., bool]
    integral_only: bool = False

    def check(self, *args: Any) -> bool:
        """Evaluate the property predicate with the given arguments."""
        return self.predicate(*args)

    def applies_to(self, domain: NumericDomain) -> bool:
        return domain.is_integral or not self.integral_only


@dataclass
class Spec:
    """An ordered collection of properties that together form a contract."""

    name: str
    domain: NumericDomain
    properties: list[Property] = field(default_factory=list)

    def add(self, prop: Property) -> None:
        self.properties.append(prop)

    def __iter__(self):
        return iter(p for p in self.properties if p.applies_to(self.domain))

    def __len__(self):
        return sum(1 for _ in self)


class StepOp(Protocol):
    """What a stepper operation must look like."""

    def __call__(self, start: Any, step: Any, count: int) -> StepResult: ...


# ---------------------------------------------------------------------------
# Reference model
# ---------------------------------------------------------------------------

def reference_run(
    domain: NumericDomain, start: Any, step: Any, count: int, sign: int
) -> tuple[int, bool]:
    """Arbitrary-precision model of a bounded run over an integral domain.

    ``sign`` is +1 for accumulate and -1 for deplete.  Returns the
    expected ``(value, completed)`` pair.
    """
    lo, hi = int(domain.min), int(domain.max)
    value, delta = int(start), sign * int(step)
    for _ in range(count):
        nxt = value + delta
        if not lo <= nxt <= hi:
            return value, False
        value = nxt
    return value, True


# ---------------------------------------------------------------------------
# Spec builders
# ---------------------------------------------------------------------------

def _common_properties(spec: Spec, domain: NumericDomain, sign: int) -> None:
    zero = domain.zero

    def closure(op: StepOp, start, step, count) -> bool:
        return domain.contains(op(start, step, count).value)

    def zero_step_identity(op: StepOp, start, step, count) -> bool:
        r = op(start, zero, count)
        return r.completed and r.value == start

    def matches_reference(op: StepOp, start, step, count) -> bool:
        r = op(start, step, count)
        expected = reference_run(domain, start, step, count, sign)
        return (int(r.value), r.completed) == expected

    def applied_counts_steps(op: StepOp, start, step, count) -> bool:
        r = op(start, step, count)
        if r.completed:
            return r.applied == max(count, 0)
        return r.applied < count

    def idempotence(op: StepOp, start, step, count) -> bool:
        return op(start, step, count) == op(start, step, count)

    spec.add(Property(
        name="closure",
        description="Result value stays within [min, max]",
        predicate=closure,
    ))

    spec.add(Property(
        name="zero_step_identity",
        description="A zero step always completes and leaves start unchanged",
        predicate=zero_step_identity,
    ))

    spec.add(Property(
        name="matches_reference",
        description="(value, completed) equals the arbitrary-precision model",
        predicate=matches_reference,
        integral_only=True,
    ))

    spec.add(Property(
        name="applied_counts_steps",
        description="Completed runs apply every step, stopped runs fewer",
        predicate=applied_counts_steps,
    ))

    spec.add(Property(
        name="idempotence",
        description="Identical inputs give identical results",
        predicate=idempotence,
    ))


def accumulate_spec(domain: NumericDomain) -> Spec:
    """Build the full specification for bounded repeated addition."""
    hi, zero = domain.max, domain.zero

    spec = Spec(name="accumulate", domain=domain)
    _common_properties(spec, domain, sign=+1)

    def boundary_stop(op: StepOp, start, step, count) -> bool:
        # Only meaningful for a positive step that is resolvable at max
        # and at least one iteration
        if not step > zero or not hi - step < hi or count < 1:
            return True
        r = op(hi, step, count)
        return not r.completed and r.value == hi and r.applied == 0

    spec.add(Property(
        name="boundary_stop",
        description="Starting at max with a positive step stops immediately",
        predicate=boundary_stop,
    ))

    return spec


def deplete_spec(domain: NumericDomain) -> Spec:
    """Build the full specification for bounded repeated subtraction."""
    lo, zero = domain.min, domain.zero

    spec = Spec(name="deplete", domain=domain)
    _common_properties(spec, domain, sign=-1)

    def boundary_stop(op: StepOp, start, step, count) -> bool:
        if not step > zero or not lo + step > lo or count < 1:
            return True
        r = op(lo, step, count)
        return not r.completed and r.value == lo and r.applied == 0

    spec.add(Property(
        name="boundary_stop",
        description="Starting at min with a positive step stops immediately",
        predicate=boundary_stop,
    ))

    return spec
