"""
The stepper factory.

The factory does NOT just construct steppers - it *verifies* them
against their specs before releasing them.

Flow:
  1. Caller requests a stepper for a given numeric domain.
  2. Factory builds a BoundedStepper bound to that domain.
  3. Factory runs the accumulate and deplete specs against it.
  4. If verification passes  -> return the stepper.
     If verification fails   -> raise, never hand out a broken instance.
"""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Iterable

from bounds import NumericDomain
from spec import Property, Spec, StepOp, accumulate_spec, deplete_spec
from stepper import BoundedStepper, StepResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Counterexample:
    """A run that broke a property, with what the operation returned for it."""

    operation: str
    start: Any
    step: Any
    count: int
    observed: StepResult | None = None

    def __str__(self) -> str:
        call = f"{self.operation}(start={self.start}, step={self.step}, count={self.count})"
        if self.observed is None:
            return call
        r = self.observed
        return f"{call} -> value={r.value} completed={r.completed} applied={r.applied}"


@dataclass
class VerificationResult:
    """Outcome of verifying one property."""

    property_name: str
    passed: bool
    counterexample: Counterexample | None = None
    tests_run: int = 0

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        ce = f"  counterexample: {self.counterexample}" if self.counterexample else ""
        return f"[{status}] {self.property_name} ({self.tests_run} runs){ce}"


@dataclass
class VerificationReport:
    """Aggregate result of verifying one operation's spec on one domain."""

    spec_name: str
    domain_name: str
    exhaustive: bool = False
    results: list[VerificationResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> list[VerificationResult]:
        return [r for r in self.results if not r.passed]

    @property
    def tests_run(self) -> int:
        return sum(r.tests_run for r in self.results)

    def summary(self) -> str:
        mode = "exhaustive" if self.exhaustive else "sampled"
        lines = [f"--- {self.spec_name} [{self.domain_name}, {mode}] ---"]
        for r in self.results:
            lines.append(f"  {r}")
        status = "ALL PASSED" if self.passed else f"FAILED {len(self.failures)}"
        lines.append(f"  => {status} ({self.tests_run} runs)")
        return "\n".join(lines)


class VerificationError(Exception):
    """Raised when a stepper's operation fails its spec.

    ``counterexample`` is the first failing run, so callers can replay it
    without digging through the report.
    """

    def __init__(self, report: VerificationReport):
        self.report = report
        failures = report.failures
        self.counterexample = failures[0].counterexample if failures else None
        super().__init__(
            f"{report.spec_name} failed verification on {report.domain_name}:\n"
            f"{report.summary()}"
        )


# ---------------------------------------------------------------------------
# The factory
# ---------------------------------------------------------------------------

class StepperFactory:
    """
    Produces BoundedStepper instances that are proven correct.

    Small integral domains are verified *exhaustively* - every
    (start, step) pair for every count below COUNT_LIMIT.  Wider and
    floating-point domains fall back to edge values plus seeded random
    samples.
    """

    EXHAUSTIVE_THRESHOLD = 32  # max domain width for brute-force check
    COUNT_LIMIT = 8            # counts 0 .. COUNT_LIMIT - 1
    SAMPLE_COUNT = 2_000
    SEED = 0

    @classmethod
    def create(cls, domain: NumericDomain) -> BoundedStepper:
        """Build, verify, and return a BoundedStepper."""
        stepper = BoundedStepper(domain=domain)
        for report in cls._verify_all(stepper):
            if not report.passed:
                raise VerificationError(report)
        logger.debug("stepper for %s verified", domain.name)
        return stepper

    @classmethod
    def verify(cls, domain: NumericDomain) -> list[VerificationReport]:
        """Verify a fresh stepper for ``domain`` and return every report."""
        return cls._verify_all(BoundedStepper(domain=domain))

    # -- internal ---------------------------------------------------------

    @classmethod
    def _verify_all(cls, stepper: BoundedStepper) -> list[VerificationReport]:
        domain = stepper.domain
        specs_and_ops = [
            (accumulate_spec(domain), stepper.accumulate),
            (deplete_spec(domain), stepper.deplete),
        ]
        reports = []
        for spec, op in specs_and_ops:
            report = cls._verify_spec(spec, op)
            logger.info(
                "verified %s on %s: %s",
                spec.name, domain.name, "passed" if report.passed else "FAILED",
            )
            reports.append(report)
        return reports

    @classmethod
    def _verify_spec(cls, spec: Spec, op: StepOp) -> VerificationReport:
        report = VerificationReport(
            spec_name=spec.name,
            domain_name=spec.domain.name,
            exhaustive=cls._is_exhaustive(spec.domain),
        )
        for prop in spec:
            result = cls._verify_property(prop, op, spec.domain, spec.name)
            report.results.append(result)
        return report

    @classmethod
    def _verify_property(
        cls, prop: Property, op: StepOp, domain: NumericDomain, operation: str
    ) -> VerificationResult:
        tests_run = 0
        for start, step, count in cls._inputs(domain):
            tests_run += 1
            if not prop.check(op, start, step, count):
                counterexample = Counterexample(
                    operation, start, step, count, observed=op(start, step, count)
                )
                logger.warning(
                    "%s violated on %s: %s", prop.name, domain.name, counterexample
                )
                return VerificationResult(
                    property_name=prop.name,
                    passed=False,
                    counterexample=counterexample,
                    tests_run=tests_run,
                )

        return VerificationResult(
            property_name=prop.name,
            passed=True,
            tests_run=tests_run,
        )

    @classmethod
    def _is_exhaustive(cls, domain: NumericDomain) -> bool:
        width = domain.width
        return width is not None and width <= cls.EXHAUSTIVE_THRESHOLD

    @classmethod
    def _inputs(cls, domain: NumericDomain) -> Iterable[tuple[Any, Any, int]]:
        if cls._is_exhaustive(domain):
            values = [domain.cast(v) for v in range(int(domain.min), int(domain.max) + 1)]
            return itertools.product(values, values, range(cls.COUNT_LIMIT))
        return _generate_samples(domain, cls.SAMPLE_COUNT, cls.COUNT_LIMIT, cls.SEED)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _edge_values(domain: NumericDomain) -> list[Any]:
    lo, hi = domain.min, domain.max
    if domain.is_integral:
        lo, hi = int(lo), int(hi)
        candidates = [lo, lo + 1, -1, 0, 1, hi - 1, hi]
    else:
        candidates = [lo, lo / 2, -1, 0, 1, hi / 2, hi]
    edges = []
    for v in candidates:
        if domain.contains(v):
            cast = domain.cast(v)
            if cast not in edges:
                edges.append(cast)
    return edges


def _random_value(domain: NumericDomain, rng: random.Random) -> Any:
    if domain.is_integral:
        return domain.cast(rng.randint(int(domain.min), int(domain.max)))
    # scale inside the domain's own type so the product stays finite
    return domain.cast(rng.uniform(-1.0, 1.0)) * domain.max


def _generate_samples(
    domain: NumericDomain, count: int, count_limit: int, seed: int
) -> list[tuple[Any, Any, int]]:
    """Generate edge-case + random (start, step, count) samples."""
    rng = random.Random(seed)
    edges = _edge_values(domain)

    samples: list[tuple[Any, Any, int]] = []

    # All edge combinations
    for start, step in itertools.product(edges, repeat=2):
        for n in (0, 1, count_limit - 1):
            samples.append((start, step, n))

    # Random fill
    while len(samples) < count:
        samples.append((
            _random_value(domain, rng),
            _random_value(domain, rng),
            rng.randrange(count_limit),
        ))

    return samples
