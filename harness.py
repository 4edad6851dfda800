"""Overflow / underflow demonstration harness.

For every configured domain this runs two pairs of bounded runs:

  * overflow  - accumulate ``max // steps`` from 0, first ``steps`` times
    (fits) and then ``steps + 1`` times (would pass ``max``);
  * underflow - deplete ``max // steps`` from ``max``, first ``steps``
    times and then ``steps + 1`` times (would pass ``min``).

All number-to-text rendering happens here.  The stepper only ever hands
back ``StepResult`` values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

from bounds import NumericDomain
from models import HarnessSettings
from stepper import StepResult, accumulate, deplete

logger = logging.getLogger(__name__)

START_BANNER = "Starting Numeric Underflow / Overflow Tests!"
END_BANNER = "All Numeric Underflow / Overflow Tests Complete!"


@dataclass(frozen=True)
class DemoRun:
    """One bounded run and how to describe it."""

    label: str
    flag: str          # "Overflow" or "Underflow"
    start: Any
    step: Any
    count: int
    result: StepResult

    @property
    def exhausted(self) -> bool:
        return not self.result.completed


@dataclass
class DemoSection:
    """Both runs of one direction for one domain."""

    title: str
    domain: NumericDomain
    runs: list[DemoRun] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

def per_step(domain: NumericDomain, steps: int) -> Any:
    """``max / steps`` in the domain's own arithmetic."""
    if domain.is_integral:
        return domain.max // steps
    return domain.max / steps


def overflow_section(domain: NumericDomain, steps: int) -> DemoSection:
    increment = per_step(domain, steps)
    start = domain.zero
    section = DemoSection(title=f"Overflow Test of Type = {domain.name}", domain=domain)
    for label, count in (
        ("Adding Numbers Without Overflow", steps),
        ("Adding Numbers With Overflow", steps + 1),
    ):
        result = accumulate(domain, start, increment, count)
        section.runs.append(DemoRun(label, "Overflow", start, increment, count, result))
    return section


def underflow_section(domain: NumericDomain, steps: int) -> DemoSection:
    decrement = per_step(domain, steps)
    start = domain.max
    section = DemoSection(title=f"Underflow Test of Type = {domain.name}", domain=domain)
    for label, count in (
        ("Subtracting Numbers Without Underflow", steps),
        ("Subtracting Numbers With Underflow", steps + 1),
    ):
        result = deplete(domain, start, decrement, count)
        section.runs.append(DemoRun(label, "Underflow", start, decrement, count, result))
    return section


def run_demo(settings: HarnessSettings | None = None) -> tuple[list[DemoSection], list[DemoSection]]:
    """Run every overflow section, then every underflow section."""
    if settings is None:
        settings = HarnessSettings()
    domains = settings.resolve_domains()
    logger.info("running demonstration over %d domains", len(domains))
    overflow = [overflow_section(d, settings.steps) for d in domains]
    underflow = [underflow_section(d, settings.steps) for d in domains]
    return overflow, underflow


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def format_value(value: Any) -> str:
    """Render a domain value as a number, never as a character."""
    return str(value)


def format_flag(flag: bool) -> str:
    return "true" if flag else "false"


def render_run(run: DemoRun) -> str:
    return (
        f"\t{run.label} ({format_value(run.start)}, {format_value(run.step)}, "
        f"{run.count}) = {run.flag}: {format_flag(run.exhausted)} "
        f"Result: {format_value(run.result.value)}"
    )


def render_section(section: DemoSection) -> Iterator[str]:
    yield section.title
    for run in section.runs:
        yield render_run(run)


def render_demo(settings: HarnessSettings | None = None) -> Iterator[str]:
    """Yield the demonstration report line by line."""
    if settings is None:
        settings = HarnessSettings()
    star_line = "*" * settings.banner_width
    overflow, underflow = run_demo(settings)

    yield START_BANNER
    for heading, sections in (
        ("*** Running Overflow Tests ***", overflow),
        ("*** Running Underflow Tests ***", underflow),
    ):
        yield ""
        yield star_line
        yield heading
        yield star_line
        for section in sections:
            yield from render_section(section)
    yield ""
    yield END_BANNER
