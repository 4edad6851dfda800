"""Request and settings models for the stepper's callers.

The stepper itself takes plain values; these models sit in front of it
wherever input arrives from outside Python (the command line), and carry
the handful of knobs the demonstration harness has.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from bounds import C_TYPES, NumericDomain, UnknownDomainError, get_domain
from stepper import StepResult, accumulate, deplete


def _known_domain(name: str) -> str:
    try:
        get_domain(name)
    except UnknownDomainError as exc:
        raise ValueError(str(exc.args[0])) from exc
    return " ".join(name.split())


# ---------------------------------------------------------------------------
# StepRequest: one bounded run
# ---------------------------------------------------------------------------

class StepRequest(BaseModel):
    """A single accumulate/deplete run described by plain values.

    ``start`` and ``step`` stay as Python numbers here; they are converted
    into the domain when the request is run, which is where values the
    domain cannot represent are rejected.
    """

    operation: Literal["accumulate", "deplete"]
    domain: str = Field(..., min_length=1)
    start: int | float
    step: int | float
    count: int = Field(..., ge=0, description="Number of steps to apply")

    @field_validator("domain")
    @classmethod
    def domain_is_registered(cls, v: str) -> str:
        return _known_domain(v)

    def resolve_domain(self) -> NumericDomain:
        return get_domain(self.domain)

    def run(self) -> StepResult:
        op = accumulate if self.operation == "accumulate" else deplete
        return op(self.resolve_domain(), self.start, self.step, self.count)


# ---------------------------------------------------------------------------
# HarnessSettings: knobs for the demonstration run
# ---------------------------------------------------------------------------

DEFAULT_DEMO_DOMAINS: list[str] = list(C_TYPES)


class HarnessSettings(BaseModel):
    """Settings for the overflow/underflow demonstration."""

    steps: int = Field(default=5, ge=1, description="Steps in the in-range run")
    banner_width: int = Field(default=50, ge=1, le=200)
    domains: list[str] = Field(default_factory=lambda: list(DEFAULT_DEMO_DOMAINS))

    @field_validator("domains")
    @classmethod
    def domains_are_registered(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("At least one domain is required")
        return [_known_domain(name) for name in v]

    def resolve_domains(self) -> list[NumericDomain]:
        return [get_domain(name) for name in self.domains]
