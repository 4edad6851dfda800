"""
Typer CLI for the bounded stepper.

Commands:
- demo        run the overflow/underflow demonstration over a set of domains
- accumulate  one bounded run of repeated addition
- deplete     one bounded run of repeated subtraction
- domains     list every registered domain with its range
- verify      run the stepper factory's verification for one domain

Single runs exit with code 1 when the run stopped on range exhaustion,
so the command composes with shell conditionals.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import typer
from pydantic import ValidationError

from bounds import C_TYPES, DOMAINS, UnknownDomainError, get_domain
from factory import StepperFactory
from harness import format_flag, format_value, render_demo
from models import HarnessSettings, StepRequest

logger = logging.getLogger(__name__)

app = typer.Typer(help="Repeated addition/subtraction that stops before overflowing.")


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(err["msg"] for err in exc.errors())


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def demo(
    steps: int = typer.Option(5, "--steps", help="Steps in the in-range run."),
    width: int = typer.Option(50, "--width", help="Width of the banner lines."),
    domain: Optional[List[str]] = typer.Option(
        None, "--domain", "-d", help="Domain to exercise (repeatable)."
    ),
) -> None:
    """Run the overflow and underflow demonstration."""
    fields = {"steps": steps, "banner_width": width}
    if domain:
        fields["domains"] = domain
    try:
        settings = HarnessSettings(**fields)
    except ValidationError as exc:
        raise typer.BadParameter(_validation_message(exc)) from exc

    for line in render_demo(settings):
        typer.echo(line)


def _single_run(operation: str, domain: str, start: str, step: str, count: int) -> None:
    try:
        request = StepRequest(
            operation=operation, domain=domain, start=start, step=step, count=count
        )
    except ValidationError as exc:
        raise typer.BadParameter(_validation_message(exc)) from exc

    logger.debug("single run: %s", request)
    try:
        result = request.run()
    except OverflowError as exc:
        raise typer.BadParameter(str(exc)) from exc

    typer.echo(
        f"value={format_value(result.value)} "
        f"completed={format_flag(result.completed)} applied={result.applied}"
    )
    if not result.completed:
        raise typer.Exit(code=1)


@app.command()
def accumulate(
    domain: str = typer.Argument(..., help="Numeric domain name, e.g. int8 or 'unsigned char'."),
    start: str = typer.Argument(..., help="Starting value."),
    step: str = typer.Argument(..., help="Amount added per step."),
    count: int = typer.Argument(..., help="Number of steps."),
) -> None:
    """Add STEP to START COUNT times, stopping before the domain's range ends."""
    _single_run("accumulate", domain, start, step, count)


@app.command()
def deplete(
    domain: str = typer.Argument(..., help="Numeric domain name, e.g. int8 or 'unsigned char'."),
    start: str = typer.Argument(..., help="Starting value."),
    step: str = typer.Argument(..., help="Amount subtracted per step."),
    count: int = typer.Argument(..., help="Number of steps."),
) -> None:
    """Subtract STEP from START COUNT times, stopping before the domain's range ends."""
    _single_run("deplete", domain, start, step, count)


@app.command()
def domains() -> None:
    """List every registered domain and its range."""
    for name, d in list(DOMAINS.items()) + list(C_TYPES.items()):
        typer.echo(f"{name}: [{format_value(d.min)}, {format_value(d.max)}]")


@app.command()
def verify(
    domain: str = typer.Argument(..., help="Numeric domain name."),
) -> None:
    """Verify the stepper against its spec for one domain."""
    try:
        resolved = get_domain(domain)
    except UnknownDomainError as exc:
        raise typer.BadParameter(exc.args[0]) from exc

    reports = StepperFactory.verify(resolved)
    for report in reports:
        typer.echo(report.summary())
    if not all(r.passed for r in reports):
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for the ``bounded-stepper`` console script."""
    app()


if __name__ == "__main__":
    main()
