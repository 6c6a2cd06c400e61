"""Typer CLI entrypoint."""

from __future__ import annotations

import logging

import typer

from lampctl.core.errors import LampctlError, ValidationError
from lampctl.core.invocation import InvocationBuilder
from lampctl.core.model import BlinkIntent, BuzzIntent, ColorIntensity, PulseIntent
from lampctl.core.service import LampService

app = typer.Typer(help="USB indicator lamp control: colors, buzzer, and fanfares")


@app.callback()
def main(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for info, -vv for debug"),
) -> None:
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)


def _build_service() -> LampService:
    service = LampService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _pick_color(
    service: LampService,
    color: str | None,
    red: bool,
    green: bool,
    blue: bool,
) -> ColorIntensity | None:
    chosen = [name for name, flag in (("red", red), ("green", green), ("blue", blue)) if flag]
    if color is not None:
        chosen.append(color)
    if len(chosen) > 1:
        raise ValidationError("Use only one of --color, --red, --green, --blue")
    if not chosen:
        return None
    return service.resolve_color(chosen[0])


def _parse_cycle(service: LampService, text: str) -> tuple[ColorIntensity, list[int]]:
    """Split COLOR[:ON[:OFF[:BUZZER]]]; omitted numbers are not returned."""
    parts = text.split(":")
    if len(parts) > 4 or not parts[0]:
        raise ValidationError(f"Illegal cycle '{text}'. Expected COLOR[:ON[:OFF[:BUZZER]]]")
    numbers: list[int] = []
    for part in parts[1:]:
        try:
            numbers.append(int(part))
        except ValueError:
            raise ValidationError(f"Illegal number '{part}' in cycle '{text}'") from None
    return service.resolve_color(parts[0]), numbers


def _apply_cycle(builder: InvocationBuilder, color: ColorIntensity, numbers: list[int]) -> None:
    # settings a cycle leaves out carry over from the previous cycle
    builder.set_color(color)
    setters = (builder.set_on_ms, builder.set_off_ms, builder.set_frequency)
    for setter, value in zip(setters, numbers):
        setter(value)
    builder.new_cycle()


@app.command("colors")
def list_colors() -> None:
    """List named colors, including those from the user config."""
    try:
        service = _build_service()
        for name, color in service.list_colors().items():
            typer.echo(f"{name}: {color.hex()}")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("devices")
def list_devices() -> None:
    """List attached lamps."""
    try:
        service = _build_service()
        lamps = service.list_devices()
        if not lamps:
            typer.echo("No lamp found")
            raise typer.Exit(code=1)

        for lamp in lamps:
            serial = lamp.serial or "<no-serial>"
            typer.echo(f"{lamp.path} {lamp.product} serial={serial}")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("play")
def play(
    color: str | None = typer.Option(None, "--color", "-c", help="Color name or RRGGBB hex"),
    red: bool = typer.Option(False, "--red", help="Shortcut for --color ff0000"),
    green: bool = typer.Option(False, "--green", help="Shortcut for --color 00ff00"),
    blue: bool = typer.Option(False, "--blue", help="Shortcut for --color 0000ff"),
    on_ms: int | None = typer.Option(None, "--on", help="Lamp on time in milliseconds"),
    off_ms: int | None = typer.Option(None, "--off", help="Pause after the cycle in milliseconds"),
    buzzer: int | None = typer.Option(None, "--buzzer", "-z", help="Buzzer frequency index (0 = silent)"),
    tada: bool = typer.Option(False, "--tada", help="Play the fanfare before the cycle"),
    count: int = typer.Option(1, "--count", "-n", min=1, help="Number of cycles"),
) -> None:
    """Light the lamp for one cycle (or COUNT cycles), optionally with the buzzer."""
    try:
        service = _build_service()
        builder = service.builder()
        chosen = _pick_color(service, color, red, green, blue)
        if chosen is not None:
            builder.set_color(chosen)
        if on_ms is not None:
            builder.set_on_ms(on_ms)
        if off_ms is not None:
            builder.set_off_ms(off_ms)
        if buzzer is not None:
            builder.set_frequency(buzzer)
        if tada:
            builder.tada()
        for _ in range(count):
            builder.new_cycle()
        result = service.run(builder.finish())
        typer.echo(f"Played {', '.join(result.programs)} ({result.sends} commands)")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("sequence")
def sequence(
    cycles: list[str] = typer.Argument(..., help="Cycles as COLOR[:ON[:OFF[:BUZZER]]]"),
    tada: bool = typer.Option(False, "--tada", help="Play the fanfare before the first cycle"),
) -> None:
    """Play several cycles in order, e.g. `red:1000 dead00:100:200:5`."""
    try:
        service = _build_service()
        parsed = [_parse_cycle(service, text) for text in cycles]
        builder = service.builder()
        if tada:
            builder.tada()
        for color, numbers in parsed:
            _apply_cycle(builder, color, numbers)
        result = service.run(builder.finish())
        typer.echo(f"Played {len(parsed)} cycle(s) ({result.sends} commands)")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("tada")
def tada() -> None:
    """Play the fanfare, followed by the default cycle."""
    try:
        service = _build_service()
        result = service.run(service.builder().tada().finish())
        typer.echo(f"Played {', '.join(result.programs)} ({result.sends} commands)")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("buzz")
def buzz(
    buzzer: int = typer.Option(..., "--buzzer", "-z", help="Buzzer frequency index (0 = silent)"),
    duration: int = typer.Option(100, "--duration", "-d", help="Tone length in milliseconds"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Block until the tone has finished"),
) -> None:
    """Sound the buzzer without touching the LEDs."""
    try:
        service = _build_service()
        result = service.run([BuzzIntent(frequency=buzzer, duration_ms=duration, wait=wait)])
        typer.echo(f"Buzzed ({result.sends} commands)")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("blink")
def blink(
    color: str = typer.Option("red", "--color", "-c", help="Color name or RRGGBB hex"),
    cycles: int | None = typer.Option(None, "--cycles", min=1, help="Stop after this many on/off cycles"),
) -> None:
    """Blink the lamp. Runs until interrupted unless --cycles is given."""
    try:
        service = _build_service()
        result = service.run([BlinkIntent(color=service.resolve_color(color), cycles=cycles)])
        typer.echo(f"Blinked ({result.sends} commands)")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("pulse")
def pulse(
    pattern: int = typer.Argument(..., help="Hardware pulse pattern byte"),
    color: int = typer.Argument(..., help="Hardware pulse color byte"),
) -> None:
    """Start a hardware-driven pulse pattern."""
    try:
        service = _build_service()
        result = service.run([PulseIntent(pattern=pattern, color=color)])
        typer.echo(f"Pulse started ({result.sends} commands)")
    except LampctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
