"""Effect programs and their step-by-step execution."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable, Iterator
from typing import Protocol

from lampctl.core.codec import (
    ALL_PORTS_DISABLED,
    buzzer_extra,
    encode_buzzer,
    encode_port_write,
    encode_pulse,
)
from lampctl.core.color import color_frames, enable_mask
from lampctl.core.model import ColorIntensity, EffectProgram, Frame, Step

LOGGER = logging.getLogger(__name__)

TADA_BASE_MS = 120
# (frequency index, buzz duration ms, wait after ms)
TADA_SCHEDULE: tuple[tuple[int, int, int], ...] = (
    (15, TADA_BASE_MS, TADA_BASE_MS),
    (12, TADA_BASE_MS, TADA_BASE_MS),
    (10, TADA_BASE_MS, TADA_BASE_MS),
    (7, TADA_BASE_MS, 2 * TADA_BASE_MS),
    (15, TADA_BASE_MS, TADA_BASE_MS),
    (7, 3 * TADA_BASE_MS, 3 * TADA_BASE_MS),
)

BLINK_ON_MS = 10
BLINK_OFF_MS = 20


class FrameSink(Protocol):
    def send(self, frame: Frame) -> None:
        """Write one frame to the device."""


def _buzz_step(frequency: int, duration_ms: int, wait_ms: int = 0) -> Step:
    frame = encode_buzzer(frequency != 0, frequency, buzzer_extra(duration_ms))
    return Step(frame=frame, wait_ms=wait_ms)


def build_buzz(frequency: int, duration_ms: int = 100, wait: bool = False) -> EffectProgram:
    step = _buzz_step(frequency, duration_ms, duration_ms if wait else 0)
    return EffectProgram(name="buzz", steps=(step,))


def build_play(color: ColorIntensity, on_ms: int, off_ms: int, frequency: int) -> EffectProgram:
    steps = [_buzz_step(frequency, on_ms)]
    frames = color_frames(color)
    steps.extend(Step(frame=frame) for frame in frames[:-1])
    steps.append(Step(frame=frames[-1], wait_ms=on_ms))
    steps.append(Step(frame=encode_port_write(ALL_PORTS_DISABLED), wait_ms=off_ms))
    return EffectProgram(name="play", steps=tuple(steps))


def build_tada() -> EffectProgram:
    steps = tuple(
        _buzz_step(frequency, duration_ms, wait_ms)
        for frequency, duration_ms, wait_ms in TADA_SCHEDULE
    )
    return EffectProgram(name="tada", steps=steps)


def _blink_steps(mask: int, cycles: int | None) -> Iterator[Step]:
    on = Step(frame=encode_port_write(mask), wait_ms=BLINK_ON_MS)
    off = Step(frame=encode_port_write(ALL_PORTS_DISABLED), wait_ms=BLINK_OFF_MS)
    counter = itertools.count() if cycles is None else range(cycles)
    for _ in counter:
        yield on
        yield off


def build_blink(color: ColorIntensity, cycles: int | None = None) -> EffectProgram:
    """Alternate the color's enable mask with all ports off.

    Without `cycles` the program never ends on its own.
    """
    return EffectProgram(
        name="blink",
        steps=_blink_steps(enable_mask(color), cycles),
        endless=cycles is None,
    )


def build_pulse(pattern: int, color: int, extra: bytes = b"") -> EffectProgram:
    return EffectProgram(name="pulse", steps=(Step(frame=encode_pulse(pattern, color, extra)),))


def run_program(
    program: EffectProgram,
    session: FrameSink,
    *,
    sleep: Callable[[float], None] = time.sleep,
    cancel: threading.Event | None = None,
) -> int:
    """Send each step in order, sleeping after it; return the number of sends.

    A send failure propagates and the remaining steps are skipped.
    """
    sent = 0
    LOGGER.debug("Running program '%s'", program.name)
    for step in program.steps:
        if cancel is not None and cancel.is_set():
            LOGGER.debug("Program '%s' cancelled after %d sends", program.name, sent)
            break
        session.send(step.frame)
        sent += 1
        if step.wait_ms > 0:
            sleep(step.wait_ms / 1000)
    LOGGER.debug("Program '%s' finished after %d sends", program.name, sent)
    return sent
