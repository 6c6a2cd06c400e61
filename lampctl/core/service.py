"""Service layer used by CLI and API frontends."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence

from lampctl.core.codec import PRODUCT_ID, VENDOR_ID
from lampctl.core.color import NAMED_COLORS, parse_color
from lampctl.core.config import load_config
from lampctl.core.errors import ValidationError
from lampctl.core.invocation import InvocationBuilder
from lampctl.core.model import (
    BlinkIntent,
    BuzzIntent,
    ColorIntensity,
    CycleDefaults,
    DetectedLamp,
    EffectProgram,
    Intent,
    LampConfig,
    PlayIntent,
    PulseIntent,
    RunResult,
    TadaIntent,
)
from lampctl.core.sequencer import (
    build_blink,
    build_buzz,
    build_play,
    build_pulse,
    build_tada,
    run_program,
)
from lampctl.core.session import DeviceSession
from lampctl.transports.base import HidTransport
from lampctl.transports.hidapi import HidApiTransport

LOGGER = logging.getLogger(__name__)


def _require_duration(value: int, *, context: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{context} must be a non-negative number of milliseconds, got {value!r}")


def build_program(intent: Intent) -> EffectProgram:
    if isinstance(intent, PlayIntent):
        _require_duration(intent.on_ms, context="On time")
        _require_duration(intent.off_ms, context="Off time")
        return build_play(intent.color, intent.on_ms, intent.off_ms, intent.frequency)
    if isinstance(intent, TadaIntent):
        return build_tada()
    if isinstance(intent, BuzzIntent):
        _require_duration(intent.duration_ms, context="Buzz duration")
        return build_buzz(intent.frequency, intent.duration_ms, intent.wait)
    if isinstance(intent, BlinkIntent):
        if intent.cycles is not None and (isinstance(intent.cycles, bool) or intent.cycles < 0):
            raise ValidationError(f"Blink cycles must be non-negative, got {intent.cycles!r}")
        return build_blink(intent.color, intent.cycles)
    if isinstance(intent, PulseIntent):
        return build_pulse(intent.pattern, intent.color, intent.extra)
    raise ValidationError(f"Unsupported intent {intent!r}")


class LampService:
    def __init__(
        self,
        *,
        transport: HidTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        config: LampConfig | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.load_warnings = self.config.warnings
        self.transport = transport or HidApiTransport()
        self.sleep = sleep

    @property
    def defaults(self) -> CycleDefaults:
        return self.config.defaults

    def list_colors(self) -> dict[str, ColorIntensity]:
        palette = dict(NAMED_COLORS)
        palette.update(self.config.colors)
        return dict(sorted(palette.items()))

    def resolve_color(self, text: str) -> ColorIntensity:
        return parse_color(text, self.list_colors())

    def list_devices(self) -> list[DetectedLamp]:
        return self.transport.enumerate(VENDOR_ID, PRODUCT_ID)

    def builder(self) -> InvocationBuilder:
        return InvocationBuilder(self.defaults)

    def run(
        self,
        intents: Sequence[Intent],
        *,
        cancel: threading.Event | None = None,
    ) -> RunResult:
        """Execute intents in order on one device session.

        Every program is built before the device is opened, so argument
        errors never leave a half-played effect behind.
        """
        programs = [build_program(intent) for intent in intents]
        sends = 0
        with DeviceSession(self.transport) as session:
            for program in programs:
                LOGGER.info("Playing '%s'", program.name)
                sends += run_program(program, session, sleep=self.sleep, cancel=cancel)
        return RunResult(programs=tuple(p.name for p in programs), sends=sends)
