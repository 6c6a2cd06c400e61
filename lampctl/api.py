"""Stable public API for building tooling on top of lampctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence

from lampctl.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    DeviceNotFoundError,
    LampctlError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    ValidationError,
)
from lampctl.core.invocation import InvocationBuilder
from lampctl.core.model import (
    BlinkIntent,
    BuzzIntent,
    ColorIntensity,
    DetectedLamp,
    Intent,
    LampConfig,
    PlayIntent,
    PulseIntent,
    RunResult,
    TadaIntent,
)
from lampctl.core.service import LampService
from lampctl.transports.base import HidTransport
from lampctl.transports.hidapi import HidApiTransport

__all__ = [
    "LampctlError",
    "ValidationError",
    "ConfigLoadError",
    "ConfigValidationError",
    "DeviceNotFoundError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "BlinkIntent",
    "BuzzIntent",
    "ColorIntensity",
    "DetectedLamp",
    "Intent",
    "InvocationBuilder",
    "PlayIntent",
    "PulseIntent",
    "RunResult",
    "TadaIntent",
    "HidApiTransport",
    "Client",
]


class Client:
    """Public client for driving the lamp.

    A `Client` wraps configuration loading, color resolution, and effect
    playback behind a stable API intended for third-party tools
    (scripts/services/status monitors). Colors may be given as
    `ColorIntensity` values or as names/hex strings.
    """

    def __init__(
        self,
        *,
        transport: HidTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        config: LampConfig | None = None,
    ) -> None:
        self._service = LampService(transport=transport, sleep=sleep, config=config)

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def _color(self, color: ColorIntensity | str) -> ColorIntensity:
        if isinstance(color, ColorIntensity):
            return color
        return self._service.resolve_color(color)

    def list_colors(self) -> dict[str, ColorIntensity]:
        return self._service.list_colors()

    def list_devices(self) -> list[DetectedLamp]:
        return self._service.list_devices()

    def builder(self) -> InvocationBuilder:
        return self._service.builder()

    def run(self, intents: Sequence[Intent], *, cancel: threading.Event | None = None) -> RunResult:
        return self._service.run(intents, cancel=cancel)

    def play(
        self,
        color: ColorIntensity | str,
        *,
        on_ms: int | None = None,
        off_ms: int | None = None,
        frequency: int | None = None,
    ) -> RunResult:
        defaults = self._service.defaults
        intent = PlayIntent(
            color=self._color(color),
            on_ms=defaults.on_ms if on_ms is None else on_ms,
            off_ms=defaults.off_ms if off_ms is None else off_ms,
            frequency=defaults.frequency if frequency is None else frequency,
        )
        return self._service.run([intent])

    def tada(self) -> RunResult:
        return self._service.run([TadaIntent()])

    def buzz(self, frequency: int, *, duration_ms: int = 100, wait: bool = False) -> RunResult:
        return self._service.run([BuzzIntent(frequency=frequency, duration_ms=duration_ms, wait=wait)])

    def blink(
        self,
        color: ColorIntensity | str,
        *,
        cycles: int | None = None,
        cancel: threading.Event | None = None,
    ) -> RunResult:
        """Blink for `cycles` on/off pairs, or until `cancel` is set when unbounded."""
        intent = BlinkIntent(color=self._color(color), cycles=cycles)
        return self._service.run([intent], cancel=cancel)

    def pulse(self, pattern: int, color: int, *, extra: bytes = b"") -> RunResult:
        return self._service.run([PulseIntent(pattern=pattern, color=color, extra=extra)])
