"""Resolution of ordered user requests into intents.

Cycle settings accumulate until a new cycle is requested. Finishing an
invocation adds one trailing cycle with the current settings unless the
last request already started one.
"""

from __future__ import annotations

from lampctl.core.model import (
    OFF,
    BlinkIntent,
    BuzzIntent,
    ColorIntensity,
    CycleDefaults,
    Intent,
    PlayIntent,
    PulseIntent,
    TadaIntent,
)


class InvocationBuilder:
    def __init__(self, defaults: CycleDefaults | None = None) -> None:
        self.defaults = defaults or CycleDefaults()
        self.color: ColorIntensity = OFF
        self.on_ms = self.defaults.on_ms
        self.off_ms = self.defaults.off_ms
        self.frequency = self.defaults.frequency
        self._intents: list[Intent] = []
        self._ended_with_new_cycle = False

    def _add(self, intent: Intent) -> InvocationBuilder:
        self._intents.append(intent)
        self._ended_with_new_cycle = isinstance(intent, PlayIntent)
        return self

    def _touch(self) -> InvocationBuilder:
        self._ended_with_new_cycle = False
        return self

    def set_color(self, color: ColorIntensity) -> InvocationBuilder:
        self.color = color
        return self._touch()

    def set_on_ms(self, on_ms: int) -> InvocationBuilder:
        self.on_ms = on_ms
        return self._touch()

    def set_off_ms(self, off_ms: int) -> InvocationBuilder:
        self.off_ms = off_ms
        return self._touch()

    def set_frequency(self, frequency: int) -> InvocationBuilder:
        self.frequency = frequency
        return self._touch()

    def current_cycle(self) -> PlayIntent:
        return PlayIntent(
            color=self.color,
            on_ms=self.on_ms,
            off_ms=self.off_ms,
            frequency=self.frequency,
        )

    def new_cycle(self) -> InvocationBuilder:
        return self._add(self.current_cycle())

    def tada(self) -> InvocationBuilder:
        return self._add(TadaIntent())

    def buzz(self, frequency: int, duration_ms: int = 100, wait: bool = False) -> InvocationBuilder:
        return self._add(BuzzIntent(frequency=frequency, duration_ms=duration_ms, wait=wait))

    def blink(self, color: ColorIntensity, cycles: int | None = None) -> InvocationBuilder:
        return self._add(BlinkIntent(color=color, cycles=cycles))

    def pulse(self, pattern: int, color: int, extra: bytes = b"") -> InvocationBuilder:
        return self._add(PulseIntent(pattern=pattern, color=color, extra=extra))

    def finish(self) -> tuple[Intent, ...]:
        intents = list(self._intents)
        if not self._ended_with_new_cycle:
            intents.append(self.current_cycle())
        return tuple(intents)
