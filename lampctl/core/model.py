"""Core data models used across codec, sequencer, service, and CLI."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union

from lampctl.core.errors import ValidationError

SHORT_FRAME_SIZE = 8
LONG_FRAME_SIZE = 16
EXTENSION_SIZE = LONG_FRAME_SIZE - SHORT_FRAME_SIZE
RESERVED_SIZE = 4


def _check_header(frame: ShortFrame | LongFrame) -> None:
    for name in ("major_cmd", "minor_cmd", "data_lsb", "data_msb"):
        value = getattr(frame, name)
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise ValidationError(f"Frame field '{name}' must be 0-255, got {value!r}")
    if not isinstance(frame.reserved, (bytes, bytearray)) or len(frame.reserved) != RESERVED_SIZE:
        raise ValidationError(f"Frame reserved bytes must be exactly {RESERVED_SIZE} bytes")


@dataclass(frozen=True)
class ShortFrame:
    minor_cmd: int
    data_lsb: int = 0
    data_msb: int = 0
    major_cmd: int = 0
    reserved: bytes = bytes(RESERVED_SIZE)

    def __post_init__(self) -> None:
        _check_header(self)

    def to_bytes(self) -> bytes:
        return bytes([self.major_cmd, self.minor_cmd, self.data_lsb, self.data_msb]) + self.reserved


@dataclass(frozen=True)
class LongFrame:
    minor_cmd: int
    data_lsb: int = 0
    data_msb: int = 0
    data_ext: bytes = bytes(EXTENSION_SIZE)
    major_cmd: int = 0
    reserved: bytes = bytes(RESERVED_SIZE)

    def __post_init__(self) -> None:
        _check_header(self)
        if not isinstance(self.data_ext, (bytes, bytearray)) or len(self.data_ext) != EXTENSION_SIZE:
            raise ValidationError(f"Frame extension must be exactly {EXTENSION_SIZE} bytes")

    def to_bytes(self) -> bytes:
        head = bytes([self.major_cmd, self.minor_cmd, self.data_lsb, self.data_msb]) + self.reserved
        return head + self.data_ext


Frame = Union[ShortFrame, LongFrame]


@dataclass(frozen=True)
class ColorIntensity:
    """Target brightness per channel, 0-255 each."""

    red: int = 0
    green: int = 0
    blue: int = 0

    def __post_init__(self) -> None:
        for channel in ("red", "green", "blue"):
            value = getattr(self, channel)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValidationError(f"Color channel '{channel}' must be 0-255, got {value!r}")

    @property
    def is_off(self) -> bool:
        return self.red == 0 and self.green == 0 and self.blue == 0

    def channel(self, name: str) -> int:
        return int(getattr(self, name))

    def hex(self) -> str:
        return f"{self.red:02x}{self.green:02x}{self.blue:02x}"


OFF = ColorIntensity()


@dataclass(frozen=True)
class Step:
    frame: Frame
    wait_ms: int = 0


@dataclass(frozen=True)
class EffectProgram:
    """An ordered list of steps; only endless programs hold an unbounded iterator."""

    name: str
    steps: Iterable[Step]
    endless: bool = False


@dataclass(frozen=True)
class PlayIntent:
    color: ColorIntensity = OFF
    on_ms: int = 200
    off_ms: int = 200
    frequency: int = 0


@dataclass(frozen=True)
class TadaIntent:
    pass


@dataclass(frozen=True)
class BuzzIntent:
    frequency: int
    duration_ms: int = 100
    wait: bool = False


@dataclass(frozen=True)
class BlinkIntent:
    color: ColorIntensity
    cycles: int | None = None


@dataclass(frozen=True)
class PulseIntent:
    pattern: int
    color: int
    extra: bytes = b""


Intent = Union[PlayIntent, TadaIntent, BuzzIntent, BlinkIntent, PulseIntent]


@dataclass(frozen=True)
class CycleDefaults:
    on_ms: int = 200
    off_ms: int = 200
    frequency: int = 0


@dataclass(frozen=True)
class LampConfig:
    defaults: CycleDefaults = field(default_factory=CycleDefaults)
    colors: dict[str, ColorIntensity] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()
    source: str | None = None


@dataclass(frozen=True)
class DetectedLamp:
    path: str
    serial: str
    product: str


@dataclass(frozen=True)
class RunResult:
    programs: tuple[str, ...]
    sends: int
