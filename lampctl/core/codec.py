"""Frame encoding for the lamp's 8-byte and 16-byte feature reports.

Layout and command values follow the vendor datasheet: byte 0 selects the
frame size, byte 1 the function, bytes 2-3 carry the payload, and 16-byte
frames append eight extension bytes.
"""

from __future__ import annotations

from dataclasses import replace

from lampctl.core.errors import ValidationError
from lampctl.core.model import (
    EXTENSION_SIZE,
    LONG_FRAME_SIZE,
    SHORT_FRAME_SIZE,
    Frame,
    LongFrame,
    ShortFrame,
)

VENDOR_ID = 0x0FC5
PRODUCT_ID = 0xB080

MAJOR_COMMAND_8_BYTE = 101
MAJOR_COMMAND_16_BYTE = 102

MINOR_COMMAND_PORT_1 = 2
MINOR_COMMAND_PWM = 34
MINOR_COMMAND_BUZZER = 70
MINOR_COMMAND_PULSE = 76

PORT_COUNT = 3
ALL_PORTS_DISABLED = 0x07
MAX_DUTY_PERCENT = 100
MAX_FREQUENCY_INDEX = 255
BUZZER_TICK_MS = 50


def _require_byte(value: int, *, context: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise ValidationError(f"{context} must be 0-255, got {value!r}")
    return value


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _pad_extension(extra: bytes) -> bytes:
    extra = bytes(extra)
    if len(extra) > EXTENSION_SIZE:
        raise ValidationError(
            f"Extension payload must be at most {EXTENSION_SIZE} bytes, got {len(extra)}"
        )
    return extra + bytes(EXTENSION_SIZE - len(extra))


def stamp(frame: Frame) -> Frame:
    """Overwrite the size selector with the value matching the frame type."""
    if isinstance(frame, LongFrame):
        return replace(frame, major_cmd=MAJOR_COMMAND_16_BYTE)
    return replace(frame, major_cmd=MAJOR_COMMAND_8_BYTE)


def duty_from_intensity(intensity: int) -> int:
    _require_byte(intensity, context="Intensity")
    return _clamp(round(MAX_DUTY_PERCENT * intensity / 255), 0, MAX_DUTY_PERCENT)


def encode_port_write(mask: int) -> ShortFrame:
    if isinstance(mask, bool) or not isinstance(mask, int) or not 0 <= mask <= ALL_PORTS_DISABLED:
        raise ValidationError(f"Enable mask must be 0-{ALL_PORTS_DISABLED}, got {mask!r}")
    return stamp(ShortFrame(minor_cmd=MINOR_COMMAND_PORT_1, data_lsb=mask))


def encode_pwm(port: int, duty_percent: int) -> ShortFrame:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port < PORT_COUNT:
        raise ValidationError(f"Port index must be 0-{PORT_COUNT - 1}, got {port!r}")
    duty = _clamp(int(duty_percent), 0, MAX_DUTY_PERCENT)
    return stamp(ShortFrame(minor_cmd=MINOR_COMMAND_PWM, data_lsb=port, data_msb=duty))


def buzzer_extra(duration_ms: int, repeat: int = 1, off_ms: int = 0) -> bytes:
    """Extension bytes for the buzzer: repeat count, on ticks, off ticks (50 ms each)."""
    on_ticks = _clamp(int(duration_ms) // BUZZER_TICK_MS, 0, 0xFF)
    off_ticks = _clamp(int(off_ms) // BUZZER_TICK_MS, 0, 0xFF)
    return _pad_extension(bytes([_clamp(int(repeat), 0, 0xFF), on_ticks, off_ticks]))


def encode_buzzer(enabled: bool, frequency_index: int, extra: bytes = b"") -> LongFrame:
    if (
        isinstance(frequency_index, bool)
        or not isinstance(frequency_index, int)
        or not 0 <= frequency_index <= MAX_FREQUENCY_INDEX
    ):
        raise ValidationError(
            f"Buzzer frequency index must be 0-{MAX_FREQUENCY_INDEX}, got {frequency_index!r}"
        )
    # index 0 always silences the buzzer
    active = bool(enabled) and frequency_index != 0
    return stamp(
        LongFrame(
            minor_cmd=MINOR_COMMAND_BUZZER,
            data_lsb=1 if active else 0,
            data_msb=frequency_index,
            data_ext=_pad_extension(extra),
        )
    )


def encode_pulse(pattern: int, color: int, extra: bytes = b"") -> LongFrame:
    return stamp(
        LongFrame(
            minor_cmd=MINOR_COMMAND_PULSE,
            data_lsb=_require_byte(pattern, context="Pulse pattern"),
            data_msb=_require_byte(color, context="Pulse color"),
            data_ext=_pad_extension(extra),
        )
    )


def decode_frame(raw: bytes) -> Frame:
    raw = bytes(raw)
    if len(raw) == SHORT_FRAME_SIZE and raw[0] == MAJOR_COMMAND_8_BYTE:
        return ShortFrame(
            minor_cmd=raw[1],
            data_lsb=raw[2],
            data_msb=raw[3],
            major_cmd=raw[0],
            reserved=raw[4:8],
        )
    if len(raw) == LONG_FRAME_SIZE and raw[0] == MAJOR_COMMAND_16_BYTE:
        return LongFrame(
            minor_cmd=raw[1],
            data_lsb=raw[2],
            data_msb=raw[3],
            data_ext=raw[8:],
            major_cmd=raw[0],
            reserved=raw[4:8],
        )
    raise ValidationError(
        f"Not a lamp frame: {len(raw)} bytes with major command {raw[0] if raw else None!r}"
    )
