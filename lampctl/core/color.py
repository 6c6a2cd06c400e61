"""Color parsing and mapping onto the lamp's PWM ports."""

from __future__ import annotations

import re
from collections.abc import Mapping

from lampctl.core.codec import (
    ALL_PORTS_DISABLED,
    duty_from_intensity,
    encode_port_write,
    encode_pwm,
)
from lampctl.core.errors import ValidationError
from lampctl.core.model import ColorIntensity, ShortFrame

# hardware port -> logical channel
PORT_WIRING: dict[int, str] = {
    0: "green",
    1: "red",
    2: "blue",
}

NAMED_COLORS: dict[str, ColorIntensity] = {
    "off": ColorIntensity(0, 0, 0),
    "red": ColorIntensity(255, 0, 0),
    "green": ColorIntensity(0, 255, 0),
    "blue": ColorIntensity(0, 0, 255),
    "yellow": ColorIntensity(255, 255, 0),
    "cyan": ColorIntensity(0, 255, 255),
    "magenta": ColorIntensity(255, 0, 255),
    "white": ColorIntensity(255, 255, 255),
}

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-f]{6})$")


def parse_hex_color(text: str) -> ColorIntensity:
    match = _HEX_COLOR_RE.match(text.strip().lower())
    if not match:
        raise ValidationError(f"Illegal color string: {text!r} (expected RRGGBB hex)")
    value = bytes.fromhex(match.group(1))
    return ColorIntensity(red=value[0], green=value[1], blue=value[2])


def parse_color(text: str, named: Mapping[str, ColorIntensity] | None = None) -> ColorIntensity:
    """Resolve a color name or a six-digit hex string."""
    palette = NAMED_COLORS if named is None else named
    key = text.strip().lower()
    if key in palette:
        return palette[key]
    if _HEX_COLOR_RE.match(key):
        return parse_hex_color(key)
    known = ", ".join(sorted(palette))
    raise ValidationError(f"Illegal color string: {text!r}. Use RRGGBB hex or one of: {known}")


def enable_mask(color: ColorIntensity) -> int:
    mask = ALL_PORTS_DISABLED
    for port, channel in PORT_WIRING.items():
        if color.channel(channel):
            mask &= ~(1 << port)
    return mask


def color_frames(color: ColorIntensity) -> list[ShortFrame]:
    """PWM frames for every lit port, then the single port-enable write.

    The device only switches a port to its latched duty cycle once the
    enable mask is written, so the port write always comes last.
    """
    if color.is_off:
        return [encode_port_write(ALL_PORTS_DISABLED)]
    frames: list[ShortFrame] = []
    mask = ALL_PORTS_DISABLED
    for port in sorted(PORT_WIRING):
        intensity = color.channel(PORT_WIRING[port])
        if not intensity:
            continue
        frames.append(encode_pwm(port, duty_from_intensity(intensity)))
        mask &= ~(1 << port)
    frames.append(encode_port_write(mask))
    return frames
