from __future__ import annotations

import itertools

import pytest

from lampctl.core.codec import MINOR_COMMAND_PORT_1, MINOR_COMMAND_PWM
from lampctl.core.color import PORT_WIRING, color_frames, enable_mask, parse_color
from lampctl.core.errors import ValidationError
from lampctl.core.model import ColorIntensity


def test_port_wiring_table() -> None:
    assert PORT_WIRING == {0: "green", 1: "red", 2: "blue"}


def test_red_maps_to_port_one() -> None:
    frames = color_frames(ColorIntensity(255, 0, 0))
    assert [f.to_bytes() for f in frames] == [
        bytes([101, 34, 1, 100, 0, 0, 0, 0]),
        bytes([101, 2, 0b101, 0, 0, 0, 0, 0]),
    ]


def test_frame_count_and_order_for_any_color() -> None:
    levels = (0, 1, 128, 255)
    for red, green, blue in itertools.product(levels, repeat=3):
        frames = color_frames(ColorIntensity(red, green, blue))
        lit = sum(1 for value in (red, green, blue) if value)
        assert [f.minor_cmd for f in frames[:-1]] == [MINOR_COMMAND_PWM] * lit
        assert frames[-1].minor_cmd == MINOR_COMMAND_PORT_1
        assert sum(1 for f in frames if f.minor_cmd == MINOR_COMMAND_PORT_1) == 1


def test_pwm_frames_follow_port_order() -> None:
    frames = color_frames(ColorIntensity(10, 20, 30))
    assert [f.data_lsb for f in frames[:-1]] == [0, 1, 2]
    assert [f.data_msb for f in frames[:-1]] == [8, 4, 12]
    assert frames[-1].data_lsb == 0


def test_off_color_only_disables() -> None:
    assert ColorIntensity().is_off
    assert not ColorIntensity(0, 0, 1).is_off
    frames = color_frames(ColorIntensity())
    assert len(frames) == 1
    assert frames[0].data_lsb == 0x07


def test_enable_mask_inverted_logic() -> None:
    assert enable_mask(ColorIntensity()) == 0x07
    assert enable_mask(ColorIntensity(0, 255, 0)) == 0b110
    assert enable_mask(ColorIntensity(0, 0, 1)) == 0b011
    assert enable_mask(ColorIntensity(1, 1, 1)) == 0


def test_parse_color_names_and_hex() -> None:
    assert parse_color("red") == ColorIntensity(255, 0, 0)
    assert parse_color("BLUE") == ColorIntensity(0, 0, 255)
    assert parse_color("dead00") == ColorIntensity(0xDE, 0xAD, 0x00)
    assert parse_color("#00ff00") == ColorIntensity(0, 255, 0)


def test_parse_color_uses_supplied_palette() -> None:
    palette = {"alert": ColorIntensity(255, 64, 0)}
    assert parse_color("alert", palette) == ColorIntensity(255, 64, 0)
    with pytest.raises(ValidationError):
        parse_color("red", palette)


@pytest.mark.parametrize("text", ["fff", "ff00zz", "ff00000", "", "purple"])
def test_parse_color_rejects_illegal_strings(text: str) -> None:
    with pytest.raises(ValidationError):
        parse_color(text)


def test_color_intensity_rejects_out_of_range() -> None:
    with pytest.raises(ValidationError):
        ColorIntensity(256, 0, 0)
    with pytest.raises(ValidationError):
        ColorIntensity(0, -1, 0)
