import pytest

from itfliesby.render_types import (
    NORMALIZING_FACTOR,
    ColorHex,
    ColorNormalized,
    color_to_hex,
    normalize_color,
)


def test_packed_value_puts_red_in_low_byte():
    assert ColorHex(1, 2, 3, 4).value == 0x04030201


def test_from_value_round_trips():
    for value in (0, 0xFFFFFFFF, 0x12345678, 0x80FF0001):
        assert ColorHex.from_value(value).value == value


def test_channel_out_of_range_rejected():
    with pytest.raises(ValueError):
        ColorHex(256, 0, 0, 0)
    with pytest.raises(ValueError):
        ColorHex(0, -1, 0, 0)


def test_from_value_rejects_too_large():
    with pytest.raises(ValueError):
        ColorHex.from_value(1 << 32)


def test_normalize_zero_is_zero():
    assert normalize_color(ColorHex()).data == (0.0, 0.0, 0.0, 0.0)


def test_normalize_full_channel_is_about_one():
    normalized = normalize_color(ColorHex(255, 255, 255, 255))
    for channel in normalized.data:
        assert channel == pytest.approx(1.0, abs=1e-6)


def test_normalize_uses_factor():
    normalized = normalize_color(ColorHex(10, 0, 0, 0))
    assert normalized.r == pytest.approx(10 * NORMALIZING_FACTOR, rel=1e-6)


def test_round_trip_every_byte():
    for value in range(256):
        color = ColorHex(value, 255 - value, value, 255 - value)
        assert color_to_hex(normalize_color(color)) == color


def test_normalize_is_monotonic():
    channels = [normalize_color(ColorHex(v, 0, 0, 0)).r for v in range(256)]
    assert channels == sorted(channels)


def test_to_hex_rejects_out_of_range():
    with pytest.raises(ValueError):
        color_to_hex(ColorNormalized(1.5, 0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        color_to_hex(ColorNormalized(-0.5, 0.0, 0.0, 0.0))


def test_to_hex_rejects_nan():
    with pytest.raises(ValueError):
        color_to_hex(ColorNormalized(float("nan"), 0.0, 0.0, 0.0))


def test_to_hex_truncates():
    assert color_to_hex(ColorNormalized(0.0, 0.0, 0.0, 0.0)) == ColorHex(0, 0, 0, 0)
    assert color_to_hex(ColorNormalized(1.0, 1.0, 1.0, 1.0)) == ColorHex(255, 255, 255, 255)