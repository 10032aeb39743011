import pytest

from itfliesby.render_geometry import perspective, scale_factor, viewport


def test_perspective_keeps_dimensions():
    result = perspective(1920.0, 1080.0)
    assert result.width_pixels == 1920.0
    assert result.height_pixels == 1080.0


def test_perspective_bottom_row_is_identity():
    assert perspective(1920.0, 1080.0).transform[6:] == (0.0, 0.0, 1.0)


def test_perspective_maps_screen_corners_to_unit_square():
    result = perspective(1920.0, 1080.0)
    assert result.apply(960.0, 540.0) == pytest.approx((1.0, 1.0))
    assert result.apply(-960.0, -540.0) == pytest.approx((-1.0, -1.0))
    assert result.apply(0.0, 0.0) == pytest.approx((0.0, 0.0))


def test_perspective_rejects_zero_size():
    with pytest.raises(ValueError):
        perspective(0.0, 1080.0)


def test_viewport_matching_aspect_fills_window():
    result = viewport(1920.0, 1080.0, 1920.0, 1080.0)
    assert (result.x, result.y, result.width, result.height) == (0.0, 0.0, 1920.0, 1080.0)


@pytest.mark.parametrize(
    "window",
    [(1000.0, 1000.0), (3000.0, 1000.0), (800.0, 600.0), (1024.0, 768.0)],
)
def test_viewport_keeps_aspect_fits_and_centres(window):
    window_width, window_height = window
    result = viewport(window_width, window_height, 1920.0, 1080.0)
    assert result.width / result.height == pytest.approx(1920.0 / 1080.0)
    assert result.width <= window_width + 1e-9
    assert result.height <= window_height + 1e-9
    assert result.x * 2 + result.width == pytest.approx(window_width)
    assert result.y * 2 + result.height == pytest.approx(window_height)


def test_viewport_pillarboxes_wide_window():
    result = viewport(3000.0, 1000.0, 1920.0, 1080.0)
    assert result.height == 1000.0
    assert result.width < 3000.0
    assert result.y == 0.0


def test_viewport_letterboxes_tall_window():
    result = viewport(1000.0, 1000.0, 1920.0, 1080.0)
    assert result.width == 1000.0
    assert result.x == 0.0
    assert result.y > 0.0


def test_scale_factor_identity():
    assert scale_factor(1920.0, 1080.0, 1920.0, 1080.0) == (1.0, 1.0)


def test_scale_factor_half():
    assert scale_factor(960.0, 540.0, 1920.0, 1080.0) == (0.5, 0.5)


def test_scale_factor_rejects_zero_screen():
    with pytest.raises(ValueError):
        scale_factor(960.0, 540.0, 0.0, 1080.0)