import numpy as np

from overlay import OverlayCanvas, compose

RED = (0, 0, 255)


def mirrored(canvas: OverlayCanvas) -> None:
    canvas.save()
    canvas.scale(-1, 1)
    canvas.translate(-canvas.width, 0)


def test_mirror_transform_maps_x_to_width_minus_x():
    canvas = OverlayCanvas(100, 50)
    mirrored(canvas)

    assert canvas.to_device(10, 20) == (90, 20)
    assert canvas.to_device(0, 0) == (100, 0)


def test_restore_returns_to_identity():
    canvas = OverlayCanvas(100, 50)
    mirrored(canvas)
    canvas.restore()

    assert canvas.is_identity()
    assert canvas.to_device(10, 20) == (10, 20)


def test_restore_without_save_is_a_no_op():
    canvas = OverlayCanvas(10, 10)
    canvas.restore()
    assert canvas.is_identity()


def test_resize_resets_transform_and_clears():
    canvas = OverlayCanvas(100, 50)
    mirrored(canvas)
    canvas.fill_circle(10, 10, 3, RED)
    canvas.resize(120, 60)

    assert canvas.is_identity()
    assert (canvas.width, canvas.height) == (120, 60)
    assert canvas.image.shape == (60, 120, 4)
    assert not canvas.image.any()


def test_fill_circle_draws_at_mirrored_position():
    canvas = OverlayCanvas(100, 50)
    mirrored(canvas)
    canvas.fill_circle(10, 20, 3, RED)
    canvas.restore()

    assert tuple(canvas.image[20, 90]) == (0, 0, 255, 255)
    assert canvas.image[20, 10, 3] == 0


def test_stroke_line_and_clear():
    canvas = OverlayCanvas(100, 50)
    canvas.stroke_line(10, 25, 60, 25, RED, 2)
    assert canvas.image[25, 30, 3] > 0

    canvas.clear()
    assert not canvas.image.any()


def test_compose_mirrors_video_and_blends_overlay():
    frame = np.zeros((50, 100, 3), dtype=np.uint8)
    frame[:, 0] = 255
    canvas = OverlayCanvas(100, 50)
    canvas.fill_circle(50, 25, 4, RED)

    out = compose(frame, canvas)

    assert out.shape == frame.shape
    assert tuple(out[10, 99]) == (255, 255, 255)
    assert tuple(out[10, 0]) == (0, 0, 0)
    assert tuple(out[25, 50]) == RED


def test_compose_skips_overlay_of_other_size():
    frame = np.zeros((50, 100, 3), dtype=np.uint8)
    canvas = OverlayCanvas(10, 10)
    canvas.fill_circle(5, 5, 3, RED)

    out = compose(frame, canvas)
    assert not out.any()


def test_compose_without_mirror_keeps_orientation():
    frame = np.zeros((50, 100, 3), dtype=np.uint8)
    frame[:, 0] = 255
    out = compose(frame, OverlayCanvas(100, 50), mirror=False)

    assert tuple(out[10, 0]) == (255, 255, 255)
    assert out is not frame
