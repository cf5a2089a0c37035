"""Viewport transform and card geometry."""
import random
from types import SimpleNamespace

import pytest

from thoughtboard.canvas import (
    IDENTITY,
    MAX_SCALE,
    MIN_SCALE,
    Transform,
    Viewport,
    card_center,
    center_placement,
    committed_size,
    connection_segments,
    drag_position,
    grow_position,
    resize_dimensions,
)

TRANSFORMS = [
    IDENTITY,
    Transform(x=120, y=-40, k=2.5),
    Transform(x=-300.5, y=80.25, k=0.3),
    Transform(x=0, y=0, k=MAX_SCALE),
]
POINTS = [(0, 0), (15.5, -3), (800, 600), (-1234.5, 987.25)]


class TestTransform:
    @pytest.mark.parametrize("transform", TRANSFORMS)
    def test_world_to_screen_inverts_screen_to_world(self, transform):
        viewport = Viewport(transform)
        for sx, sy in POINTS:
            wx, wy = viewport.screen_to_world(sx, sy)
            assert viewport.world_to_screen(wx, wy) == pytest.approx((sx, sy))

    @pytest.mark.parametrize("delta_y", [-120, -3, 40, 500])
    def test_zoom_keeps_anchor_fixed(self, delta_y):
        viewport = Viewport(Transform(x=50, y=25, k=1.5))
        anchor = (400, 300)
        before = viewport.screen_to_world(*anchor)

        viewport.zoom_at(*anchor, delta_y)

        assert viewport.screen_to_world(*anchor) == pytest.approx(before)

    def test_negative_delta_zooms_in(self):
        viewport = Viewport()

        viewport.zoom_at(0, 0, -200)

        assert viewport.transform.k == pytest.approx(1.1)

    def test_scale_is_clamped(self):
        viewport = Viewport()
        for _ in range(200):
            viewport.zoom_at(100, 100, -1000)
        assert viewport.transform.k == MAX_SCALE

        for _ in range(400):
            viewport.zoom_at(100, 100, 1000)
        assert viewport.transform.k == MIN_SCALE

    def test_zoom_at_limit_does_not_move(self):
        viewport = Viewport(Transform(x=10, y=20, k=MAX_SCALE))

        viewport.zoom_at(500, 500, -100)

        assert viewport.transform == Transform(x=10, y=20, k=MAX_SCALE)

    def test_buttons_scale_by_step_and_clamp(self):
        viewport = Viewport(Transform(x=7, y=8, k=1))

        assert viewport.zoom_in() == Transform(x=7, y=8, k=pytest.approx(1.2))
        assert viewport.zoom_out().k == pytest.approx(1.0)

        viewport = Viewport(Transform(k=4.9))
        assert viewport.zoom_in().k == MAX_SCALE

    def test_pan_tracks_pointer(self):
        viewport = Viewport(Transform(x=10, y=10, k=2))

        viewport.begin_pan(100, 100)
        viewport.pan_to(130, 90)
        viewport.end_pan()
        viewport.pan_to(999, 999)

        assert viewport.transform == Transform(x=40, y=0, k=2)
        assert not viewport.is_panning

    def test_reset(self):
        viewport = Viewport(Transform(x=5, y=5, k=3))

        assert viewport.reset() == IDENTITY


class TestGeometry:
    def test_new_card_is_centred_in_view(self):
        viewport = Viewport(Transform(x=100, y=50, k=2))

        x, y = center_placement(viewport, 1000, 800)

        # screen centre (500, 400) -> world (200, 175), minus half a card
        assert (x, y) == pytest.approx((75, 100))

    def test_drag_divides_by_scale(self):
        assert drag_position(10, 20, 50, -30, 2) == pytest.approx((35, 5))

    def test_resize_is_floored(self):
        assert resize_dimensions(250, 150, -500, -500, 1) == (220, 100)
        assert resize_dimensions(250, 150, 100, 60, 2) == pytest.approx((300, 180))

    def test_committed_size_rounds(self):
        assert committed_size(220.4, 180.6) == (220, 181)

    def test_card_center(self):
        assert card_center(0, 0) == (125, 75)

    def test_segments_skip_broken_references(self):
        thoughts = [
            SimpleNamespace(id="a", x=0, y=0),
            SimpleNamespace(id="b", x=400, y=100),
        ]
        connections = [
            SimpleNamespace(id="c1", from_id="a", to_id="b"),
            SimpleNamespace(id="c2", from_id="a", to_id="gone"),
        ]

        segments = connection_segments(thoughts, connections)

        assert len(segments) == 1
        assert segments[0].connection_id == "c1"
        assert segments[0].start == (125, 75)
        assert segments[0].end == (525, 175)

    def test_grow_position_range(self):
        rng = random.Random(7)
        for _ in range(50):
            x, y = grow_position(100, 200, rng)
            assert x == 450
            assert 100 <= y <= 300
