"""Tests for skyhop/camera.py — one-way follow, score, fall-out check."""

from __future__ import annotations

import pytest

from skyhop.camera import Camera, camera_update, fell_out, score_for
from skyhop.physics import Viewport
from skyhop.player import create_player


VP = Viewport(400, 600)


class TestFollow:
    def test_holds_while_player_below_threshold(self):
        cam = Camera()
        player = create_player(0, 300)
        assert camera_update(cam, player, VP) == 0.0
        assert cam.y == 0.0

    def test_scrolls_up_to_threshold(self):
        cam = Camera()
        player = create_player(0, 200)
        moved = camera_update(cam, player, VP)
        assert moved == pytest.approx(40)
        assert cam.y == pytest.approx(-40)
        # Player now sits exactly on the line
        assert player.physics.y - cam.y == pytest.approx(240)

    def test_never_scrolls_down(self):
        cam = Camera(y=-500)
        player = create_player(0, 1000)
        camera_update(cam, player, VP)
        assert cam.y == -500

    def test_to_screen(self):
        cam = Camera(y=-500)
        assert cam.to_screen(-300) == 200


class TestScore:
    def test_score_is_floor_of_travel(self):
        assert score_for(Camera(y=-129), VP) == 12
        assert score_for(Camera(y=-130), VP) == 13

    def test_score_scales_with_viewport(self):
        assert score_for(Camera(y=-100), Viewport(200, 300)) == 20

    def test_no_negative_score(self):
        assert score_for(Camera(y=50), VP) == 0

    def test_zero_scale_is_zero(self):
        assert score_for(Camera(y=-100), Viewport(200, 0)) == 0


class TestFellOut:
    def test_inside_window(self):
        assert not fell_out(Camera(), create_player(0, 600), VP)

    def test_margin_inclusive(self):
        assert not fell_out(Camera(), create_player(0, 650), VP)

    def test_past_margin(self):
        assert fell_out(Camera(), create_player(0, 650.5), VP)

    def test_relative_to_camera(self):
        cam = Camera(y=-1000)
        assert not fell_out(cam, create_player(0, -400), VP)
        assert fell_out(cam, create_player(0, -340), VP)
