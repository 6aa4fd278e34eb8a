"""Tests for skyhop/simulation.py — Session, session_step, Game, FrameLoop."""

from __future__ import annotations

import logging

import pytest

from skyhop.constants import MAX_FRAME_MS, TARGET_FRAME_MS
from skyhop.invariants import platform_bound
from skyhop.physics import InputState, Viewport
from skyhop.platforms import PlatformKind
from skyhop.simulation import (
    FrameLoop,
    Game,
    GameState,
    LandedEvent,
    ScoreEvent,
    SessionOverEvent,
    create_session,
    session_step,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeClock:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


def _session(seed: int = 1):
    return create_session(Viewport(400, 600), seed=seed, clock=FakeClock())


def _kill(session) -> None:
    """Drop the player far below the window."""
    session.player.physics.y = session.camera.y + 5000
    session.player.physics.vy = 0.0


# ---------------------------------------------------------------------------
# create_session
# ---------------------------------------------------------------------------

class TestCreateSession:
    def test_defaults(self):
        s = _session()
        assert s.running
        assert s.score == 0
        assert s.frame == 0
        assert s.camera.y == 0.0
        assert s.platforms[0].serial == 0
        assert s.max_platforms == len(s.platforms)
        assert s.placements > 0

    def test_player_starts_above_start_platform(self):
        s = _session()
        start = s.platforms[0]
        assert s.player.bottom < start.y
        assert start.x < s.player.physics.x + s.player.width / 2 < start.x + start.width

    def test_same_seed_same_ladder(self):
        a = _session(seed=7)
        b = _session(seed=7)
        assert [(p.x, p.y) for p in a.platforms] == [(p.x, p.y) for p in b.platforms]

    def test_different_seed_different_ladder(self):
        a = _session(seed=7)
        b = _session(seed=8)
        assert [(p.x, p.y) for p in a.platforms] != [(p.x, p.y) for p in b.platforms]


# ---------------------------------------------------------------------------
# session_step
# ---------------------------------------------------------------------------

class TestSessionStep:
    def test_first_landing_on_start_platform(self):
        s = _session()
        landed = []
        for _ in range(30):
            for e in session_step(s, InputState(), TARGET_FRAME_MS):
                if isinstance(e, LandedEvent):
                    landed.append(e)
        assert landed
        assert landed[0].kind == PlatformKind.NORMAL
        assert s.landings >= 1
        assert s.running

    def test_frame_and_elapsed_advance(self):
        s = _session()
        session_step(s, InputState(), TARGET_FRAME_MS)
        session_step(s, InputState(), 1000.0)
        assert s.frame == 2
        assert s.elapsed_ms == pytest.approx(TARGET_FRAME_MS + MAX_FRAME_MS)

    def test_fall_out_ends_session(self):
        s = _session()
        _kill(s)
        events = session_step(s, InputState(), TARGET_FRAME_MS)
        assert not s.running
        assert isinstance(events[-1], SessionOverEvent)
        assert events[-1].score == s.score

    def test_step_after_end_is_noop(self):
        s = _session()
        _kill(s)
        session_step(s, InputState(), TARGET_FRAME_MS)
        frame = s.frame
        assert session_step(s, InputState(), TARGET_FRAME_MS) == []
        assert s.frame == frame

    def test_score_rises_with_camera(self):
        s = _session()
        s.player.physics.y = -1000.0
        events = session_step(s, InputState(), TARGET_FRAME_MS)
        assert s.score > 0
        assert any(isinstance(e, ScoreEvent) for e in events)
        assert s.peak_height > 1000

    def test_score_never_decreases(self):
        s = _session()
        s.player.physics.y = -1000.0
        session_step(s, InputState(), TARGET_FRAME_MS)
        best = s.score
        scores = []
        for _ in range(120):
            session_step(s, InputState(), TARGET_FRAME_MS)
            scores.append(s.score)
        assert all(b >= a for a, b in zip(scores, scores[1:]))
        assert scores[0] >= best

    def test_old_platforms_pruned(self):
        s = _session()
        s.player.physics.y = -5000.0
        session_step(s, InputState(), TARGET_FRAME_MS)
        session_step(s, InputState(), TARGET_FRAME_MS)
        assert 0 not in {p.serial for p in s.platforms}
        assert len(s.platforms) <= platform_bound(s.generator)
        assert max(p.y for p in s.platforms) < s.camera.y + 800 + 1e-9

    def test_ladder_extends_above_camera(self):
        s = _session()
        s.player.physics.y = -3000.0
        session_step(s, InputState(), TARGET_FRAME_MS)
        session_step(s, InputState(), TARGET_FRAME_MS)
        assert min(p.y for p in s.platforms) <= s.camera.y

    def test_zero_dt_does_not_move(self):
        s = _session()
        y = s.player.physics.y
        session_step(s, InputState(right=True), 0.0)
        assert s.player.physics.y == y

    def test_due_spring_release_runs_during_step(self):
        clock = FakeClock()
        s = create_session(Viewport(400, 600), seed=1, clock=clock)
        released = []
        s.timers.schedule(200, lambda: released.append(True))
        session_step(s, InputState(), TARGET_FRAME_MS)
        assert released == []
        clock.t = 0.2
        session_step(s, InputState(), TARGET_FRAME_MS)
        assert released == [True]
        assert len(s.timers) == 0

    def test_initial_placements_recorded(self):
        s = _session()
        assert len(s.last_placements) == s.placements
        assert all(p.anchor is not None for p in s.last_placements)

    def test_last_placements_follow_each_step(self):
        s = _session()
        s.player.physics.y = -3000.0
        session_step(s, InputState(), TARGET_FRAME_MS)
        session_step(s, InputState(), TARGET_FRAME_MS)
        placed = s.last_placements
        assert placed
        assert {p.platform.serial for p in placed} <= {p.serial for p in s.platforms}
        session_step(s, InputState(), TARGET_FRAME_MS)
        assert all(p not in s.last_placements for p in placed)

    def test_no_placements_after_end(self):
        s = _session()
        _kill(s)
        session_step(s, InputState(), TARGET_FRAME_MS)
        session_step(s, InputState(), TARGET_FRAME_MS)
        assert s.last_placements == []


# ---------------------------------------------------------------------------
# Game state machine
# ---------------------------------------------------------------------------

class TestGame:
    def _game(self, cb=None) -> Game:
        return Game(Viewport(400, 600), on_session_end=cb, seed=3, clock=FakeClock())

    def test_starts_idle(self):
        game = self._game()
        assert game.state == GameState.IDLE
        assert game.score == 0
        assert game.step(InputState(), TARGET_FRAME_MS) == []

    def test_start_runs(self):
        game = self._game()
        game.start()
        assert game.state == GameState.RUNNING
        assert game.session is not None

    def test_end_reports_score_once(self):
        calls = []
        game = self._game(calls.append)
        game.start()
        game.session.player.physics.y = -1000.0
        game.step(InputState(), TARGET_FRAME_MS)
        score = game.score
        _kill(game.session)
        game.step(InputState(), TARGET_FRAME_MS)
        assert game.state == GameState.OVER
        assert calls == [score]
        game.step(InputState(), TARGET_FRAME_MS)
        game.to_menu()
        assert calls == [score]
        assert game.state == GameState.IDLE

    def test_restart_after_over(self):
        calls = []
        game = self._game(calls.append)
        game.start()
        _kill(game.session)
        game.step(InputState(), TARGET_FRAME_MS)
        game.start()
        assert game.state == GameState.RUNNING
        assert game.score == 0
        _kill(game.session)
        game.step(InputState(), TARGET_FRAME_MS)
        assert calls == [0, 0]
        assert game.sessions_played == 2

    def test_to_menu_while_running_reports(self):
        calls = []
        game = self._game(calls.append)
        game.start()
        game.to_menu()
        assert calls == [0]
        assert game.state == GameState.IDLE

    def test_start_while_running_reports_previous(self):
        calls = []
        game = self._game(calls.append)
        game.start()
        game.session.player.physics.y = -1000.0
        game.step(InputState(), TARGET_FRAME_MS)
        score = game.score
        assert score > 0
        game.start()
        assert calls == [score]
        assert game.sessions_played == 1
        assert game.state == GameState.RUNNING
        assert game.score == 0
        _kill(game.session)
        game.step(InputState(), TARGET_FRAME_MS)
        assert calls == [score, 0]
        assert game.sessions_played == 2

    def test_failing_handler_is_logged(self, caplog):
        def boom(score):
            raise RuntimeError("leaderboard down")

        game = self._game(boom)
        game.start()
        _kill(game.session)
        with caplog.at_level(logging.ERROR, logger="skyhop.simulation"):
            game.step(InputState(), TARGET_FRAME_MS)
        assert game.state == GameState.OVER
        assert "session end handler failed" in caplog.text

    def test_seeded_games_repeat(self):
        a = self._game()
        b = self._game()
        sa = a.start()
        sb = b.start()
        assert [(p.x, p.y) for p in sa.platforms] == [(p.x, p.y) for p in sb.platforms]

    def test_explicit_seed(self):
        game = self._game()
        s1 = game.start(seed=99)
        layout = [(p.x, p.y) for p in s1.platforms]
        s2 = game.start(seed=99)
        assert [(p.x, p.y) for p in s2.platforms] == layout


class TestResize:
    def test_resize_keeps_session(self):
        game = Game(Viewport(400, 600), seed=1, clock=FakeClock())
        session = game.start()
        for _ in range(10):
            game.step(InputState(), TARGET_FRAME_MS)
        frame = session.frame
        game.resize(200, 300)
        assert game.session is session
        assert session.frame == frame
        assert session.viewport.scale == pytest.approx(0.5)
        assert all(p.scale == pytest.approx(0.5) for p in session.platforms)

    def test_resize_pulls_player_on_screen(self):
        game = Game(Viewport(400, 600), seed=1, clock=FakeClock())
        session = game.start()
        session.player.physics.x = 350.0
        game.resize(200, 300)
        assert session.player.physics.x == pytest.approx(200 - session.player.width)

    def test_resize_without_session(self):
        game = Game(Viewport(400, 600), clock=FakeClock())
        game.resize(100, 200)
        assert game.viewport.width == 100


# ---------------------------------------------------------------------------
# Frame loop
# ---------------------------------------------------------------------------

class TestFrameLoop:
    def test_tick_uses_clock_delta(self):
        clock = FakeClock()
        game = Game(Viewport(400, 600), seed=1, clock=clock)
        game.start()
        loop = FrameLoop(game, clock=clock)
        loop.tick()
        assert game.session.elapsed_ms == 0.0
        clock.t = 0.016
        loop.tick()
        assert game.session.elapsed_ms == pytest.approx(16.0)
        clock.t += 1.0
        loop.tick()
        assert game.session.elapsed_ms == pytest.approx(16.0 + MAX_FRAME_MS)
        assert game.session.frame == 3

    def test_tick_reads_input_source(self):
        clock = FakeClock()
        game = Game(Viewport(400, 600), seed=1, clock=clock)
        game.start()
        loop = FrameLoop(game, clock=clock, input_source=lambda: InputState(left=True))
        loop.tick()
        assert game.session.player.physics.vx < 0
        assert game.session.player.physics.facing == -1

    def test_run_fixed(self):
        game = Game(Viewport(400, 600), seed=1, clock=FakeClock())
        game.start()
        frames = FrameLoop(game).run_fixed([TARGET_FRAME_MS] * 10)
        assert len(frames) == 10
        assert game.session.frame == 10

    def test_idle_game_does_not_step(self):
        game = Game(Viewport(400, 600), clock=FakeClock())
        frames = FrameLoop(game).run_fixed([TARGET_FRAME_MS] * 3)
        assert frames == [[], [], []]
        assert game.poll_effects() == 0
