"""Tests for skyhop/main.py — input mapping and session-end wiring (no window)."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

from skyhop.main import GAMEOVER_INPUT_DELAY, App, _read_input
from skyhop.physics import InputState
from skyhop.records import Leaderboard, PlayerRecord, ScoreSubmitter


def _press(mock_pyxel, *keys) -> None:
    held = {getattr(mock_pyxel, k) for k in keys}
    mock_pyxel.btn.side_effect = lambda key: key in held


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

class TestReadInput:
    @patch("skyhop.main.pyxel")
    def test_nothing_held(self, mock_pyxel):
        _press(mock_pyxel)
        assert _read_input() == InputState()

    @patch("skyhop.main.pyxel")
    def test_arrow_keys(self, mock_pyxel):
        _press(mock_pyxel, "KEY_LEFT")
        assert _read_input() == InputState(left=True)

    @patch("skyhop.main.pyxel")
    def test_wasd_keys(self, mock_pyxel):
        _press(mock_pyxel, "KEY_D")
        assert _read_input() == InputState(right=True)

    @patch("skyhop.main.pyxel")
    def test_touch_left_half(self, mock_pyxel):
        _press(mock_pyxel, "MOUSE_BUTTON_LEFT")
        mock_pyxel.mouse_x = 10
        assert _read_input() == InputState(left=True)

    @patch("skyhop.main.pyxel")
    def test_touch_overrides_keys(self, mock_pyxel):
        _press(mock_pyxel, "MOUSE_BUTTON_LEFT", "KEY_LEFT")
        mock_pyxel.mouse_x = 230
        assert _read_input() == InputState(right=True)


# ---------------------------------------------------------------------------
# Session end
# ---------------------------------------------------------------------------

class TestSessionEnd:
    def _app(self) -> App:
        app = App.__new__(App)
        app.record = PlayerRecord()
        app.leaderboard = Leaderboard()
        app.submitter = MagicMock()
        app.new_best = False
        app.gameover_timer = 0
        return app

    def test_records_and_submits(self):
        app = self._app()
        app._on_session_end(250)
        assert app.record.best == 250
        assert app.new_best is True
        assert app.gameover_timer == GAMEOVER_INPUT_DELAY
        app.submitter.defer.assert_called_once_with(app.record.save)
        app.submitter.submit.assert_called_once_with(250)

    def test_record_file_written_on_worker(self, tmp_path):
        path = tmp_path / "player.json"
        app = self._app()
        app.record = PlayerRecord(path)
        app.submitter = ScoreSubmitter(app.leaderboard.submit)
        threads = []
        with patch.object(PlayerRecord, "save", autospec=True) as save:
            save.side_effect = lambda rec: threads.append(threading.current_thread().name)
            app._on_session_end(120)
            app.submitter.close(wait=True)
        save.assert_called_once_with(app.record)
        assert threads[0].startswith("skyhop-submit")
        assert threads[0] != threading.current_thread().name
        assert not path.exists()
        assert [e.score for e in app.leaderboard.entries] == [120]

    def test_saved_record_reloads(self, tmp_path):
        path = tmp_path / "player.json"
        app = self._app()
        app.record = PlayerRecord(path)
        app.submitter = ScoreSubmitter(app.leaderboard.submit)
        app._on_session_end(80)
        app.submitter.close(wait=True)
        assert PlayerRecord(path).best == 80

    def test_not_new_best(self):
        app = self._app()
        app._on_session_end(250)
        app._on_session_end(100)
        assert app.new_best is False
        assert app.record.games == 2
