"""Tests for skyhop/records.py — validation, leaderboard, player record, ranks, submitter."""

from __future__ import annotations

import json
import logging
import math
from unittest.mock import MagicMock

import pytest

from skyhop.records import (
    RANKS,
    InvalidScoreError,
    Leaderboard,
    PlayerRecord,
    ScoreSubmitter,
    next_rank,
    rank_for,
    rank_progress,
    validate_score,
)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidateScore:
    def test_truncates_float(self):
        assert validate_score(12.9) == 12

    def test_upper_bound_inclusive(self):
        assert validate_score(1e9) == 1_000_000_000

    @pytest.mark.parametrize("bad", [0, -1, 1e9 + 1, math.nan, math.inf])
    def test_out_of_range(self, bad):
        with pytest.raises(InvalidScoreError):
            validate_score(bad)

    @pytest.mark.parametrize("bad", ["100", None, True, [5]])
    def test_not_a_number(self, bad):
        with pytest.raises(InvalidScoreError):
            validate_score(bad)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            validate_score(-5)


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

class TestLeaderboard:
    def test_first_submission_is_first_place(self):
        board = Leaderboard()
        result = board.submit(100)
        assert result.position == 1
        assert result.is_top10

    def test_position_counts_strictly_greater(self):
        board = Leaderboard()
        for s in (500, 300, 300):
            board.submit(s)
        result = board.submit(300)
        assert result.position == 2

    def test_outside_top10(self):
        board = Leaderboard()
        for s in range(100, 1200, 100):
            board.submit(s)
        result = board.submit(50)
        assert result.position == 12
        assert not result.is_top10

    def test_invalid_not_stored(self):
        board = Leaderboard()
        with pytest.raises(InvalidScoreError):
            board.submit(0)
        assert board.entries == []

    def test_top_sorted_and_limited(self):
        board = Leaderboard()
        for s in range(1, 16):
            board.submit(s)
        top = board.top()
        assert len(top) == 10
        assert [e.score for e in top] == list(range(15, 5, -1))

    def test_stats(self):
        board = Leaderboard()
        assert board.stats() == {"total_games": 0, "average_score": 0, "best_score": 0}
        for s in (10, 20, 31):
            board.submit(s)
        assert board.stats() == {"total_games": 3, "average_score": 20, "best_score": 31}

    def test_persists_to_json(self, tmp_path):
        path = tmp_path / "board.json"
        Leaderboard(path).submit(42)
        data = json.loads(path.read_text())
        assert data[0]["score"] == 42
        assert "created_at" in data[0]
        reloaded = Leaderboard(path)
        assert [e.score for e in reloaded.entries] == [42]

    def test_corrupt_file_is_ignored(self, tmp_path, caplog):
        path = tmp_path / "board.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING):
            board = Leaderboard(path)
        assert board.entries == []
        assert "unreadable" in caplog.text


# ---------------------------------------------------------------------------
# Player record
# ---------------------------------------------------------------------------

class TestPlayerRecord:
    def test_new_best(self):
        rec = PlayerRecord()
        assert rec.record_game(50) is True
        assert rec.record_game(30) is False
        assert rec.best == 50
        assert rec.games == 2

    def test_xp_sums_positive_scores(self):
        rec = PlayerRecord()
        for s in (100, 0, 250):
            rec.record_game(s)
        assert rec.total_xp == 350

    def test_persists(self, tmp_path):
        path = tmp_path / "player.json"
        PlayerRecord(path).record_game(77)
        rec = PlayerRecord(path)
        assert rec.best == 77
        assert rec.total_xp == 77
        assert rec.games == 1

    def test_unsaved_game_written_on_save(self, tmp_path):
        path = tmp_path / "player.json"
        rec = PlayerRecord(path)
        assert rec.record_game(40, save=False) is True
        assert rec.best == 40
        assert not path.exists()
        rec.save()
        assert json.loads(path.read_text()) == {"best": 40, "total_xp": 40, "games": 1}


# ---------------------------------------------------------------------------
# Ranks
# ---------------------------------------------------------------------------

class TestRanks:
    def test_thresholds(self):
        assert [r.min_xp for r in RANKS] == [0, 1000, 5000, 40000]

    @pytest.mark.parametrize("xp,name", [
        (0, "Hatchling"),
        (999, "Hatchling"),
        (1000, "Hopper"),
        (4999, "Hopper"),
        (5000, "Skyrunner"),
        (40000, "Sky Master"),
        (10**7, "Sky Master"),
    ])
    def test_rank_for(self, xp, name):
        assert rank_for(xp).name == name

    def test_next_rank(self):
        assert next_rank(0).name == "Hopper"
        assert next_rank(40000) is None

    def test_progress(self):
        assert rank_progress(500) == (50, 500, 1000)
        assert rank_progress(3000) == (50, 3000, 5000)
        assert rank_progress(50000) == (100, 50000, 50000)


# ---------------------------------------------------------------------------
# Submitter
# ---------------------------------------------------------------------------

class TestScoreSubmitter:
    def test_sends_positive_scores(self):
        send = MagicMock(return_value="ok")
        submitter = ScoreSubmitter(send)
        future = submitter.submit(12)
        assert future.result(timeout=5) == "ok"
        submitter.close()
        send.assert_called_once_with(12)

    def test_zero_score_not_sent(self):
        send = MagicMock()
        submitter = ScoreSubmitter(send)
        assert submitter.submit(0) is None
        submitter.close()
        send.assert_not_called()

    def test_failure_is_logged_not_raised(self, caplog):
        def send(score):
            raise ConnectionError("offline")

        submitter = ScoreSubmitter(send)
        with caplog.at_level(logging.WARNING, logger="skyhop.records"):
            submitter(5)
            submitter.close(wait=True)
        assert "background job failed" in caplog.text

    def test_defer_runs_jobs_in_order(self):
        order = []
        submitter = ScoreSubmitter(order.append)
        submitter.defer(order.append, "save")
        submitter.submit(9)
        submitter.close(wait=True)
        assert order == ["save", 9]

    def test_deferred_failure_is_logged(self, caplog):
        def save():
            raise OSError("disk full")

        submitter = ScoreSubmitter(MagicMock())
        with caplog.at_level(logging.WARNING, logger="skyhop.records"):
            future = submitter.defer(save)
            submitter.close(wait=True)
        assert isinstance(future.exception(), OSError)
        assert "disk full" in caplog.text

    def test_feeds_leaderboard(self):
        board = Leaderboard()
        submitter = ScoreSubmitter(board.submit)
        submitter.submit(300).result(timeout=5)
        submitter.close()
        assert [e.score for e in board.entries] == [300]
