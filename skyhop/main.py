"""skyhop/main.py — Pyxel front end and entry point.

Three screens: TITLE, GAMEPLAY, GAME_OVER. The Game state machine owns the
session; this module only reads input, draws, and wires the session-end
callback to the local records.
"""

import logging
import time
from pathlib import Path

import pyxel

from skyhop import renderer
from skyhop.constants import SCREEN_HEIGHT, SCREEN_WIDTH, TARGET_FPS
from skyhop.debug import DEBUG
from skyhop.physics import InputState, Viewport, touch_to_input
from skyhop.records import Leaderboard, PlayerRecord, ScoreSubmitter, rank_for, rank_progress
from skyhop.simulation import FrameLoop, Game, GameState

logger = logging.getLogger(__name__)

DATA_DIR = Path.home() / ".skyhop"
GAMEOVER_INPUT_DELAY = 45  # frames before restart is accepted


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------

def _read_input() -> InputState:
    """Map keys (arrows, A/D) and a held mouse/touch to InputState."""
    if pyxel.btn(pyxel.MOUSE_BUTTON_LEFT):
        return touch_to_input(pyxel.mouse_x, SCREEN_WIDTH)
    return InputState(
        left=pyxel.btn(pyxel.KEY_LEFT) or pyxel.btn(pyxel.KEY_A),
        right=pyxel.btn(pyxel.KEY_RIGHT) or pyxel.btn(pyxel.KEY_D),
    )


def _start_pressed() -> bool:
    return (pyxel.btnp(pyxel.KEY_SPACE)
            or pyxel.btnp(pyxel.KEY_RETURN)
            or pyxel.btnp(pyxel.MOUSE_BUTTON_LEFT))


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

class App:
    def __init__(self):
        pyxel.init(SCREEN_WIDTH, SCREEN_HEIGHT, title="Skyhop", fps=TARGET_FPS)
        pyxel.mouse(True)
        renderer.init_palette()

        self.record = PlayerRecord(DATA_DIR / "player.json")
        self.leaderboard = Leaderboard(DATA_DIR / "leaderboard.json")
        self.submitter = ScoreSubmitter(self.leaderboard.submit)
        self.new_best = False
        self.gameover_timer = 0

        self.game = Game(
            Viewport(SCREEN_WIDTH, SCREEN_HEIGHT),
            on_session_end=self._on_session_end,
        )
        self.loop = FrameLoop(self.game, clock=time.perf_counter, input_source=_read_input)

        pyxel.run(self.update, self.draw)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def update(self):
        if pyxel.btnp(pyxel.KEY_Q):
            self.submitter.close(wait=False)
            pyxel.quit()

        state = self.game.state
        if state == GameState.IDLE:
            self._update_title()
        elif state == GameState.RUNNING:
            self._update_gameplay()
        elif state == GameState.OVER:
            self._update_game_over()

    def draw(self):
        pyxel.cls(0)

        state = self.game.state
        if state == GameState.IDLE:
            self._draw_title()
        elif state == GameState.RUNNING:
            self._draw_gameplay()
        elif state == GameState.OVER:
            self._draw_gameplay()
            self._draw_game_over()

    # ------------------------------------------------------------------
    # Session end
    # ------------------------------------------------------------------

    def _on_session_end(self, score: int) -> None:
        self.new_best = self.record.record_game(score, save=False)
        self.gameover_timer = GAMEOVER_INPUT_DELAY
        # Disk and leaderboard I/O stay off the frame thread.
        self.submitter.defer(self.record.save)
        self.submitter.submit(score)

    def _start(self):
        self.new_best = False
        self.game.start()
        # Restart the clock so the title screen time is not one giant delta.
        self.loop = FrameLoop(self.game, clock=time.perf_counter, input_source=_read_input)

    # ------------------------------------------------------------------
    # TITLE
    # ------------------------------------------------------------------

    def _update_title(self):
        if _start_pressed():
            self._start()

    def _draw_title(self):
        cx = SCREEN_WIDTH // 2
        pyxel.text(cx - 22, 80, "S K Y H O P", 12)
        pyxel.text(cx - 46, 96, "Bounce as high as you can", 12)

        rank = rank_for(self.record.total_xp)
        percent, xp, target = rank_progress(self.record.total_xp)
        pyxel.text(cx - 40, 140, f"BEST: {self.record.best}", 12)
        pyxel.text(cx - 40, 150, f"RANK: {rank.name.upper()}", 12)
        pyxel.text(cx - 40, 160, f"XP:   {xp}/{target} ({percent}%)", 12)

        if pyxel.frame_count % 60 < 40:
            pyxel.text(cx - 24, 220, "PRESS  START", 12)
        pyxel.text(cx - 58, 240, "ARROWS / TAP LEFT-RIGHT", 12)

    # ------------------------------------------------------------------
    # GAMEPLAY
    # ------------------------------------------------------------------

    def _update_gameplay(self):
        self.loop.tick()

    def _draw_gameplay(self):
        session = self.game.session
        if session is None:
            return
        pyxel.camera(0, int(session.camera.y))
        renderer.draw_platforms(
            session.platforms, session.camera.y, session.viewport.height, pyxel.frame_count,
        )
        renderer.draw_player(session.player, pyxel.frame_count)

        # HUD (screen space)
        pyxel.camera()
        renderer.draw_hud(session.score, self.record.best)
        if DEBUG:
            renderer.draw_debug_hud(session)

    # ------------------------------------------------------------------
    # GAME OVER
    # ------------------------------------------------------------------

    def _update_game_over(self):
        if self.gameover_timer > 0:
            self.gameover_timer -= 1
            return
        if _start_pressed():
            self._start()
        elif pyxel.btnp(pyxel.KEY_ESCAPE) or pyxel.btnp(pyxel.KEY_M):
            self.game.to_menu()

    def _draw_game_over(self):
        cx = SCREEN_WIDTH // 2
        cy = SCREEN_HEIGHT // 2
        pyxel.rect(cx - 60, cy - 30, 120, 64, 12)
        pyxel.text(cx - 20, cy - 22, "GAME  OVER", 7)
        pyxel.text(cx - 36, cy - 6, f"SCORE: {self.game.score}", 11)
        if self.new_best:
            pyxel.text(cx - 36, cy + 4, "NEW BEST!", 9)
        else:
            pyxel.text(cx - 36, cy + 4, f"BEST:  {self.record.best}", 11)

        if self.gameover_timer == 0 and pyxel.frame_count % 60 < 40:
            pyxel.text(cx - 24, cy + 20, "PRESS  START", 11)


def main() -> None:
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    App()


if __name__ == "__main__":
    main()
