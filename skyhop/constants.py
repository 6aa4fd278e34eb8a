"""skyhop/constants.py — Tunable values for physics, generation, and scoring.

All distances are in reference units: the game is tuned for a 600px-tall
viewport and every length below is multiplied by ``Viewport.scale`` at use.
"""

# ---------------------------------------------------------------------------
# Viewport
# ---------------------------------------------------------------------------

REFERENCE_HEIGHT = 600.0

# Pyxel window (front end only; the simulation accepts any viewport)
SCREEN_WIDTH = 240
SCREEN_HEIGHT = 320

# ---------------------------------------------------------------------------
# Frame timing
# ---------------------------------------------------------------------------

TARGET_FPS = 60
TARGET_FRAME_MS = 1000.0 / TARGET_FPS
MAX_FRAME_MS = 50.0  # clamp after tab stalls / throttling

# ---------------------------------------------------------------------------
# Player physics
# ---------------------------------------------------------------------------

PLAYER_SPEED = 5.5
JUMP_FORCE = -10.0
GRAVITY = 0.3
FRICTION = 0.85  # horizontal velocity retained per reference frame
JUMP_SAFETY = 0.75  # shrink on the theoretical peak height

PLAYER_WIDTH = 70.0
PLAYER_HEIGHT = 85.0

# ---------------------------------------------------------------------------
# Platforms
# ---------------------------------------------------------------------------

PLATFORM_WIDTH = 85.0
PLATFORM_HEIGHT = 18.0
START_PLATFORM_WIDTH = 130.0
START_PLATFORM_OFFSET = 100.0  # start platform top, measured up from the bottom edge

MOVING_SPEED = 1.8
BREAK_THRESHOLD = 15.0  # scaled ticks from trigger to broken
LANDING_BAND = 15.0  # top-surface band accepted as a landing
SPRING_BAND = 15.0
SPRING_MULTIPLIER = 1.8
SPRING_COMPRESS_MS = 200.0

# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

MIN_GAP = 40.0
MAX_GAP_FACTOR = 0.85  # fraction of max jump height
REACH_FACTOR = 0.4  # fraction of screen width
SAFE_START_HEIGHT = 150.0  # Normal-only zone above the start platform
BREAKING_MIN_HEIGHT = 500.0
DIFFICULTY_HEIGHT = 1000.0
MAX_DIFFICULTY = 0.6
FALLBACK_EXTRA_GAP = 20.0
FALLBACK_REACH_FACTOR = 0.5  # fallback x jitter, fraction of reach
PRUNE_MARGIN = 200.0

# Type roll thresholds (cumulative)
NORMAL_BASE_CHANCE = 0.55
NORMAL_DIFFICULTY_DROP = 0.2
MOVING_CEILING = 0.75
BREAKING_CEILING = 0.88

# ---------------------------------------------------------------------------
# Camera / scoring / termination
# ---------------------------------------------------------------------------

CAMERA_THRESHOLD = 0.4  # fraction of screen height from the top
SCORE_UNIT = 10.0
DEATH_MARGIN = 50.0

# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

MAX_SCORE = 1e9
LEADERBOARD_SIZE = 10
