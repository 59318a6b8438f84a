GRID_ROWS = 8
GRID_COLS = 8

# Difficulty picks how many of the six sphere types spawn, never fewer than this.
MIN_SPHERE_TYPES = 3

# Points per cleared tile before pattern multipliers.
SCORE_UNIT = 100

DEFAULT_TIME_LIMIT = 60.0
DEFAULT_MOVES = 30
MIN_TIME_LIMIT = 30.0
MIN_MOVES = 15
LEVEL_TARGET_BASE = 1000

# Power-ups
MAX_AVAILABLE_POWER_UPS = 3
TIME_BOOST_SECONDS = 15.0
MULTIPLIER_DURATION = 30.0
MULTIPLIER_FACTOR = 2.0
FREEZE_DURATION = 10.0
LIGHTNING_POINTS_PER_TILE = 50
TRANSFORM_POINTS_PER_TILE = 25
BOMB_POINTS_PER_TILE = 75
BOMB_RADIUS = 1

# Upper bound on layouts tried when filling a fresh board.
POPULATE_MAX_ATTEMPTS = 200
