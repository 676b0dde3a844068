"""Application-level constants for rainbowtree."""

# ============================================================================
# Application identity
# ============================================================================

APP_NAME = "rainbowtree"
DEBUG_ENV_VAR = "RAINBOWTREE_DEBUG"

# ============================================================================
# Relay timing
# ============================================================================

# Palette rotation period. Much shorter periods change colours faster than
# the wrapped program produces lines.
DEFAULT_COLOR_INTERVAL_MS = 3000

# Pacing: delay when a draw over [0, 999) falls below the threshold.
PACING_DRAW_UPPER = 999
DEFAULT_PACING_THRESHOLD = 100
PACING_STEP_MS = 5
PACING_MIN_STEPS = 1
PACING_MAX_STEPS = 19

# Upper bound for the post-exit wait on the host "command running" flag.
COMMAND_RUNNING_WAIT_SEC = 0.05

# ============================================================================
# Commands
# ============================================================================

DEFAULT_TREE_COMMAND = ("tree",)
DEFAULT_PROMPT = "> "
DEFAULT_RICKROLL_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
