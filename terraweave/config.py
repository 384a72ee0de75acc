"""
Configuration constants.

Centralizes all magic numbers and configuration values used by the solver.
Organized by functional area for easy maintenance. The solver reads them
through SolverSettings.from_config(), so a caller can override any of them
per engine without touching module state.
"""

# =============================================================================
# GENERAL
# =============================================================================

# 0 means "pick a non-deterministic seed"
DEFAULT_SEED = 0

# Compatibility list entry that admits every tile
WILDCARD = "*"

# =============================================================================
# SEARCH LIMITS
# =============================================================================

# Backtracks allowed within one attempt before it is abandoned
MAX_BACKTRACK_DEPTH = 200

# Full restarts (fresh grid, reseeded RNG) before generation gives up
MAX_GENERATION_ATTEMPTS = 3

# Consecutive steps with backtrack depth above twice the resolved cell count
# before an attempt is considered stalled
STALL_LIMIT = 10

# Propagation stops (softly) after cell_count * this many dequeues
PROPAGATION_STEP_FACTOR = 10

# =============================================================================
# WEIGHTING
# =============================================================================

# Lowest weight or score a surviving candidate can have
MIN_TILE_WEIGHT = 0.1

# Added once per resolved orthogonal neighbour
NEIGHBOR_BONUS = 1.5

# Layout multipliers
CONTINUOUS_PATH_MULTIPLIER = 1.3
SPARSE_IMPASSABLE_MULTIPLIER = 1.2

# Path connectivity terms, per resolved path neighbour
CONTINUOUS_PATH_BONUS = 0.3
SPARSE_PATH_BONUS = 0.1
SPARSE_PATH_PENALTY = -0.2  # Flat, once the run threshold is exceeded
SPARSE_PATH_RUN_THRESHOLD = 2

# =============================================================================
# SAFETY LOOKAHEAD
# =============================================================================

# Above this backtrack depth only the safer half of candidates is sampled
SAFETY_DEPTH_THRESHOLD = 20

# =============================================================================
# DIAGNOSTICS
# =============================================================================

LOW_ENTROPY_THRESHOLD = 2
LOW_ENTROPY_REPORT_LIMIT = 5
RESTRICTIVE_TILE_REPORT_LIMIT = 3

# Tiles described in the start-up compatibility overview
COMPATIBILITY_OVERVIEW_LIMIT = 5

# =============================================================================
# COMMAND LINE
# =============================================================================

CLI_DEFAULT_WIDTH = 12
CLI_DEFAULT_HEIGHT = 8
