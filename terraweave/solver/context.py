"""Per-generation state and settings.

GenerationParams describes what to generate, SolverSettings how hard to try,
and GenerationContext carries the mutable counters and the RNG stream through
every component call. Nothing here is process-wide: each engine owns its own
context and RNG provider.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from terraweave import config
from terraweave.catalog import Biome, LayoutMode
from terraweave.util.rng import RNGProvider, RNGStream, normalize_seed

SOLVER_RNG_DOMAIN = "wfc.solver"


@dataclass(frozen=True)
class GenerationParams:
    """What to generate.

    Attributes:
        width: Grid width in cells.
        height: Grid height in cells.
        biome: Only rules of this biome are used.
        layout: Continuous favours long connected paths, sparse scatters them.
        seed: RNG seed. 0 picks a non-deterministic seed.
    """

    width: int
    height: int
    biome: Biome = Biome.CUSTOM
    layout: LayoutMode = LayoutMode.CONTINUOUS
    seed: int = config.DEFAULT_SEED

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")


@dataclass(frozen=True)
class SolverSettings:
    """Tunable limits and weighting constants.

    Defaults come from ``terraweave.config``; override per engine with
    ``dataclasses.replace(SolverSettings.from_config(), ...)``.
    """

    max_backtrack_depth: int = config.MAX_BACKTRACK_DEPTH
    max_attempts: int = config.MAX_GENERATION_ATTEMPTS
    stall_limit: int = config.STALL_LIMIT
    propagation_step_factor: int = config.PROPAGATION_STEP_FACTOR
    safety_depth_threshold: int = config.SAFETY_DEPTH_THRESHOLD
    min_weight: float = config.MIN_TILE_WEIGHT
    neighbor_bonus: float = config.NEIGHBOR_BONUS
    continuous_path_multiplier: float = config.CONTINUOUS_PATH_MULTIPLIER
    sparse_impassable_multiplier: float = config.SPARSE_IMPASSABLE_MULTIPLIER
    continuous_path_bonus: float = config.CONTINUOUS_PATH_BONUS
    sparse_path_bonus: float = config.SPARSE_PATH_BONUS
    sparse_path_penalty: float = config.SPARSE_PATH_PENALTY
    sparse_path_run_threshold: int = config.SPARSE_PATH_RUN_THRESHOLD

    def __post_init__(self) -> None:
        if self.min_weight <= 0:
            raise ValueError("min_weight must be positive")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.max_backtrack_depth < 0:
            raise ValueError("max_backtrack_depth must not be negative")

    @classmethod
    def from_config(cls) -> SolverSettings:
        """Snapshot the current values of ``terraweave.config``."""
        return cls(
            max_backtrack_depth=config.MAX_BACKTRACK_DEPTH,
            max_attempts=config.MAX_GENERATION_ATTEMPTS,
            stall_limit=config.STALL_LIMIT,
            propagation_step_factor=config.PROPAGATION_STEP_FACTOR,
            safety_depth_threshold=config.SAFETY_DEPTH_THRESHOLD,
            min_weight=config.MIN_TILE_WEIGHT,
            neighbor_bonus=config.NEIGHBOR_BONUS,
            continuous_path_multiplier=config.CONTINUOUS_PATH_MULTIPLIER,
            sparse_impassable_multiplier=config.SPARSE_IMPASSABLE_MULTIPLIER,
            continuous_path_bonus=config.CONTINUOUS_PATH_BONUS,
            sparse_path_bonus=config.SPARSE_PATH_BONUS,
            sparse_path_penalty=config.SPARSE_PATH_PENALTY,
            sparse_path_run_threshold=config.SPARSE_PATH_RUN_THRESHOLD,
        )


@dataclass
class GenerationContext:
    """Mutable state threaded through one generation.

    Attributes:
        biome: Biome being generated.
        layout: Layout mode for the weighting heuristics.
        provider: Owner of every RNG stream used by this generation.
        rng: The solver's stream (cell tie-breaks and tile sampling).
        attempt: 1-based attempt number, 0 before the first attempt.
        backtrack_depth: Backtracks performed in the current attempt.
        total_backtracks: Backtracks performed across all attempts.
        stall_count: Consecutive steps spent with depth above twice the
            resolved cell count.
        step_count: Steps taken in the current attempt.
    """

    biome: Biome
    layout: LayoutMode
    provider: RNGProvider
    rng: RNGStream = field(init=False)
    attempt: int = 0
    backtrack_depth: int = 0
    total_backtracks: int = 0
    stall_count: int = 0
    step_count: int = 0

    def __post_init__(self) -> None:
        self.rng = self.provider.get(SOLVER_RNG_DOMAIN)

    @classmethod
    def create(cls, params: GenerationParams) -> GenerationContext:
        return cls(
            biome=params.biome,
            layout=params.layout,
            provider=RNGProvider(normalize_seed(params.seed)),
        )

    def begin_attempt(self) -> None:
        """Advance to the next attempt and reset the per-attempt counters.

        From the second attempt on, the provider is reseeded from a draw of
        the current solver stream, so a retry explores a different path while
        staying reproducible from the original seed.
        """
        if self.attempt > 0:
            self.provider.reset(self.rng.getrandbits(32))
        self.attempt += 1
        self.backtrack_depth = 0
        self.stall_count = 0
        self.step_count = 0
