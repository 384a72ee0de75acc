"""Deterministic random number generation with isolated streams.

Every engine owns one RNGProvider. Each consumer (cell tie-breaking and tile
sampling, the heuristic adjustment source, benchmarks) gets its own random
stream derived from the provider's master seed. This ensures that:

1. A generation is fully deterministic from the same master seed
2. Changes to one consumer's random draws don't shift another's sequence
3. Reseeding the provider between attempts keeps cached stream references valid

Usage:
    provider = RNGProvider(master_seed=42)
    solver_rng = provider.get("wfc.solver")
    solver_rng.randrange(10)

    # Later, start a new attempt from a fresh seed; solver_rng keeps working
    provider.reset(solver_rng.getrandbits(32))

Domain naming convention (hierarchical):
    - "wfc.solver", "wfc.adjustment"
    - "bench.grid"

There is deliberately no module-level provider: concurrent engines never share
random state.
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

if TYPE_CHECKING:
    from terraweave.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """Proxy that delegates to the current RNG for a domain.

    This wrapper allows callers to cache a reference that survives reset().
    All method calls are forwarded to the underlying Random instance,
    which is looked up fresh each time from the provider.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    @property
    def domain(self) -> str:
        return self._domain

    def _rng(self) -> Random:
        """Get the current underlying RNG."""
        return self._provider._get_raw(self._domain)

    # -------------------------------------------------------------------------
    # Random method proxies
    # -------------------------------------------------------------------------

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng().random()

    def randint(self, a: int, b: int) -> int:
        """Return random integer N such that a <= N <= b."""
        return self._rng().randint(a, b)

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        """Return randomly selected element from range(start, stop, step)."""
        return self._rng().randrange(start, stop, step)

    def choice(self, seq: Sequence[T]) -> T:
        """Return random element from non-empty sequence."""
        return self._rng().choice(seq)

    def shuffle(self, x: list) -> None:
        """Shuffle list x in place."""
        self._rng().shuffle(x)

    def uniform(self, a: float, b: float) -> float:
        """Return random float N such that a <= N <= b."""
        return self._rng().uniform(a, b)

    def getrandbits(self, k: int) -> int:
        """Return an integer with k random bits."""
        return self._rng().getrandbits(k)


# Type alias for functions that accept either Random or RNGStream.
# Use this in type hints: `def foo(rng: RNG) -> int:`
RNG: TypeAlias = Random | RNGStream


def normalize_seed(seed: RandomSeed) -> RandomSeed:
    """Map the public "0 means random" convention onto provider seeds."""
    if seed == 0:
        return None
    return seed


class RNGProvider:
    """Provides isolated RNG streams for different solver consumers.

    Each domain gets its own Random instance derived deterministically
    from the master seed. Domains are identified by string names.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Get an RNG stream for the named domain.

        Returns a proxy object that can be cached. The proxy automatically
        uses the current underlying RNG, even after reset().

        Args:
            domain: Hierarchical name like "wfc.solver" or "wfc.adjustment"

        Returns:
            An RNGStream proxy with the same interface as Random
        """
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        """Get the raw Random instance for a domain (internal use)."""
        if domain not in self._streams:
            if self._master_seed is None:
                # No seed: use system entropy for non-deterministic behavior
                self._streams[domain] = Random()
            else:
                # Use crc32 instead of hash() - hash() is randomized per Python
                # session via PYTHONHASHSEED, which would break cross-session
                # determinism
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reset all streams with a new master seed.

        Existing RNGStream proxies remain valid and will use the new streams.

        Args:
            master_seed: New master seed for all streams
        """
        self._master_seed = master_seed
        self._streams.clear()
        # Note: _proxies are kept - they'll get fresh RNGs on next access
