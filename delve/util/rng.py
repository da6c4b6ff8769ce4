"""Deterministic random number generation with isolated streams.

Level generation threads a single random stream through every step of a
builder chain. Reproducibility depends on every consumer drawing from it in
exactly the same order on every run, so nothing in the generators keeps
ambient random state: each step receives the stream as an argument.

Streams for whole levels come from an RNGProvider, which derives one
independent stream per domain from a master seed. Generating level 3 twice,
or generating level 2 first, yields the same level 3.

Usage:
    stream = RNGProvider(config.RANDOM_SEED).get("map.level.3")
    chain.build_map(stream)

    # A step that runs a nested chain forks a child stream. The fork costs
    # exactly one draw from the parent, so the parent's order is unaffected
    # by whatever the child consumes.
    child = fork(rng, "map.cave_transition")

Domain naming convention (hierarchical):
    - "map.level.<depth>"
    - "map.cave_transition", "map.dragons_lair"
    - "map.spawn_noise"
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from delve.types import RandomSeed

# What every builder step draws from. Tests may pass any object with the
# same randint/randrange/getrandbits methods.
type RNG = Random


class RNGProvider:
    """Hands out one Random per generation domain.

    Each domain's stream is seeded from the master seed and the domain name,
    so it never depends on what other domains have drawn. Without a master
    seed every stream comes from system entropy.
    """

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}

    def get(self, domain: str) -> Random:
        """Get the stream for a domain such as "map.level.3".

        Repeated calls for one domain return the same, partly consumed,
        stream.
        """
        stream = self._streams.get(domain)
        if stream is None:
            if self._master_seed is None:
                stream = Random()
            else:
                stream = Random(derive_seed(self._master_seed, domain))
            self._streams[domain] = stream
        return stream


def derive_seed(master_seed: int | str, domain: str) -> int:
    """Derive a stable integer seed for a domain from a master seed.

    Uses crc32 rather than hash(), which is salted per interpreter session.
    """
    return zlib.crc32(f"{master_seed}:{domain}".encode())


def fork(rng: RNG, domain: str) -> Random:
    """Create an isolated child stream seeded from one draw of the parent.

    Args:
        rng: The parent stream. Exactly one value is drawn from it.
        domain: Name mixed into the child seed so sibling forks differ.

    Returns:
        A new Random instance independent of the parent from here on.
    """
    return Random(derive_seed(rng.getrandbits(32), domain))
