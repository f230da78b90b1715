"""
Random number generation utilities.

The engine never reaches for a hidden global generator on its own: every
randomized operation takes an optional ``rng`` argument. When the caller
does not pass one, the process wide Alea generator from this module is
used. It is seeded unpredictably unless ``set_random_seed`` is called.
"""

import uuid
from typing import List, MutableSequence, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """``AleaPRNG`` or a ``random.Random``: floats in [0, 1) plus an in-place shuffle."""

    def random(self) -> float:
        ...

    def shuffle(self, seq: MutableSequence) -> None:
        ...


# Global PRNG instance
_prng = None


def set_random_seed(seed: str) -> None:
    """
    Reseed the process wide Alea PRNG.

    Args:
        seed: Seed string to use
    """
    from ..core.alea_prng import AleaPRNG

    global _prng
    _prng = AleaPRNG(seed)


def get_prng():
    """
    Get the process wide Alea PRNG instance, creating an unseeded one on first use.

    Returns:
        AleaPRNG instance
    """
    from ..core.alea_prng import AleaPRNG

    global _prng
    if _prng is None:
        _prng = AleaPRNG(uuid.uuid4().hex)
    return _prng


def resolve_rng(rng: Optional[RandomSource]) -> RandomSource:
    """Return ``rng`` or the process wide generator."""
    return rng if rng is not None else get_prng()


def shuffled(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Return a copy of ``items`` shuffled by ``rng`` (or the process wide generator)."""
    result = list(items)
    resolve_rng(rng).shuffle(result)
    return result
