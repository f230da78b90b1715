"""
Seedable Alea pseudo random generator.

Based on Johannes Baagøe's Alea algorithm. Construction runs that are
driven by an ``AleaPRNG`` with a fixed seed are fully reproducible, which
is what the tests rely on to force specific segment choices.
"""

from typing import Any, MutableSequence


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def _make_mash():
    mash_n = 0xEFC8249D

    def mash(data):
        nonlocal mash_n
        for char in str(data):
            mash_n += ord(char)
            h = 0.02519603282416938 * mash_n
            mash_n = _uint32(h)
            h -= mash_n
            h *= mash_n
            mash_n = _uint32(h)
            h -= mash_n
            mash_n += h * 0x100000000  # 2^32
        return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

    return mash


class AleaPRNG:
    """Alea generator with the ``random()`` and ``shuffle()`` methods of ``random.Random``."""

    def __init__(self, seed: Any):
        """Initialize with a seed string, number, or iterable of those."""
        self.seed = seed
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _make_mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 = (self.s0 - mash(part)) % 1.0
            self.s1 = (self.s1 - mash(part)) % 1.0
            self.s2 = (self.s2 - mash(part)) % 1.0

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def shuffle(self, seq: MutableSequence) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(seq) - 1, 0, -1):
            j = int(self.random() * (i + 1))
            seq[i], seq[j] = seq[j], seq[i]
