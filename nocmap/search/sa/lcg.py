"""A portable linear congruential random number generator.

Python's Mersenne Twister is already reproducible across platforms but the
annealing schedule was tuned against this much simpler generator (using the
parameters of example D, p. 40 of Knuth, The Art of Computer Programming,
Vol. 2) and so it is provided to reproduce published annealing trajectories
exactly.
"""

import os

import random


class LCGRandom(random.Random):
    """A :py:class:`random.Random` driven by a linear congruential generator.

    Only :py:meth:`.random` and :py:meth:`.randint` follow the generator's
    documented sequence exactly. Other methods inherited from
    :py:class:`random.Random` (e.g. :py:meth:`~random.Random.shuffle`) are
    built on :py:meth:`.random` and so are also deterministic given a seed.

    Parameters
    ----------
    seed : int or None
        The initial state. If None, a seed is drawn from the operating
        system's entropy source.
    """

    A = 147453245
    C = 226908347
    M = 1073741824

    def __init__(self, seed=None):
        self._state = 0
        super(LCGRandom, self).__init__(seed)

    def seed(self, seed=None, version=2):
        if seed is None:
            seed = int.from_bytes(os.urandom(4), "little")
        self._state = int(seed) % self.M
        self.gauss_next = None

    def getstate(self):
        return self._state

    def setstate(self, state):
        self._state = state

    def _next(self):
        # The sequence is defined with 32-bit signed arithmetic which wraps
        # on overflow, negative results being made positive again.
        state = (self.A * self._state + self.C) & 0xFFFFFFFF
        if state >= 0x80000000:
            state -= 0x100000000
        self._state = abs(state) % self.M
        return self._state

    def random(self):
        """Get the next number from the sequence, in [0, 1)."""
        return self._next() / float(self.M)

    def getrandbits(self, k):
        """Assemble k random bits from the top bits of successive states."""
        if k < 0:
            raise ValueError("number of bits must be non-negative")
        bits = 0
        produced = 0
        while produced < k:
            bits = (bits << 30) | self._next()
            produced += 30
        return bits >> (produced - k)

    def randint(self, a, b):
        """Get a random integer in [a, b], both inclusive."""
        return a + int((b + 1 - a) * self.random())
