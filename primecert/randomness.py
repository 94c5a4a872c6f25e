"""
Random-bit sources and the uniform range sampler.

Responsibility: turn a bounded-width word source (uniform below 2^B) into
single bits, bounded draws and uniform draws over spans of any width.

A source owns a bit buffer between draws. Draws are serialized with a
lock, so a single instance may be shared across threads, but sharing
makes the sequence of draws seen by each caller nondeterministic.
"""

import threading
from typing import Iterable, Optional

import numpy as np

from .config import DEFAULT_CONFIG
from .errors import InvalidArgument, RandomSourceExhausted


class RandomBitSource:
    """
    Uniform words below 2^bits from a numpy Generator.

    Parameters
    ----------
    bits : int
        Word width B. Defaults to the configured random_bits (31).
    seed : int, optional
        Seed for numpy.random.default_rng. Ignored if rng is given.
    rng : numpy.random.Generator, optional
        Generator to draw from.
    retry_limit : int, optional
        Rejected words draw_below tolerates before giving up. Defaults to
        the configured retry_limit.
    """

    def __init__(self, bits: Optional[int] = None, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 retry_limit: Optional[int] = None):
        if bits is None:
            bits = DEFAULT_CONFIG.random_bits
        if not 1 <= bits <= 62:
            raise InvalidArgument(f"bits={bits} must be in [1, 62]")
        if retry_limit is None:
            retry_limit = DEFAULT_CONFIG.retry_limit
        if retry_limit < 1:
            raise InvalidArgument(f"retry_limit={retry_limit} must be positive")
        self.bits = bits
        self.max_value = 1 << bits
        self.retry_limit = retry_limit
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._buffer = 0
        self._buffered = 0
        self._lock = threading.RLock()

    def _word(self) -> int:
        """One uniform integer in [0, 2^bits)."""
        return int(self._rng.integers(0, self.max_value))

    def draw_bit(self) -> int:
        """One uniform bit, taken from the buffered word."""
        with self._lock:
            if self._buffered == 0:
                self._buffer = self._word()
                self._buffered = self.bits
            bit = self._buffer & 1
            self._buffer >>= 1
            self._buffered -= 1
            return bit

    def draw_below(self, n: int) -> int:
        """
        Uniform integer in [0, n) for 1 <= n <= 2^bits.

        Whole words are rejected above the largest multiple of n, so the
        result carries no modulo bias.
        """
        if not 1 <= n <= self.max_value:
            raise InvalidArgument(f"draw_below({n}) needs 1 <= n <= {self.max_value}")
        if n == 1:
            return 0
        limit = self.max_value - self.max_value % n
        with self._lock:
            for _ in range(self.retry_limit):
                w = self._word()
                if w < limit:
                    return w % n
        raise RandomSourceExhausted(f"No word below {limit} in {self.retry_limit} draws")

    def draw_range(self, span: int) -> int:
        """
        Uniform integer in [0, span], span of any size.

        While the remaining count of values exceeds the word width, the
        count is split in two halves (the odd one left over goes to the
        upper half) and one bit picks a half. The rest is a direct draw.
        """
        if span < 0:
            raise InvalidArgument(f"draw_range({span}) needs span >= 0")
        count = span + 1
        offset = 0
        with self._lock:
            while count > self.max_value:
                lower = count >> 1
                if self.draw_bit():
                    offset += lower
                    count -= lower
                else:
                    count = lower
            return offset + self.draw_below(count)

    def draw_fraction(self) -> float:
        """Uniform float in [0, 1) with bits of resolution."""
        return self.draw_below(self.max_value) / self.max_value


class SequenceBitSource(RandomBitSource):
    """
    Replays a fixed word sequence, cycling when it runs out.

    Intended for deterministic tests. Every word must be below 2^bits.
    """

    def __init__(self, words: Iterable[int], bits: Optional[int] = None,
                 retry_limit: Optional[int] = None):
        super().__init__(bits=bits, seed=0, retry_limit=retry_limit)
        self._words = [int(w) for w in words]
        if not self._words:
            raise InvalidArgument("SequenceBitSource needs at least one word")
        for w in self._words:
            if not 0 <= w < self.max_value:
                raise InvalidArgument(f"Word {w} outside [0, {self.max_value})")
        self._pos = 0

    def _word(self) -> int:
        w = self._words[self._pos]
        self._pos = (self._pos + 1) % len(self._words)
        return w


_default_source = None
_default_lock = threading.Lock()


def default_source() -> RandomBitSource:
    """The shared, lazily created, OS-seeded source."""
    global _default_source
    with _default_lock:
        if _default_source is None:
            _default_source = RandomBitSource()
        return _default_source
