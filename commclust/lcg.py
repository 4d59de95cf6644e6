"""Linear congruential random numbers split across cooperating processes.

Each of ``nprocs`` processes draws ``n`` numbers. Rank ``r`` starts at the
position where rank ``r - 1`` stopped, found by jumping ahead through powers
of the generator's 2x2 transition matrix. Joined in rank order, the ranks'
numbers form one continuous sequence.
"""

from __future__ import annotations

from collections.abc import Sequence

from .utils import ALCG, BLCG, MLCG

_MASK32 = 0xFFFFFFFF
_IDENTITY = (1, 0, 0, 1)


def _seed_seq_generate(seeds: Sequence[int], count: int) -> list[int]:
    """Produce ``count`` 32-bit words from ``seeds`` with the seed-sequence mixing algorithm."""
    values = [seed & _MASK32 for seed in seeds]
    s = len(values)
    out = [0x8B8B8B8B] * count
    if count == 0:
        return out
    n = count
    if n >= 623:
        t = 11
    elif n >= 68:
        t = 7
    elif n >= 39:
        t = 5
    elif n >= 7:
        t = 3
    else:
        t = (n - 1) // 2
    p = (n - t) // 2
    q = p + t
    m = max(s + 1, n)

    def mix(x: int) -> int:
        return x ^ (x >> 27)

    for k in range(m):
        r1 = (1664525 * mix(out[k % n] ^ out[(k + p) % n] ^ out[(k - 1) % n])) & _MASK32
        if k == 0:
            r2 = r1 + s
        elif k <= s:
            r2 = r1 + k % n + values[k - 1]
        else:
            r2 = r1 + k % n
        r2 &= _MASK32
        out[(k + p) % n] = (out[(k + p) % n] + r1) & _MASK32
        out[(k + q) % n] = (out[(k + q) % n] + r2) & _MASK32
        out[k % n] = r2

    for k in range(m, m + n):
        total = (out[k % n] + out[(k + p) % n] + out[(k - 1) % n]) & _MASK32
        r3 = (1566083941 * mix(total)) & _MASK32
        r4 = (r3 - k % n) & _MASK32
        out[(k + p) % n] ^= r3
        out[(k + q) % n] ^= r4
        out[k % n] = r4
    return out


def seed_seq_first(seed: int) -> int:
    """Return the first 32-bit word a seed sequence built from ``seed`` generates."""
    return _seed_seq_generate([seed], 1)[0]


def _mat_mul(a: Sequence[int], b: Sequence[int], modulus: int | None = None) -> list[int]:
    if len(a) != 4 or len(b) != 4:
        raise ValueError("2x2 matrices must have exactly four entries in row-major order")
    product = [
        a[0] * b[0] + a[1] * b[2],
        a[0] * b[1] + a[1] * b[3],
        a[2] * b[0] + a[3] * b[2],
        a[2] * b[1] + a[3] * b[3],
    ]
    if modulus is not None:
        product = [x % modulus for x in product]
    return product


def _mat_pow(mat: Sequence[int], k: int, modulus: int | None = None) -> list[int]:
    # k <= 1 leaves the matrix as it is: the power is formed by k - 1 multiplications.
    if k <= 1:
        return _mat_mul(mat, _IDENTITY, modulus)
    result = list(_IDENTITY)
    base = list(mat)
    exponent = k
    while exponent:
        if exponent & 1:
            result = _mat_mul(result, base, modulus)
        exponent >>= 1
        if exponent:
            base = _mat_mul(base, base, modulus)
    return result


def mat_mul_2x2(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Multiply two 2x2 integer matrices given as row-major lists of four entries."""
    return _mat_mul(a, b)


def mat_power(mat: Sequence[int], k: int) -> list[int]:
    """Return ``mat`` raised to the ``k``-th power; for ``k <= 1`` the matrix itself."""
    return _mat_pow(mat, k)


class ParallelLCG:
    """The share of one rank in a sequence of LCG numbers spread over ``nprocs`` ranks.

    The recurrence is ``x[i] = (ALCG * x[i - 1] + BLCG) % MLCG``. Every rank
    holds ``n`` numbers; ``nprocs`` must be a power of two.
    """

    def __init__(self, seed: int, n: int, nprocs: int, rank: int) -> None:
        if n < 1:
            raise ValueError("each rank must draw at least one number")
        if nprocs < 1 or nprocs & (nprocs - 1):
            raise ValueError(f"number of processes must be a power of two, got {nprocs}")
        if not 0 <= rank < nprocs:
            raise ValueError(f"rank {rank} out of range 0..{nprocs - 1}")
        self.seed = seed & _MASK32
        self.n = n
        self.nprocs = nprocs
        self.rank = rank
        self.x0 = seed_seq_first(self.seed)
        self.numbers: list[int] = [0] * n
        self.drand: list[float] = []
        self.numbers[0] = self._first_number()

    def _first_number(self) -> int:
        """Jump ahead to this rank's first number with a hypercube prefix product."""
        global_op = _mat_pow((ALCG, 0, BLCG, 1), self.n, MLCG)
        prefix_op = list(_IDENTITY)
        steps = self.nprocs.bit_length() - 1
        for step in range(steps):
            mate = self.rank ^ (1 << step)
            # Every rank holds the same accumulated operator at each step.
            received = list(global_op)
            global_op = _mat_mul(global_op, received, MLCG)
            if mate < self.rank:
                prefix_op = _mat_mul(prefix_op, received, MLCG)
        if self.rank == 0:
            return self.x0
        return (self.x0 * prefix_op[0] + prefix_op[2]) % MLCG

    def generate(self) -> list[float]:
        """Fill in this rank's numbers and return them scaled to real values in ``[0, 1)``."""
        for i in range(1, self.n):
            self.numbers[i] = (self.numbers[i - 1] * ALCG + BLCG) % MLCG
        mult = 1.0 / (1.0 + float(MLCG - 1))
        self.drand = [float(abs(x)) * mult for x in self.numbers]
        return list(self.drand)

    def rescale(self, idx_start: int, lo: float) -> list[float]:
        """Map the real values from ``idx_start`` on into ``[lo, lo + 1 / nprocs)``."""
        if not 0 <= idx_start <= self.n:
            raise IndexError(f"start index {idx_start} out of range 0..{self.n}")
        if not self.drand:
            self.generate()
        span = 1.0 / float(self.nprocs)
        return [lo + span * value for value in self.drand[idx_start:]]