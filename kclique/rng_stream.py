"""
Deterministic random stream for the k-clique solvers.

Implements L'Ecuyer's combined multiple-recursive generator MRG32k3a.
All stochastic decisions of a solve pass through a single RngStream
instance; identical seeds give an identical call sequence and therefore
identical results.
"""

from typing import List, Optional, Sequence


M1 = 4294967087
M2 = 4294944443
A12 = 1403580
A13N = 810728
A21 = 527612
A23N = 1370589
NORM = 2.328306549295727688e-10

DEFAULT_SEED = (12345, 12345, 12345, 12345, 12345, 12345)


def _mat_vec_mod(matrix: List[List[int]], vector: Sequence[int], modulus: int) -> List[int]:
    """Multiply a 3x3 matrix by a 3-vector modulo `modulus`."""
    return [
        sum(matrix[i][j] * vector[j] for j in range(3)) % modulus
        for i in range(3)
    ]


def _mat_mat_mod(a: List[List[int]], b: List[List[int]], modulus: int) -> List[List[int]]:
    """Multiply two 3x3 matrices modulo `modulus`."""
    return [
        [sum(a[i][k] * b[k][j] for k in range(3)) % modulus for j in range(3)]
        for i in range(3)
    ]


def _mat_two_pow_mod(matrix: List[List[int]], exponent: int, modulus: int) -> List[List[int]]:
    """Compute matrix^(2^exponent) modulo `modulus` by repeated squaring."""
    result = [row[:] for row in matrix]
    for _ in range(exponent):
        result = _mat_mat_mod(result, result, modulus)
    return result


# One-step transition matrices of both components
_A1 = [[0, 1, 0], [0, 0, 1], [M1 - A13N, A12, 0]]
_A2 = [[0, 1, 0], [0, 0, 1], [M2 - A23N, 0, A21]]

# Jump ahead by one substream (2^76 steps)
A1P76 = _mat_two_pow_mod(_A1, 76, M1)
A2P76 = _mat_two_pow_mod(_A2, 76, M2)


class RngStream:
    """
    One stream of the MRG32k3a generator.

    The stream keeps three states of six integers each: the start of the
    stream (Ig), the start of the current substream (Bg) and the current
    state (Cg). Streams are split into 2^51 substreams of length 2^76.

    Args:
        seeds: Optional six integer seeds (defaults to 12345 for all six)
    """

    def __init__(self, seeds: Optional[Sequence[int]] = None):
        self._cg: List[int] = list(DEFAULT_SEED)
        self._bg: List[int] = list(DEFAULT_SEED)
        self._ig: List[int] = list(DEFAULT_SEED)
        if seeds is not None:
            self.set_seed(seeds)

    @staticmethod
    def check_seed(seeds: Sequence[int]) -> None:
        """
        Validate a six-integer seed.

        Raises:
            ValueError: If the seed has the wrong length, a component is out
                of range, or one of the two triples is all zero
        """
        if len(seeds) != 6:
            raise ValueError(f"Seed must contain exactly 6 integers, got {len(seeds)}")

        for i in range(3):
            if not 0 <= seeds[i] < M1:
                raise ValueError(f"Seed[{i}] = {seeds[i]} must be in [0, {M1})")
        for i in range(3, 6):
            if not 0 <= seeds[i] < M2:
                raise ValueError(f"Seed[{i}] = {seeds[i]} must be in [0, {M2})")

        if seeds[0] == seeds[1] == seeds[2] == 0:
            raise ValueError("First 3 seeds are all 0")
        if seeds[3] == seeds[4] == seeds[5] == 0:
            raise ValueError("Last 3 seeds are all 0")

    def set_seed(self, seeds: Sequence[int]) -> None:
        """Reset the stream, its substream and current state to `seeds`."""
        seeds = [int(s) for s in seeds]
        self.check_seed(seeds)
        self._ig = list(seeds)
        self._bg = list(seeds)
        self._cg = list(seeds)

    def get_state(self) -> List[int]:
        """Return a copy of the current six-integer state."""
        return list(self._cg)

    def reset_start_stream(self) -> None:
        """Move back to the start of the stream."""
        self._bg = list(self._ig)
        self._cg = list(self._ig)

    def reset_start_substream(self) -> None:
        """Move back to the start of the current substream."""
        self._cg = list(self._bg)

    def reset_next_substream(self) -> None:
        """Jump to the start of the next substream (2^76 steps ahead)."""
        self._bg = _mat_vec_mod(A1P76, self._bg[:3], M1) + _mat_vec_mod(A2P76, self._bg[3:], M2)
        self._cg = list(self._bg)

    def rand_u01(self) -> float:
        """Return a uniform real in (0, 1) and advance the state by one step."""
        s = self._cg

        # component 1
        p1 = (A12 * s[1] - A13N * s[0]) % M1
        s[0], s[1], s[2] = s[1], s[2], p1

        # component 2
        p2 = (A21 * s[5] - A23N * s[3]) % M2
        s[3], s[4], s[5] = s[4], s[5], p2

        if p1 > p2:
            return (p1 - p2) * NORM
        return (p1 - p2 + M1) * NORM

    def rand_int(self, low: int, high: int) -> int:
        """
        Return a uniform integer in [low, high] (inclusive).

        Raises:
            ValueError: If low > high
        """
        if low > high:
            raise ValueError(f"Invalid bounds: low ({low}) > high ({high})")
        return low + int((high - low + 1.0) * self.rand_u01())
