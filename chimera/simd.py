"""Fixed-width batch hashing of consecutive nonces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from chimera.primitives import Hash, Nonce

SIMD_BATCH = 8


@dataclass(frozen=True)
class NonceBatch:
    """Exactly SIMD_BATCH nonces evaluated together."""

    nonces: tuple[Nonce, ...]

    def __post_init__(self) -> None:
        nonces = tuple(self.nonces)
        if len(nonces) != SIMD_BATCH:
            raise ValueError(f"batch must hold {SIMD_BATCH} nonces, got {len(nonces)}")
        object.__setattr__(self, "nonces", nonces)

    @classmethod
    def starting_at(cls, start: Nonce) -> NonceBatch:
        """Batch of consecutive nonces beginning at start."""
        return cls(tuple(Nonce(start.value + i) for i in range(SIMD_BATCH)))


@dataclass(frozen=True)
class HashBatch:
    """Hashes produced for one nonce batch, in the same order."""

    hashes: tuple[Hash, ...]

    def __post_init__(self) -> None:
        hashes = tuple(self.hashes)
        if len(hashes) != SIMD_BATCH:
            raise ValueError(f"batch must hold {SIMD_BATCH} hashes, got {len(hashes)}")
        object.__setattr__(self, "hashes", hashes)


class SimdHasher:
    """Evaluates a hash function across a whole nonce batch."""

    def __init__(self, hash_fn: Callable[[Nonce], Hash]) -> None:
        self.hash_fn = hash_fn

    def hash_batch(self, batch: NonceBatch) -> HashBatch:
        return HashBatch(tuple(self.hash_fn(n) for n in batch.nonces))