"""SHA-256 hashing of block data followed by a little-endian nonce."""

from __future__ import annotations

import hashlib
from typing import Iterable

from chimera.primitives import Hash, Nonce

_NONCE_BYTES = 8


class Sha256Engine:
    """Computes SHA-256(data || nonce) for single nonces and batches."""

    @staticmethod
    def _digest(nonce: Nonce, data: bytes) -> Hash:
        hasher = hashlib.sha256(data)
        hasher.update(nonce.value.to_bytes(_NONCE_BYTES, "little"))
        return Hash(hasher.digest())

    async def compute(self, nonce: Nonce, data: bytes) -> Hash:
        """Hash the data with the nonce appended as 8 little-endian bytes."""
        return self._digest(nonce, bytes(data))

    async def compute_batch(self, nonces: Iterable[Nonce], data: bytes) -> list[Hash]:
        """Hash the data once per nonce, preserving the nonce order."""
        payload = bytes(data)
        return [self._digest(nonce, payload) for nonce in nonces]


def verify_difficulty(hash_value: Hash, target: bytes) -> bool:
    """True if the hash is lexicographically at or below the target.

    Only the common prefix of the two is compared; an equal prefix passes.
    """
    for h, t in zip(hash_value.data, bytes(target)):
        if h < t:
            return True
        if h > t:
            return False
    return True