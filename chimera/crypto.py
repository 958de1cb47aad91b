"""Cryptographic engine facade and its configuration."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from chimera.memory import MemoryRegionType
from chimera.primitives import Hash, Nonce, OpCost
from chimera.sha256 import Sha256Engine

if TYPE_CHECKING:
    from chimera.fabric import FabricManager

logger = logging.getLogger(__name__)

_JOULES_PER_ITERATION = 0.0000001
_SECONDS_PER_ITERATION = 0.0000000001
_DOLLARS_PER_JOULE = 0.0001


class CryptoError(Exception):
    """Base class for cryptographic failures."""


class ComputationFailed(CryptoError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Hash computation failed: {reason}")
        self.reason = reason


class HardwareUnavailable(CryptoError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Hardware acceleration unavailable: {reason}")
        self.reason = reason


class InvalidInputSize(CryptoError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid input size: {reason}")
        self.reason = reason


class MemoryError_(CryptoError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Memory allocation failed in crypto context: {reason}")
        self.reason = reason


class CryptographicTransform(ABC):
    """Hashing backend that can compute single hashes, batches and cost estimates."""

    @abstractmethod
    async def compute(self, nonce: Nonce, data: bytes) -> Hash:
        """Hash the data for one nonce."""

    @abstractmethod
    async def compute_batch(self, nonces: Iterable[Nonce], data: bytes) -> list[Hash]:
        """Hash the data for every nonce."""

    @abstractmethod
    def estimate_cost(self, iterations: int) -> OpCost:
        """Estimated energy, time and money for a number of hashes."""


@dataclass
class CryptoConfig:
    """Settings for the crypto engine."""

    use_hardware_acceleration: bool = False
    preferred_memory_region: MemoryRegionType = field(default=MemoryRegionType.HOST)
    target_latency_ns: float = 100.0


class CryptoEngine(CryptographicTransform):
    """Central manager for cryptographic operations, backed by SHA-256 on the CPU."""

    def __init__(self, config: CryptoConfig | None = None) -> None:
        self.config = config if config is not None else CryptoConfig()
        self._sha256 = Sha256Engine()

    async def optimize_for_fabric(self, fabric: FabricManager) -> None:
        """Choose the hashing backend for the fabric; currently always the CPU."""
        logger.info("Optimizing crypto engine for available fabric...")
        self.config.use_hardware_acceleration = False

    async def compute(self, nonce: Nonce, data: bytes) -> Hash:
        return await self._sha256.compute(nonce, data)

    async def compute_batch(self, nonces: Iterable[Nonce], data: bytes) -> list[Hash]:
        return await self._sha256.compute_batch(nonces, data)

    def estimate_cost(self, iterations: int) -> OpCost:
        joules = iterations * _JOULES_PER_ITERATION
        seconds = iterations * _SECONDS_PER_ITERATION
        return OpCost(joules=joules, seconds=seconds, dollars=joules * _DOLLARS_PER_JOULE)