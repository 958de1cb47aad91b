"""Mining orchestrator combining hash scoring, nonce stepping and cost scoring."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from chimera.primitives import Hash, Nonce, OpCost
from chimera.transforms import (
    ActivationFn,
    HashTransform,
    NonceTransform,
    OpCostTransform,
    TransformChain,
)

_U64_MAX = 2**64 - 1

HashFn = Callable[[Nonce], Hash]
CostFn = Callable[[], OpCost]


@dataclass(frozen=True)
class MiningResult:
    """Outcome of one mining step."""

    nonce: Nonce
    hash: Hash
    score: float
    cost: OpCost


@dataclass(frozen=True)
class AlchemistConfig:
    """Settings for an Alchemist."""

    hash_dim: int = 32
    nonce_stride: int = 1
    max_nonce: int = _U64_MAX
    activation: ActivationFn = ActivationFn.RELU


class Alchemist:
    """Explores nonces and scores the resulting hashes."""

    def __init__(
        self,
        config: Optional[AlchemistConfig] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        config = config or AlchemistConfig()
        self.config = config
        self.hash_transform = HashTransform(config.hash_dim, config.activation, rng=rng)
        self.nonce_transform = NonceTransform(config.nonce_stride, config.max_nonce)
        self.cost_transform = OpCostTransform(0.5, 0.3, 0.2)
        self.hash_chain = TransformChain()
        self.hash_chain.add(self.hash_transform)
        self.nonce_chain = TransformChain()
        self.nonce_chain.add(self.nonce_transform)

    def evaluate_hash(self, hash_value: Hash) -> float:
        """Mean of the approximated hash features (NaN when there are none)."""
        approx = self.hash_chain.apply(hash_value)
        if not approx:
            return math.nan
        return sum(approx) / len(approx)

    def evaluate_cost(self, cost: OpCost) -> float:
        return self.cost_transform.apply(cost)

    def step(self, nonce: Nonce, hash_fn: HashFn, cost_fn: CostFn) -> MiningResult:
        """Advance the nonce once, hash it and score the result."""
        next_nonce = self.nonce_chain.apply(nonce)
        hash_value = hash_fn(next_nonce)
        score = self.evaluate_hash(hash_value)
        return MiningResult(nonce=next_nonce, hash=hash_value, score=score, cost=cost_fn())

    def mine(
        self,
        start_nonce: Nonce,
        iterations: int,
        hash_fn: HashFn,
        cost_fn: CostFn,
    ) -> MiningResult:
        """Run a number of steps and return the lowest-scoring result."""
        best: Optional[MiningResult] = None
        nonce = start_nonce
        for _ in range(iterations):
            result = self.step(nonce, hash_fn, cost_fn)
            if best is None or result.score < best.score:
                best = result
            nonce = result.nonce
        if best is None:
            raise ValueError("mining loop must run at least one iteration")
        return best

    def mine_batch(self, nonces: Iterable[Nonce], hash_fn: HashFn) -> list[float]:
        """Score the hash of every nonce."""
        return [self.evaluate_hash(hash_fn(n)) for n in nonces]