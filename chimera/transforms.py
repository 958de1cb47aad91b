"""Composable transforms over hashes, nonces and costs."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Sequence

from chimera.primitives import Hash, Nonce, OpCost


class TransformError(Exception):
    """Base class for transform failures."""


class GradientComputationFailed(TransformError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Gradient computation failed: {reason}")
        self.reason = reason


class DimensionMismatch(TransformError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidInput(TransformError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid input: {reason}")
        self.reason = reason


class NotDifferentiable(TransformError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Transform not differentiable: {reason}")
        self.reason = reason


@dataclass
class Grad:
    """Gradient descriptor for a function with respect to selected arguments."""

    f: Callable[[Any], Any]
    argnums: list[int]
    values: Optional[list[float]] = None

    def compute(self, value: Any) -> None:
        """Fill in gradient values (unit gradient per selected argument)."""
        self.values = [1.0] * len(self.argnums)


class Transform(ABC):
    """A named mapping from one value to another."""

    differentiable: ClassVar[bool] = False

    @abstractmethod
    def apply(self, value: Any) -> Any:
        """Transform a value."""

    @abstractmethod
    def name(self) -> str:
        """Short identifier of the transform."""

    def gradient(self, value: Any) -> Optional[Grad]:
        """Gradient descriptor of this transform, or None when it has none."""
        if not self.differentiable:
            return None
        return Grad(self.apply, [0])

    def cost(self) -> OpCost:
        return OpCost()


@dataclass
class VMap(Transform):
    """Applies a function to every element of a batch."""

    f: Callable[[Any], Any]

    def apply(self, values: Sequence[Any]) -> list[Any]:
        return [self.f(v) for v in values]

    def name(self) -> str:
        return "vmap_transform"


@dataclass
class TransformChain:
    """A pipeline of transforms whose output type equals their input type."""

    transforms: list[Transform] = field(default_factory=list)

    def add(self, transform: Transform) -> None:
        self.transforms.append(transform)

    def apply(self, value: Any) -> Any:
        for transform in self.transforms:
            value = transform.apply(value)
        return value

    def __len__(self) -> int:
        return len(self.transforms)


def _sigmoid(x: float) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


class ActivationFn(Enum):
    LINEAR = "linear"
    RELU = "relu"
    SIGMOID = "sigmoid"
    TANH = "tanh"

    def apply(self, x: float) -> float:
        if self is ActivationFn.LINEAR:
            return x
        if self is ActivationFn.RELU:
            return max(x, 0.0)
        if self is ActivationFn.SIGMOID:
            return _sigmoid(x)
        return math.tanh(x)

    def derivative(self, x: float) -> float:
        if self is ActivationFn.LINEAR:
            return 1.0
        if self is ActivationFn.RELU:
            return 1.0 if x > 0.0 else 0.0
        if self is ActivationFn.SIGMOID:
            s = _sigmoid(x)
            return s * (1.0 - s)
        return 1.0 - math.tanh(x) ** 2


class HashTransform(Transform):
    """Random linear projection of hash bytes followed by an activation."""

    def __init__(
        self,
        dim: int,
        activation: ActivationFn,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        rng = rng or random.Random()
        self.weights: tuple[float, ...] = tuple(rng.uniform(-1.0, 1.0) for _ in range(dim))
        self.bias: float = rng.uniform(-0.1, 0.1)
        self.activation = activation

    def compute_approx(self, hash_value: Hash) -> list[float]:
        data = hash_value.data
        return [
            self.activation.apply((data[i % len(data)] / 255.0) * w + self.bias)
            for i, w in enumerate(self.weights)
        ]

    def apply(self, value: Hash) -> list[float]:
        return self.compute_approx(value)

    def name(self) -> str:
        return "hash_transform"


@dataclass
class NonceTransform(Transform):
    """Advances a nonce by a fixed stride, wrapping at max_nonce."""

    stride: int
    max_nonce: int

    def apply(self, value: Nonce) -> Nonce:
        return Nonce((value.value + self.stride) % self.max_nonce)

    def name(self) -> str:
        return "nonce_transform"


@dataclass
class OpCostTransform(Transform):
    """Weighted scalar score of an operational cost."""

    joules_weight: float
    seconds_weight: float
    dollars_weight: float

    def score(self, cost: OpCost) -> float:
        return (
            cost.joules * self.joules_weight
            + cost.seconds * self.seconds_weight
            + cost.dollars * self.dollars_weight
        )

    def apply(self, value: OpCost) -> float:
        return self.score(value)

    def name(self) -> str:
        return "opcost_transform"