"""Core value types shared across the fabric: hashes, nonces, node ids and costs."""

from __future__ import annotations

from dataclasses import dataclass

HASH_SIZE = 32
_U64_MAX = 2**64 - 1


@dataclass(frozen=True)
class Hash:
    """A 32-byte digest."""

    data: bytes = bytes(HASH_SIZE)

    def __post_init__(self) -> None:
        raw = bytes(self.data)
        if len(raw) != HASH_SIZE:
            raise ValueError(f"hash must be {HASH_SIZE} bytes, got {len(raw)}")
        object.__setattr__(self, "data", raw)

    @classmethod
    def zero(cls) -> Hash:
        """The all-zero hash."""
        return cls(bytes(HASH_SIZE))

    def is_zero(self) -> bool:
        return not any(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def __getitem__(self, index):
        return self.data[index]

    def __str__(self) -> str:
        return self.data.hex()


@dataclass(frozen=True, order=True)
class Nonce:
    """An unsigned 64-bit nonce."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError(f"nonce out of 64-bit range: {self.value}")

    @classmethod
    def zero(cls) -> Nonce:
        return cls(0)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class NodeId:
    """Identifier of a node in the fabric."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _U64_MAX:
            raise ValueError(f"node id out of 64-bit range: {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OpCost:
    """Operational cost of an action in energy, time and money."""

    joules: float = 0.0
    seconds: float = 0.0
    dollars: float = 0.0

    @classmethod
    def zero(cls) -> OpCost:
        return cls(0.0, 0.0, 0.0)