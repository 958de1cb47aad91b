"""Memory accounting across host, device and shared regions of the fabric."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum

from chimera.primitives import NodeId, OpCost
from chimera.topology import AllocationFailed, DeviceType, Topology

_GIB = 1024 * 1024 * 1024
_MIB = 1024 * 1024

_BYTES_PER_UNIT = {
    DeviceType.CPU: 2 * _GIB,
    DeviceType.GPU: 4 * _GIB,
    DeviceType.FPGA: _GIB,
    DeviceType.ASIC: 512 * _MIB,
}
_UNKNOWN_DEVICE_BYTES = 512 * _MIB
_FALLBACK_CAPACITY = _GIB

_PCIE_BANDWIDTH = 25_000_000_000.0
_JOULES_PER_BYTE = 0.00005
_JOULES_PER_TRANSFER = 0.002
_DOLLARS_PER_JOULE = 0.0001


class MemoryRegionType(Enum):
    """Kind of memory a region lives in."""

    HOST = "host"
    DEVICE = "device"
    SHARED = "shared"


@dataclass(eq=False)
class MemoryHandle:
    """An allocated region; clones share the same backing buffer."""

    size: int
    region_type: MemoryRegionType
    node_id: NodeId
    buffer: bytearray = field(repr=False)

    def __len__(self) -> int:
        return self.size

    @property
    def view(self) -> memoryview:
        """Writable view onto the backing buffer."""
        return memoryview(self.buffer)


@dataclass(frozen=True)
class MemoryStats:
    """Snapshot of memory usage."""

    total_allocated: int
    capacity: int
    utilization: float


def _device_capacity(device_type: DeviceType, compute_units: int) -> int:
    per_unit = _BYTES_PER_UNIT.get(device_type)
    if per_unit is None:
        return _UNKNOWN_DEVICE_BYTES
    return compute_units * per_unit


class MemoryManager:
    """Tracks allocations against the capacity implied by a topology."""

    def __init__(self, topology: Topology) -> None:
        capacity = sum(
            _device_capacity(d.device_type, d.compute_units) for d in topology.nodes.values()
        )
        self.max_capacity = capacity or _FALLBACK_CAPACITY
        self.topology_nodes = len(topology.nodes)
        self._allocated = 0
        self._lock = threading.Lock()

    @property
    def total_allocated(self) -> int:
        return self._allocated

    async def allocate(
        self, size: int, region_type: MemoryRegionType, node_id: NodeId
    ) -> MemoryHandle:
        """Reserve a zero-filled region; raise AllocationFailed when capacity is exhausted."""
        if size < 0:
            raise ValueError(f"allocation size must be non-negative, got {size}")
        with self._lock:
            if self._allocated + size > self.max_capacity:
                raise AllocationFailed("Fabric memory exhausted")
            self._allocated += size
        return MemoryHandle(
            size=size, region_type=region_type, node_id=node_id, buffer=bytearray(size)
        )

    def deallocate(self, handle: MemoryHandle) -> None:
        """Return a region's bytes to the pool."""
        with self._lock:
            self._allocated -= handle.size

    def clone_handle(self, handle: MemoryHandle) -> MemoryHandle:
        """A second handle onto the same buffer, without copying."""
        return MemoryHandle(
            size=handle.size,
            region_type=handle.region_type,
            node_id=handle.node_id,
            buffer=handle.buffer,
        )

    def transfer_cost(self, size: int, transfers: int) -> OpCost:
        """Estimated cost of moving size bytes the given number of times."""
        seconds = (size / _PCIE_BANDWIDTH) * transfers
        joules = size * _JOULES_PER_BYTE + transfers * _JOULES_PER_TRANSFER
        return OpCost(joules=joules, seconds=seconds, dollars=joules * _DOLLARS_PER_JOULE)

    def locality_penalty(self, region: MemoryRegionType) -> float:
        """Scheduling penalty for computing against a region."""
        return {
            MemoryRegionType.HOST: 1.0,
            MemoryRegionType.SHARED: 1.5,
            MemoryRegionType.DEVICE: 0.8,
        }[region]

    def stats(self) -> MemoryStats:
        allocated = self._allocated
        return MemoryStats(
            total_allocated=allocated,
            capacity=self.max_capacity,
            utilization=allocated / self.max_capacity,
        )

    def max_parallel_buffers(self, average_size: int) -> int:
        """How many buffers of average_size fit in total capacity."""
        if average_size == 0:
            return 0
        return self.max_capacity // average_size