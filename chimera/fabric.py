"""Central manager tying together topology, memory and routing."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional

from chimera.memory import MemoryManager
from chimera.primitives import NodeId
from chimera.topology import Device, DeviceExists, DeviceOffline, Topology, TopologyManager


@dataclass(frozen=True)
class DeviceCapabilities:
    """Summary of a device's hardware capabilities."""

    compute_units: int
    memory_bandwidth: float
    latency_ns: float


class FabricManager:
    """Coordinates hardware topology, memory allocation and routing."""

    def __init__(self, topology: Topology) -> None:
        self.memory_manager = MemoryManager(topology)
        # The manager optimises its own snapshot of the topology.
        self.topology_manager = TopologyManager(copy.deepcopy(topology))
        self.topology = topology

    @classmethod
    async def create(cls) -> FabricManager:
        """Fabric built from the locally detected hardware."""
        return cls(Topology.detect())

    async def register_device(self, device: Device) -> None:
        """Add a device; raise DeviceExists if its id is taken."""
        if device.node_id in self.topology.nodes:
            raise DeviceExists(device.node_id)
        self.topology.register_device(device)

    async def remove_device(self, node_id: NodeId) -> None:
        self.topology.remove_device(node_id)

    async def optimize_topology(self) -> None:
        """Recompute latencies and routes."""
        await self.topology_manager.optimize()

    async def assess_capabilities(self, node_id: NodeId) -> DeviceCapabilities:
        """Capabilities of a node; raise DeviceOffline if it is unknown."""
        device = self.topology.get_device(node_id)
        if device is None:
            raise DeviceOffline(node_id)
        return DeviceCapabilities(
            compute_units=device.compute_units,
            memory_bandwidth=device.memory_bandwidth_gb_s,
            latency_ns=device.avg_latency_ns,
        )

    async def total_hashrate_capacity(self) -> int:
        return self.topology.total_hashrate_capacity()

    async def route(self, source: NodeId, target: NodeId) -> Optional[list[NodeId]]:
        """A copy of the cached route between two nodes, if any."""
        path = self.topology.get_route(source, target)
        return list(path) if path is not None else None