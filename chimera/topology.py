"""Physical device topology, latency matrix and route optimisation."""

from __future__ import annotations

import dataclasses
import logging
import math
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from chimera.primitives import NodeId

logger = logging.getLogger(__name__)

_HASHRATE_PER_UNIT = 10_000_000
_LINK_OVERHEAD_NS = 100.0


class FabricError(Exception):
    """Base class for fabric failures."""


class DetectionFailed(FabricError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Hardware detection failed: {reason}")
        self.reason = reason


class AllocationFailed(FabricError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Memory allocation failed: {reason}")
        self.reason = reason


class TopologyError(FabricError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Topology error: {reason}")
        self.reason = reason


class DeviceOffline(FabricError):
    def __init__(self, node_id: NodeId) -> None:
        super().__init__(f"Device offline: {node_id}")
        self.node_id = node_id


class DeviceExists(FabricError):
    def __init__(self, node_id: NodeId) -> None:
        super().__init__(f"Device already exists: {node_id}")
        self.node_id = node_id


class RoutingFailure(FabricError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Routing failure: {reason}")
        self.reason = reason


class DeviceType(Enum):
    CPU = "cpu"
    GPU = "gpu"
    FPGA = "fpga"
    ASIC = "asic"
    UNKNOWN = "unknown"


@dataclass
class Device:
    """A compute device in the fabric."""

    node_id: NodeId
    device_type: DeviceType
    compute_units: int = 0
    memory_bandwidth_gb_s: float = 0.0
    avg_latency_ns: float = 1000.0
    thermal_state: float = 0.0
    is_online: bool = False


@dataclass
class Topology:
    """Devices, their pairwise latencies and cached optimised routes."""

    nodes: dict[NodeId, Device] = field(default_factory=dict)
    adjacency_matrix: list[list[float]] = field(default_factory=list)
    optimized_routes: dict[tuple[NodeId, NodeId], list[NodeId]] = field(default_factory=dict)

    @classmethod
    def detect(cls) -> Topology:
        """Topology holding just the local CPU."""
        local_id = NodeId()
        cpu = Device(
            node_id=local_id,
            device_type=DeviceType.CPU,
            compute_units=os.cpu_count() or 1,
            memory_bandwidth_gb_s=50.0,
            avg_latency_ns=50.0,
            is_online=True,
        )
        return cls(nodes={local_id: cpu})

    def get_device(self, node_id: NodeId) -> Optional[Device]:
        return self.nodes.get(node_id)

    def register_device(self, device: Device) -> None:
        self.nodes[device.node_id] = device

    def remove_device(self, node_id: NodeId) -> None:
        self.nodes.pop(node_id, None)

    def build_latency_matrix(self) -> None:
        """Fill the latency matrix from each pair's average device latency."""
        devices = list(self.nodes.values())
        self.adjacency_matrix = [
            [
                0.0
                if i == j
                else (a.avg_latency_ns + b.avg_latency_ns) / 2.0 + _LINK_OVERHEAD_NS
                for j, b in enumerate(devices)
            ]
            for i, a in enumerate(devices)
        ]

    def optimize_data_locality(self) -> None:
        """Relax all pairs through intermediate nodes, caching improved routes."""
        ids = list(self.nodes)
        n = len(ids)
        if n == 0:
            return
        if len(self.adjacency_matrix) != n or any(len(row) != n for row in self.adjacency_matrix):
            raise TopologyError(f"latency matrix does not match {n} nodes")

        dist = [list(row) for row in self.adjacency_matrix]
        for k, via in enumerate(ids):
            for i, src in enumerate(ids):
                for j, dst in enumerate(ids):
                    alt = dist[i][k] + dist[k][j]
                    if not math.isnan(alt) and alt < dist[i][j]:
                        dist[i][j] = alt
                        self.optimized_routes[(src, dst)] = [src, via, dst]

        logger.info(
            "Fabric topology optimized: %d nodes, %d routes", n, len(self.optimized_routes)
        )

    def get_route(self, source: NodeId, target: NodeId) -> Optional[list[NodeId]]:
        return self.optimized_routes.get((source, target))

    def total_hashrate_capacity(self) -> int:
        return sum(
            d.compute_units * _HASHRATE_PER_UNIT for d in self.nodes.values() if d.is_online
        )


class TopologyManager:
    """Shared handle for reading and reshaping a topology."""

    def __init__(self, topology: Topology) -> None:
        self.topology = topology

    async def get_device(self, node_id: NodeId) -> Optional[Device]:
        """A copy of the device, if present."""
        device = self.topology.get_device(node_id)
        return dataclasses.replace(device) if device is not None else None

    async def register_device(self, device: Device) -> None:
        self.topology.register_device(device)

    async def optimize(self) -> None:
        self.topology.build_latency_matrix()
        self.topology.optimize_data_locality()

    async def total_hashrate(self) -> int:
        return self.topology.total_hashrate_capacity()