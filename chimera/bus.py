"""In-process messaging between nodes: direct sends, broadcasts and topics."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Union

from chimera.primitives import NodeId


class BusError(Exception):
    """Base class for messaging failures."""


class NodeNotFound(BusError):
    def __init__(self, node_id: NodeId) -> None:
        super().__init__(f"Node not registered: {node_id}")
        self.node_id = node_id


class SendFailed(BusError):
    def __init__(self) -> None:
        super().__init__("Channel send failed")


class ReceiveFailed(BusError):
    def __init__(self) -> None:
        super().__init__("Channel receive failed")


class TopicNotFound(BusError):
    def __init__(self, topic: str) -> None:
        super().__init__(f"Topic not found: {topic}")
        self.topic = topic


@dataclass(frozen=True)
class ComputeTask:
    """Task handed to a node."""

    task_id: str
    payload: bytes


@dataclass(frozen=True)
class ComputeResult:
    """Result of a task."""

    task_id: str
    result: bytes


@dataclass(frozen=True)
class Heartbeat:
    """Liveness ping from a node."""

    node_id: NodeId
    timestamp: int


@dataclass(frozen=True)
class Data:
    """Payload published on a topic."""

    topic: str
    payload: bytes


BusMessage = Union[ComputeTask, ComputeResult, Heartbeat, Data]
NodeChannel = "asyncio.Queue[BusMessage]"


def create_node_channel(buffer: int) -> asyncio.Queue:
    """A bounded queue a node receives its messages on."""
    if buffer < 1:
        raise ValueError(f"channel buffer must be at least 1, got {buffer}")
    return asyncio.Queue(maxsize=buffer)


class BusManager:
    """Routes messages to registered node channels."""

    def __init__(self) -> None:
        self._nodes: dict[NodeId, asyncio.Queue] = {}
        self._topics: dict[str, list[NodeId]] = {}

    async def register_node(self, node_id: NodeId, channel: asyncio.Queue) -> None:
        """Attach a channel for a node, replacing any earlier one."""
        self._nodes[node_id] = channel

    async def unregister_node(self, node_id: NodeId) -> None:
        self._nodes.pop(node_id, None)

    async def send(self, target: NodeId, message: BusMessage) -> None:
        """Deliver a message to one node; raise NodeNotFound if it is not registered."""
        channel = self._nodes.get(target)
        if channel is None:
            raise NodeNotFound(target)
        await channel.put(message)

    async def broadcast(self, message: BusMessage) -> None:
        """Deliver a message to every registered node."""
        for channel in list(self._nodes.values()):
            await channel.put(message)

    async def subscribe(self, topic: str, node_id: NodeId) -> None:
        self._topics.setdefault(topic, []).append(node_id)

    async def publish(self, topic: str, payload: bytes) -> None:
        """Send a Data message to every registered subscriber of a topic."""
        subscribers = self._topics.get(topic)
        if subscribers is None:
            raise TopicNotFound(topic)
        message = Data(topic=topic, payload=bytes(payload))
        channels = [self._nodes[n] for n in subscribers if n in self._nodes]
        for channel in channels:
            await channel.put(message)

    async def dispatch_task(self, node_id: NodeId, task_id: str, payload: bytes) -> None:
        await self.send(node_id, ComputeTask(task_id=task_id, payload=bytes(payload)))

    async def send_result(self, node_id: NodeId, task_id: str, result: bytes) -> None:
        await self.send(node_id, ComputeResult(task_id=task_id, result=bytes(result)))

    async def heartbeat(self, node_id: NodeId, timestamp: int) -> None:
        await self.broadcast(Heartbeat(node_id=node_id, timestamp=timestamp))