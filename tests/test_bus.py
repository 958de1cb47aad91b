import pytest

from chimera.bus import (
    BusError,
    BusManager,
    ComputeResult,
    ComputeTask,
    Data,
    Heartbeat,
    NodeNotFound,
    TopicNotFound,
    create_node_channel,
)
from chimera.primitives import NodeId


@pytest.mark.asyncio
async def test_node_registration():
    bus = BusManager()
    node_id = NodeId()
    channel = create_node_channel(16)
    await bus.register_node(node_id, channel)
    await bus.send(node_id, Data(topic="test", payload=bytes([1, 2, 3])))
    message = await channel.get()
    assert isinstance(message, Data)
    assert message.topic == "test"


@pytest.mark.asyncio
async def test_send_to_unknown_node_raises():
    bus = BusManager()
    with pytest.raises(NodeNotFound) as info:
        await bus.send(NodeId(9), Data(topic="t", payload=b""))
    assert info.value.node_id == NodeId(9)
    assert isinstance(info.value, BusError)


@pytest.mark.asyncio
async def test_unregister_removes_node():
    bus = BusManager()
    await bus.register_node(NodeId(1), create_node_channel(4))
    await bus.unregister_node(NodeId(1))
    with pytest.raises(NodeNotFound):
        await bus.send(NodeId(1), Data(topic="t", payload=b""))


@pytest.mark.asyncio
async def test_broadcast_reaches_all_nodes():
    bus = BusManager()
    channels = {NodeId(i): create_node_channel(4) for i in range(3)}
    for node_id, channel in channels.items():
        await bus.register_node(node_id, channel)
    message = Data(topic="all", payload=b"x")
    await bus.broadcast(message)
    for channel in channels.values():
        assert await channel.get() == message


@pytest.mark.asyncio
async def test_publish_unknown_topic_raises():
    bus = BusManager()
    with pytest.raises(TopicNotFound) as info:
        await bus.publish("missing", b"x")
    assert info.value.topic == "missing"


@pytest.mark.asyncio
async def test_publish_reaches_only_subscribers():
    bus = BusManager()
    subscriber = create_node_channel(4)
    other = create_node_channel(4)
    await bus.register_node(NodeId(1), subscriber)
    await bus.register_node(NodeId(2), other)
    await bus.subscribe("news", NodeId(1))
    await bus.publish("news", b"hello")
    assert await subscriber.get() == Data(topic="news", payload=b"hello")
    assert other.empty()


@pytest.mark.asyncio
async def test_publish_skips_unregistered_subscribers():
    bus = BusManager()
    channel = create_node_channel(4)
    await bus.register_node(NodeId(1), channel)
    await bus.subscribe("news", NodeId(1))
    await bus.subscribe("news", NodeId(2))
    await bus.publish("news", b"a")
    assert channel.qsize() == 1


@pytest.mark.asyncio
async def test_dispatch_task_and_result():
    bus = BusManager()
    channel = create_node_channel(4)
    await bus.register_node(NodeId(5), channel)
    await bus.dispatch_task(NodeId(5), "task-1", b"\x01\x02")
    await bus.send_result(NodeId(5), "task-1", b"\x03")
    assert await channel.get() == ComputeTask(task_id="task-1", payload=b"\x01\x02")
    assert await channel.get() == ComputeResult(task_id="task-1", result=b"\x03")


@pytest.mark.asyncio
async def test_dispatch_task_unknown_node():
    bus = BusManager()
    with pytest.raises(NodeNotFound):
        await bus.dispatch_task(NodeId(3), "task", b"")


@pytest.mark.asyncio
async def test_heartbeat_broadcasts():
    bus = BusManager()
    a = create_node_channel(2)
    b = create_node_channel(2)
    await bus.register_node(NodeId(1), a)
    await bus.register_node(NodeId(2), b)
    await bus.heartbeat(NodeId(1), 1234)
    expected = Heartbeat(node_id=NodeId(1), timestamp=1234)
    assert await a.get() == expected
    assert await b.get() == expected


@pytest.mark.asyncio
async def test_channel_is_bounded():
    channel = create_node_channel(2)
    assert channel.maxsize == 2


def test_zero_buffer_rejected():
    with pytest.raises(ValueError):
        create_node_channel(0)


def test_error_messages():
    assert str(TopicNotFound("jobs")) == "Topic not found: jobs"
    assert str(NodeNotFound(NodeId(4))) == "Node not registered: 4"