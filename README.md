# chimera

Building blocks for a distributed mining compute fabric, in plain Python
with no third-party dependencies.

## Modules

- `chimera.primitives`: the value types `Hash` (exactly 32 bytes, with
  `Hash.zero()` and `is_zero()`), `Nonce` and `NodeId` (unsigned 64-bit
  integers), and `OpCost` (joules, seconds and dollars).
- `chimera.transforms`: the abstract `Transform` base plus `HashTransform`
  (a random linear projection of the hash bytes followed by an activation),
  `NonceTransform` (adds a stride and wraps at `max_nonce`),
  `OpCostTransform` (a weighted sum of a cost), `VMap` (applies a function
  to each item of a batch) and `TransformChain`. `ActivationFn` provides
  `LINEAR`, `RELU`, `SIGMOID` and `TANH`, each with `apply` and `derivative`.
  The module also defines `Grad` and the `TransformError` exceptions.
- `chimera.simd`: `NonceBatch.starting_at(nonce)` builds eight consecutive
  nonces, and `SimdHasher.hash_batch` turns them into a `HashBatch`.
- `chimera.alchemist`: `Alchemist` (configured by `AlchemistConfig`) scores
  hashes with `evaluate_hash` and costs with `evaluate_cost`. `step` moves
  to the next nonce, hashes it and returns a `MiningResult`. `mine` runs
  several steps and returns the result with the lowest score; with zero
  iterations it raises `ValueError`. `mine_batch` scores a list of nonces.
- `chimera.buildinfo`: `build_info()` returns a `BuildInfo` holding the
  name, version, Python version and the git hash. The git hash is read from
  the `CHIMERA_GIT_SHA` environment variable and is `"unknown"` when that
  variable is unset. `init()` sets up logging if nothing else has already
  configured it.
- `chimera.topology`: `Device`, `DeviceType` and `Topology`.
  `Topology.detect()` returns only the local CPU. `build_latency_matrix` and
  `optimize_data_locality` compute and cache three-hop routes, and `get_route`
  reads them back. `total_hashrate_capacity` gives the capacity of the online
  devices. `TopologyManager` wraps a topology with async methods. The module
  also defines the `FabricError` exceptions.
- `chimera.memory`: `MemoryManager` accounts for allocations against a
  capacity derived from the topology. `allocate` is async and raises
  `AllocationFailed` once capacity is exhausted. The module also provides
  `deallocate`, `clone_handle` (a second handle on the same buffer), `stats`,
  `transfer_cost`, `locality_penalty` and `max_parallel_buffers`.
- `chimera.fabric`: `FabricManager.create()` builds a fabric from the
  detected topology. It can register and remove devices (`DeviceExists` when
  an id is already taken), `assess_capabilities` (`DeviceOffline` for an
  unknown node), `optimize_topology`, `route` and `total_hashrate_capacity`.
- `chimera.sha256`: `Sha256Engine` computes SHA-256(data || nonce), with the
  nonce encoded as 8 little-endian bytes, for one nonce or for a batch.
  `verify_difficulty(hash, target)` compares the common prefix of the two
  byte by byte and treats an equal prefix as passing.
- `chimera.crypto`: `CryptoEngine`, configured by `CryptoConfig`, implements
  the `CryptographicTransform` interface using `Sha256Engine`, together with
  `estimate_cost`. The module also defines the `CryptoError` exceptions.
- `chimera.bus`: `BusManager` routes messages between nodes inside one
  process. The message types are `ComputeTask`, `ComputeResult`, `Heartbeat`
  and `Data`. Each node receives on an `asyncio.Queue` made by
  `create_node_channel(buffer)`. `send` raises `NodeNotFound`, and
  `publish` raises `TopicNotFound` when a topic has no subscribers.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import asyncio

from chimera.bus import BusManager, Data, create_node_channel
from chimera.primitives import NodeId, Nonce
from chimera.sha256 import Sha256Engine, verify_difficulty


async def main():
    engine = Sha256Engine()
    digest = await engine.compute(Nonce(12345), b"chimera_block_data")
    print(verify_difficulty(digest, bytes([0xFF] * 32)))

    bus = BusManager()
    node = NodeId()
    channel = create_node_channel(16)
    await bus.register_node(node, channel)
    await bus.send(node, Data(topic="test", payload=b"\x01\x02\x03"))
    print(await channel.get())


asyncio.run(main())
```

The APIs for the bus, the fabric, the topology manager, the crypto engine
and `MemoryManager.allocate` are asyncio coroutines. The transform, batch
hashing, alchemist and topology APIs are synchronous.

## What it does not do

- The bus is in-process only. It has no network transport, server or
  persistence.
- Hardware detection reports just the local CPU, using `os.cpu_count()`.
  Other devices have to be registered by hand. Hashing always runs on the
  CPU: `CryptoEngine.optimize_for_fabric` does not choose any GPU or FPGA
  backend.
- There is no command-line program, no loading or execution of sandboxed
  modules, and no evolution of strategies.