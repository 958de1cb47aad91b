import math
import random

import pytest

from chimera.primitives import Hash, Nonce, OpCost
from chimera.transforms import (
    ActivationFn,
    DimensionMismatch,
    Grad,
    GradientComputationFailed,
    HashTransform,
    InvalidInput,
    NonceTransform,
    NotDifferentiable,
    OpCostTransform,
    Transform,
    TransformChain,
    TransformError,
    VMap,
)


def test_error_messages_and_hierarchy():
    err = DimensionMismatch(3, 4)
    assert isinstance(err, TransformError)
    assert err.expected == 3 and err.actual == 4
    assert "expected 3" in str(err) and "got 4" in str(err)
    assert str(InvalidInput("bad")).startswith("Invalid input: ")
    assert str(GradientComputationFailed("x")).endswith("x")
    assert isinstance(NotDifferentiable("y"), TransformError)


def test_grad_compute_gives_one_value_per_argnum():
    grad = Grad(f=lambda v: v, argnums=[0, 1, 2])
    assert grad.values is None
    grad.compute(5)
    assert grad.values == [1.0, 1.0, 1.0]


def test_transform_defaults():
    t = NonceTransform(1, 100)
    assert t.gradient(Nonce(1)) is None
    assert t.cost() == OpCost.zero()


def test_transform_is_abstract():
    with pytest.raises(TypeError):
        Transform()


def test_vmap_applies_elementwise():
    vm = VMap(lambda n: n * 2)
    assert vm.apply([1, 2, 3]) == [2, 4, 6]
    assert vm.apply([]) == []
    assert vm.name() == "vmap_transform"


def test_transform_chain_composes_in_order():
    chain = TransformChain()
    assert len(chain) == 0
    assert chain.apply(Nonce(7)) == Nonce(7)
    chain.add(NonceTransform(1, 1000))
    chain.add(NonceTransform(10, 1000))
    assert len(chain) == 2
    assert chain.apply(Nonce(5)) == Nonce(16)


def test_nonce_transform_wraps():
    t = NonceTransform(3, 10)
    assert t.apply(Nonce(9)) == Nonce(2)
    assert t.apply(Nonce(4)) == Nonce(7)
    assert t.name() == "nonce_transform"


def test_nonce_transform_zero_max_raises():
    with pytest.raises(ZeroDivisionError):
        NonceTransform(1, 0).apply(Nonce(1))


def test_activation_linear_and_relu():
    for x in (-2.5, 0.0, 3.5):
        assert ActivationFn.LINEAR.apply(x) == x
        assert ActivationFn.LINEAR.derivative(x) == 1.0
    assert ActivationFn.RELU.apply(3.5) == 3.5
    assert ActivationFn.RELU.apply(-3.5) == 0.0
    assert ActivationFn.RELU.derivative(3.5) == 1.0
    assert ActivationFn.RELU.derivative(0.0) == 0.0


def test_activation_sigmoid_properties():
    s = ActivationFn.SIGMOID
    assert s.apply(0.0) == 0.5
    assert s.derivative(0.0) == 0.25
    for x in (-3.0, -0.5, 1.0, 4.0):
        assert math.isclose(s.apply(x) + s.apply(-x), 1.0)
        assert 0.0 < s.apply(x) < 1.0
    assert s.apply(-1000.0) == pytest.approx(0.0)
    assert s.apply(1000.0) == pytest.approx(1.0)


def test_activation_tanh_properties():
    t = ActivationFn.TANH
    for x in (-2.0, 0.3, 1.7):
        assert math.isclose(t.apply(-x), -t.apply(x))
        assert -1.0 < t.apply(x) < 1.0
        assert 0.0 < t.derivative(x) <= 1.0
    assert t.derivative(0.0) == 1.0


def test_hash_transform_shape_and_ranges():
    ht = HashTransform(32, ActivationFn.RELU, rng=random.Random(1))
    assert len(ht.weights) == 32
    assert all(-1.0 <= w <= 1.0 for w in ht.weights)
    assert -0.1 <= ht.bias <= 0.1
    out = ht.apply(Hash(bytes(range(32))))
    assert len(out) == 32
    assert all(v >= 0.0 for v in out)
    assert ht.name() == "hash_transform"


def test_hash_transform_zero_hash_yields_bias():
    ht = HashTransform(10, ActivationFn.LINEAR, rng=random.Random(3))
    assert ht.compute_approx(Hash.zero()) == [ht.bias] * 10


def test_hash_transform_dim_beyond_hash_wraps():
    ht = HashTransform(40, ActivationFn.SIGMOID, rng=random.Random(5))
    out = ht.compute_approx(Hash(bytes([255] * 32)))
    assert len(out) == 40
    assert all(0.0 < v < 1.0 for v in out)


def test_hash_transform_seed_is_deterministic():
    a = HashTransform(8, ActivationFn.TANH, rng=random.Random(42))
    b = HashTransform(8, ActivationFn.TANH, rng=random.Random(42))
    h = Hash(bytes(range(32)))
    assert a.apply(h) == b.apply(h)


def test_opcost_transform_weights():
    t = OpCostTransform(0.5, 0.3, 0.2)
    assert t.score(OpCost(1.0, 0.0, 0.0)) == 0.5
    assert t.score(OpCost(0.0, 1.0, 0.0)) == 0.3
    assert t.apply(OpCost(0.0, 0.0, 1.0)) == 0.2
    assert t.apply(OpCost.zero()) == 0.0
    assert t.name() == "opcost_transform"