import numpy as np
import pytest

from linbench.data import Dataset, generate
from linbench.errors import DimensionMismatchError, InvalidConfigurationError


def test_generate_shapes_and_exact_targets():
    w, ds = generate(4, 10, rng_seed=0)
    assert w.shape == (4,)
    assert ds.inputs.shape == (10, 4) and ds.targets.shape == (10,)
    assert ds.dimension == 4 and ds.sample_count == 10 and len(ds) == 10
    # targets are the exact linear combination, not an approximation
    assert np.array_equal(ds.targets, ds.inputs @ w)
    assert np.all((w >= 0) & (w < 1))
    assert np.all((ds.inputs >= 0) & (ds.inputs < 1))


def test_generate_is_reproducible_and_seed_sensitive():
    w1, d1 = generate(3, 5, rng_seed=42)
    w2, d2 = generate(3, 5, rng_seed=42)
    w3, _ = generate(3, 5, rng_seed=43)
    assert np.array_equal(w1, w2) and np.array_equal(d1.inputs, d2.inputs)
    assert not np.array_equal(w1, w3)


def test_generate_accepts_generator():
    w1, _ = generate(3, 3, rng=np.random.default_rng(7))
    w2, _ = generate(3, 3, rng_seed=7)
    assert np.array_equal(w1, w2)


def test_generate_leaves_global_state_alone():
    np.random.seed(0)
    expected = np.random.rand()
    np.random.seed(0)
    generate(3, 3)
    assert np.random.rand() == expected


def test_weights_and_dataset_are_read_only():
    w, ds = generate(2, 2, rng_seed=1)
    with pytest.raises(ValueError):
        w[0] = 1.0
    with pytest.raises(ValueError):
        ds.inputs[0, 0] = 1.0
    with pytest.raises(ValueError):
        ds.targets[0] = 1.0


def test_dataset_indexing_yields_samples():
    w, ds = generate(3, 4, rng_seed=2)
    x, t = ds[1]
    assert x.shape == (3,)
    assert t == pytest.approx(float(x @ w), abs=1e-15)


@pytest.mark.parametrize("d,n", [(0, 3), (3, 2), (-1, 1)])
def test_generate_rejects_invalid_sizes(d, n):
    with pytest.raises(InvalidConfigurationError):
        generate(d, n, rng_seed=0)


def test_dataset_rejects_mismatched_targets():
    with pytest.raises(DimensionMismatchError):
        Dataset(np.ones((3, 2)), np.ones(4))
