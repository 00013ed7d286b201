import math

import numpy as np
import pytest

from linbench.data import generate
from linbench.errors import DimensionMismatchError, InvalidConfigurationError
from linbench.optim import AdamConfig, AdamState, adam_step
from linbench.schedules import constant, cosine, exponential, make_schedule
from linbench.trainer import mse_grad


def test_first_adam_step_moves_by_lr_against_gradient_sign():
    # bias correction makes |m_hat| / sqrt(v_hat) == 1 on the first step
    w = np.array([1.0, -2.0, 0.5])
    g = np.array([0.3, -4.0, 0.0])
    state = AdamState.zeros(3)
    adam_step(w, g, state, 0.1, AdamConfig(epsilon=1e-12))
    assert state.step == 1
    assert np.allclose(w, [0.9, -1.9, 0.5])


def test_adam_state_is_per_instance():
    cfg = AdamConfig()
    s1, s2 = AdamState.zeros(2), AdamState.zeros(2)
    adam_step(np.zeros(2), np.ones(2), s1, 1e-3, cfg)
    assert s1.step == 1 and s2.step == 0
    assert np.all(s2.m == 0) and np.all(s2.v == 0)


def test_adam_step_rejects_shape_mismatch():
    with pytest.raises(DimensionMismatchError):
        adam_step(np.zeros(3), np.zeros(2), AdamState.zeros(3), 1e-3, AdamConfig())


def test_adam_matches_torch_reference():
    torch = pytest.importorskip("torch")
    _, ds = generate(3, 10, rng_seed=0)
    X, y = np.array(ds.inputs), np.array(ds.targets)
    w0 = np.full(3, 0.5)

    p = torch.tensor(w0, dtype=torch.float64, requires_grad=True)
    Xt, yt = torch.tensor(X), torch.tensor(y)
    opt = torch.optim.Adam([p], lr=1e-2, betas=(0.9, 0.999), eps=1e-8)
    for _ in range(50):
        opt.zero_grad()
        loss = torch.mean((Xt @ p - yt) ** 2)
        loss.backward()
        opt.step()

    w = w0.copy()
    state = AdamState.zeros(3)
    for _ in range(50):
        adam_step(w, mse_grad(w, X, y), state, 1e-2, AdamConfig(0.9, 0.999, 1e-8))
    assert np.allclose(w, p.detach().numpy(), rtol=1e-10, atol=1e-12)


def test_constant_schedule():
    lr_at = constant(0.01)
    assert lr_at(0) == lr_at(10_000) == 0.01


def test_cosine_schedule_warmup_and_floor():
    lr_at = cosine(1e-2, total_steps=110, warmup_steps=10, min_lr=1e-4)
    assert lr_at(0) == pytest.approx(1e-3)
    assert lr_at(9) == pytest.approx(1e-2)
    assert lr_at(10) == pytest.approx(1e-2)
    assert lr_at(60) == pytest.approx(1e-4 + (1e-2 - 1e-4) * 0.5)
    assert lr_at(110) == pytest.approx(1e-4)
    assert lr_at(500) == pytest.approx(1e-4)


def test_exponential_schedule_halves_every_decay_period():
    lr_at = exponential(1e-2, decay_rate=0.5, decay_steps=100)
    assert lr_at(100) == pytest.approx(5e-3)
    assert lr_at(300) == pytest.approx(1.25e-3)
    assert lr_at(50) == pytest.approx(1e-2 / math.sqrt(2))


def test_make_schedule_dispatch_and_errors():
    assert make_schedule("constant", 0.1)(5) == 0.1
    assert make_schedule("Cosine", 0.1, total_steps=10)(0) == pytest.approx(0.1)
    with pytest.raises(InvalidConfigurationError):
        make_schedule("linear", 0.1)
    with pytest.raises(InvalidConfigurationError):
        make_schedule("exponential", 0.1, decay_steps=0)
