from pathlib import Path

import pytest

from linbench.config import ExperimentConfig, load_config
from linbench.errors import InvalidConfigurationError

REPO = Path(__file__).resolve().parents[1]


def test_shipped_configs_load():
    cfg = load_config(REPO / "configs" / "default.yaml")
    assert (cfg.dimension, cfg.sample_count, cfg.iterations, cfg.rng_seed) == (3, 3, 20000, 42)
    assert cfg.learning_rate == pytest.approx(1e-3)
    assert cfg.batch_size is None
    assert cfg.fit_bias is True and cfg.dtype == "float32"
    over = load_config(REPO / "configs" / "overdetermined.yaml")
    assert over.sample_count == 100


def test_yaml_scientific_notation_is_coerced(tmp_path: Path):
    p = tmp_path / "cfg.yaml"
    p.write_text("dimension: 2\nsample_count: 4\nlearning_rate: 1e-2\nepsilon: 1e-7\n")
    cfg = load_config(p)
    assert cfg.learning_rate == pytest.approx(1e-2) and isinstance(cfg.learning_rate, float)
    assert cfg.epsilon == pytest.approx(1e-7)


def test_empty_yaml_gives_defaults(tmp_path: Path):
    p = tmp_path / "empty.yaml"
    p.write_text("")
    assert load_config(p).to_dict() == ExperimentConfig().to_dict()


@pytest.mark.parametrize(
    "overrides",
    [
        {"dimension": 0},
        {"dimension": 4, "sample_count": 3},
        {"iterations": -1},
        {"learning_rate": 0},
        {"beta1": 1.0},
        {"beta2": -0.1},
        {"schedule": "step"},
        {"batch_size": 0},
        {"sample_count": 3, "batch_size": 4},
        {"condition_threshold": 0.5},
        {"log_every": 0},
        {"learning_rate": "fast"},
        {"dtype": "float16"},
        {"fit_bias": "yes"},
    ],
)
def test_invalid_values_raise(overrides):
    with pytest.raises(InvalidConfigurationError):
        ExperimentConfig.from_dict(overrides)


def test_unknown_key_raises():
    with pytest.raises(InvalidConfigurationError) as exc:
        ExperimentConfig.from_dict({"dimensions": 3})
    assert "dimensions" in str(exc.value)


def test_non_mapping_yaml_raises(tmp_path: Path):
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n")
    with pytest.raises(InvalidConfigurationError):
        load_config(p)


def test_replace_ignores_none_and_validates():
    cfg = ExperimentConfig()
    assert cfg.replace(iterations=None).iterations == cfg.iterations
    assert cfg.replace(sample_count=50).sample_count == 50
    with pytest.raises(InvalidConfigurationError):
        cfg.replace(sample_count=1)


def test_unseeded_clears_seed_and_keeps_the_rest():
    cfg = ExperimentConfig(sample_count=10, rng_seed=3)
    free = cfg.unseeded()
    assert free.rng_seed is None and free.sample_count == 10
    assert cfg.rng_seed == 3
    # replace drops None, so it cannot clear the seed
    assert cfg.replace(rng_seed=None).rng_seed == 3
