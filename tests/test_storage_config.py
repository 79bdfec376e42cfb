import numpy as np
import pytest

from coretensor import StorageConfig, Tensor, config_override, get_default_config, set_default_config


def test_storage_config_normalization():
    cfg = StorageConfig(dtype="f4", growth_factor=3, stale_views="WARN").normalized()
    assert cfg.dtype == "float32"
    assert cfg.growth_factor == 3.0
    assert cfg.stale_views == "warn"
    assert cfg.resolved_dtype() == np.float32
    assert StorageConfig().resolved_dtype() == np.float64


@pytest.mark.parametrize(
    "kwargs",
    [
        {"growth_factor": 1.0},
        {"min_capacity": -1},
        {"stale_views": "explode"},
        {"dtype": "not-a-dtype"},
    ],
)
def test_storage_config_rejects_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        StorageConfig(**kwargs).normalized()


def test_config_override_restores_default():
    before = get_default_config()
    with config_override(dtype="int32") as cfg:
        assert cfg.dtype == "int32"
        assert Tensor().dtype == np.int32
    assert get_default_config() == before
    assert Tensor().dtype == np.float64


def test_set_default_config_returns_previous():
    previous = set_default_config(StorageConfig(min_capacity=8))
    try:
        assert Tensor.from_element_shape((2,)).capacity == 4
    finally:
        set_default_config(previous)
    assert get_default_config() == previous


def test_growth_factor_controls_relocation():
    t = Tensor.from_element_shape((), config=StorageConfig(growth_factor=3.0))
    t.append(1)
    assert t.capacity == 1
    t.append(2)
    assert t.capacity == 3
    t.append(3)
    assert t.capacity == 3
    assert t.config.growth_factor == 3.0


def test_derived_tensors_inherit_config():
    cfg = StorageConfig(stale_views="ignore")
    t = Tensor.increasing_from((2, 2), config=cfg)
    assert t[0].config.stale_views == "ignore"
    assert t.view(1).config is t.config
    assert t.copy().config.stale_views == "ignore"
