import pytest

from palette_recolour import config as config_mod
from palette_recolour.config import (
    RecolourConfig,
    default_workers,
    required_palette_size,
)
from palette_recolour.errors import ConfigError


def test_defaults():
    cfg = RecolourConfig().validate()
    assert cfg.interpolation_mode is None
    assert cfg.mix_strength == 1.0
    assert cfg.saturation is None
    assert cfg.working_space == "oklab"
    assert cfg.output_path is None
    assert cfg.required_palette_size == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"interpolation_mode": "blend"},
        {"working_space": "hsv"},
        {"mix_strength": -0.1},
        {"mix_strength": 1.5},
        {"saturation": 1.01},
        {"saturation": -2.0},
    ],
)
def test_out_of_range_settings_rejected(kwargs):
    with pytest.raises(ConfigError):
        RecolourConfig(**kwargs).validate()


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_mix_strength_bounds_accepted(value):
    assert RecolourConfig(mix_strength=value).validate().mix_strength == value


def test_required_palette_size():
    assert required_palette_size(None) == 1
    assert required_palette_size("mix") == 2
    assert required_palette_size("interpolate") == 2
    assert RecolourConfig(interpolation_mode="mix").required_palette_size == 2


@pytest.mark.parametrize(
    "cpus, expected", [(1, 1), (4, 3), (8, 6), (16, 13), (32, 28), (None, 3)]
)
def test_default_workers_reserves_cores(monkeypatch, cpus, expected):
    monkeypatch.setattr(config_mod.os, "cpu_count", lambda: cpus)
    assert default_workers() == expected
