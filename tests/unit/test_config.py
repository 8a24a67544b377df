"""Tests for config loading, local overlays and environment overrides."""
from __future__ import annotations

import math
from pathlib import Path

import pytest
import yaml

import fftengine
from fftengine import config as config_module
from fftengine.config import (
    EngineConfig,
    coerce_env_value,
    get_config,
    load_config,
    local_config_path,
    set_config,
)
from fftengine.registry import reset_registry


@pytest.fixture
def no_env(monkeypatch):
    monkeypatch.setattr(config_module, "os_environ_items", lambda: [])


def test_defaults_when_file_missing(tmp_path: Path, no_env) -> None:
    config = load_config(tmp_path / "missing.yaml")

    assert config.registry.use_variants is True
    assert config.registry.disabled == []
    assert config.validation.tolerance == 1e-9
    assert config.validation.seed == 42
    assert config.logging.level == "WARNING"
    assert 4096 in config.twiddle.precompute_sizes


def test_load_config_overlays_local_file(tmp_path: Path, no_env) -> None:
    base_path = tmp_path / "fftengine.yaml"
    local_path = tmp_path / "fftengine.local.yaml"

    base_path.write_text(
        yaml.safe_dump(
            {
                "registry": {"use_variants": True, "disabled": ["unrolled-2"]},
                "validation": {"tolerance": 1e-8, "seed": 1},
            }
        ),
        encoding="utf-8",
    )
    local_path.write_text(
        yaml.safe_dump({"validation": {"seed": 99}, "logging": {"level": "DEBUG"}}),
        encoding="utf-8",
    )

    config = load_config(str(base_path))

    assert config.registry.disabled == ["unrolled-2"]
    assert config.validation.tolerance == 1e-8
    assert config.validation.seed == 99
    assert config.logging.level == "DEBUG"


def test_local_config_path() -> None:
    assert local_config_path(Path("conf/fftengine.yaml")) == Path("conf/fftengine.local.yaml")


def test_environment_overrides(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        config_module,
        "os_environ_items",
        lambda: [
            ("FFTENGINE__VALIDATION__TOLERANCE", "1e-6"),
            ("FFTENGINE__REGISTRY__USE_VARIANTS", "false"),
            ("FFTENGINE__REGISTRY__DISABLED", "table-driven-32, unrolled-8"),
            ("FFTENGINE__UNKNOWN__KEY", "1"),
            ("FFTENGINE__TOO__MANY__PARTS", "1"),
            ("OTHER__VALIDATION__SEED", "5"),
        ],
    )

    config = load_config(tmp_path / "fftengine.yaml")

    assert config.validation.tolerance == 1e-6
    assert config.validation.seed == 42
    assert config.registry.use_variants is False
    assert config.registry.disabled == ["table-driven-32", "unrolled-8"]


def test_root_must_be_mapping(tmp_path: Path, no_env) -> None:
    path = tmp_path / "fftengine.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_section_must_be_mapping(tmp_path: Path, no_env) -> None:
    path = tmp_path / "fftengine.yaml"
    path.write_text("validation: 5\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_unknown_key_rejected(tmp_path: Path, no_env) -> None:
    path = tmp_path / "fftengine.yaml"
    path.write_text("validation:\n  tolerence: 1.0\n", encoding="utf-8")

    with pytest.raises(TypeError):
        load_config(path)


@pytest.mark.parametrize(
    "raw,expected",
    [("true", True), ("FALSE", False), ("12", 12), ("1e-9", 1e-9), ("0.5", 0.5), ("abc", "abc")],
)
def test_coerce_env_value(raw: str, expected) -> None:
    assert coerce_env_value(raw) == expected


def test_set_and_get_config() -> None:
    cfg = EngineConfig()
    cfg.validation.seed = 3
    set_config(cfg)

    assert get_config() is cfg
    assert get_config().validation.seed == 3


@pytest.mark.parametrize("raw,expected", [("1024", [1024]), ("8,16", [8, 16]), (" 32 , 64 ", [32, 64])])
def test_precompute_sizes_from_environment(tmp_path: Path, monkeypatch, raw: str, expected) -> None:
    monkeypatch.setattr(
        config_module,
        "os_environ_items",
        lambda: [("FFTENGINE__TWIDDLE__PRECOMPUTE_SIZES", raw)],
    )

    config = load_config(tmp_path / "fftengine.yaml")

    assert config.twiddle.precompute_sizes == expected


def test_precompute_sizes_scalar_in_yaml(tmp_path: Path, no_env) -> None:
    path = tmp_path / "fftengine.yaml"
    path.write_text("twiddle:\n  precompute_sizes: 1024\n", encoding="utf-8")

    assert load_config(path).twiddle.precompute_sizes == [1024]


@pytest.mark.parametrize("value", ["[10]", "[8, true]", "8,10", "eight", "[0]", "[16.0]"])
def test_precompute_sizes_rejected_at_load(tmp_path: Path, no_env, value: str) -> None:
    path = tmp_path / "fftengine.yaml"
    path.write_text(f"twiddle:\n  precompute_sizes: {value}\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_environment_sizes_usable_by_transform(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(
        config_module,
        "os_environ_items",
        lambda: [("FFTENGINE__TWIDDLE__PRECOMPUTE_SIZES", "8,16")],
    )
    set_config(load_config(tmp_path / "fftengine.yaml"))
    reset_registry()

    spectrum = fftengine.transform([1, 2, 3, 4, 5, 6, 7, 8])

    assert spectrum.magnitude_at(0) == pytest.approx(36 / math.sqrt(8))
