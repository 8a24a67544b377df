from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from fftengine.core.bitreverse import is_power_of_two

ENV_PREFIX = "FFTENGINE__"

DEFAULT_PRECOMPUTE_SIZES = [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096]


@dataclass
class RegistryConfig:
    # False makes resolve() return the reference for every size
    use_variants: bool = True
    # Implementation names resolve() skips, e.g. ["table-driven-64"]
    disabled: list[str] = field(default_factory=list)


@dataclass
class TwiddleConfig:
    precompute_sizes: list[int] = field(default_factory=lambda: list(DEFAULT_PRECOMPUTE_SIZES))


@dataclass
class ValidationConfig:
    """Defaults for the differential validation harness."""

    # Relative to max(1, peak magnitude of the reference checkpoint)
    tolerance: float = 1e-9
    # Seed for the random signals in the standard battery
    seed: int = 42


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class EngineConfig:
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    twiddle: TwiddleConfig = field(default_factory=TwiddleConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {
    "registry": RegistryConfig,
    "twiddle": TwiddleConfig,
    "validation": ValidationConfig,
    "logging": LoggingConfig,
}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping")
        return data


def _overlay(dst: dict[str, Any], src: dict[str, Any]) -> dict[str, Any]:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _overlay(dst[k], v)
        else:
            dst[k] = v
    return dst


def local_config_path(path: Path) -> Path:
    """Sibling override file: fftengine.yaml -> fftengine.local.yaml."""
    return path.with_name(f"{path.stem}.local{path.suffix}")


def load_config(path_str: str | Path) -> EngineConfig:
    path = Path(path_str)
    raw: dict[str, Any] = _read_yaml(path)
    _overlay(raw, _read_yaml(local_config_path(path)))

    # Environment overrides (prefix FFTENGINE__SECTION__KEY)
    # Example: FFTENGINE__VALIDATION__TOLERANCE=1e-6
    for k, v in os_environ_items():
        if not k.startswith(ENV_PREFIX):
            continue
        parts = k[len(ENV_PREFIX) :].split("__")
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.lower()
        key = key.lower()
        if section not in _SECTIONS:
            continue
        raw.setdefault(section, {})
        if isinstance(raw[section], dict):
            raw[section][key] = coerce_env_value(v)

    sections: dict[str, Any] = {}
    for name, cls in _SECTIONS.items():
        data = raw.get(name) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config section '{name}' must be a mapping")
        sections[name] = cls(**data)

    cfg = EngineConfig(**sections)
    if isinstance(cfg.registry.disabled, str):
        cfg.registry.disabled = [n.strip() for n in cfg.registry.disabled.split(",") if n.strip()]
    cfg.twiddle.precompute_sizes = parse_sizes(cfg.twiddle.precompute_sizes)
    return cfg


def parse_sizes(value: Any) -> list[int]:
    """Normalise a size list from YAML or the environment.

    Accepts a list, a single int (``1024``) or a comma-separated string
    (``"8,16"``).

    Raises:
        ValueError: If an entry is not a power-of-two integer
    """
    if isinstance(value, str):
        items: list[Any] = [part.strip() for part in value.split(",") if part.strip()]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        items = [value]

    sizes = []
    for item in items:
        if isinstance(item, str):
            try:
                item = int(item)
            except ValueError:
                raise ValueError(f"Invalid size in twiddle.precompute_sizes: {item!r}") from None
        if isinstance(item, bool) or not is_power_of_two(item):
            raise ValueError(
                f"twiddle.precompute_sizes entries must be powers of 2, got: {item!r}"
            )
        sizes.append(int(item))
    return sizes


def coerce_env_value(val: str) -> Any:
    # Basic bool/int/float coercion for convenience
    lower = val.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    try:
        return int(val)
    except ValueError:
        pass
    try:
        return float(val)
    except ValueError:
        return val


def os_environ_items() -> list[tuple[str, str]]:
    # Wrapped for testability
    from os import environ

    return [(k, v) for k, v in environ.items()]


_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_config() -> EngineConfig:
    """Process-wide config; defaults plus environment overrides until set."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config("fftengine.yaml")
    return _config


def set_config(cfg: EngineConfig | None) -> None:
    """Replace the process-wide config (None resets to lazy loading)."""
    global _config
    with _config_lock:
        _config = cfg
