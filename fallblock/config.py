"""
Configuration loader.

Reads a YAML file and turns it into a typed, immutable GameConfig. Keys
missing from the file fall back to the defaults below.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, fields, replace
from typing import Any

import yaml

from fallblock.game.pieces import MIN_FIELD_HEIGHT, MIN_FIELD_WIDTH
from fallblock.game.tetris import DEFAULT_FALL_INTERVAL, INPUT_REPEAT_INTERVAL


DEFAULT_CONFIG_PATH = pathlib.Path("config/game.yaml")


@dataclass(frozen=True)
class GameConfig:
    """Settings fixed at construction time."""
    field_width: int = 10
    field_height: int = 20
    preview_width: int = 4
    preview_height: int = 4
    fall_interval: float = DEFAULT_FALL_INTERVAL
    input_repeat_interval: float = INPUT_REPEAT_INTERVAL
    cell_size: int = 30
    fps: int = 60
    seed: int | None = None

    def __post_init__(self) -> None:
        for name in ("field_width", "field_height", "preview_width", "preview_height", "cell_size", "fps"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.field_width < MIN_FIELD_WIDTH or self.field_height < MIN_FIELD_HEIGHT:
            raise ValueError(
                f"field must be at least {MIN_FIELD_WIDTH}x{MIN_FIELD_HEIGHT} to spawn a piece, "
                f"got {self.field_width}x{self.field_height}"
            )
        if self.fall_interval <= 0:
            raise ValueError(f"fall_interval must be positive, got {self.fall_interval}")
        if self.input_repeat_interval < 0:
            raise ValueError(f"input_repeat_interval must not be negative, got {self.input_repeat_interval}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameConfig:
        """Build a config from a plain dict, ignoring unknown keys.

        Raises:
            ValueError: If a value has the wrong type or is out of range.
        """
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            raw = data[f.name]
            if f.name in ("fall_interval", "input_repeat_interval"):
                kwargs[f.name] = _as_float(f.name, raw)
            else:
                kwargs[f.name] = _as_int(f.name, raw)
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> GameConfig:
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _as_int(name: str, raw: Any) -> int:
    """Parse an integer setting, rejecting bools and fractional numbers."""
    if isinstance(raw, bool):
        raise ValueError(f"Invalid value for {name}: {raw!r}")
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"Invalid value for {name}: {raw!r}")
        return int(raw)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def _as_float(name: str, raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError(f"Invalid value for {name}: {raw!r}")
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def load_config(config_path: str | pathlib.Path = DEFAULT_CONFIG_PATH) -> GameConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        The parsed GameConfig.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If the file is not a mapping or holds invalid values.
    """
    config_path = pathlib.Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path, "r") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return GameConfig.from_dict(data)
