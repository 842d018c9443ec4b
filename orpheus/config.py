"""Runtime settings for the synthesizer."""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from .constants import (
    CHUNK_SIZE,
    CROSSFADE_MS,
    PEAK_DEFAULT,
    PITCH_DROP_HZ,
    PITCH_START_HZ,
    SAMPLE_RATE,
    SYNTHESIS_LAYERS,
)
from .errors import ConfigurationError

__all__ = ["SynthesisSettings", "DEFAULT_SETTINGS"]

CONFIG_FILE_ENCODING = "utf-8"

# environment variable -> settings field
_ENV_FIELDS: Dict[str, str] = {
    "ORPHEUS_SYNTHESIS_LAYERS": "synthesis_layers",
    "ORPHEUS_CHUNK_SIZE": "chunk_size",
    "ORPHEUS_MASTER_VOLUME": "master_volume",
}


@dataclass(frozen=True)
class SynthesisSettings:
    """Tunable constants of the synthesis pipeline."""

    sample_rate: int = SAMPLE_RATE
    chunk_size: int = CHUNK_SIZE
    synthesis_layers: int = SYNTHESIS_LAYERS
    master_volume: float = PEAK_DEFAULT
    crossfade_ms: float = CROSSFADE_MS
    pitch_start_hz: float = PITCH_START_HZ
    pitch_drop_hz: float = PITCH_DROP_HZ

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive: {self.sample_rate}")
        if self.chunk_size <= 0 or self.chunk_size % 2:
            raise ConfigurationError(f"chunk_size must be a positive even byte count: {self.chunk_size}")
        if not 0.0 < self.master_volume <= 1.0:
            raise ConfigurationError(f"master_volume must be in (0, 1]: {self.master_volume}")
        if self.synthesis_layers < 1:
            object.__setattr__(self, "synthesis_layers", 1)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SynthesisSettings":
        """Build settings from a mapping, ignoring unknown keys."""
        values: Dict[str, Any] = {}
        for field_info in fields(cls):
            if field_info.name not in data:
                continue
            caster = int if field_info.type in ("int", int) else float
            try:
                values[field_info.name] = caster(data[field_info.name])
            except (TypeError, ValueError) as error:
                raise ConfigurationError(
                    f"Invalid value for {field_info.name}: {data[field_info.name]!r}"
                ) from error
        return cls(**values)

    @classmethod
    def from_file(cls, path: str) -> "SynthesisSettings":
        """Load settings from a JSON file.

        Args:
            path (str): Path to a JSON object whose keys are field names.

        Returns:
            SynthesisSettings: Settings with file values over the defaults.
        """
        try:
            with open(path, "r", encoding=CONFIG_FILE_ENCODING) as config_file:
                data = json.load(config_file)
        except FileNotFoundError as error:
            raise ConfigurationError(f"Settings file not found: {path}") from error
        except json.JSONDecodeError as error:
            raise ConfigurationError(f"Settings file is not valid JSON: {path}") from error
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file must contain a JSON object: {path}")
        return cls.from_mapping(data)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        base: Optional["SynthesisSettings"] = None,
    ) -> "SynthesisSettings":
        """Overlay ``ORPHEUS_*`` environment variables on ``base``."""
        environ = os.environ if environ is None else environ
        base = base or cls()
        overrides = {
            name: environ[key].strip()
            for key, name in _ENV_FIELDS.items()
            if environ.get(key, "").strip()
        }
        if not overrides:
            return base
        merged = {**base.to_dict(), **overrides}
        return cls.from_mapping(merged)

    def with_layers(self, layers: int) -> "SynthesisSettings":
        return replace(self, synthesis_layers=int(layers))


DEFAULT_SETTINGS = SynthesisSettings()
