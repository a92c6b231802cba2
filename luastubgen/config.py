"""Configuration loading for luastubgen (.luastubs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .constants import ENUMERABLE_STYLES

CONFIG_FILENAME = ".luastubs.yml"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_WORKERS = 4


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class AssemblyConfig:
    """One descriptor dump and the type filters applied to it."""

    path: Path
    types: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class GenericShapesConfig:
    """Extra generic definitions rendered as ``T[]`` or ``{ [K]: V }``."""

    list_shapes: List[str] = field(default_factory=list)
    dictionary_shapes: List[str] = field(default_factory=list)


@dataclass
class GeneratorConfig:
    """Represents the settings defined in .luastubs.yml."""

    root: Path
    assemblies: List[AssemblyConfig] = field(default_factory=list)
    output_dir: Optional[Path] = None
    workers: int = DEFAULT_WORKERS
    enumerable_style: str = "function"
    flatten_inheritance: bool = False
    templates_dir: Optional[Path] = None
    generic_shapes: GenericShapesConfig = field(default_factory=GenericShapesConfig)

    @property
    def resolved_output_dir(self) -> Path:
        return self.output_dir if self.output_dir is not None else self.root / DEFAULT_OUTPUT_DIR


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GeneratorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    assemblies: List[AssemblyConfig] = []
    raw_assemblies = data.get("assemblies")
    if raw_assemblies is not None and not isinstance(raw_assemblies, list):
        raise ConfigError("'assemblies' must be a list")
    for index, raw in enumerate(raw_assemblies or []):
        entry = _as_dict(raw)
        path = _as_str(entry.get("path"))
        if not path:
            raise ConfigError(f"assemblies[{index}] is missing 'path'")
        types = _as_str_list(entry.get("types")) or ["*"]
        assemblies.append(AssemblyConfig(path=root / path, types=types))

    output_dir_str = _as_str(data.get("output_dir"))
    templates_dir_str = _as_str(data.get("templates_dir"))

    workers = _as_int(data.get("workers"))
    if workers is not None and workers < 1:
        raise ConfigError("'workers' must be a positive integer")

    style = _as_str(data.get("enumerable_style")) or "function"
    if style not in ENUMERABLE_STYLES:
        allowed = ", ".join(ENUMERABLE_STYLES)
        raise ConfigError(f"'enumerable_style' must be one of: {allowed}")

    shapes_data = _as_dict(data.get("generic_shapes"))
    generic_shapes = GenericShapesConfig(
        list_shapes=_as_str_list(shapes_data.get("list")),
        dictionary_shapes=_as_str_list(shapes_data.get("dictionary")),
    )

    return GeneratorConfig(
        root=root,
        assemblies=assemblies,
        output_dir=root / output_dir_str if output_dir_str else None,
        workers=workers if workers is not None else DEFAULT_WORKERS,
        enumerable_style=style,
        flatten_inheritance=_as_bool(data.get("flatten_inheritance")) or False,
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        generic_shapes=generic_shapes,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float)) and not isinstance(item, bool)]
    return []


__all__ = [
    "AssemblyConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "GenericShapesConfig",
    "GeneratorConfig",
    "load_config",
]
