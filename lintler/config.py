"""Optional YAML configuration for lintler.

Nothing is read unless a path is passed explicitly (``--config``). Example:

    extensions:
      xhtml: xml
      geojson: json
    markup:
      angle_brackets: true
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import jsonschema
import yaml

BUILTIN_EXTENSIONS = {"xml": "xml", "json": "json", "csv": "csv"}

CONFIG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "extensions": {
            "type": "object",
            "additionalProperties": {"enum": sorted(BUILTIN_EXTENSIONS)},
        },
        "markup": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "angle_brackets": {"type": "boolean"},
            },
        },
    },
}


class ConfigError(Exception):
    """Configuration file is unreadable, not YAML, or fails the schema."""


@dataclass
class Config:
    extensions: dict[str, str] = field(default_factory=lambda: dict(BUILTIN_EXTENSIONS))
    angle_brackets: bool = False

    def kind_for(self, ext: str) -> Optional[str]:
        """Checker kind for an extension (case-insensitive), or None."""
        return self.extensions.get(ext.lower())


def load_config(path: Optional[str]) -> Config:
    if path is None:
        return Config()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Could not read config file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file '{path}' is not valid YAML: {e}") from e

    if data is None:
        return Config()

    try:
        jsonschema.validate(data, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"Config file '{path}' is invalid at {where}: {e.message}") from e

    return build_config(data, source=Path(path).name)


def build_config(data: dict, source: str = "<config>") -> Config:
    cfg = Config()
    for ext, kind in (data.get("extensions") or {}).items():
        key = str(ext).lower().lstrip(".")
        if key in BUILTIN_EXTENSIONS and kind != BUILTIN_EXTENSIONS[key]:
            raise ConfigError(f"{source}: built-in extension '{key}' cannot be remapped to '{kind}'")
        cfg.extensions[key] = kind
    cfg.angle_brackets = bool((data.get("markup") or {}).get("angle_brackets", False))
    return cfg
