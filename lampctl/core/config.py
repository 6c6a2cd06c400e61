"""Loading and validation of the optional YAML user configuration."""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validators

from lampctl.core.color import NAMED_COLORS, parse_hex_color
from lampctl.core.errors import ConfigLoadError, ConfigValidationError, ValidationError
from lampctl.core.model import ColorIntensity, CycleDefaults, LampConfig

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# keep "on"/"off" and friends as plain strings, they are color names here
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("lampctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def config_path() -> Path:
    explicit = os.environ.get("LAMPCTL_CONFIG")
    if explicit:
        return Path(explicit)
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "lampctl/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _build_config(doc: dict[str, Any], source: Path) -> LampConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except SchemaValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    base = CycleDefaults()
    section = doc.get("defaults", {})
    defaults = CycleDefaults(
        on_ms=int(section.get("on_ms", base.on_ms)),
        off_ms=int(section.get("off_ms", base.off_ms)),
        frequency=int(section.get("frequency", base.frequency)),
    )

    warnings: list[str] = []
    colors: dict[str, ColorIntensity] = {}
    for name, hex_value in doc.get("colors", {}).items():
        key = str(name).strip().lower()
        try:
            colors[key] = parse_hex_color(str(hex_value))
        except ValidationError as exc:
            raise ConfigValidationError(f"colors.{name} in {source}: {exc}") from exc
        if key in NAMED_COLORS:
            warning = f"User color '{key}' overrides built-in color"
            LOGGER.warning(warning)
            warnings.append(warning)

    return LampConfig(
        defaults=defaults,
        colors=colors,
        warnings=tuple(warnings),
        source=str(source),
    )


def load_config() -> LampConfig:
    path = config_path()
    if not path.exists():
        LOGGER.debug("No config file at %s, using defaults", path)
        return LampConfig()
    return _build_config(_read_yaml(path), path)
