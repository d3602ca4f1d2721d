from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from cratenav.hir import CfgOptions
from cratenav.spec import ConfigError

CONFIG_FILE = "cratenav.toml"
CARGO_MANIFEST = "Cargo.toml"


@dataclass
class NavConfig:
    # Crate root files relative to the workspace root. Empty means: discover
    # them from Cargo manifests.
    roots: List[str] = field(default_factory=list)
    cfg: List[str] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    def cfg_options(self, extra: Optional[List[str]] = None) -> CfgOptions:
        specs = list(self.cfg)
        specs.extend(f'feature="{feature}"' for feature in self.features)
        specs.extend(extra or [])
        return CfgOptions.from_specs(specs)


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def _string_list(data: Dict[str, Any], key: str, origin: Path) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{origin}: '{key}' must be a list of strings")
    return list(value)


def _from_table(table: Dict[str, Any], origin: Path) -> NavConfig:
    return NavConfig(
        roots=_string_list(table, "roots", origin),
        cfg=_string_list(table, "cfg", origin),
        features=_string_list(table, "features", origin),
        exclude=_string_list(table, "exclude", origin),
    )


def load_config_from_path(root_path: Path) -> NavConfig:
    """
    Loads settings from `cratenav.toml`, falling back to the
    `[package.metadata.cratenav]` table of `Cargo.toml`.
    """
    config_path = root_path / CONFIG_FILE
    if config_path.is_file():
        return _from_table(_read_toml(config_path), config_path)

    manifest_path = root_path / CARGO_MANIFEST
    if manifest_path.is_file():
        manifest = _read_toml(manifest_path)
        table = manifest.get("package", {}).get("metadata", {}).get("cratenav")
        if isinstance(table, dict):
            return _from_table(table, manifest_path)

    return NavConfig()
