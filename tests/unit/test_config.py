import pytest

from cratenav.config import NavConfig, load_config_from_path
from cratenav.hir import CfgAtom
from cratenav.spec import ConfigError


def test_defaults_without_any_file(tmp_path):
    assert load_config_from_path(tmp_path) == NavConfig()


def test_reads_cratenav_toml(workspace_factory):
    root = workspace_factory.with_config(
        """
        roots = ["src/main.rs"]
        cfg = ["unix", 'target_os = "linux"']
        features = ["serde"]
        exclude = ["vendor"]
        """
    ).build()

    config = load_config_from_path(root)

    assert config.roots == ["src/main.rs"]
    assert config.exclude == ["vendor"]
    assert config.cfg_options(["test"]).atoms == frozenset(
        {
            CfgAtom("unix"),
            CfgAtom("target_os", "linux"),
            CfgAtom("feature", "serde"),
            CfgAtom("test"),
        }
    )


def test_falls_back_to_cargo_metadata(workspace_factory):
    root = workspace_factory.with_cargo_toml(
        extra="""
        [package.metadata.cratenav]
        features = ["std"]
        """
    ).build()

    config = load_config_from_path(root)

    assert config.features == ["std"]


def test_cargo_toml_without_metadata_gives_defaults(workspace_factory):
    root = workspace_factory.with_cargo_toml().build()

    assert load_config_from_path(root) == NavConfig()


def test_invalid_toml_raises_config_error(workspace_factory):
    root = workspace_factory.with_raw_file("cratenav.toml", "roots = [").build()

    with pytest.raises(ConfigError):
        load_config_from_path(root)


def test_wrongly_typed_values_raise_config_error(workspace_factory):
    root = workspace_factory.with_config('cfg = "unix"').build()

    with pytest.raises(ConfigError, match="'cfg' must be a list of strings"):
        load_config_from_path(root)
