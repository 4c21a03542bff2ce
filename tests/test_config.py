"""Tests for configuration loading and merging."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from vartypes.config.loader import (
    BUILTIN_MODE_ENV,
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    load_config,
    load_yaml_config,
    local_config_exists,
    remember_target_folder,
    resolve_assets_root,
    resolve_templates_path,
    save_config,
)
from vartypes.config.schema import DEFAULT_CONFIG, VarTypesConfig, coerce_bool
from vartypes.metadata import DEFAULT_MENU_ORDER


@pytest.fixture
def config_paths(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[tuple[Path, Path]]:
    """Point home and local config at temporary files."""
    monkeypatch.delenv(BUILTIN_MODE_ENV, raising=False)
    home_config = tmp_path / "home" / ".vartypes" / "config.yaml"
    local_config = tmp_path / "local" / ".vartypes" / "config.yaml"
    with (
        patch("vartypes.config.loader.get_home_config_path", return_value=home_config),
        patch(
            "vartypes.config.loader.get_local_config_path", return_value=local_config
        ),
    ):
        yield home_config, local_config


class TestVarTypesConfig:
    """Tests for VarTypesConfig dataclass."""

    def test_default_config_values(self) -> None:
        """Test that DEFAULT_CONFIG has expected values."""
        assert DEFAULT_CONFIG.assets_root == "Assets"
        assert DEFAULT_CONFIG.builtin_mode is False
        assert DEFAULT_CONFIG.default_menu_order == DEFAULT_MENU_ORDER
        assert DEFAULT_CONFIG.templates_path is None
        assert DEFAULT_CONFIG.last_target_folder is None

    def test_merge_prefers_other_values(self) -> None:
        """Test that merge prefers values from 'other' when set."""
        base = VarTypesConfig(assets_root="Assets", default_menu_order=1)
        override = VarTypesConfig(assets_root="Game", default_menu_order=2)
        merged = base.merge(override)

        assert merged.assets_root == "Game"
        assert merged.default_menu_order == 2

    def test_merge_preserves_base_when_other_is_none(self) -> None:
        """Test that merge preserves base values when other is None."""
        base = VarTypesConfig(assets_root="Assets", templates_path="tpl")
        override = VarTypesConfig(assets_root="Game")
        merged = base.merge(override)

        assert merged.assets_root == "Game"
        assert merged.templates_path == "tpl"

    def test_merge_keeps_explicit_false(self) -> None:
        """Test that False overrides True rather than counting as unset."""
        merged = VarTypesConfig(builtin_mode=True).merge(
            VarTypesConfig(builtin_mode=False)
        )
        assert merged.builtin_mode is False

    def test_merge_returns_new_instance(self) -> None:
        """Test that merge returns a new instance, not mutating originals."""
        base = VarTypesConfig(assets_root="Assets")
        override = VarTypesConfig(default_menu_order=4)
        merged = base.merge(override)

        assert merged is not base
        assert merged is not override
        assert base.default_menu_order is None
        assert override.assets_root is None

    def test_to_dict_excludes_none(self) -> None:
        """Test that to_dict excludes None values."""
        data = VarTypesConfig(assets_root="Assets", builtin_mode=False).to_dict()

        assert data == {"assets_root": "Assets", "builtin_mode": False}

    def test_from_dict_ignores_unknown_keys(self) -> None:
        """Test that from_dict ignores unknown keys."""
        config = VarTypesConfig.from_dict({"assets_root": "Game", "unknown": 1})

        assert config.assets_root == "Game"
        assert not hasattr(config, "unknown")

    def test_from_dict_coerces_types(self) -> None:
        """Test that from_dict coerces types appropriately."""
        config = VarTypesConfig.from_dict(
            {"default_menu_order": "12", "builtin_mode": "yes", "assets_root": 5}
        )

        assert config.default_menu_order == 12
        assert config.builtin_mode is True
        assert config.assets_root == "5"

    def test_from_dict_drops_bad_menu_order(self) -> None:
        """Test that an unparsable menu order is treated as unset."""
        config = VarTypesConfig.from_dict({"default_menu_order": "high"})
        assert config.default_menu_order is None

    def test_roundtrip(self) -> None:
        """Test to_dict/from_dict roundtrip."""
        config = VarTypesConfig(
            assets_root="Assets",
            templates_path="~/tpl",
            builtin_mode=True,
            default_menu_order=7,
            last_target_folder="/tmp/x",
        )
        assert VarTypesConfig.from_dict(config.to_dict()) == config

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, None),
            ("1", True),
            ("true", True),
            ("On", True),
            ("0", False),
            ("no", False),
            (True, True),
            (0, False),
        ],
    )
    def test_coerce_bool(self, raw: object, expected: bool | None) -> None:
        """Test boolean coercion of config and environment values."""
        assert coerce_bool(raw) is expected


class TestConfigPaths:
    """Tests for config path functions."""

    def test_get_home_config_path(self) -> None:
        """Test that home config path is in ~/.vartypes/."""
        path = get_home_config_path()
        assert path.name == "config.yaml"
        assert path.parent.name == ".vartypes"
        assert path.parent.parent == Path.home()

    def test_get_local_config_path(self, tmp_path: Path) -> None:
        """Test that local config path is in ./.vartypes/."""
        with patch("vartypes.config.loader.Path.cwd", return_value=tmp_path):
            path = get_local_config_path()
            assert path.name == "config.yaml"
            assert path.parent.name == ".vartypes"
            assert path.parent.parent == tmp_path

    def test_config_exists(self, config_paths: tuple[Path, Path]) -> None:
        """Test the existence checks of both config files."""
        home_config, local_config = config_paths
        assert home_config_exists() is False
        assert local_config_exists() is False

        home_config.parent.mkdir(parents=True)
        home_config.write_text("builtin_mode: true\n")
        assert home_config_exists() is True


class TestConfigLoading:
    """Tests for config file loading."""

    def test_load_yaml_config_returns_dict(self, tmp_path: Path) -> None:
        """Test that load_yaml_config returns a dictionary."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("assets_root: Game\ndefault_menu_order: 4\n")

        data = load_yaml_config(config_file)
        assert data == {"assets_root": "Game", "default_menu_order": 4}

    def test_load_yaml_config_returns_none_for_missing_file(
        self, tmp_path: Path
    ) -> None:
        """Test that load_yaml_config returns None for missing file."""
        assert load_yaml_config(tmp_path / "nonexistent.yaml") is None

    def test_load_yaml_config_returns_none_for_empty_file(self, tmp_path: Path) -> None:
        """Test that load_yaml_config returns None for empty file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert load_yaml_config(config_file) is None

    def test_load_yaml_config_returns_none_for_invalid_yaml(
        self, tmp_path: Path
    ) -> None:
        """Test that load_yaml_config returns None for invalid YAML."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("invalid: yaml: content: [")

        assert load_yaml_config(config_file) is None

    def test_load_yaml_config_returns_none_for_list(self, tmp_path: Path) -> None:
        """Test that a top-level list is ignored."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- a\n- b\n")

        assert load_yaml_config(config_file) is None


class TestConfigMerging:
    """Tests for config loading and merging."""

    def test_load_config_uses_defaults_when_no_files(
        self, config_paths: tuple[Path, Path]
    ) -> None:
        """Test that load_config uses defaults when no config files exist."""
        assert load_config() == DEFAULT_CONFIG

    def test_load_config_applies_home_config(
        self, config_paths: tuple[Path, Path]
    ) -> None:
        """Test that load_config applies home config values."""
        home_config, _ = config_paths
        home_config.parent.mkdir(parents=True)
        home_config.write_text("templates_path: ~/tpl\ndefault_menu_order: 2\n")

        config = load_config()

        assert config.templates_path == "~/tpl"
        assert config.default_menu_order == 2
        # Default values still apply
        assert config.assets_root == "Assets"

    def test_load_config_local_overrides_home(
        self, config_paths: tuple[Path, Path]
    ) -> None:
        """Test that local config overrides home config values."""
        home_config, local_config = config_paths
        home_config.parent.mkdir(parents=True)
        home_config.write_text("templates_path: ~/tpl\ndefault_menu_order: 2\n")
        local_config.parent.mkdir(parents=True)
        local_config.write_text("default_menu_order: 8\n")

        config = load_config()

        assert config.templates_path == "~/tpl"
        assert config.default_menu_order == 8

    def test_env_enables_builtin_mode(
        self, config_paths: tuple[Path, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that the environment variable beats the config files."""
        _, local_config = config_paths
        local_config.parent.mkdir(parents=True)
        local_config.write_text("builtin_mode: false\n")
        monkeypatch.setenv(BUILTIN_MODE_ENV, "1")

        assert load_config().builtin_mode is True


class TestConfigSaving:
    """Tests for config file saving."""

    def test_save_config_creates_file(self, tmp_path: Path) -> None:
        """Test that save_config creates the config file and parents."""
        config_file = tmp_path / "deep" / ".vartypes" / "config.yaml"

        save_config(VarTypesConfig(assets_root="Game", builtin_mode=True), config_file)

        with config_file.open() as f:
            data = yaml.safe_load(f)
        assert data == {"assets_root": "Game", "builtin_mode": True}

    def test_remember_target_folder(
        self, config_paths: tuple[Path, Path], tmp_path: Path
    ) -> None:
        """Test that the last target is stored without losing other keys."""
        _, local_config = config_paths
        local_config.parent.mkdir(parents=True)
        local_config.write_text("default_menu_order: 3\n")

        remember_target_folder(tmp_path / "Assets" / "Vars")

        config = load_config()
        assert config.last_target_folder == str(tmp_path / "Assets" / "Vars")
        assert config.default_menu_order == 3


class TestResolve:
    """Tests for resolving configured paths."""

    def test_assets_root_relative_to_cwd(self, tmp_path: Path) -> None:
        """Test that a relative asset root is anchored at the cwd."""
        with patch("vartypes.config.loader.Path.cwd", return_value=tmp_path):
            root = resolve_assets_root(VarTypesConfig(assets_root="Game"))
        assert root == tmp_path / "Game"

    def test_assets_root_defaults(self, tmp_path: Path) -> None:
        """Test that an unset asset root falls back to Assets."""
        with patch("vartypes.config.loader.Path.cwd", return_value=tmp_path):
            root = resolve_assets_root(VarTypesConfig())
        assert root == tmp_path / "Assets"

    def test_templates_path_unset(self) -> None:
        """Test that no templates path means None."""
        assert resolve_templates_path(VarTypesConfig()) is None

    def test_templates_path_absolute(self, tmp_path: Path) -> None:
        """Test that absolute template paths are kept."""
        config = VarTypesConfig(templates_path=str(tmp_path / "tpl"))
        assert resolve_templates_path(config) == tmp_path / "tpl"
