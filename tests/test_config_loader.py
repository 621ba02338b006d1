"""Tests for sitexport.config_loader — file discovery and merging."""

from pathlib import Path

import pytest

from sitexport._errors import ConfigError
from sitexport.config_loader import load_config


class TestLoadConfig:
    """load_config — yaml/toml files merged with keyword overrides."""

    def test_no_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.root == tmp_path
        assert config.site_name == "My Site"

    def test_yaml_file(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text(
            "site_name: Acme\n"
            "output: build/site.zip\n"
            "options:\n"
            "  include_js: false\n"
            "project:\n"
            "  group_id: org.acme\n"
        )
        config = load_config(tmp_path)
        assert config.site_name == "Acme"
        assert config.output == Path("build/site.zip")
        assert config.options.include_js is False
        assert config.project.group_id == "org.acme"

    def test_yml_extension(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yml").write_text("site_name: Yml\n")
        assert load_config(tmp_path).site_name == "Yml"

    def test_toml_section(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.toml").write_text(
            "[sitexport]\n"
            'asset_base_url = "https://assets.example.com"\n'
            "fetch_timeout_ms = 1500\n"
            "\n"
            "[sitexport.project]\n"
            'artifact_id = "shop"\n'
        )
        config = load_config(tmp_path)
        assert config.asset_base_url == "https://assets.example.com"
        assert config.fetch_timeout_ms == 1500
        assert config.project.artifact_id == "shop"

    def test_yaml_preferred_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text("site_name: From YAML\n")
        (tmp_path / "sitexport.toml").write_text('site_name = "From TOML"\n')
        assert load_config(tmp_path).site_name == "From YAML"

    def test_overrides_take_precedence(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text("site_name: File\nsingle_page: true\n")
        config = load_config(tmp_path, site_name="Flag")
        assert config.site_name == "Flag"
        assert config.options.single_page is True

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text("site_name: File\n")
        config = load_config(tmp_path, site_name=None, group_id=None)
        assert config.site_name == "File"

    def test_string_booleans(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text('include_css: "no"\nsingle_page: "yes"\n')
        config = load_config(tmp_path)
        assert config.options.include_css is False
        assert config.options.single_page is True

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text("colour: blue\n")
        with pytest.raises(ConfigError, match="colour"):
            load_config(tmp_path)

    def test_invalid_boolean_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="include_css"):
            load_config(tmp_path, include_css="sometimes")

    def test_invalid_timeout_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="fetch_timeout_ms"):
            load_config(tmp_path, fetch_timeout_ms="soon")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text("site_name: [unclosed\n")
        with pytest.raises(ConfigError, match="Cannot parse"):
            load_config(tmp_path)

    def test_yaml_must_be_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(tmp_path)

    def test_malformed_toml(self, tmp_path: Path) -> None:
        (tmp_path / "sitexport.toml").write_text("site_name = \n")
        with pytest.raises(ConfigError, match="Cannot parse"):
            load_config(tmp_path)

    def test_invalid_project_value_surfaces(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="group_id"):
            load_config(tmp_path, group_id="not a package")
