"""Tests for engine configuration and [tool.equitree] loading."""

import pytest

from equitree.config import DEFAULT_CONFIG, EngineConfig, find_pyproject, load_config


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.horizontal_spacing == 150
        assert config.vertical_spacing == 140
        assert (config.node_width, config.node_height) == (120, 60)
        assert (config.min_scale, config.max_scale) == (0.2, 3.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"horizontal_spacing": 120},
            {"vertical_spacing": 50},
            {"min_scale": 2.0, "max_scale": 1.0},
            {"max_label_lines": 0},
        ],
    )
    def test_rejects_invalid_geometry(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_clamp_scale(self):
        assert DEFAULT_CONFIG.clamp_scale(10) == 3.0
        assert DEFAULT_CONFIG.clamp_scale(0.01) == 0.2
        assert DEFAULT_CONFIG.clamp_scale(1.5) == 1.5

    def test_with_overrides_ignores_unknown_keys(self):
        config = DEFAULT_CONFIG.with_overrides({"horizontal_spacing": 200, "colour": "red"})
        assert config.horizontal_spacing == 200
        assert config.vertical_spacing == 140


class TestLoadConfig:
    def test_find_pyproject_walks_up(self, tmp_path):
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")
        child = tmp_path / "src" / "pkg"
        child.mkdir(parents=True)
        assert find_pyproject(child) == pyproject

    def test_reads_tool_section(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text(
            "[tool.equitree]\nhorizontal_spacing = 180\nadaptive_spacing = true\n"
        )
        config = load_config(tmp_path)
        assert config.horizontal_spacing == 180
        assert config.adaptive_spacing is True

    def test_missing_section_gives_defaults(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n")
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_invalid_values_raise(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[tool.equitree]\nnode_width = 500\n")
        with pytest.raises(ValueError):
            load_config(tmp_path)
