"""Tests for the configuration module."""

from pathlib import Path

import pytest

from gatenet import EvaluationStrategy
from gatenet._cli.config import ConfigError, GatenetConfig, find_pyproject_toml, get_config, load_config


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        subdir = tmp_path / "src" / "pkg"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        result = find_pyproject_toml(tmp_path)

        assert result is None


class TestLoadConfig:
    """Tests for loading the [tool.gatenet] table."""

    def test_full_table(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.gatenet]
expression = "!(A ^ B ^ C)"
strategy = "topological"

[tool.gatenet.inputs]
A = true
B = false
""",
        )

        config = load_config(pyproject)

        assert config.expression == "!(A ^ B ^ C)"
        assert config.strategy == EvaluationStrategy.TOPOLOGICAL
        assert config.inputs == {"A": True, "B": False}

    def test_missing_table_gives_defaults(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == GatenetConfig()
        assert config.expression is None
        assert config.strategy == EvaluationStrategy.FIXED_POINT
        assert config.inputs == {}

    def test_unknown_key_raises_error(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.gatenet]
expresion = "A"
""",
        )

        with pytest.raises(ConfigError, match="Invalid \\[tool.gatenet\\] configuration"):
            load_config(pyproject)

    def test_unknown_strategy_raises_error(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.gatenet]
strategy = "random"
""",
        )

        with pytest.raises(ConfigError):
            load_config(pyproject)

    def test_non_bool_input_raises_error(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.gatenet.inputs]
A = [1, 2]
""",
        )

        with pytest.raises(ConfigError):
            load_config(pyproject)

    def test_non_table_raises_error(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool]
gatenet = "A & B"
""",
        )

        with pytest.raises(ConfigError, match="expected a table"):
            load_config(pyproject)

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[tool.gatenet\nexpression = \n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_config_is_frozen(self) -> None:
        config = GatenetConfig(expression="A")
        with pytest.raises(ValueError):  # noqa: PT011
            config.expression = "B"  # type: ignore[misc]


class TestGetConfig:
    def test_reads_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.gatenet]\nexpression = "A | B"\n')
        subdir = tmp_path / "nested"
        subdir.mkdir()
        monkeypatch.chdir(subdir)

        assert get_config().expression == "A | B"
