"""Configuration loading from pyproject.toml."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from gatenet._eval_engine import EvaluationStrategy


class ConfigError(Exception):
    """Error in gatenet configuration."""


class GatenetConfig(BaseModel):
    """Defaults read from the ``[tool.gatenet]`` table.

    Attributes:
        expression: Expression used when none is given on the command line.
        strategy: Default evaluation strategy.
        inputs: Default variable assignments, overridden by ``--set``.

    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    expression: str | None = None
    strategy: EvaluationStrategy = EvaluationStrategy.FIXED_POINT
    inputs: dict[str, bool] = Field(default_factory=dict)


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config(pyproject_path: Path) -> GatenetConfig:
    """Load and validate [tool.gatenet] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed GatenetConfig. Empty when there is no [tool.gatenet] table.

    Raises:
        ConfigError: If the file is not valid TOML or the table is invalid

    """
    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("gatenet", {})
    if not isinstance(section, dict):
        msg = "Invalid [tool.gatenet] configuration: expected a table"
        raise ConfigError(msg)

    try:
        return GatenetConfig.model_validate(section)
    except ValidationError as e:
        msg = f"Invalid [tool.gatenet] configuration in {pyproject_path}:\n{e}"
        raise ConfigError(msg) from e


def get_config() -> GatenetConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        GatenetConfig (empty if no pyproject.toml or no [tool.gatenet] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return GatenetConfig()
    return load_config(pyproject_path)
