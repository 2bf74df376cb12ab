# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loading for the fortlint linter."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DISABLED: Final[str] = "Disabled"
CONFIG_FILENAME: Final[str] = ".fortlint.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "fortlint"


class FyppConfig(BaseModel):
    """Settings for the optional ``fypp`` preprocessor stage."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = False
    path: str = "fypp"
    definitions: dict[str, str] = Field(default_factory=dict)
    includes: tuple[str, ...] = ()
    line_numbering_mode: str = "nocontlines"
    line_marker_format: str = "cpp"
    extra_args: tuple[str, ...] = ()


class LinterConfig(BaseModel):
    """Compiler selection and argument settings for the linter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    compiler: str = "gfortran"
    compiler_path: str = ""
    include_paths: tuple[str, ...] = ()
    extra_args: tuple[str, ...] = ()
    mod_output: str = ""
    max_line_length: int | None = None
    timeout: float | None = Field(default=None, gt=0)
    fypp: FyppConfig = Field(default_factory=FyppConfig)

    @field_validator("compiler")
    @classmethod
    def _require_compiler(cls, value: str) -> str:
        """Reject blank compiler names; use ``Disabled`` to turn linting off."""

        stripped = value.strip()
        if not stripped:
            raise ValueError(f"compiler must be a compiler name or '{DISABLED}'")
        return stripped

    @field_validator("max_line_length")
    @classmethod
    def _check_line_length(cls, value: int | None) -> int | None:
        if value is not None and value != -1 and value <= 0:
            raise ValueError("max_line_length must be positive or -1 for unbounded")
        return value

    @property
    def enabled(self) -> bool:
        """Return ``True`` unless the compiler is set to ``Disabled``."""

        return self.compiler != DISABLED


class Config(BaseModel):
    """Top-level configuration bundle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    workspace_root: Path = Field(default_factory=Path.cwd)
    linter: LinterConfig = Field(default_factory=LinterConfig)

    def with_linter(self, **changes: Any) -> Config:
        """Return a copy with ``changes`` applied to the linter section."""

        return self.model_copy(update={"linter": self.linter.model_copy(update=changes)})


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _section_from(path: Path) -> Mapping[str, Any] | None:
    """Return the fortlint table from ``path`` or ``None`` when it has none."""

    data = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        tool = data.get(PYPROJECT_TOOL_KEY, {})
        section = tool.get(PYPROJECT_SECTION_KEY) if isinstance(tool, Mapping) else None
        return section if isinstance(section, Mapping) else None
    return data


def find_config_file(root: Path) -> Path | None:
    """Return the configuration file governing ``root``.

    ``.fortlint.toml`` wins over a ``[tool.fortlint]`` table in ``pyproject.toml``.

    Args:
        root: Workspace root directory.

    Returns:
        Path | None: Configuration file, or ``None`` when neither exists.
    """

    dedicated = root / CONFIG_FILENAME
    if dedicated.is_file():
        return dedicated
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file() and _section_from(pyproject) is not None:
        return pyproject
    return None


def load_config(root: Path, *, config_file: Path | None = None, **overrides: Any) -> Config:
    """Load configuration for the workspace at ``root``.

    Args:
        root: Workspace root; also the base for relative include patterns.
        config_file: Explicit configuration file overriding discovery.
        **overrides: Linter fields that replace values from the file.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If the file is unreadable or fails validation.
    """

    resolved_root = root.resolve()
    source = config_file if config_file is not None else find_config_file(resolved_root)
    section: Mapping[str, Any] = {}
    if source is not None:
        if not source.is_file():
            raise ConfigError(f"Configuration file {source} does not exist")
        section = _section_from(source) or {}
    linter_data = dict(section.get("linter", {}))
    linter_data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return Config(workspace_root=resolved_root, linter=LinterConfig(**linter_data))
    except ValidationError as exc:
        origin = f" in {source}" if source is not None else ""
        raise ConfigError(f"Invalid linter configuration{origin}: {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "DISABLED",
    "Config",
    "FyppConfig",
    "LinterConfig",
    "find_config_file",
    "load_config",
]
