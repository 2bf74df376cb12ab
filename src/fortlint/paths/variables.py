# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Placeholder substitution for path and argument settings."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

_PLACEHOLDER: Final[re.Pattern[str]] = re.compile(r"\$\{(?:(?P<scope>env):)?(?P<name>[^}]+)\}")
_HOME_PREFIX: Final[re.Pattern[str]] = re.compile(r"^~(?=$|[\\/])")


@dataclass(frozen=True, slots=True)
class VariableContext:
    """Values available to ``${...}`` placeholders.

    ``file`` is optional: include path patterns are resolved once per
    workspace, so file-scoped placeholders are left untouched for them.
    """

    workspace_root: Path
    file: Path | None = None
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def with_file(self, file: Path) -> VariableContext:
        """Return a copy of the context bound to ``file``."""

        return VariableContext(workspace_root=self.workspace_root, file=file, environ=self.environ)

    def lookup(self, name: str) -> str | None:
        """Return the substitution for the built-in variable ``name``.

        Args:
            name: Variable name without the surrounding ``${}``.

        Returns:
            str | None: Replacement text, or ``None`` for unknown variables.
        """

        root = self.workspace_root
        builtins: dict[str, str] = {
            "workspaceFolder": str(root),
            "workspaceRoot": str(root),
            "workspaceFolderBasename": root.name,
            "cwd": str(root),
            "userHome": str(Path.home()),
        }
        if self.file is not None:
            builtins.update(
                {
                    "file": str(self.file),
                    "fileDirname": str(self.file.parent),
                    "fileBasename": self.file.name,
                    "fileBasenameNoExtension": self.file.stem,
                    "fileExtname": self.file.suffix,
                },
            )
        return builtins.get(name)


def resolve_variables(text: str, context: VariableContext) -> str:
    """Substitute ``${...}`` placeholders and a leading ``~`` in ``text``.

    Unknown placeholders are kept verbatim. ``${env:NAME}`` expands to an empty
    string when ``NAME`` is unset, which lets callers drop the argument.

    Args:
        text: Raw setting value.
        context: Values backing the placeholders.

    Returns:
        str: Text with every recognised placeholder substituted.
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group("name")
        if match.group("scope") == "env":
            return context.environ.get(name, "")
        value = context.lookup(name)
        return match.group(0) if value is None else value

    substituted = _PLACEHOLDER.sub(_substitute, text)
    return _HOME_PREFIX.sub(lambda _: str(Path.home()), substituted)


__all__ = ["VariableContext", "resolve_variables"]
