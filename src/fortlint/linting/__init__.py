# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Argument building, process orchestration and the lint session."""

from __future__ import annotations

from .arguments import build_compile_arguments, build_compiler_arguments, build_preprocessor_arguments
from .build import BuildResult, build_file
from .documents import DocumentEvent, TextDocument
from .orchestrator import LintInvocation, StageCommand, build_environment, resolve_executable, run_pipeline
from .planner import LintPlan, LintPlanner
from .session import DiagnosticCollection, LintSession

__all__ = [
    "BuildResult",
    "DiagnosticCollection",
    "DocumentEvent",
    "LintInvocation",
    "LintPlan",
    "LintPlanner",
    "LintSession",
    "StageCommand",
    "TextDocument",
    "build_compile_arguments",
    "build_compiler_arguments",
    "build_environment",
    "build_file",
    "build_preprocessor_arguments",
    "resolve_executable",
    "run_pipeline",
]
