# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Placeholder substitution, glob expansion and the resolved-path cache."""

from __future__ import annotations

from .cache import CachedPathSet, PathCache, PathCacheKey
from .globbing import PathResolver, bulk_glob, iterative_glob
from .variables import VariableContext, resolve_variables

__all__ = [
    "CachedPathSet",
    "PathCache",
    "PathCacheKey",
    "PathResolver",
    "VariableContext",
    "bulk_glob",
    "iterative_glob",
    "resolve_variables",
]
