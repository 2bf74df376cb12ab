# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compiler profiles, diagnostic grammars and version probing."""

from __future__ import annotations

from .parsers import parse_output, select_captures
from .profiles import CompilerProfile, Vendor
from .registry import DEFAULT_PROFILE, PROFILES, is_supported, select_profile
from .version import FormatProbe, parse_gnu_version

__all__ = [
    "DEFAULT_PROFILE",
    "PROFILES",
    "CompilerProfile",
    "FormatProbe",
    "Vendor",
    "is_supported",
    "parse_gnu_version",
    "parse_output",
    "select_captures",
    "select_profile",
]
