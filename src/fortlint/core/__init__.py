# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Foundational models, severities and process helpers."""

from __future__ import annotations

from .models import Diagnostic, deduplicate
from .severity import Severity, SeverityTable

__all__ = ["Diagnostic", "Severity", "SeverityTable", "deduplicate"]
