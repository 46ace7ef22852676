# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared diagnostic/span types."""

from .diagnostics import Diagnostic
from .span import Span

__all__ = ["Diagnostic", "Span"]
