# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Diagnostic records emitted by the CLI.

The rewrite engine itself raises (`PolicyError`, `LinkageParseError`); the
driver converts those into diagnostics so they can be printed for humans or
serialized as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .span import Span


@dataclass
class Diagnostic:
	"""Represents a user-facing error/warning."""

	message: str
	# Which step produced the diagnostic: "parser", "policy" or "io".
	phase: str | None = None
	severity: str = "error"
	span: Span = field(default_factory=Span)

	def __post_init__(self) -> None:
		if self.span is None:  # type: ignore[unreachable]
			self.span = Span()

	def render(self) -> str:
		"""Human-readable single line, `file:line:col: severity: message`."""
		return f"{self.span.render()}: {self.severity}: {self.message}"

	def to_json(self) -> Dict[str, Any]:
		return {
			"phase": self.phase,
			"message": self.message,
			"severity": self.severity,
			"file": self.span.file,
			"line": self.span.line,
			"column": self.span.column,
		}


__all__ = ["Diagnostic"]
