# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source span used by diagnostics.

A Span wraps whatever location object the front end produced (a `Located`
from the linkage AST, a lark token, an `UnexpectedInput`) and keeps the
best-effort file/line/column extracted from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Span:
	"""Represents a source span (best-effort file/line/column plus raw loc)."""

	file: Optional[str] = None
	line: Optional[int] = None
	column: Optional[int] = None
	raw: Any = None

	@classmethod
	def from_loc(cls, loc: Any, *, file: Optional[str] = None) -> "Span":
		"""
		Construct a Span from an existing location object.

		If `loc` is already a Span it is returned unchanged (with `file` filled
		in when it was missing).
		"""
		if loc is None:
			return cls(file=file)
		if isinstance(loc, cls):
			if loc.file is None and file is not None:
				return cls(file=file, line=loc.line, column=loc.column, raw=loc.raw)
			return loc
		return cls(
			file=file or getattr(loc, "file", None) or getattr(loc, "filename", None),
			line=getattr(loc, "line", None),
			column=getattr(loc, "column", None),
			raw=loc,
		)

	def render(self) -> str:
		"""`file:line:col` with `?` for unknown parts."""
		line = "?" if self.line is None else str(self.line)
		col = "?" if self.column is None else str(self.column)
		return f"{self.file or '<input>'}:{line}:{col}"


__all__ = ["Span"]
