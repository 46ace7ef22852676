# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Linkage AST → source text.

Nodes that still carry their `raw` source text (untouched parser output) are
printed exactly as written. Rewritten and generated nodes are printed in one
canonical style: double-quoted strings, `{ a, b: c }` patterns, trailing `;`.
"""

from __future__ import annotations

import json
from typing import Iterable, List

from .parser import ast as A


def print_program(body: Iterable[A.Stmt]) -> str:
	"""Print statements one per line, with a trailing newline."""
	lines = [print_stmt(stmt) for stmt in body]
	return "\n".join(lines) + "\n" if lines else ""


def print_stmt(stmt: A.Stmt) -> str:
	if isinstance(stmt, A.OpaqueStmt):
		return "".join(p if isinstance(p, str) else print_expr(p) for p in stmt.parts)
	if stmt.raw is not None:
		return stmt.raw
	if isinstance(stmt, A.ImportDeclaration):
		clause = _import_clause(stmt.specifiers)
		if not clause:
			return f"import {_string(stmt.source)};"
		return f"import {clause} from {_string(stmt.source)};"
	if isinstance(stmt, A.ExportAllDeclaration):
		return f"export * from {_string(stmt.source)};"
	if isinstance(stmt, A.ExportNamedDeclaration):
		if stmt.declaration is not None:
			return "export " + print_stmt(stmt.declaration)
		text = "export " + _export_clause(stmt.specifiers)
		if stmt.source is not None:
			text += f" from {_string(stmt.source)}"
		return text + ";"
	if isinstance(stmt, A.VariableDeclaration):
		decls = ", ".join(f"{_pattern(d.id)} = {print_expr(d.init)}" for d in stmt.declarations)
		return f"{stmt.kind} {decls};"
	raise NotImplementedError(f"cannot print statement {type(stmt).__name__}")


def print_expr(expr: A.Expr | A.Identifier) -> str:
	if isinstance(expr, A.Identifier):
		return expr.name
	if isinstance(expr, A.ImportCall):
		if expr.raw is not None:
			return expr.raw
		return f"import({_string(expr.source)})"
	if isinstance(expr, A.AwaitExpr):
		return f"await {print_expr(expr.argument)}"
	raise NotImplementedError(f"cannot print expression {type(expr).__name__}")


def _string(lit: A.StringLiteral) -> str:
	return json.dumps(lit.value, ensure_ascii=False)


def _pattern(pattern: A.Pattern) -> str:
	if isinstance(pattern, A.Identifier):
		return pattern.name
	props = [
		p.key.name if p.key.name == p.value.name else f"{p.key.name}: {p.value.name}"
		for p in pattern.properties
	]
	if not props:
		return "{}"
	return "{ " + ", ".join(props) + " }"


def _import_clause(specifiers: List[A.Specifier]) -> str:
	head: List[str] = []
	named: List[str] = []
	for s in specifiers:
		if isinstance(s, A.ImportDefaultSpecifier):
			head.append(s.local.name)
		elif isinstance(s, A.ImportNamespaceSpecifier):
			head.append(f"* as {s.local.name}")
		elif isinstance(s, A.ImportSpecifier):
			named.append(_alias(s.imported.name, s.local.name))
		else:
			raise NotImplementedError(f"unexpected import specifier {type(s).__name__}")
	if named or not head:
		head.append("{ " + ", ".join(named) + " }" if named else "{}")
	if not specifiers:
		return ""
	return ", ".join(head)


def _export_clause(specifiers: List[A.Specifier]) -> str:
	head: List[str] = []
	named: List[str] = []
	for s in specifiers:
		if isinstance(s, A.ExportDefaultSpecifier):
			head.append(s.exported.name)
		elif isinstance(s, A.ExportSpecifier):
			named.append(_alias(s.local.name, s.exported.name))
		else:
			raise NotImplementedError(f"unexpected export specifier {type(s).__name__}")
	if named or not head:
		head.append("{ " + ", ".join(named) + " }" if named else "{}")
	return ", ".join(head)


def _alias(name: str, as_name: str) -> str:
	return name if name == as_name else f"{name} as {as_name}"


__all__ = ["print_program", "print_stmt", "print_expr"]
