# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-statement rewriting of module linkage.

For a reference that the policy classifies as remote:

    import Foo, { a } from "pkg"      →  const { default: Foo, a } = await import("mf/pkg");
    import * as ns from "pkg"         →  const ns = await import("mf/pkg");
    import D, * as ns from "pkg"      →  const ns = await import("mf/pkg");
                                         const { default: D } = ns;
    export * from "pkg"               →  const __all_exports = await import("mf/pkg");
      (member list configured)           export const { m1, m2 } = __all_exports;
    export { a, b } from "pkg"        →  const { a, b } = await import("mf/pkg");
                                         export { a, b };
    import("pkg")                     →  import("mf/pkg")

Generated declarations are returned to the caller (the program pass hoists
them); the statement itself is dropped (imports), replaced in place
(re-exports) or kept. Every reference is reported to the policy's listener
before any rewrite, matched or not.

Nodes are never mutated; rewrites build new ones.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from modfed.parser import ast as A
from modfed.policy import ModulePolicy, TransformDep
from modfed.rewrite.path_matcher import check_libs, matches, remote_path
from modfed.rewrite.specifiers import project_specifiers

# Binding that holds the remote namespace of a rewritten `export *`.
ALL_EXPORTS_NAME = "__all_exports"


@dataclass
class StmtRewrite:
	"""
	Outcome for one top-level statement.

	`stmt` is the statement to keep in place (the original object when
	untouched), or None when the statement is removed. `declarations` are the
	generated bindings, in the order they must appear.
	"""

	stmt: Optional[A.Stmt]
	declarations: List[A.VariableDeclaration] = field(default_factory=list)


class StatementRewriter:
	"""Rewrite linkage statements and dynamic imports against one policy."""

	def __init__(self, policy: ModulePolicy, *, filename: Optional[str] = None) -> None:
		# Validated once here; every later `matches` call skips it.
		check_libs(policy.libs)
		self.policy = policy
		self.filename = filename

	# Public entry points -----------------------------------------------

	def rewrite_stmt(self, stmt: A.Stmt) -> StmtRewrite:
		if isinstance(stmt, A.ImportDeclaration):
			return self._rewrite_import(stmt)
		if isinstance(stmt, A.ExportAllDeclaration):
			return self._rewrite_export_all(stmt)
		if isinstance(stmt, A.ExportNamedDeclaration):
			if stmt.source is None:
				return StmtRewrite(stmt)
			return self._rewrite_export_named(stmt, stmt.source)
		if isinstance(stmt, A.OpaqueStmt):
			return StmtRewrite(self._rewrite_opaque(stmt))
		if isinstance(stmt, A.VariableDeclaration):
			return StmtRewrite(stmt)
		raise NotImplementedError(f"StatementRewriter does not handle stmt {type(stmt).__name__}")

	def rewrite_dynamic_import(self, call: A.ImportCall) -> A.ImportCall:
		"""Point a matched `import("x")` at the remote; no hoisting."""
		source = call.source.value
		if not self._check(source):
			return call
		return A.ImportCall(source=A.StringLiteral(remote_path(source, self.policy)), loc=call.loc)

	# Statement kinds ---------------------------------------------------

	def _rewrite_import(self, stmt: A.ImportDeclaration) -> StmtRewrite:
		source = stmt.source.value
		if not self._check(source):
			return StmtRewrite(stmt)
		projected = project_specifiers(stmt.specifiers)
		init = self._load(source)
		if projected.namespace is None:
			return StmtRewrite(None, [A.const_decl(projected.pattern(), init)])
		namespace = projected.namespace
		decls = [A.const_decl(A.Identifier(namespace.name), init)]
		if projected.properties:
			# Destructure from the namespace binding, not a second load.
			decls.append(A.const_decl(projected.pattern(), A.Identifier(namespace.name)))
		return StmtRewrite(None, decls)

	def _rewrite_export_all(self, stmt: A.ExportAllDeclaration) -> StmtRewrite:
		source = stmt.source.value
		is_match = self._check(source, blanket=True)
		members = self.policy.export_all_members.get(source)
		# Without the member list the exported names are unknown.
		if not is_match or members is None:
			return StmtRewrite(stmt)
		decl = A.const_decl(A.Identifier(ALL_EXPORTS_NAME), self._load(source))
		replacement = A.ExportNamedDeclaration(
			declaration=A.const_decl(
				A.object_pattern([(m, m) for m in members]),
				A.Identifier(ALL_EXPORTS_NAME),
			),
			loc=stmt.loc,
		)
		return StmtRewrite(replacement, [decl])

	def _rewrite_export_named(self, stmt: A.ExportNamedDeclaration, module: A.StringLiteral) -> StmtRewrite:
		source = module.value
		if not self._check(source):
			return StmtRewrite(stmt)
		projected = project_specifiers(stmt.specifiers)
		decl = A.const_decl(projected.pattern(), self._load(source))
		replacement = A.ExportNamedDeclaration(specifiers=list(stmt.specifiers), source=None, loc=stmt.loc)
		return StmtRewrite(replacement, [decl])

	def _rewrite_opaque(self, stmt: A.OpaqueStmt) -> A.OpaqueStmt:
		changed = False
		parts: List[Union[str, A.ImportCall]] = []
		for part in stmt.parts:
			if isinstance(part, A.ImportCall):
				new_part = self.rewrite_dynamic_import(part)
				changed = changed or new_part is not part
				parts.append(new_part)
			else:
				parts.append(part)
		if not changed:
			return stmt
		return A.OpaqueStmt(parts=parts, loc=stmt.loc)

	# Helpers -----------------------------------------------------------

	def _check(self, source: str, *, blanket: bool = False) -> bool:
		"""Classify `source` and report it to the listener."""
		is_match = matches(source, self.policy, libs_checked=True)
		self.policy.on_transform_deps(
			TransformDep(source=source, file=self.filename, is_match=is_match, is_blanket_reexport=blanket)
		)
		return is_match

	def _load(self, source: str) -> A.AwaitExpr:
		return A.AwaitExpr(argument=A.ImportCall(source=A.StringLiteral(remote_path(source, self.policy))))


__all__ = ["ALL_EXPORTS_NAME", "StatementRewriter", "StmtRewrite"]
