# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Linkage AST.

Only the top-level statement kinds the rewriter understands get real nodes:

  ImportDeclaration        import Foo, { a as b } from "pkg"
  ExportAllDeclaration     export * from "pkg"
  ExportNamedDeclaration   export { a, b } from "pkg" / export { a } / export const {...} = x
  VariableDeclaration      const <pattern> = <init>      (generated)
  OpaqueStmt               anything else, kept as source text

Dynamic `import("x")` calls inside opaque statements are split out as
`ImportCall` parts so they can be rewritten without touching the text around
them.

Nodes produced by the parser carry `raw` (their exact source text) and `loc`.
Neither takes part in equality, so a parsed node compares equal to a
hand-built one with the same shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union


@dataclass(frozen=True)
class Located:
	line: int
	column: int


@dataclass
class Identifier:
	name: str


@dataclass
class StringLiteral:
	value: str


# Specifiers


class Specifier:
	pass


@dataclass
class ImportDefaultSpecifier(Specifier):
	"""`import Foo from ...`"""

	local: Identifier


@dataclass
class ImportNamespaceSpecifier(Specifier):
	"""`import * as ns from ...`"""

	local: Identifier


@dataclass
class ImportSpecifier(Specifier):
	"""`import { imported as local } from ...`"""

	imported: Identifier
	local: Identifier


@dataclass
class ExportSpecifier(Specifier):
	"""`export { local as exported } ...`"""

	local: Identifier
	exported: Identifier


@dataclass
class ExportDefaultSpecifier(Specifier):
	"""`export exported from ...` (forwards the source's default export)."""

	exported: Identifier


# Expressions and patterns


class Expr:
	pass


@dataclass
class ImportCall(Expr):
	"""Dynamic module load: `import("source")`."""

	source: StringLiteral
	loc: Optional[Located] = field(default=None, compare=False)
	raw: Optional[str] = field(default=None, compare=False)


@dataclass
class AwaitExpr(Expr):
	argument: Expr


@dataclass
class ObjectProperty:
	key: Identifier
	value: Identifier


@dataclass
class ObjectPattern:
	properties: List[ObjectProperty] = field(default_factory=list)


Pattern = Union[Identifier, ObjectPattern]


# Statements


class Stmt:
	loc: Optional[Located]
	raw: Optional[str]


@dataclass
class ImportDeclaration(Stmt):
	specifiers: List[Specifier]
	source: StringLiteral
	loc: Optional[Located] = field(default=None, compare=False)
	raw: Optional[str] = field(default=None, compare=False)


@dataclass
class ExportAllDeclaration(Stmt):
	source: StringLiteral
	loc: Optional[Located] = field(default=None, compare=False)
	raw: Optional[str] = field(default=None, compare=False)


@dataclass
class VariableDeclarator:
	id: Pattern
	init: Union[Expr, Identifier]


@dataclass
class VariableDeclaration(Stmt):
	declarations: List[VariableDeclarator]
	kind: str = "const"
	loc: Optional[Located] = field(default=None, compare=False)
	raw: Optional[str] = field(default=None, compare=False)


@dataclass
class ExportNamedDeclaration(Stmt):
	"""
	Named export.

	With `source` this is a named re-export (`export { a } from "pkg"`).
	Without it, either a local export list (`export { a }`) or an exported
	declaration (`declaration` set).
	"""

	specifiers: List[Specifier] = field(default_factory=list)
	source: Optional[StringLiteral] = None
	declaration: Optional[VariableDeclaration] = None
	loc: Optional[Located] = field(default=None, compare=False)
	raw: Optional[str] = field(default=None, compare=False)


@dataclass
class OpaqueStmt(Stmt):
	"""
	A statement the rewriter does not model.

	`parts` is the statement's source split around dynamic import calls;
	joining the text parts with the printed calls reproduces the statement.
	"""

	parts: List[Union[str, ImportCall]]
	loc: Optional[Located] = field(default=None, compare=False)
	raw: Optional[str] = field(default=None, compare=False)

	@property
	def dynamic_imports(self) -> List[ImportCall]:
		return [p for p in self.parts if isinstance(p, ImportCall)]


@dataclass
class Module:
	body: List[Stmt]
	filename: Optional[str] = None


def const_decl(id: Pattern, init: Union[Expr, Identifier]) -> VariableDeclaration:
	"""Build `const <id> = <init>`."""
	return VariableDeclaration(declarations=[VariableDeclarator(id=id, init=init)])


def object_pattern(pairs: Sequence[tuple[str, str]]) -> ObjectPattern:
	"""Build `{ key: value, ... }` from name pairs."""
	return ObjectPattern(
		properties=[ObjectProperty(key=Identifier(k), value=Identifier(v)) for k, v in pairs]
	)


__all__ = [
	"Located",
	"Identifier",
	"StringLiteral",
	"Specifier",
	"ImportDefaultSpecifier",
	"ImportNamespaceSpecifier",
	"ImportSpecifier",
	"ExportSpecifier",
	"ExportDefaultSpecifier",
	"Expr",
	"ImportCall",
	"AwaitExpr",
	"ObjectProperty",
	"ObjectPattern",
	"Pattern",
	"Stmt",
	"ImportDeclaration",
	"ExportAllDeclaration",
	"VariableDeclarator",
	"VariableDeclaration",
	"ExportNamedDeclaration",
	"OpaqueStmt",
	"Module",
	"const_decl",
	"object_pattern",
]
