# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module source → linkage AST.

Two steps:

1. `split_statements` cuts the source into top-level statements. It tracks
   bracket depth, string/template literals and comments; a statement ends at
   `;` or at a newline while no bracket is open. An import or re-export stays
   open across newlines until it has its module string, and also takes a
   following line that starts with `from`, `with {` or `assert {`. It is not
   a JavaScript parser: regular-expression literals are not recognized, so
   an unbalanced bracket inside one merges the rest of the file into one
   opaque statement.
2. Statements whose code (after leading comments) starts like an import or
   re-export are parsed with the lark grammar in `grammar.lark`. Every other
   statement becomes an `OpaqueStmt`, with `import("literal")` calls in code
   positions (not in strings or comments) split out as `ImportCall` parts.
"""

from __future__ import annotations

import re
from ast import literal_eval
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from .ast import (
	ExportAllDeclaration,
	ExportDefaultSpecifier,
	ExportNamedDeclaration,
	ExportSpecifier,
	Identifier,
	ImportCall,
	ImportDeclaration,
	ImportDefaultSpecifier,
	ImportNamespaceSpecifier,
	ImportSpecifier,
	Located,
	Module,
	OpaqueStmt,
	Specifier,
	Stmt,
	StringLiteral,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="linkage_stmt",
	maybe_placeholders=False,
)

# Statements handed to the grammar. `import(...)`/`import.meta`, `import type`,
# `export * as ns` and exported declarations (`export const ...`) stay opaque.
_LINKAGE_START = re.compile(
	r"""
	import\b(?!\s*[(.])(?!\s+type\s+(?!from\b)[{*A-Za-z_$])
	| export\s*\*(?!\s*as\b)
	| export\s*\{
	| export\s+
	  (?!(?:default|const|let|var|function|class|async|type|interface|enum|declare|abstract)\b)
	  [A-Za-z_$][\w$]*\s*(?:,|from\b)
	""",
	re.VERBOSE,
)

# An import/re-export split over lines: the next line carries its tail.
_LINKAGE_TAIL = re.compile(r"\s*(?:from\b|(?:with|assert)\s*\{)")

# Tried only at code positions found by `_dynamic_imports`.
_DYNAMIC_IMPORT = re.compile(
	r"""import\s*\(\s*(?P<lit>"(?:[^"\\\n]|\\.)*"|'(?:[^'\\\n]|\\.)*')\s*\)"""
)

_OPEN = "([{"
_CLOSE = ")]}"


class LinkageParseError(ValueError):
	"""
	An import/re-export statement the grammar could not parse.

	The CLI turns this into a parser-phase diagnostic pinned at `loc`.
	"""

	def __init__(self, message: str, *, loc: Optional[Located]) -> None:
		super().__init__(message)
		self.loc = loc


@dataclass(frozen=True)
class Chunk:
	"""One top-level statement's source text and where it starts."""

	text: str
	line: int
	column: int
	offset: int


def split_statements(source: str) -> List[Chunk]:
	"""Split module source into top-level statement chunks (see module doc)."""
	chunks: List[Chunk] = []
	n = len(source)
	depth = 0
	start: Optional[int] = None
	# Per chunk: does it start like a linkage statement, and the last code
	# token seen ("string", a bracket or other punctuation).
	code_seen = False
	linkage = False
	last = ""
	i = 0

	def flush(end: int) -> None:
		nonlocal start, code_seen, linkage, last
		if start is not None:
			text = source[start:end].rstrip()
			if text:
				line = source.count("\n", 0, start) + 1
				column = start - (source.rfind("\n", 0, start) + 1) + 1
				chunks.append(Chunk(text=text, line=line, column=column, offset=start))
		start = None
		code_seen = False
		linkage = False
		last = ""

	while i < n:
		ch = source[i]
		if ch == "\n":
			if depth == 0 and not (linkage and _linkage_continues(source, i, last)):
				flush(i)
			i += 1
			continue
		if ch.isspace():
			i += 1
			continue
		if start is None:
			start = i
		if source.startswith("//", i):
			i = _line_end(source, i)
			continue
		if source.startswith("/*", i):
			i = _comment_end(source, i)
			continue
		if not code_seen:
			code_seen = True
			linkage = _LINKAGE_START.match(source, i) is not None
		if ch in "\"'":
			i = _skip_string(source, i)
			last = "string"
			continue
		if ch == "`":
			i = _skip_template(source, i)
			last = "`"
			continue
		last = ch
		if ch in _OPEN:
			depth += 1
		elif ch in _CLOSE:
			depth = max(depth - 1, 0)
		elif ch == ";" and depth == 0:
			end = i + 1
			# Keep a trailing `// comment` with the statement it annotates.
			j = end
			while j < n and source[j] in " \t":
				j += 1
			if source.startswith("//", j):
				end = _line_end(source, j)
			flush(end)
			i = end
			continue
		i += 1
	flush(n)
	return chunks


def _linkage_continues(source: str, newline: int, last: str) -> bool:
	"""
	Whether an import/re-export cut at `newline` goes on past it.

	Before its module string the statement is unfinished. After a string or
	a closing brace it continues only if the next line opens a `from` or
	attributes clause.
	"""
	if last not in ("string", "}"):
		return True
	return _LINKAGE_TAIL.match(source, newline) is not None


def _line_end(source: str, i: int) -> int:
	end = source.find("\n", i)
	return len(source) if end < 0 else end


def _comment_end(source: str, i: int) -> int:
	close = source.find("*/", i + 2)
	return len(source) if close < 0 else close + 2


def _code_start(text: str) -> int:
	"""Offset of the first character that is not whitespace or a comment."""
	i = 0
	n = len(text)
	while i < n:
		if text[i].isspace():
			i += 1
		elif text.startswith("//", i):
			i = _line_end(text, i)
		elif text.startswith("/*", i):
			i = _comment_end(text, i)
		else:
			break
	return i


def _skip_string(source: str, i: int) -> int:
	quote = source[i]
	i += 1
	n = len(source)
	while i < n:
		ch = source[i]
		if ch == "\\":
			i += 2
			continue
		if ch == quote:
			return i + 1
		if ch == "\n":
			# Unterminated; let the newline end the statement.
			return i
		i += 1
	return n


def _skip_template(source: str, i: int) -> int:
	i += 1
	n = len(source)
	while i < n:
		ch = source[i]
		if ch == "\\":
			i += 2
			continue
		if ch == "`":
			return i + 1
		if source.startswith("${", i):
			i += 2
			depth = 1
			while i < n and depth:
				c = source[i]
				if c == "`":
					i = _skip_template(source, i)
					continue
				if c in "\"'":
					i = _skip_string(source, i)
					continue
				if c == "{":
					depth += 1
				elif c == "}":
					depth -= 1
				i += 1
			continue
		i += 1
	return n


def _dynamic_imports(text: str) -> List["re.Match[str]"]:
	"""
	`import("literal")` calls in code positions of `text`, in textual order.

	Strings and comments are skipped; template literals are entered only
	through their `${...}` expressions.
	"""
	found: List["re.Match[str]"] = []
	_scan_code(text, 0, found, nested=False)
	return found


def _scan_code(text: str, i: int, found: List["re.Match[str]"], *, nested: bool) -> int:
	# `nested`: scanning a `${...}` expression; stop after its closing brace.
	n = len(text)
	depth = 0
	while i < n:
		ch = text[i]
		if text.startswith("//", i):
			i = _line_end(text, i)
			continue
		if text.startswith("/*", i):
			i = _comment_end(text, i)
			continue
		if ch in "\"'":
			i = _skip_string(text, i)
			continue
		if ch == "`":
			i = _scan_template(text, i, found)
			continue
		if nested and ch == "{":
			depth += 1
		elif nested and ch == "}":
			if depth == 0:
				return i + 1
			depth -= 1
		elif ch == "i" and (i == 0 or not _is_word_or_dot(text[i - 1])):
			m = _DYNAMIC_IMPORT.match(text, i)
			if m is not None:
				found.append(m)
				i = m.end()
				continue
		i += 1
	return n


def _scan_template(text: str, i: int, found: List["re.Match[str]"]) -> int:
	i += 1
	n = len(text)
	while i < n:
		ch = text[i]
		if ch == "\\":
			i += 2
			continue
		if ch == "`":
			return i + 1
		if text.startswith("${", i):
			i = _scan_code(text, i + 2, found, nested=True)
			continue
		i += 1
	return n


def _is_word_or_dot(ch: str) -> bool:
	return ch.isalnum() or ch in "_$."


def parse_module(source: str, filename: Optional[str] = None) -> Module:
	"""Parse module source into a `Module` of top-level statements."""
	body: List[Stmt] = []
	for chunk in split_statements(source):
		loc = Located(line=chunk.line, column=chunk.column)
		if _LINKAGE_START.match(chunk.text, _code_start(chunk.text)):
			body.append(parse_linkage(chunk.text, loc=loc))
		else:
			body.append(_build_opaque(chunk, loc))
	return Module(body=body, filename=filename)


def parse_linkage(text: str, *, loc: Optional[Located] = None) -> Stmt:
	"""Parse a single import/re-export statement."""
	try:
		tree = _PARSER.parse(text)
	except UnexpectedInput as err:
		raise LinkageParseError(
			f"cannot parse module linkage statement: {text.splitlines()[0]!r}",
			loc=_error_loc(err, loc),
		) from err
	return _build_stmt(tree, raw=text, loc=loc)


def _error_loc(err: Union[UnexpectedInput, Token], base: Optional[Located]) -> Optional[Located]:
	line = getattr(err, "line", None) or -1
	column = getattr(err, "column", None) or 1
	if base is None:
		return Located(line=line, column=column) if line > 0 else None
	if line <= 0:
		return base
	if line == 1:
		return Located(line=base.line, column=base.column + column - 1)
	return Located(line=base.line + line - 1, column=column)


def _build_opaque(chunk: Chunk, loc: Located) -> OpaqueStmt:
	text = chunk.text
	parts: List[Union[str, ImportCall]] = []
	pos = 0
	for m in _dynamic_imports(text):
		if m.start() > pos:
			parts.append(text[pos : m.start()])
		before = text.count("\n", 0, m.start())
		if before:
			column = m.start() - text.rfind("\n", 0, m.start())
		else:
			column = chunk.column + m.start()
		parts.append(
			ImportCall(
				source=StringLiteral(_decode_string(m.group("lit"))),
				loc=Located(line=chunk.line + before, column=column),
				raw=m.group(0),
			)
		)
		pos = m.end()
	if pos < len(text):
		parts.append(text[pos:])
	return OpaqueStmt(parts=parts, loc=loc, raw=text)


# Tree → AST


def _name(node: Tree) -> str:
	return str(node.data)


def _decode_string(raw: str) -> str:
	"""Decode a quoted module specifier (either quote style)."""
	try:
		return literal_eval(raw)
	except (ValueError, SyntaxError):
		# JS-only escapes (`\u{...}`); keep the body as written.
		return raw[1:-1]


def _string(tok: Token) -> StringLiteral:
	return StringLiteral(_decode_string(tok.value))


def _ident(tok: Token) -> Identifier:
	return Identifier(tok.value)


def _trees(node: Tree) -> List[Tree]:
	return [c for c in node.children if isinstance(c, Tree)]


def _tokens(node: Tree, kind: str) -> List[Token]:
	return [c for c in node.children if isinstance(c, Token) and c.type == kind]


def _children(node: Tree, name: str) -> List[Tree]:
	return [c for c in _trees(node) if _name(c) == name]


def _check_attributes(tree: Tree, loc: Optional[Located]) -> None:
	# Attributes are accepted and left in `raw`; rewritten loads do not carry them.
	for attrs in _children(tree, "import_attributes"):
		keyword = _tokens(attrs, "IDENT")[0]
		if keyword.value not in ("with", "assert"):
			raise LinkageParseError(
				f"expected `with` or `assert` before import attributes, got {keyword.value!r}",
				loc=_error_loc(keyword, loc),
			)


def _build_stmt(tree: Tree, *, raw: str, loc: Optional[Located]) -> Stmt:
	kind = _name(tree)
	_check_attributes(tree, loc)
	strings = _tokens(tree, "STRING")
	source = _string(strings[0]) if strings else None
	if kind == "import_decl":
		(clause,) = _children(tree, "import_clause")
		return ImportDeclaration(specifiers=_build_import_clause(clause), source=source, loc=loc, raw=raw)
	if kind == "side_effect_import":
		return ImportDeclaration(specifiers=[], source=source, loc=loc, raw=raw)
	if kind == "export_all_decl":
		return ExportAllDeclaration(source=source, loc=loc, raw=raw)
	if kind == "export_named_decl":
		(named,) = _children(tree, "named_exports")
		return ExportNamedDeclaration(specifiers=_build_export_specs(named), source=source, loc=loc, raw=raw)
	if kind == "export_default_from_decl":
		(name,) = _tokens(tree, "IDENT")
		specifiers: List[Specifier] = [ExportDefaultSpecifier(exported=_ident(name))]
		for named in _children(tree, "named_exports"):
			specifiers.extend(_build_export_specs(named))
		return ExportNamedDeclaration(specifiers=specifiers, source=source, loc=loc, raw=raw)
	raise NotImplementedError(f"unexpected linkage statement {kind}")


def _build_import_clause(clause: Tree) -> List[Specifier]:
	out: List[Specifier] = []
	for part in _trees(clause):
		kind = _name(part)
		if kind == "default_binding":
			(name,) = _tokens(part, "IDENT")
			out.append(ImportDefaultSpecifier(local=_ident(name)))
		elif kind == "namespace_binding":
			(name,) = _tokens(part, "IDENT")
			out.append(ImportNamespaceSpecifier(local=_ident(name)))
		elif kind == "named_imports":
			for spec in _trees(part):
				names = _tokens(spec, "IDENT")
				imported = _ident(names[0])
				local = _ident(names[-1])
				out.append(ImportSpecifier(imported=imported, local=local))
		else:
			raise NotImplementedError(f"unexpected import clause part {kind}")
	return out


def _build_export_specs(named: Tree) -> List[Specifier]:
	out: List[Specifier] = []
	for spec in _trees(named):
		names = _tokens(spec, "IDENT")
		out.append(ExportSpecifier(local=_ident(names[0]), exported=_ident(names[-1])))
	return out


__all__ = [
	"Chunk",
	"LinkageParseError",
	"parse_linkage",
	"parse_module",
	"split_statements",
]
