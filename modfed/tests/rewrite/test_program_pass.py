# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whole-program rewriting: hoisting order, identity of untouched statements,
and the end-to-end output shapes (parse → rewrite → print).
"""

from __future__ import annotations

import re

import pytest

from modfed.parser import ast as A
from modfed.parser.parser import parse_module
from modfed.policy import ModulePolicy, PolicyError, TransformDep
from modfed.rewrite.program_pass import rewrite_program, rewrite_source


def _policy(**kwargs) -> ModulePolicy:
	kwargs.setdefault("remote_name", "mf")
	kwargs.setdefault("libs", ("pkg",))
	return ModulePolicy(**kwargs)


def test_default_and_named_import() -> None:
	out = rewrite_source("import Foo, { a, b } from 'pkg';\n", _policy())
	assert out == 'const { default: Foo, a, b } = await import("mf/pkg");\n'


def test_namespace_import() -> None:
	out = rewrite_source("import * as ns from 'pkg';\n", _policy())
	assert out == 'const ns = await import("mf/pkg");\n'


def test_default_plus_namespace_import() -> None:
	out = rewrite_source("import Default, * as ns from 'pkg';\n", _policy())
	assert out == 'const ns = await import("mf/pkg");\nconst { default: Default } = ns;\n'


def test_renamed_import() -> None:
	out = rewrite_source('import { a as b } from "pkg";\n', _policy())
	assert out == 'const { a: b } = await import("mf/pkg");\n'


def test_export_all_with_members() -> None:
	out = rewrite_source("export * from 'pkg';\n", _policy(export_all_members={"pkg": ("a", "b")}))
	assert out == 'const __all_exports = await import("mf/pkg");\nexport const { a, b } = __all_exports;\n'


def test_export_all_without_members_is_unchanged() -> None:
	src = "export * from 'pkg';\n"
	assert rewrite_source(src, _policy()) == src


def test_named_reexport() -> None:
	out = rewrite_source("export { a, b } from 'pkg';\n", _policy())
	assert out == 'const { a, b } = await import("mf/pkg");\nexport { a, b };\n'


def test_dynamic_import_is_rewritten_in_place() -> None:
	src = "const lazy = () => import('pkg');\nconst local = () => import('./page');\n"
	out = rewrite_source(src, _policy())
	assert out == 'const lazy = () => import("mf/pkg");\nconst local = () => import(\'./page\');\n'


def test_unmatched_statements_print_byte_for_byte() -> None:
	src = (
		"import React, {useState} from 'react' // ui\n"
		"export {x as y} from './x';\n"
		"export * from \"./all\"\n"
		"console.log('hi');\n"
	)
	assert rewrite_source(src, _policy()) == src


def test_generated_declarations_keep_source_order() -> None:
	src = (
		'import a from "a";\n'
		"foo();\n"
		'import b from "b";\n'
		'export { c } from "c";\n'
		"bar();\n"
	)
	out = rewrite_source(src, _policy(libs=("a", "b", "c")))
	assert out == (
		'const { default: a } = await import("mf/a");\n'
		'const { default: b } = await import("mf/b");\n'
		'const { c } = await import("mf/c");\n'
		"foo();\n"
		"export { c };\n"
		"bar();\n"
	)


def test_namespace_chain_stays_together_between_neighbours() -> None:
	src = (
		'import a from "a";\n'
		'import D, * as ns from "b";\n'
		'import c from "c";\n'
	)
	out = rewrite_source(src, _policy(libs=("a", "b", "c")))
	assert out.splitlines() == [
		'const { default: a } = await import("mf/a");',
		'const ns = await import("mf/b");',
		"const { default: D } = ns;",
		'const { default: c } = await import("mf/c");',
	]


def test_untouched_statements_are_the_same_objects() -> None:
	body = parse_module('import x from "local";\nfoo();\nimport p from "pkg";\n').body
	out = rewrite_program(body, _policy())
	assert len(out) == 3
	assert isinstance(out[0], A.VariableDeclaration)
	assert out[1] is body[0]
	assert out[2] is body[1]
	# The input list is not modified.
	assert len(body) == 3


def test_statement_count_only_drops_matched_imports() -> None:
	src = (
		'import a from "pkg";\n'
		'export { b } from "pkg";\n'
		'export * from "pkg";\n'
		'import "side";\n'
	)
	body = parse_module(src).body
	out = rewrite_program(body, _policy(export_all_members={"pkg": ("z",)}))
	generated = [s for s in out if isinstance(s, A.VariableDeclaration)]
	kept = [s for s in out if not isinstance(s, A.VariableDeclaration)]
	assert len(generated) == 3
	assert len(kept) == 3
	assert len(generated) + len(kept) == len(body) - 1 + len(generated)


def test_wildcard_mode_end_to_end() -> None:
	src = (
		"import React from 'react';\n"
		"import umi from 'umi';\n"
		"import Button from './Button';\n"
		"import x from '/repo/node_modules/x/index.js';\n"
	)
	out = rewrite_source(src, _policy(match_all=True, libs=()))
	assert out == (
		'const { default: React } = await import("mf/react");\n'
		'const { default: x } = await import("mf//repo/node_modules/x/index.js");\n'
		"import umi from 'umi';\n"
		"import Button from './Button';\n"
	)


def test_notifications_follow_backward_scan() -> None:
	deps: list[TransformDep] = []
	src = (
		'import a from "pkg";\n'
		"const l = import('lazy');\n"
		'export * from "other";\n'
	)
	body = parse_module(src, filename="m.js").body
	rewrite_program(body, _policy(on_transform_deps=deps.append), filename="m.js")
	assert deps == [
		TransformDep(source="other", file="m.js", is_match=False, is_blanket_reexport=True),
		TransformDep(source="lazy", file="m.js", is_match=False),
		TransformDep(source="pkg", file="m.js", is_match=True),
	]


def test_bad_lib_entry_fails_before_any_rewrite() -> None:
	deps: list[TransformDep] = []
	policy = _policy(libs=(re.compile("^pkg$"), 3), on_transform_deps=deps.append)
	body = parse_module('import a from "pkg";\n').body
	with pytest.raises(PolicyError):
		rewrite_program(body, policy)
	assert deps == []


def test_bad_lib_entry_fails_without_linkage_statements() -> None:
	with pytest.raises(PolicyError):
		rewrite_program([A.OpaqueStmt(parts=["foo();"])], _policy(libs=(1.5,)))


def test_empty_program() -> None:
	assert rewrite_program([], _policy()) == []
	assert rewrite_source("", _policy()) == ""


def test_matched_export_default_forward() -> None:
	out = rewrite_source("export v, { a } from 'pkg';\n", _policy())
	assert out == 'const { default: v, a } = await import("mf/pkg");\nexport v, { a };\n'


def test_import_text_in_strings_and_comments_is_not_a_dependency() -> None:
	deps: list[TransformDep] = []
	src = (
		"const s = \"import('pkg')\";\n"
		"foo(); // see import('pkg')\n"
		"/* import('pkg') */ bar();\n"
		"const t = `import('pkg')`;\n"
	)
	assert rewrite_source(src, _policy(on_transform_deps=deps.append)) == src
	assert deps == []


def test_dynamic_import_inside_template_expression() -> None:
	src = "const t = `${await import('pkg')}`;\n"
	assert rewrite_source(src, _policy()) == 'const t = `${await import("mf/pkg")}`;\n'


def test_import_split_over_lines() -> None:
	out = rewrite_source("import Foo\n  from 'pkg';\nfoo();\n", _policy())
	assert out == 'const { default: Foo } = await import("mf/pkg");\nfoo();\n'


def test_import_attributes() -> None:
	src = (
		"import data from 'pkg' with { type: 'json' };\n"
		"import local from './local.json' assert { type: 'json' };\n"
	)
	out = rewrite_source(src, _policy())
	assert out == (
		'const { default: data } = await import("mf/pkg");\n'
		"import local from './local.json' assert { type: 'json' };\n"
	)


def test_import_after_leading_comment_is_rewritten() -> None:
	out = rewrite_source("/* hdr */ import Foo from 'pkg';\n", _policy())
	assert out == 'const { default: Foo } = await import("mf/pkg");\n'
