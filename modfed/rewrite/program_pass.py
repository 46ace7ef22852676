# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Program-level driver.

Folds over the top-level statements from last to first, letting
`StatementRewriter` decide each one. Generated declarations are hoisted in
front of every kept statement; because each statement's declarations are
prepended to the accumulator during the backward scan, they end up in the
same order as the statements that produced them:

    import a from "a"            const { default: a } = await import("mf/a");
    foo();                  →    const { default: b } = await import("mf/b");
    import b from "b"            foo();

The input list is left untouched.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from modfed.parser import ast as A
from modfed.parser.parser import parse_module
from modfed.policy import ModulePolicy
from modfed.printer import print_program
from modfed.rewrite.statements import StatementRewriter


def rewrite_program(
	body: Sequence[A.Stmt],
	policy: ModulePolicy,
	*,
	filename: Optional[str] = None,
) -> List[A.Stmt]:
	"""Return the rewritten statement list for one compilation unit."""
	# Constructing the rewriter validates `libs`: a bad entry fails the pass
	# before anything is reported or rewritten.
	rewriter = StatementRewriter(policy, filename=filename)
	generated: List[A.Stmt] = []
	kept: List[A.Stmt] = []
	for stmt in reversed(body):
		result = rewriter.rewrite_stmt(stmt)
		generated[0:0] = result.declarations
		if result.stmt is not None:
			kept.append(result.stmt)
	kept.reverse()
	return generated + kept


def rewrite_module(module: A.Module, policy: ModulePolicy) -> A.Module:
	return A.Module(body=rewrite_program(module.body, policy, filename=module.filename), filename=module.filename)


def rewrite_source(source: str, policy: ModulePolicy, *, filename: Optional[str] = None) -> str:
	"""Parse, rewrite and print one module."""
	module = parse_module(source, filename=filename)
	return print_program(rewrite_module(module, policy).body)


__all__ = ["rewrite_module", "rewrite_program", "rewrite_source"]
