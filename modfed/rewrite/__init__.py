# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rewrite engine.

  path_matcher:  remote/local classification and alias resolution
  specifiers:    specifier projection
  statements:    per-statement rewriting
  program_pass:  top-level fold and declaration hoisting
"""

from .path_matcher import check_libs, matches, remote_path, resolve_alias, substitute_alias
from .program_pass import rewrite_module, rewrite_program, rewrite_source
from .specifiers import ProjectedSpecifiers, project_specifiers
from .statements import ALL_EXPORTS_NAME, StatementRewriter, StmtRewrite

__all__ = [
	"ALL_EXPORTS_NAME",
	"ProjectedSpecifiers",
	"StatementRewriter",
	"StmtRewrite",
	"check_libs",
	"matches",
	"project_specifiers",
	"remote_path",
	"resolve_alias",
	"rewrite_module",
	"rewrite_program",
	"rewrite_source",
	"substitute_alias",
]
