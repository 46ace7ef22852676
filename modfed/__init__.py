# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
modfed: rewrite top-level module linkage for module federation.

Layout:
  parser:  linkage AST, statement splitter and lark grammar
  rewrite: path matching, specifier projection, statement rewriting, program pass
  printer: AST back to source text
  cli:     `python -m modfed`
"""

__all__ = ["core", "parser", "rewrite", "policy", "printer"]
