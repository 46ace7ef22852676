# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Front end: module source → linkage AST.

`parse_module` is the entry point; `ast` holds the node types shared with the
rewriter and the printer.
"""

from . import ast
from .parser import Chunk, LinkageParseError, parse_linkage, parse_module, split_statements

__all__ = ["ast", "Chunk", "LinkageParseError", "parse_linkage", "parse_module", "split_statements"]
