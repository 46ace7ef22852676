# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Specifier projection: statement bindings → destructuring shape.

  import Foo, { a, b as c } from "x"   → properties (default: Foo), (a: a), (b: c)
  import * as ns from "x"              → namespace ns
  export { a as b } from "x"           → properties (a: b)
  export v from "x"                    → properties (default: v)

Property order is the specifier order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from modfed.parser import ast as A


@dataclass
class ProjectedSpecifiers:
	properties: List[A.ObjectProperty] = field(default_factory=list)
	namespace: Optional[A.Identifier] = None

	def pattern(self) -> A.ObjectPattern:
		return A.ObjectPattern(properties=list(self.properties))


def project_specifiers(specifiers: Sequence[A.Specifier]) -> ProjectedSpecifiers:
	out = ProjectedSpecifiers()
	for s in specifiers:
		if isinstance(s, A.ImportDefaultSpecifier):
			out.properties.append(A.ObjectProperty(key=A.Identifier("default"), value=s.local))
		elif isinstance(s, A.ExportDefaultSpecifier):
			out.properties.append(A.ObjectProperty(key=A.Identifier("default"), value=s.exported))
		elif isinstance(s, A.ExportSpecifier):
			out.properties.append(A.ObjectProperty(key=s.local, value=s.exported))
		elif isinstance(s, A.ImportNamespaceSpecifier):
			out.namespace = s.local
		elif isinstance(s, A.ImportSpecifier):
			out.properties.append(A.ObjectProperty(key=s.imported, value=s.local))
		else:
			raise NotImplementedError(f"unexpected specifier {type(s).__name__}")
	return out


__all__ = ["ProjectedSpecifiers", "project_specifiers"]
