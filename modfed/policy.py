# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Rewrite policy: which module references are remote and how to name them.

A `ModulePolicy` is built once per invocation and never mutated. Alias maps
are ordered tuples of `(prefix, replacement)` pairs so first-match-wins is
deterministic.

JSON format (`load_policy_json`):

	{
	  "remote_name": "mf",
	  "libs": ["react", {"pattern": "^antd(/|$)"}],
	  "match_all": false,
	  "alias": {"@/": "src/"},
	  "webpack_alias": {"react": "/repo/node_modules/react"},
	  "export_all_members": {"pkg": ["a", "b"]}
	}

Object key order is alias order.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple, Union

LibEntry = Union[str, "re.Pattern[str]"]
AliasPairs = Tuple[Tuple[str, str], ...]


class PolicyError(ValueError):
	"""Invalid policy configuration; fatal to the whole pass."""


@dataclass(frozen=True)
class TransformDep:
	"""One module reference seen by the rewriter, matched or not."""

	source: str
	file: Optional[str]
	is_match: bool
	is_blanket_reexport: bool = False


DepsListener = Callable[[TransformDep], None]


def ignore_deps(dep: TransformDep) -> None:
	"""Default listener: drop notifications."""
	return None


@dataclass(frozen=True)
class ModulePolicy:
	remote_name: str
	# Other entry kinds are kept and rejected when the pass starts.
	libs: Tuple[LibEntry, ...] = ()
	match_all: bool = False
	alias: AliasPairs = ()
	webpack_alias: AliasPairs = ()
	export_all_members: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
	on_transform_deps: DepsListener = field(default=ignore_deps, compare=False)

	@classmethod
	def from_mapping(
		cls,
		obj: Mapping[str, Any],
		*,
		on_transform_deps: Optional[DepsListener] = None,
	) -> "ModulePolicy":
		"""
		Build a policy from a decoded JSON/dict configuration.

		`libs` entries of the form `{"pattern": "..."}` are compiled; strings
		and compiled patterns pass through. Anything else is kept as-is so the
		rewrite pass rejects it.
		"""
		if not isinstance(obj, Mapping):
			raise PolicyError("policy must be a JSON object")
		remote_name = obj.get("remote_name")
		if not isinstance(remote_name, str) or not remote_name:
			raise PolicyError("policy remote_name must be a non-empty string")
		libs_obj = obj.get("libs") or []
		if not isinstance(libs_obj, Sequence) or isinstance(libs_obj, str):
			raise PolicyError("policy libs must be a list")
		members_obj = obj.get("export_all_members") or {}
		if not isinstance(members_obj, Mapping):
			raise PolicyError("policy export_all_members must be an object")
		export_all_members: dict[str, Tuple[str, ...]] = {}
		for src, names in members_obj.items():
			if not isinstance(names, Sequence) or isinstance(names, str) or not all(isinstance(n, str) for n in names):
				raise PolicyError(f"policy export_all_members[{src!r}] must be a list of strings")
			export_all_members[str(src)] = tuple(names)
		return cls(
			remote_name=remote_name,
			libs=tuple(_lib_entry(e) for e in libs_obj),
			match_all=bool(obj.get("match_all", False)),
			alias=alias_pairs(obj.get("alias"), what="alias"),
			webpack_alias=alias_pairs(obj.get("webpack_alias"), what="webpack_alias"),
			export_all_members=export_all_members,
			on_transform_deps=on_transform_deps or ignore_deps,
		)


def _lib_entry(entry: Any) -> Any:
	if isinstance(entry, Mapping) and set(entry) == {"pattern"}:
		pattern = entry["pattern"]
		if not isinstance(pattern, str):
			raise PolicyError("libs pattern must be a string")
		try:
			return re.compile(pattern)
		except re.error as err:
			raise PolicyError(f"invalid libs pattern {pattern!r}: {err}") from err
	return entry


def alias_pairs(obj: Any, *, what: str = "alias") -> AliasPairs:
	"""Normalize a mapping or a sequence of pairs into ordered alias pairs."""
	if obj is None:
		return ()
	items = obj.items() if isinstance(obj, Mapping) else obj
	pairs = []
	for item in items:
		if not (isinstance(item, (tuple, list)) and len(item) == 2):
			raise PolicyError(f"policy {what} entries must be prefix/replacement pairs")
		key, value = item
		if not isinstance(key, str) or not isinstance(value, str):
			raise PolicyError(f"policy {what} keys and values must be strings")
		pairs.append((key, value))
	return tuple(pairs)


def load_policy_json(path: Path, *, on_transform_deps: Optional[DepsListener] = None) -> ModulePolicy:
	"""Load a policy file (see module docstring for the format)."""
	try:
		obj = json.loads(path.read_text(encoding="utf-8"))
	except json.JSONDecodeError as err:
		raise PolicyError(f"policy file is not valid JSON: {err}") from err
	return ModulePolicy.from_mapping(obj, on_transform_deps=on_transform_deps)


__all__ = [
	"AliasPairs",
	"DepsListener",
	"LibEntry",
	"ModulePolicy",
	"PolicyError",
	"TransformDep",
	"alias_pairs",
	"ignore_deps",
	"load_policy_json",
]
