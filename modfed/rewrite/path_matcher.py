# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Remote/local classification of module references.

Two modes:

- explicit list (`match_all` off): a reference is remote iff it equals a
  string entry of `libs`, satisfies a pattern entry, or equals an alias key;
- wildcard (`match_all` on): everything that would come from a package
  registry or from another package of the monorepo is remote. Relative
  references and the tool's own packages never are. Bundler aliases
  (`webpack_alias`) are resolved first so an alias pointing into
  `node_modules` counts as remote and one pointing at local sources does not.
"""

from __future__ import annotations

import posixpath
import re
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any, Iterable, Optional

from modfed.policy import AliasPairs, ModulePolicy, PolicyError

# The tool's own packages; importing them from a remote would load a second copy.
SELF_PACKAGES = frozenset({"umi", "dumi"})

_RE_NODE_MODULES = re.compile(r"node_modules")
# Packages of the local monorepo checkout (linked for development).
_RE_MONOREPO_PACKAGE = re.compile(r"umi/packages/")

_SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")


def check_libs(libs: Iterable[Any]) -> None:
	"""Raise `PolicyError` unless every entry is a string or compiled pattern."""
	for lib in libs:
		if not isinstance(lib, (str, re.Pattern)):
			raise PolicyError(f"Unsupported lib format: {lib!r}")


def resolve_alias(path: str, alias: AliasPairs) -> Optional[str]:
	"""
	Resolve `path` through an ordered alias map; None when no entry applies.

	A key whose replacement is a source file is matched as a plain prefix;
	other keys are directory prefixes (`/` appended when missing), so
	`react` does not capture `react-dom`.
	"""
	for key, value in alias:
		prefix = key if _is_source_file(value) else _add_last_slash(key)
		if path.startswith(prefix):
			return value
	return None


def substitute_alias(path: str, alias: AliasPairs) -> str:
	"""Replace the first alias key that prefixes `path`; identity otherwise."""
	for key, value in alias:
		if path.startswith(key):
			return value + path[len(key) :]
	return path


def remote_path(path: str, policy: ModulePolicy) -> str:
	"""`<remote_name>/<path with alias prefix substituted>`."""
	return f"{policy.remote_name}/{substitute_alias(path, policy.alias)}"


def matches(path: str, policy: ModulePolicy, *, libs_checked: bool = False) -> bool:
	"""
	Whether `path` is loaded from the remote.

	Explicit-list mode validates every `libs` entry first; callers that already
	ran `check_libs` on this policy pass `libs_checked=True`.
	"""
	if policy.match_all:
		return _matches_wildcard(path, policy.webpack_alias)
	if not libs_checked:
		check_libs(policy.libs)
	for lib in policy.libs:
		if isinstance(lib, str):
			if lib == path:
				return True
		elif lib.search(path):
			return True
	return any(key == path for key, _ in policy.alias)


def _matches_wildcard(path: str, webpack_alias: AliasPairs) -> bool:
	if path in SELF_PACKAGES:
		return False
	if _is_absolute(path):
		return _has_remote_marker(path)
	if path.startswith("."):
		return False
	resolved = resolve_alias(path, webpack_alias)
	if resolved is not None:
		return _has_remote_marker(resolved)
	return True


def _has_remote_marker(path: str) -> bool:
	return bool(_RE_NODE_MODULES.search(path) or _RE_MONOREPO_PACKAGE.search(path))


def _is_absolute(path: str) -> bool:
	return PurePosixPath(path).is_absolute() or PureWindowsPath(path).is_absolute()


def _is_source_file(path: str) -> bool:
	return posixpath.splitext(path)[1] in _SOURCE_EXTENSIONS


def _add_last_slash(path: str) -> str:
	return path if path.endswith("/") else f"{path}/"


__all__ = [
	"SELF_PACKAGES",
	"check_libs",
	"matches",
	"remote_path",
	"resolve_alias",
	"substitute_alias",
]
