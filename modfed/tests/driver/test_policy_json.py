# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from modfed.policy import ModulePolicy, PolicyError, alias_pairs, ignore_deps, load_policy_json
from modfed.rewrite.path_matcher import matches
from modfed.rewrite.program_pass import rewrite_program


def test_from_mapping_normalizes_entries() -> None:
	policy = ModulePolicy.from_mapping(
		{
			"remote_name": "mf",
			"libs": ["react", {"pattern": "^antd"}],
			"alias": {"@/": "src/", "@": "root/"},
			"webpack_alias": [["react", "/nm/react"]],
			"export_all_members": {"pkg": ["a", "b"]},
		}
	)
	assert policy.remote_name == "mf"
	assert policy.libs[0] == "react"
	assert isinstance(policy.libs[1], re.Pattern)
	assert policy.libs[1].pattern == "^antd"
	assert policy.alias == (("@/", "src/"), ("@", "root/"))
	assert policy.webpack_alias == (("react", "/nm/react"),)
	assert policy.export_all_members == {"pkg": ("a", "b")}
	assert policy.match_all is False
	assert policy.on_transform_deps is ignore_deps
	assert matches("antd/es/button", policy)


def test_from_mapping_requires_remote_name() -> None:
	with pytest.raises(PolicyError):
		ModulePolicy.from_mapping({"libs": ["react"]})
	with pytest.raises(PolicyError):
		ModulePolicy.from_mapping({"remote_name": ""})


def test_from_mapping_rejects_malformed_sections() -> None:
	with pytest.raises(PolicyError):
		ModulePolicy.from_mapping({"remote_name": "mf", "libs": "react"})
	with pytest.raises(PolicyError):
		ModulePolicy.from_mapping({"remote_name": "mf", "libs": [{"pattern": "("}]})
	with pytest.raises(PolicyError):
		ModulePolicy.from_mapping({"remote_name": "mf", "export_all_members": {"pkg": "a"}})
	with pytest.raises(PolicyError):
		ModulePolicy.from_mapping({"remote_name": "mf", "alias": {"@": 1}})


def test_unsupported_lib_entry_is_kept_for_the_pass_to_reject() -> None:
	policy = ModulePolicy.from_mapping({"remote_name": "mf", "libs": ["react", 7]})
	assert policy.libs == ("react", 7)
	with pytest.raises(PolicyError):
		rewrite_program([], policy)


def test_alias_pairs_accepts_mappings_and_pairs() -> None:
	assert alias_pairs(None) == ()
	assert alias_pairs({"a": "b"}) == (("a", "b"),)
	assert alias_pairs([("a", "b"), ["c", "d"]]) == (("a", "b"), ("c", "d"))
	with pytest.raises(PolicyError):
		alias_pairs([("a", "b", "c")])


def test_load_policy_json(tmp_path: Path) -> None:
	path = tmp_path / "policy.json"
	path.write_text(json.dumps({"remote_name": "mf", "match_all": True, "webpack_alias": {"z": "/src/z", "a": "/nm/a"}}))
	seen = []
	policy = load_policy_json(path, on_transform_deps=seen.append)
	assert policy.match_all is True
	assert policy.webpack_alias == (("z", "/src/z"), ("a", "/nm/a"))
	assert policy.on_transform_deps == seen.append


def test_load_policy_json_rejects_bad_json(tmp_path: Path) -> None:
	path = tmp_path / "policy.json"
	path.write_text("{not json")
	with pytest.raises(PolicyError):
		load_policy_json(path)
	path.write_text("[]")
	with pytest.raises(PolicyError):
		load_policy_json(path)
