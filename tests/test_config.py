"""
Config load/save tests.

Run with::

    pytest tests/test_config.py -v
"""

from __future__ import annotations

import json

from wasm_bytecode_scanner.config import Config


def test_missing_file_gives_defaults(tmp_path):
    assert Config.load(tmp_path / "missing.json") == Config()


def test_packaged_config_matches_defaults():
    assert Config.load() == Config()


def test_camel_case_keys_and_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "precompiledMarker": "cache_",
        "showFunctionNames": False,
        "maxModuleSize": 1024,
        "somethingElse": 1,
    }))
    config = Config.load(path)
    assert config.precompiled_marker == "cache_"
    assert config.show_function_names is False
    assert config.max_module_size == 1024
    assert config.name_section == "name"


def test_save_writes_camel_case(tmp_path):
    path = tmp_path / "config.json"
    config = Config(name_section="debug_names", show_sections=False)
    config.save(path)

    data = json.loads(path.read_text())
    assert data["nameSection"] == "debug_names"
    assert data["showSections"] is False
    assert Config.load(path) == config
