"""
Test fixtures for wasm_bytecode_scanner.

Provides small, hand-assembled modules shared across test modules.
"""
import pytest

from wasm_builder import (
    CODE_SECTION, FUNCTION_SECTION, TYPE_SECTION,
    custom_section, export_section, module, name_section,
)


@pytest.fixture
def plugin_module() -> bytes:
    """A proxy-wasm 0.2.1 plugin with a name section."""
    return module(
        TYPE_SECTION,
        FUNCTION_SECTION,
        export_section([
            ("memory", 2, 0),
            ("proxy_abi_version_0_2_1", 0, 0),
            ("proxy_on_context_create", 0, 1),
        ]),
        CODE_SECTION,
        name_section({0: "main", 2: "helper"}),
    )


@pytest.fixture
def precompiled_module() -> bytes:
    """type, precompiled cache, code."""
    return module(
        TYPE_SECTION,
        custom_section("precompiled_cranelift", b"\xde\xad\xbe\xef" * 4),
        CODE_SECTION,
    )


@pytest.fixture
def module_file(tmp_path, plugin_module):
    path = tmp_path / "plugin.wasm"
    path.write_bytes(plugin_module)
    return path
