"""
WebAssembly format structure definitions.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional


# WebAssembly magic and header layout
WASM_MAGIC = b"\x00asm"
WASM_VERSION = 1
WASM_HEADER_SIZE = 8

NAME_SECTION = "name"
PRECOMPILED_MARKER = "precompiled_"


class WasmSectionId(IntEnum):
    """WebAssembly section IDs."""
    CUSTOM = 0
    TYPE = 1
    IMPORT = 2
    FUNCTION = 3
    TABLE = 4
    MEMORY = 5
    GLOBAL = 6
    EXPORT = 7
    START = 8
    ELEMENT = 9
    CODE = 10
    DATA = 11
    DATA_COUNT = 12


class ExportKind(IntEnum):
    """Export descriptor kinds."""
    FUNCTION = 0
    TABLE = 1
    MEMORY = 2
    GLOBAL = 3


class NameSubsectionId(IntEnum):
    """Subsection IDs of the "name" custom section."""
    MODULE = 0
    FUNCTION = 1
    LOCAL = 2


class AbiVersion(IntEnum):
    """Proxy-Wasm ABI versions a module can declare through its exports."""
    UNKNOWN = 0
    PROXY_WASM_0_1_0 = 1
    PROXY_WASM_0_2_0 = 2
    PROXY_WASM_0_2_1 = 3

    @property
    def label(self) -> str:
        """Dotted version string, e.g. "0.2.1", or "unknown"."""
        if self is AbiVersion.UNKNOWN:
            return "unknown"
        return self.name[len("PROXY_WASM_"):].replace("_", ".")


# Function export name -> ABI version it declares
ABI_VERSION_EXPORTS: Dict[bytes, AbiVersion] = {
    b"proxy_abi_version_0_1_0": AbiVersion.PROXY_WASM_0_1_0,
    b"proxy_abi_version_0_2_0": AbiVersion.PROXY_WASM_0_2_0,
    b"proxy_abi_version_0_2_1": AbiVersion.PROXY_WASM_0_2_1,
}


@dataclass
class WasmSection:
    """WebAssembly top-level section."""
    id: int = 0
    offset: int = 0          # Offset of the section id byte
    payload_offset: int = 0  # Offset where section content starts
    size: int = 0            # Declared payload size
    name: Optional[str] = None  # For custom sections, when decoded

    @property
    def end(self) -> int:
        """Offset one past the last payload byte."""
        return self.payload_offset + self.size

    @property
    def is_custom(self) -> bool:
        return self.id == WasmSectionId.CUSTOM

    @property
    def kind(self) -> str:
        """Human readable section kind."""
        try:
            return WasmSectionId(self.id).name.lower()
        except ValueError:
            return f"unknown({self.id})"
