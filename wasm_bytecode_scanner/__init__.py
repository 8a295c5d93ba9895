"""
WASM Bytecode Scanner
Pre-load introspection of WebAssembly modules for Proxy-Wasm hosts.

Reads the ABI version, custom sections, the function name table, and
strips precompiled-cache sections without executing the module.
"""

__version__ = "0.1.0"

from .config import Config
from .errors import (
    BytecodeError, InvalidHeaderError, TruncatedInputError,
    MalformedSectionError, VarintOverflowError,
)
from .formats.bytecode_scanner import (
    is_valid_header, iter_sections, list_sections, list_custom_sections,
    detect_abi_version, find_custom_section, extract_function_names,
    strip_precompiled_sections,
)
from .formats.wasm_structures import AbiVersion, WasmSection, WasmSectionId

__all__ = [
    'Config', 'AbiVersion', 'WasmSection', 'WasmSectionId',
    'BytecodeError', 'InvalidHeaderError', 'TruncatedInputError',
    'MalformedSectionError', 'VarintOverflowError',
    'is_valid_header', 'iter_sections', 'list_sections', 'list_custom_sections',
    'detect_abi_version', 'find_custom_section', 'extract_function_names',
    'strip_precompiled_sections', '__version__',
]
