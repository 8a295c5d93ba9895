"""
WebAssembly bytecode scanning.

Supports:
- Header check
- Proxy-Wasm ABI version detection from function exports
- Custom section lookup
- Function name table extraction from the "name" section
- Removal of precompiled-cache custom sections
"""

from .bytecode_scanner import (
    is_valid_header, iter_sections, list_sections, list_custom_sections,
    detect_abi_version, find_custom_section, extract_function_names,
    strip_precompiled_sections,
)
from .wasm_structures import *

__all__ = [
    'is_valid_header', 'iter_sections', 'list_sections', 'list_custom_sections',
    'detect_abi_version', 'find_custom_section', 'extract_function_names',
    'strip_precompiled_sections', 'AbiVersion', 'WasmSection', 'WasmSectionId',
]
