#!/usr/bin/env python3
"""
WASM Bytecode Scanner

Command-line interface for inspecting Proxy-Wasm modules before loading them.

Usage:
    wasm-scanner <module> [--section NAME] [--strip OUTPUT] [--no-names]
    wasm-scanner -h | --help
    wasm-scanner --version

Arguments:
    module             Path to the WebAssembly binary (.wasm)

Options:
    --config PATH      Path to config.json
    --section NAME     Show the payload of the named custom section
    --strip OUTPUT     Write the module without precompiled sections to OUTPUT
    --no-names         Do not print the function name table
    -v --verbose       Enable debug logging
    -h --help          Show this help message
    --version          Show version
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Config
from .errors import BytecodeError
from .formats.bytecode_scanner import (
    detect_abi_version, list_sections, find_custom_section,
    extract_function_names, strip_precompiled_sections,
)
from .utils.string_utils import escape_name, hex_preview


def print_report(data: bytes, config: Config) -> None:
    """
    Print the ABI version, section table and function names of a module.

    Args:
        data: Module bytes
        config: Configuration
    """
    if config.show_abi_version:
        version = detect_abi_version(data)
        print(f"ABI version: {version.label}")

    if config.show_sections:
        sections = list_sections(data)
        print(f"Sections ({len(sections)}):")
        for section in sections:
            label = section.kind
            if section.is_custom:
                label += f' "{escape_name(section.name.encode("utf-8"))}"'
            print(f"  {label:<32} offset=0x{section.offset:08x} size={section.size}")

    if config.show_function_names:
        names = extract_function_names(data, config.name_section)
        print(f"Function names ({len(names)}):")
        for index in sorted(names):
            print(f"  {index:>6}: {escape_name(names[index])}")


def print_section(data: bytes, name: str) -> bool:
    """
    Print size and a hex preview of a custom section.

    Returns:
        False if the module has no custom section with that name
    """
    payload = find_custom_section(data, name)
    if payload is None:
        return False
    print(f'Custom section "{name}": {len(payload)} bytes')
    print(f"  {hex_preview(payload)}")
    return True


def write_stripped(data: bytes, output: Path, config: Config) -> None:
    """Write the module without precompiled sections to *output*."""
    stripped = strip_precompiled_sections(data, config.precompiled_marker)
    output.write_bytes(stripped)
    removed = len(data) - len(stripped)
    print(f"Wrote {output} ({len(stripped)} bytes, {removed} bytes removed)")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="WASM Bytecode Scanner - inspect Proxy-Wasm modules before loading",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('module', help='WebAssembly module to inspect')
    parser.add_argument('--version', action='version', version=f'wasm-scanner {__version__}')
    parser.add_argument('--config', type=str, help='Path to config.json')
    parser.add_argument('--section', type=str, help='Show the named custom section')
    parser.add_argument('--strip', type=str, metavar='OUTPUT', help='Write stripped module to OUTPUT')
    parser.add_argument('--no-names', action='store_true', help='Skip the function name table')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    # Load config
    config_path = Path(args.config) if args.config else None
    config = Config.load(config_path)
    if args.no_names:
        config.show_function_names = False

    module_path = Path(args.module)
    if not module_path.is_file():
        print(f"ERROR: Module not found: {module_path}")
        return 1

    data = module_path.read_bytes()

    try:
        print_report(data, config)

        if args.section and not print_section(data, args.section):
            print(f'ERROR: Custom section "{args.section}" not found')
            return 1

        if args.strip:
            write_stripped(data, Path(args.strip), config)
    except BytecodeError as e:
        print(f"ERROR: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
