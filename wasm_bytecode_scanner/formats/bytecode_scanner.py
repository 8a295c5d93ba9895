"""
WebAssembly bytecode scanner for Proxy-Wasm hosts.

Inspects a module before it is loaded, without executing or validating it:
which Proxy-Wasm ABI version it exports, the payload of a named custom
section, the debug function-name table, and a copy of the module with
precompiled-cache custom sections removed.

Every operation is a pure function over an immutable buffer. Results are
built locally and only returned once the walk has finished, so a
BytecodeError never comes with partial output.
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..errors import InvalidHeaderError, MalformedSectionError
from ..io.byte_reader import ByteReader, BytesLike, as_byte_view
from .wasm_structures import (
    WasmSection, WasmSectionId, ExportKind, NameSubsectionId, AbiVersion,
    ABI_VERSION_EXPORTS, WASM_MAGIC, WASM_HEADER_SIZE,
    NAME_SECTION, PRECOMPILED_MARKER,
)

logger = logging.getLogger(__name__)


def _to_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode('utf-8') if isinstance(value, str) else bytes(value)


def is_valid_header(data: BytesLike) -> bool:
    """
    Check the 8-byte module header.

    Only the magic number is compared; the version field is not checked.
    A buffer shorter than the header is invalid.
    """
    view = as_byte_view(data)
    return len(view) >= WASM_HEADER_SIZE and view[:4] == WASM_MAGIC


def _check_header(data: BytesLike) -> memoryview:
    view = as_byte_view(data)
    if not is_valid_header(view):
        raise InvalidHeaderError(
            f"not a WebAssembly module (need {WASM_HEADER_SIZE}-byte header "
            f"starting with {WASM_MAGIC!r}, got {bytes(view[:4])!r})"
        )
    return view


def _walk(view: memoryview) -> Iterator[WasmSection]:
    reader = ByteReader(view, WASM_HEADER_SIZE)
    while not reader.at_end():
        offset = reader.position
        section_id = reader.read_byte()
        size = reader.read_varuint32()
        payload_offset = reader.position
        reader.skip(size)
        yield WasmSection(id=section_id, offset=offset, payload_offset=payload_offset, size=size)


def iter_sections(data: BytesLike) -> Iterator[WasmSection]:
    """
    Iterate over the top-level sections of a module.

    The header is checked eagerly; sections are decoded lazily. Each
    section's declared size is bounds-checked before it is yielded, and a
    violation raises TruncatedInputError from the iterator. Stop early by
    leaving the loop.

    Args:
        data: The module bytes

    Returns:
        Iterator of WasmSection (custom-section names are not decoded)

    Raises:
        InvalidHeaderError: If the header check fails
    """
    return _walk(_check_header(data))


def _payload_reader(view: memoryview, section: WasmSection) -> ByteReader:
    return ByteReader(view, section.payload_offset, section.end)


def _custom_section_name(view: memoryview, section: WasmSection) -> Tuple[bytes, ByteReader]:
    """Decode a custom section's name; the reader is left at the section data."""
    reader = _payload_reader(view, section)
    name = reader.read_name().tobytes()
    return name, reader


def list_sections(data: BytesLike) -> List[WasmSection]:
    """Return every top-level section, with custom-section names decoded."""
    view = _check_header(data)
    sections = []
    for section in _walk(view):
        if section.is_custom:
            name, _ = _custom_section_name(view, section)
            section.name = name.decode('utf-8', errors='replace')
        sections.append(section)
    return sections


def list_custom_sections(data: BytesLike) -> List[str]:
    """Return the names of all custom sections in module order."""
    return [section.name for section in list_sections(data) if section.is_custom]


def detect_abi_version(data: BytesLike) -> AbiVersion:
    """
    Detect the Proxy-Wasm ABI version from the module's function exports.

    The first function export whose name is one of the known
    proxy_abi_version_* symbols decides the version. A module without such
    an export, or without an export section, is AbiVersion.UNKNOWN.

    Raises:
        InvalidHeaderError: If the header check fails
        TruncatedInputError: If a section or export runs past its bound
        MalformedSectionError: If the export vector is inconsistent
    """
    view = _check_header(data)
    for section in _walk(view):
        if section.id != WasmSectionId.EXPORT:
            continue

        reader = _payload_reader(view, section)
        export_count = reader.read_varuint32()
        if export_count > reader.remaining:
            raise MalformedSectionError(
                f"export count {export_count} exceeds export section size at offset {section.offset}"
            )
        for _ in range(export_count):
            name = reader.read_name()
            kind = reader.read_byte()
            if kind == ExportKind.FUNCTION:
                version = ABI_VERSION_EXPORTS.get(name.tobytes())
                if version is not None:
                    logger.debug("ABI version %s declared by export %r", version.label, name.tobytes())
                    return version
            reader.read_varuint32()  # export index

        # A module has at most one export section.
        return AbiVersion.UNKNOWN

    return AbiVersion.UNKNOWN


def find_custom_section(data: BytesLike, name: Union[str, bytes]) -> Optional[memoryview]:
    """
    Find the first custom section called *name*.

    The returned memoryview borrows from *data*: it is not a copy, it keeps
    the original buffer alive while referenced, and it is read-only.

    Args:
        data: The module bytes
        name: Section name (str is UTF-8 encoded)

    Returns:
        The section payload following the name, or None if no custom
        section has that name

    Raises:
        BytecodeError: If the module is structurally invalid
    """
    wanted = _to_bytes(name)
    view = _check_header(data)
    for section in _walk(view):
        if not section.is_custom:
            continue
        section_name, reader = _custom_section_name(view, section)
        if section_name == wanted:
            return reader.read_bytes(reader.remaining)
    return None


def extract_function_names(data: BytesLike, section_name: Union[str, bytes] = NAME_SECTION) -> Dict[int, bytes]:
    """
    Extract the function index -> name table from the "name" custom section.

    *section_name* overrides the section looked up, for toolchains that
    emit the table under another name.

    A missing or empty "name" section yields an empty dict. When an index
    appears more than once the last name wins. Subsections other than the
    function-name map are skipped.

    Raises:
        BytecodeError: If the module or the name section is malformed
    """
    names: Dict[int, bytes] = {}
    name_section = find_custom_section(data, section_name)
    if name_section is None:
        return names

    reader = ByteReader(name_section)
    while not reader.at_end():
        subsection_id = reader.read_byte()
        subsection_size = reader.read_varuint32()
        reader.require(subsection_size)

        if subsection_id != NameSubsectionId.FUNCTION:
            reader.skip(subsection_size)
            continue

        subsection_end = reader.position + subsection_size
        count = reader.read_varuint32()
        if count > reader.remaining:
            raise MalformedSectionError(f"function name count {count} exceeds name section size")
        for _ in range(count):
            func_index = reader.read_varuint32()
            names[func_index] = reader.read_name().tobytes()

        if reader.position != subsection_end:
            raise MalformedSectionError(
                f"function name subsection ends at offset {reader.position}, "
                f"declared end is {subsection_end}"
            )

    return names


def strip_precompiled_sections(data: BytesLike, marker: Union[str, bytes] = PRECOMPILED_MARKER) -> bytes:
    """
    Return a copy of the module without precompiled-cache custom sections.

    Everything before the first custom section whose name contains *marker*
    is kept as is. After it, only non-custom sections are copied; every
    later custom section is dropped, matching or not. Without a matching
    section the result is an exact copy of *data*.

    Args:
        data: The module bytes
        marker: Substring identifying precompiled sections

    Returns:
        A new bytes object

    Raises:
        BytecodeError: If the module is structurally invalid
    """
    marker_bytes = _to_bytes(marker)
    view = _check_header(data)
    stripped: Optional[bytearray] = None
    for section in _walk(view):
        if section.is_custom:
            name, _ = _custom_section_name(view, section)
            if marker_bytes in name:
                logger.debug("Dropping precompiled section %r (%d bytes)", name, section.size)
                if stripped is None:
                    stripped = bytearray(view[:section.offset])
            continue
        if stripped is not None:
            stripped += view[section.offset:section.end]

    if stripped is None:
        return view.tobytes()
    return bytes(stripped)
