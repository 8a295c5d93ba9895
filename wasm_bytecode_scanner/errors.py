"""
Exceptions raised while scanning WebAssembly bytecode.

Absence of a match (unknown ABI version, missing custom section, empty
name table) is never an error; those are ordinary return values.
"""


class BytecodeError(ValueError):
    """Base class for structural decode failures. The module should be rejected."""
    pass


class InvalidHeaderError(BytecodeError):
    """Raised when the buffer is shorter than 8 bytes or the magic is wrong."""
    pass


class TruncatedInputError(BytecodeError):
    """Raised when a declared length or varint runs past the end of the buffer."""
    pass


class MalformedSectionError(BytecodeError):
    """Raised when section or subsection boundaries are inconsistent."""
    pass


class VarintOverflowError(MalformedSectionError):
    """Raised when a varuint32 needs more than 5 bytes or 32 bits."""
    pass
