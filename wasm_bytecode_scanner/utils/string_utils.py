"""
String utility functions.
"""

from typing import Union


def escape_name(raw: Union[bytes, bytearray, memoryview]) -> str:
    """
    Render raw name bytes as printable text.

    Names in a module are not guaranteed to be valid UTF-8. Valid UTF-8 is
    kept as is apart from control characters; invalid bytes become \\xNN.

    Args:
        raw: Name bytes as stored in the module

    Returns:
        Printable string
    """
    text = bytes(raw).decode('utf-8', errors='backslashreplace')
    result = []
    for char in text:
        if char == '\n':
            result.append('\\n')
        elif char == '\r':
            result.append('\\r')
        elif char == '\t':
            result.append('\\t')
        elif ord(char) < 32 or ord(char) == 127:
            result.append(f'\\x{ord(char):02x}')
        else:
            result.append(char)
    return ''.join(result)


def hex_preview(data: Union[bytes, bytearray, memoryview], limit: int = 32) -> str:
    """
    Format the first *limit* bytes as space separated hex.

    Args:
        data: Bytes to format
        limit: Maximum number of bytes shown

    Returns:
        Hex string, suffixed with "..." when truncated
    """
    shown = bytes(data[:limit])
    text = ' '.join(f'{b:02x}' for b in shown)
    if len(data) > limit:
        text += ' ...'
    return text
