"""
IO module for bounded byte reading.
"""

from .byte_reader import ByteReader, decode_varuint32, encode_varuint32

__all__ = ['ByteReader', 'decode_varuint32', 'encode_varuint32']
