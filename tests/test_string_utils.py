"""
Display helper tests.
"""

from wasm_bytecode_scanner.utils.string_utils import escape_name, hex_preview


def test_plain_name():
    assert escape_name(b"proxy_on_tick") == "proxy_on_tick"


def test_utf8_name():
    assert escape_name("λ_init".encode("utf-8")) == "λ_init"


def test_control_characters_escaped():
    assert escape_name(b"a\nb\tc\x01") == "a\\nb\\tc\\x01"


def test_invalid_utf8_escaped():
    assert escape_name(b"f\xff") == "f\\xff"


def test_hex_preview():
    assert hex_preview(b"\x00\x61\x73\x6d") == "00 61 73 6d"
    assert hex_preview(bytes(40), limit=2) == "00 00 ..."
    assert hex_preview(memoryview(b"")) == ""
