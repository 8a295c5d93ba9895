"""
Inspection server tests (Flask test client).

Run with::

    pytest tests/test_server.py -v
"""

from __future__ import annotations

from io import BytesIO

import pytest

pytest.importorskip("flask")

import server  # noqa: E402

from wasm_builder import CODE_SECTION, HEADER, TYPE_SECTION  # noqa: E402


@pytest.fixture
def client():
    server.app.config["TESTING"] = True
    return server.app.test_client()


def _upload(data: bytes, filename: str = "plugin.wasm") -> dict:
    return {"module": (BytesIO(data), filename)}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_inspect(client, plugin_module):
    response = client.post("/api/inspect", data=_upload(plugin_module), content_type="multipart/form-data")
    assert response.status_code == 200
    body = response.get_json()
    assert body["abi_version"] == "0.2.1"
    assert body["size"] == len(plugin_module)
    assert [s["kind"] for s in body["sections"]] == ["type", "function", "export", "code", "custom"]
    assert body["sections"][-1]["name"] == "name"
    assert body["function_names"] == {"0": "main", "2": "helper"}


def test_inspect_without_module(client):
    response = client.post("/api/inspect", data={}, content_type="multipart/form-data")
    assert response.status_code == 400


def test_inspect_invalid_header(client):
    response = client.post("/api/inspect", data=_upload(b"\x00asm"), content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["type"] == "InvalidHeaderError"


def test_strip(client, precompiled_module):
    response = client.post("/api/strip", data=_upload(precompiled_module), content_type="multipart/form-data")
    assert response.status_code == 200
    assert response.mimetype == "application/wasm"
    assert response.get_data() == HEADER + TYPE_SECTION + CODE_SECTION
    assert "plugin.stripped.wasm" in response.headers["Content-Disposition"]


def test_section(client, plugin_module):
    response = client.post("/api/sections/name", data=_upload(plugin_module), content_type="multipart/form-data")
    assert response.status_code == 200
    assert response.get_data().startswith(b"\x01")


def test_missing_section(client, plugin_module):
    response = client.post("/api/sections/producers", data=_upload(plugin_module), content_type="multipart/form-data")
    assert response.status_code == 404
