"""
Tests for the HTTP service.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from chaoscrypt.api.v1.dependencies import get_server_key
from chaoscrypt.core import config
from chaoscrypt.core.limiter import limiter
from chaoscrypt.main import app

SCENARIO_KEY = {"state": [0.3, -0.2], "coupling": [[1.0, 0.0], [0.0, 1.0]]}


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(config, "KEY_FILE", None)
    monkeypatch.setattr(limiter, "enabled", False)
    get_server_key.cache_clear()
    with TestClient(app) as test_client:
        yield test_client
    get_server_key.cache_clear()


class TestEncryptDecrypt:

    def test_encrypt_u16le(self, client):
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(b"\x01"), "key": SCENARIO_KEY},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["encoding"] == "u16le"
        assert body["length"] == 1
        assert base64.b64decode(body["ciphertext_b64"]) == b"\x04\x00"
        assert len(body["key_fingerprint"]) == 64

    def test_encrypt_int(self, client):
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(b"\x01"), "key": SCENARIO_KEY, "options": {"encoding": "int"}},
        )
        assert response.status_code == 200
        assert response.json()["counts"] == [4]

    def test_round_trip(self, client):
        plaintext = bytes([3, 0, 2, 1, 1])
        options = {"perturb": True}
        encrypted = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(plaintext), "key": SCENARIO_KEY, "options": options},
        ).json()
        decrypted = client.post(
            "/api/v1/cipher/decrypt",
            json={"ciphertext_b64": encrypted["ciphertext_b64"], "key": SCENARIO_KEY, "options": options},
        )
        assert decrypted.status_code == 200
        assert base64.b64decode(decrypted.json()["plaintext_b64"]) == plaintext

    def test_decrypt_counts(self, client):
        response = client.post(
            "/api/v1/cipher/decrypt",
            json={"counts": [4], "key": SCENARIO_KEY, "options": {"encoding": "int"}},
        )
        assert response.status_code == 200
        assert response.json() == {"plaintext_b64": b64(b"\x01"), "length": 1}

    def test_server_key(self, client, tmp_path, monkeypatch):
        path = tmp_path / "server.key"
        path.write_text("0.3 -0.2\n1 0\n0 1\n")
        monkeypatch.setattr(config, "KEY_FILE", str(path))
        monkeypatch.setattr(config, "KEY_SIZE", 2)
        get_server_key.cache_clear()

        response = client.post("/api/v1/cipher/encrypt", json={"plaintext_b64": b64(b"\x01")})
        assert response.status_code == 200
        assert base64.b64decode(response.json()["ciphertext_b64"]) == b"\x04\x00"


class TestErrorMapping:

    def test_key_unavailable(self, client):
        response = client.post("/api/v1/cipher/encrypt", json={"plaintext_b64": b64(b"\x01")})
        assert response.status_code == 503
        assert response.json()["detail"] == "Key unavailable"

    def test_invalid_base64(self, client):
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": "not base64!", "key": SCENARIO_KEY},
        )
        assert response.status_code == 400

    def test_odd_ciphertext(self, client):
        response = client.post(
            "/api/v1/cipher/decrypt",
            json={"ciphertext_b64": b64(b"\x04\x00\x01"), "key": SCENARIO_KEY},
        )
        assert response.status_code == 400

    def test_missing_counts(self, client):
        response = client.post(
            "/api/v1/cipher/decrypt",
            json={"key": SCENARIO_KEY, "options": {"encoding": "int"}},
        )
        assert response.status_code == 400

    def test_count_above_ceiling(self, client):
        response = client.post(
            "/api/v1/cipher/decrypt",
            json={"counts": [10**12], "key": SCENARIO_KEY, "options": {"encoding": "int"}},
        )
        assert response.status_code == 400

    def test_dimension_mismatch(self, client):
        key = {"state": [0.3, -0.2], "coupling": [[1.0, 0.0], [0.0]]}
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(b"\x01"), "key": key},
        )
        assert response.status_code == 422

    def test_unreachable_symbol(self, client):
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(b"\x04"), "key": SCENARIO_KEY},
        )
        assert response.status_code == 422
        assert "unreachable" in response.json()["detail"]

    def test_payload_too_large(self, client, monkeypatch):
        from chaoscrypt.api.v1.endpoints import cipher as cipher_endpoint

        monkeypatch.setattr(cipher_endpoint, "MAX_PLAINTEXT_BYTES", 2)
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(b"\x01\x02\x03"), "key": SCENARIO_KEY},
        )
        assert response.status_code == 413

    def test_unknown_encoding(self, client):
        response = client.post(
            "/api/v1/cipher/encrypt",
            json={"plaintext_b64": b64(b"\x01"), "key": SCENARIO_KEY, "options": {"encoding": "u32"}},
        )
        assert response.status_code == 422


class TestService:

    def test_analyze(self, client):
        response = client.post(
            "/api/v1/keys/analyze",
            json={"key": SCENARIO_KEY, "probe_steps": 2000},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["symbol_coverage"] == 1.0
        assert body["is_usable"] is True

    def test_analyze_forbidden_symbols(self, client):
        response = client.post(
            "/api/v1/keys/analyze",
            json={"key": SCENARIO_KEY, "local_map": "logistic", "map_parameter": 0.5, "probe_steps": 500},
        )
        assert response.status_code == 200
        assert response.json()["missing_symbols"] == [0, 1, 2]

    def test_health_and_headers(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Cache-Control"] == "no-store, private"
