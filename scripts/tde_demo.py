"""Manual round-trip check against a running chaoscrypt server.

Run after starting the server locally (python run.py):
    python scripts/tde_demo.py [BASE_URL]

The script:
1. Analyzes the demo key (symbol coverage)
2. Encrypts a message with the u16le encoding
3. Decrypts it and compares
4. Repeats with the int encoding and perturbation on
"""
from __future__ import annotations

import base64
import sys

import requests

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8000"

# Eight uncoupled logarithmic maps: every byte value is a symbol
DEMO_KEY = {
    "state": [0.31, -0.52, 0.77, -1.13, 0.24, -0.68, 1.42, -0.37],
    "coupling": [[1.0 if i == j else 0.0 for j in range(8)] for i in range(8)],
}
MESSAGE = b"Text dependent encryption over a coupled map network"


def post(path: str, payload: dict) -> dict:
    resp = requests.post(f"{BASE_URL}/api/v1{path}", json=payload, timeout=60)
    if resp.status_code != 200:
        print(f"❌ {path} -> {resp.status_code}: {resp.text}")
        sys.exit(1)
    return resp.json()


def round_trip(options: dict) -> None:
    encrypted = post(
        "/cipher/encrypt",
        {"plaintext_b64": base64.b64encode(MESSAGE).decode(), "key": DEMO_KEY, "options": options},
    )
    if encrypted["encoding"] == "int":
        print(f"   counts: {encrypted['counts'][:10]} …")
        request = {"counts": encrypted["counts"]}
    else:
        print(f"   ciphertext: {encrypted['ciphertext_b64'][:40]} …")
        request = {"ciphertext_b64": encrypted["ciphertext_b64"]}

    decrypted = post("/cipher/decrypt", {**request, "key": DEMO_KEY, "options": options})
    recovered = base64.b64decode(decrypted["plaintext_b64"])
    if recovered == MESSAGE:
        print("✅ Round trip OK")
    else:
        print(f"❌ Round trip mismatch: {recovered!r}")
        sys.exit(1)


print("=== 1. Analyze key ===")
report = post("/keys/analyze", {"key": DEMO_KEY, "probe_steps": 50000})
print(f"   coverage={report['symbol_coverage']:.3f} usable={report['is_usable']}")
for warning in report["warnings"]:
    print(f"   ⚠️  {warning}")

print("=== 2/3. u16le round trip ===")
round_trip({"encoding": "u16le"})

print("=== 4. int round trip with perturbation ===")
round_trip({"encoding": "int", "perturb": True})
