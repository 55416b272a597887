"""
Proof hashing and canonical signing strings.

Two pure functions that both sides of a transfer must compute identically:

- ``generate_proof_hash``: SHA-256 (hex) over the six canonical proof
  fields joined by ``|``. Missing or empty fields contribute ``""`` and
  ``proofUrls`` is comma-joined, so a record and a proof only hash equal
  when every one of the six fields agrees.
- ``canonical_signing_string``: the bytes a party signs, every proofData
  key as ``key=value`` sorted by key and joined by ``&``.
"""

import hashlib
from collections.abc import Mapping
from typing import Any

PROOF_FIELDS = ("transferId", "fowlId", "fromUid", "toUid", "timestamp", "proofUrls")


def _as_text(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(item) for item in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bool):
        return "true"
    return str(value)


def proof_string(data: Mapping[str, Any]) -> str:
    """Return the ``|``-joined canonical proof string for data."""
    return "|".join(_as_text(data.get(name)) for name in PROOF_FIELDS)


def generate_proof_hash(data: Mapping[str, Any]) -> str:
    """Return the SHA-256 hex digest of the canonical proof string."""
    return hashlib.sha256(proof_string(data).encode("utf-8")).hexdigest()


def canonical_signing_string(data: Mapping[str, Any]) -> bytes:
    """Return the UTF-8 bytes a party signs for the given proof data."""
    pairs = (f"{key}={_as_text(data[key])}" for key in sorted(data))
    return "&".join(pairs).encode("utf-8")
