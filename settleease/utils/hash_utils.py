"""Hashing of JSON payloads for cache keys"""

import hashlib
import json
from typing import Any


def compute_json_hash(data: Any) -> str:
    """
    Compute a SHA-256 hex digest of `data` serialized as canonical JSON.

    Keys are sorted and separators fixed, so equal payloads always hash the
    same regardless of dict insertion order.

    Args:
        data: JSON-serializable payload (Decimal/UUID/datetime fall back to str)

    Returns:
        64 character hex digest
    """
    canonical = json.dumps(
        data, sort_keys=True, separators=(",", ":"), default=str
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
