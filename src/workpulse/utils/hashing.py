"""Stable content hashing for snapshots and filter sets."""

from __future__ import annotations

import hashlib
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from workpulse.aggregation.filters import FilterDescriptor
    from workpulse.models.respondent import Snapshot


def _stable_hash(data: Any) -> str:
    """Generate stable SHA256 hash from JSON-serializable data.

    Args:
        data: Data to hash (must be JSON-serializable)

    Returns:
        str: First 16 characters of hex digest
    """
    json_str = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()[:16]


def hash_snapshot(snapshot: Snapshot) -> str:
    """Hash snapshot contents, independent of entry order.

    Args:
        snapshot: Snapshot to hash

    Returns:
        str: Deterministic hash string
    """
    entries = sorted(
        (entry.model_dump(mode="json") for entry in snapshot.entries),
        key=lambda e: (e["record"]["respondent_id"], e["record"]["responded_at"]),
    )
    return _stable_hash(entries)


def hash_filters(filters: FilterDescriptor | None) -> str:
    """Hash a filter descriptor; ``None`` and an empty descriptor hash alike.

    Args:
        filters: Filter descriptor or None

    Returns:
        str: Deterministic hash string
    """
    if filters is None:
        return _stable_hash({})
    return _stable_hash(filters.model_dump(mode="json", exclude_defaults=True))
