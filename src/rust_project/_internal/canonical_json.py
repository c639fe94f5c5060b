"""Canonical JSON serialization.

Used for project documents written back out and for verification
reports, so the same project always produces the same bytes.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - UTF-8 (non-ASCII kept as-is)
    - Sorted keys
    - Stable separators (",", ":")
    - Lists keep their order (crate order is significant: deps index into it)

    Args:
        obj: JSON-compatible Python object

    Returns:
        Canonical JSON string
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )
