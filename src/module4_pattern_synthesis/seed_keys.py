"""
Canonical seed keys for component patterns.

The key is the compact JSON of ``{"p": path, "t": type, "d": depth}``,
byte-for-byte what ``JSON.stringify`` emits for the same object.
"""

import json


def seed_key(path: str, type: str, depth: int) -> str:
    """
    Build the canonical seed key of a component.

    Example:
        >>> seed_key("BILLING_PAGE/metadata-panel", "panel", 2)
        '{"p":"BILLING_PAGE/metadata-panel","t":"panel","d":2}'
    """
    return json.dumps(
        {"p": path, "t": type, "d": depth},
        separators=(",", ":"),
        ensure_ascii=False,
    )
