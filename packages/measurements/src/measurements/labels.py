from __future__ import annotations

from collections.abc import Mapping


def int_from_labels(labels: Mapping[str, str], key: str) -> int:
    """Integer value of a label, or 0 when it is missing or not an integer."""
    try:
        return int(labels[key])
    except (KeyError, ValueError):
        return 0
