from __future__ import annotations

import uuid


def new_id(prefix: str) -> str:
    """Opaque string id in the ``<prefix>-<hex>`` form used across tables."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def sequential_ids(prefix: str, count: int) -> list[str]:
    """``count`` ids sharing one stem, numbered from 1 in creation order."""
    stem = uuid.uuid4().hex[:10]
    return [f"{prefix}-{stem}-{i + 1}" for i in range(count)]
