"""Order number generation.

Order numbers are human-readable: a millisecond timestamp plus a random
suffix.  This makes collisions unlikely, not impossible; uniqueness is
enforced when the order is committed.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

ORDER_NUMBER_PREFIX = "ORD"


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    suffix = uuid.uuid4().hex[:8].upper()
    return f"{ORDER_NUMBER_PREFIX}-{millis}-{suffix}"
