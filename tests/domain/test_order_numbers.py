"""Unit tests for order number generation."""

import re
from datetime import datetime, timezone

from ims.domain.service.order_numbers import generate_order_number

_PATTERN = re.compile(r"^ORD-\d+-[0-9A-F]{8}$")


class TestGenerateOrderNumber:

    def test_format(self):
        assert _PATTERN.match(generate_order_number())

    def test_embeds_millisecond_timestamp(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        number = generate_order_number(now)
        assert number.split("-")[1] == str(int(now.timestamp() * 1000))

    def test_unique_for_same_instant(self):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        numbers = {generate_order_number(now) for _ in range(200)}
        assert len(numbers) == 200
