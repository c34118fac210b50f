import math
from typing import Any, Optional

from audience_adapter.adapter.config import config


class Validator:
    """
    Input sanitation for values that arrive from the host page or the network.
    """

    @staticmethod
    def sanitize_string(s: Optional[Any], default: str = "") -> str:
        """
        Strip string inputs. Identifiers are never truncated or reinterpreted.
        Non-string values (lists, dicts, numbers) are rejected as default.
        """
        if not s or not isinstance(s, str):
            return default

        s = s.strip()
        return s or default

    @staticmethod
    def is_too_long(s: str, max_len: int = config.max_string_length) -> bool:
        return len(s) > max_len

    @staticmethod
    def parse_cents(cents: Optional[Any]) -> int:
        """
        Parse a bid_price_cents value safely. Returns 0 if invalid, infinite or missing.
        """
        if cents is None or isinstance(cents, bool):
            return 0
        try:
            value = float(cents)
        except (ValueError, TypeError):
            return 0
        if not math.isfinite(value):
            return 0
        return int(value)
