from enum import Enum
from typing import Optional


class SelectionPolicy(str, Enum):
    """Which of a user's rounds, newest first, feed the statistics."""
    ALL = "all"
    LAST_ROUND = "last_round"
    LAST_5 = "last_5"
    LAST_20 = "last_20"

    @property
    def limit(self) -> Optional[int]:
        return _LIMITS[self]

    @classmethod
    def parse(cls, value) -> "SelectionPolicy":
        """Accept enum values as well as the dashboard filter labels."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.ALL
        text = str(value).strip().lower()
        try:
            return cls(text)
        except ValueError:
            pass
        if text in _LABELS:
            return _LABELS[text]
        raise ValueError(f"Unknown selection policy: {value!r}")


_LIMITS = {
    SelectionPolicy.ALL: None,
    SelectionPolicy.LAST_ROUND: 1,
    SelectionPolicy.LAST_5: 5,
    SelectionPolicy.LAST_20: 20,
}

_LABELS = {
    "todas": SelectionPolicy.ALL,
    "última ronda": SelectionPolicy.LAST_ROUND,
    "últimas 5 rondas": SelectionPolicy.LAST_5,
    "últimas 20 rondas": SelectionPolicy.LAST_20,
    "last round": SelectionPolicy.LAST_ROUND,
    "last 5 rounds": SelectionPolicy.LAST_5,
    "last 20 rounds": SelectionPolicy.LAST_20,
}
