"""
messaging.threads — Presentation rules for message threads.

Pure functions over an already ordered list of messages; no database
access.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from core.constants import MESSAGE_HEADER_GAP_MS


class Timestamped(Protocol):
    timestamp: datetime


def needs_header(messages: Sequence[Timestamped], i: int) -> bool:
    """
    Whether a timestamp header is shown above ``messages[i]``.

    True for the first message, and for any message sent more than
    ``MESSAGE_HEADER_GAP_MS`` after the one before it.
    """
    if i == 0:
        return True
    gap = messages[i].timestamp - messages[i - 1].timestamp
    return gap.total_seconds() * 1000 > MESSAGE_HEADER_GAP_MS


def timestamp_headers(messages: Sequence[Timestamped]) -> list[bool]:
    """``needs_header`` for every index of ``messages``."""
    return [needs_header(messages, i) for i in range(len(messages))]
