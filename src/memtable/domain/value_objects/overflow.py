"""Overflow policies for bounded broadcast buffers."""

from __future__ import annotations

from enum import Enum


class OverflowPolicy(str, Enum):
    """What a full buffer does when a new item arrives.

    There is no block-producer policy: tables publish while holding
    their lock, and a slow subscriber must never stall a mutation.
    """

    DROP_NEWEST = "drop_newest"
    """Reject the incoming item; buffered items are kept."""

    DROP_OLDEST = "drop_oldest"
    """Evict the oldest buffered item to make room for the incoming one."""
