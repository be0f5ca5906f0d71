"""Domain services.

Services implement logic that doesn't naturally fit within a single
entity. Here that is the change broadcast a table uses to fan events
out to its subscribers.
"""

from memtable.domain.services.change_channel import (
    BoundedBuffer,
    ChangeChannel,
    ChangeSubscription,
)

__all__ = [
    "BoundedBuffer",
    "ChangeChannel",
    "ChangeSubscription",
]
