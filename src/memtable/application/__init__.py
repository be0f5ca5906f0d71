"""Application layer.

Database is the registry that owns tables and routes observation
requests; TableObserver is the cancellable subscription it hands out.
"""

from memtable.application.database import Database
from memtable.application.observer import TableObserver

__all__ = [
    "Database",
    "TableObserver",
]
