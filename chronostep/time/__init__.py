"""Event scheduling for event-aware integration.

- Heap-based calendar of labelled events
- Deterministic ordering of simultaneous events
- Self re-inserting recurring events
"""

from .events import EventQueue, ScheduledEvent

__all__ = ["EventQueue", "ScheduledEvent"]
