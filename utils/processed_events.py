"""
Process-local record of inbound events that were already handled.

Chat platforms retry webhook deliveries; duty completions carried by a
retried message must only be counted once.
"""

import threading


class ProcessedEventTracker:
    """
    Set of event IDs whose side effects have been applied.

    - No TTL; lost on restart.
    - Thread-safe.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids: set[str] = set()

    def mark_if_new(self, event_id: str) -> bool:
        """
        Claim an event ID.

        Returns:
            True if the ID was not seen before (caller should apply side effects),
            False if it was already processed
        """
        if not event_id:
            return True
        with self._lock:
            key = str(event_id)
            if key in self._ids:
                return False
            self._ids.add(key)
            return True
