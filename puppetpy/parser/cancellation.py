"""Cooperative cancellation for a single parse."""

import threading


class CancellationToken:
    """Flag a host thread sets to stop a parse at the next top-level statement."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()
