"""Shared evacuation state: trigger it, query it, or wait on it."""

from __future__ import annotations

import threading


class EvacuationContext:
    """Records, once and for all, that the cell has started evacuating."""

    def __init__(self) -> None:
        self._evacuated = threading.Event()
        self._lock = threading.Lock()

    def evacuate(self) -> None:
        """Mark the cell as evacuating. Repeated calls are harmless."""
        with self._lock:
            if not self._evacuated.is_set():
                self._evacuated.set()

    def evacuating(self) -> bool:
        """Return True once evacuation has been triggered."""
        return self._evacuated.is_set()

    def evacuate_notify(self) -> threading.Event:
        """Return an event that becomes set when evacuation starts."""
        return self._evacuated


def new() -> tuple[EvacuationContext, EvacuationContext, EvacuationContext]:
    """Return one context in its three roles: evacuatable, reporter, notifier."""
    context = EvacuationContext()
    return context, context, context