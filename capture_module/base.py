"""Capture/detection collaborator interface consumed by the game session."""

from __future__ import annotations

from utils.event_bus import EventStream
from utils.log_utils import deep_log


class CaptureService:
    """Owns the hit and availability streams; subclasses open real devices.

    ``hits`` carries the point value of each recognized hit (``None`` means
    "use the session default"). ``availability`` carries a bool whenever the
    device or permission state changes.
    """

    def __init__(self) -> None:
        self.hits: EventStream[int | None] = EventStream("hits")
        self.availability: EventStream[bool] = EventStream("availability")
        self._available = True
        self._active = False

    @property
    def available(self) -> bool:
        return self._available

    def is_active(self) -> bool:
        return self._active

    def start_session(self) -> None:
        if self._active:
            return
        self._active = True
        self._on_start()

    def stop_session(self) -> None:
        if not self._active:
            return
        self._active = False
        self._on_stop()

    def emit_hit(self, points: int | None = None) -> None:
        """Called by the detector when a gesture lands."""
        if not self._active:
            deep_log("CAPTURE", f"Dropping hit while inactive (points={points})")
            return
        self.hits.publish(points)

    def set_available(self, available: bool) -> None:
        available = bool(available)
        if available == self._available:
            return
        self._available = available
        self.availability.publish(available)

    def _on_start(self) -> None:
        pass

    def _on_stop(self) -> None:
        pass
