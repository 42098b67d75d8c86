"""OpenCV camera session that reports availability to the game session."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import cv2

from capture_module.base import CaptureService
from utils.log_utils import log
from utils.settings_store import get_settings


class CameraStream:
    """Thin wrapper around OpenCV VideoCapture."""

    def __init__(self, device_index: int = 0) -> None:
        self.device_index = device_index
        self._cap = None

    @property
    def is_open(self) -> bool:
        return self._cap is not None

    def open(self) -> None:
        if self._cap is not None:
            return
        cap = cv2.VideoCapture(self.device_index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Unable to open camera at index {self.device_index}.")
        self._cap = cap

    def read(self) -> tuple[bool, Any]:
        if self._cap is None:
            raise RuntimeError("CameraStream not opened.")
        return self._cap.read()

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


class CameraCaptureService(CaptureService):
    """Opens the camera for the duration of a game session.

    Failing to open (no device, permission denied) is reported as
    ``availability=False`` instead of raising, so the session keeps running
    without hit input.
    """

    def __init__(
        self,
        camera_index: int = 0,
        *,
        stream_factory: Callable[[int], CameraStream] | None = None,
    ) -> None:
        super().__init__()
        self.camera_index = camera_index
        self._stream_factory = stream_factory or CameraStream
        self._stream: CameraStream | None = None

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None = None) -> CameraCaptureService:
        if settings is None:
            settings = get_settings()
        section = settings.get("capture") or {}
        return cls(camera_index=int(section.get("camera_index", 0)))

    def read_frame(self) -> tuple[bool, Any]:
        """Hook for the external hand detector's frame loop.

        The detector pulls frames here and reports recognized gestures through
        ``emit_hit``; this service never reads frames on its own. Returns
        ``(False, None)`` outside a session. A failed read marks the camera
        unavailable so the game session can react.
        """
        if self._stream is None:
            return False, None
        ok, frame = self._stream.read()
        if not ok:
            log("CAPTURE", "Camera stopped delivering frames", "WARN")
            self.set_available(False)
        return ok, frame

    def _on_start(self) -> None:
        stream = self._stream_factory(self.camera_index)
        try:
            stream.open()
        except RuntimeError as exc:
            log("CAPTURE", f"Camera unavailable: {exc}", "WARN")
            self.set_available(False)
            return
        self._stream = stream
        log("CAPTURE", f"Camera {self.camera_index} opened", "INFO")
        self.set_available(True)

    def _on_stop(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
            log("CAPTURE", f"Camera {self.camera_index} closed", "INFO")
