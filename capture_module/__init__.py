from capture_module.base import CaptureService
from capture_module.camera_capture import CameraCaptureService, CameraStream

__all__ = [
    "CameraCaptureService",
    "CameraStream",
    "CaptureService",
]
