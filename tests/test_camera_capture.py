"""Tests for CaptureService and CameraCaptureService (camera mocked)."""

from unittest.mock import Mock

from capture_module import CameraCaptureService, CaptureService


def _stream_factory(open_error: Exception | None = None, read_result=(True, "frame")):
    stream = Mock()
    if open_error is not None:
        stream.open.side_effect = open_error
    stream.read.return_value = read_result
    factory = Mock(return_value=stream)
    return factory, stream


class TestCaptureService:
    """Test suite for the CaptureService base."""

    def test_hits_dropped_while_inactive(self):
        """Test that hits only flow during an active session."""
        capture = CaptureService()
        handler = Mock()
        capture.hits.subscribe(handler)

        capture.emit_hit(5)
        capture.start_session()
        capture.emit_hit(7)

        handler.assert_called_once_with(7)

    def test_availability_published_on_change_only(self):
        """Test that repeated identical availability values are not republished."""
        capture = CaptureService()
        handler = Mock()
        capture.availability.subscribe(handler)

        capture.set_available(True)
        capture.set_available(False)
        capture.set_available(False)

        handler.assert_called_once_with(False)
        assert capture.available is False


class TestCameraCaptureService:
    """Test suite for CameraCaptureService."""

    def test_start_opens_and_stop_closes(self):
        """Test that the camera lives exactly as long as the session."""
        factory, stream = _stream_factory()
        capture = CameraCaptureService(camera_index=2, stream_factory=factory)

        capture.start_session()
        capture.start_session()
        factory.assert_called_once_with(2)
        stream.open.assert_called_once()

        capture.stop_session()
        stream.close.assert_called_once()
        assert capture.is_active() is False

    def test_open_failure_reports_unavailable(self):
        """Test that a camera error becomes availability=False, not an exception."""
        factory, _ = _stream_factory(open_error=RuntimeError("denied"))
        capture = CameraCaptureService(stream_factory=factory)
        handler = Mock()
        capture.availability.subscribe(handler)

        capture.start_session()

        handler.assert_called_once_with(False)
        assert capture.available is False
        assert capture.read_frame() == (False, None)

    def test_reopen_after_failure_restores_availability(self):
        """Test that a later successful open flips availability back on."""
        factory, stream = _stream_factory()
        stream.open.side_effect = [RuntimeError("busy"), None]
        capture = CameraCaptureService(stream_factory=factory)

        capture.start_session()
        capture.stop_session()
        capture.start_session()

        assert capture.available is True

    def test_failed_read_marks_unavailable(self):
        """Test that a dead stream is reported through availability."""
        factory, _ = _stream_factory(read_result=(False, None))
        capture = CameraCaptureService(stream_factory=factory)
        capture.start_session()

        ok, frame = capture.read_frame()

        assert ok is False
        assert frame is None
        assert capture.available is False

    def test_from_settings(self):
        """Test that the camera index comes from the capture settings section."""
        capture = CameraCaptureService.from_settings({"capture": {"camera_index": 3}})
        assert capture.camera_index == 3
