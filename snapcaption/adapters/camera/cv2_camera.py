"""
OpenCV webcam capture adapter.
CAMERA_INDEX (default 0) selects the webcam device. Opening the device
stands in for the permission prompt: if the OS refuses access the open fails.
"""
import cv2
from snapcaption.adapters.camera.base import CameraAdapter
from snapcaption.orchestrator.contracts import CapturedImage
from snapcaption.orchestrator.errors import CaptureError

JPEG_QUALITY = 85


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int = 0):
        self.status = status_store
        self._index = index
        self._cap = None

    def _open(self):
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self._index)
            if not self._cap.isOpened():
                self.status.log(f"cv2_camera: failed to open device {self._index}")

    def request_permission(self) -> bool:
        self._open()
        return self.ready

    @property
    def ready(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def capture(self) -> CapturedImage:
        if not self.ready:
            raise CaptureError(f"camera device {self._index} is not open")
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            raise CaptureError("frame capture failed")
        ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, JPEG_QUALITY])
        if not ok:
            raise CaptureError("jpeg encode failed")
        self.status.log(f"cv2_camera: captured {frame.shape[1]}x{frame.shape[0]}")
        return CapturedImage.from_bytes(bytes(buf), source=f"device:{self._index}")

    def release(self):
        if self._cap and self._cap.isOpened():
            self._cap.release()
            self._cap = None
