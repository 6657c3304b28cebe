"""Mock camera: serves a random JPEG from a directory, for running without a webcam."""
import random
from pathlib import Path
from snapcaption.adapters.camera.base import CameraAdapter
from snapcaption.orchestrator.contracts import CapturedImage
from snapcaption.orchestrator.errors import CaptureError


class MockCamera(CameraAdapter):
    def __init__(self, status_store, images_dir: str | Path | None = None, granted: bool = True):
        self.status = status_store
        self.images_dir = Path(images_dir) if images_dir else None
        self.granted = granted
        self._ready = False

    def request_permission(self) -> bool:
        self._ready = self.granted
        self.status.log(f"mock_camera: permission {'granted' if self.granted else 'denied'}")
        return self.granted

    @property
    def ready(self) -> bool:
        return self._ready

    def release(self):
        self._ready = False

    def capture(self) -> CapturedImage:
        jpegs = sorted(self.images_dir.glob("*.jpg")) if self.images_dir else []
        if not jpegs:
            self.status.log(f"mock_camera: no images found in {self.images_dir}")
            raise CaptureError("no mock images available")
        chosen = random.choice(jpegs)
        self.status.log(f"mock_camera: serving {chosen.name}")
        return CapturedImage.from_bytes(chosen.read_bytes(), source=chosen.name)
