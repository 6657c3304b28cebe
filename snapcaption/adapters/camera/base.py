from abc import ABC, abstractmethod
from snapcaption.orchestrator.contracts import CapturedImage


class CameraAdapter(ABC):
    @abstractmethod
    def request_permission(self) -> bool:
        """Ask for camera access. True once the device can be used."""
        ...

    @property
    @abstractmethod
    def ready(self) -> bool:
        """True when the capture surface is initialized."""
        ...

    @abstractmethod
    def capture(self) -> CapturedImage:
        """Capture one still. Raises CaptureError on failure."""
        ...

    def release(self):
        """Free the device. Safe to call more than once."""
