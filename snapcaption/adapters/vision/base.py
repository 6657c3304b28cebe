from snapcaption.orchestrator.contracts import Failure


class VisionClient:
    async def classify(self, image_bytes: bytes) -> str | Failure:
        """Return a text description of the image, or a Failure. Must not raise."""
        raise NotImplementedError
