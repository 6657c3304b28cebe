from snapcaption.adapters.vision.base import VisionClient

MOCK_DESCRIPTION = "A photo taken with the mock camera."


class MockVision(VisionClient):
    def __init__(self, status_store, description: str = MOCK_DESCRIPTION):
        self.status = status_store
        self.description = description

    async def classify(self, image_bytes: bytes) -> str:
        # Mock: ignore image, return canned text
        self.status.log(f"mock_vision: {len(image_bytes)} bytes -> {self.description!r}")
        return self.description
