"""
Runtime settings, read once from the environment at startup.

The service module loads snapcaption/.env first (without overriding the
real environment), so either source works.
"""
import os
from dataclasses import dataclass
from typing import Literal

from snapcaption.adapters.vision.openai_vision import DEFAULT_API_URL, DEFAULT_MODEL

VisionAdapterName = Literal["openai", "mock"]
CameraAdapterName = Literal["cv2", "mock"]


@dataclass
class Settings:
    api_key: str = ""
    vision_adapter: VisionAdapterName = "openai"
    vision_model: str = DEFAULT_MODEL
    vision_api_url: str = DEFAULT_API_URL
    vision_timeout_s: float | None = None   # unset: httpx default
    camera_adapter: CameraAdapterName = "cv2"
    camera_index: int = 0
    mock_camera_dir: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("OPENAI_API_KEY", ""),
            vision_adapter=os.getenv("VISION_ADAPTER", "openai").lower(),
            vision_model=os.getenv("VISION_MODEL", DEFAULT_MODEL),
            vision_api_url=os.getenv("VISION_API_URL", DEFAULT_API_URL),
            vision_timeout_s=float(os.environ["VISION_TIMEOUT_S"]) if os.getenv("VISION_TIMEOUT_S") else None,
            camera_adapter=os.getenv("CAMERA_ADAPTER", "cv2").lower(),
            camera_index=int(os.getenv("CAMERA_INDEX", "0")),
            mock_camera_dir=os.getenv("MOCK_CAMERA_DIR") or None,
        )
