import base64
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from snapcaption.orchestrator import errors


class CaptureState(str, Enum):
    AWAITING_PERMISSION = "awaiting_permission"
    PERMISSION_DENIED = "permission_denied"
    READY = "ready"
    CAPTURING = "capturing"
    CLASSIFYING = "classifying"
    RESULT_SHOWN = "result_shown"


class Trigger(str, Enum):
    REQUEST_PERMISSION = "request_permission"
    CAPTURE = "capture"
    RETAKE = "retake"


@dataclass
class CapturedImage:
    data: bytes
    b64: str
    source: Optional[str] = None   # file name, device index, ...

    @classmethod
    def from_bytes(cls, data: bytes, source: str | None = None) -> "CapturedImage":
        return cls(data=data, b64=base64.standard_b64encode(data).decode("ascii"), source=source)


@dataclass
class Failure:
    kind: str                       # one of errors.FAILURE_KINDS
    status_code: Optional[int] = None
    detail: Optional[str] = None

    @property
    def message(self) -> str:
        return errors.failure_text(self)


@dataclass
class ClassificationResult:
    text: str
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass
class FlowSnapshot:
    state: CaptureState
    busy: bool
    image: Optional[CapturedImage] = None
    result: Optional[ClassificationResult] = None
