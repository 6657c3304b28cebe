from pydantic import BaseModel
from typing import Literal, Optional
from snapcaption.orchestrator.contracts import CaptureState, FlowSnapshot

ViewName = Literal["loading", "permission", "camera", "result"]

ANALYZING_TEXT = "Analyzing image..."
PERMISSION_TEXT = "We need your permission to use the camera."


class FailureOut(BaseModel):
    kind: str
    status_code: Optional[int] = None


class StatusResponse(BaseModel):
    state: CaptureState
    view: ViewName
    busy: bool
    capture_enabled: bool
    capture_label: str
    message: Optional[str] = None      # permission prompt or result text
    image: Optional[str] = None        # base64 JPEG of the current capture
    failure: Optional[FailureOut] = None
    logs: list[str] = []


class ActionResponse(BaseModel):
    ok: bool                           # False when the trigger was ignored
    state: CaptureState
    message: Optional[str] = None
    failure: Optional[FailureOut] = None


def _view_for(state: CaptureState) -> ViewName:
    if state == CaptureState.AWAITING_PERMISSION:
        return "loading"
    if state == CaptureState.PERMISSION_DENIED:
        return "permission"
    if state in (CaptureState.READY, CaptureState.CAPTURING):
        return "camera"
    return "result"


def render(snap: FlowSnapshot, logs: list[str] | None = None) -> StatusResponse:
    """View model for a snapshot. Pure function of the snapshot."""
    message = None
    if snap.state == CaptureState.PERMISSION_DENIED:
        message = PERMISSION_TEXT
    elif snap.state == CaptureState.CLASSIFYING:
        message = ANALYZING_TEXT
    elif snap.state == CaptureState.RESULT_SHOWN and snap.result is not None:
        message = snap.result.text

    failure = None
    if snap.result is not None and snap.result.failure is not None:
        failure = FailureOut(kind=snap.result.failure.kind, status_code=snap.result.failure.status_code)

    return StatusResponse(
        state=snap.state,
        view=_view_for(snap.state),
        busy=snap.busy,
        capture_enabled=snap.state == CaptureState.READY and not snap.busy,
        capture_label="Processing..." if snap.busy else "Capture",
        message=message,
        image=snap.image.b64 if snap.image else None,
        failure=failure,
        logs=logs or [],
    )
