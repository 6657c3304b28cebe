import asyncio
import time
from snapcaption.orchestrator.contracts import (
    CaptureState, Trigger, CapturedImage, ClassificationResult, Failure, FlowSnapshot,
)
from snapcaption.orchestrator import errors

_PERMISSION_STATES = (CaptureState.AWAITING_PERMISSION, CaptureState.PERMISSION_DENIED)


class CaptureFlow:
    """
    Capture → classify → retake state machine.

      AWAITING_PERMISSION --REQUEST_PERMISSION--> READY | PERMISSION_DENIED
      PERMISSION_DENIED   --REQUEST_PERMISSION--> READY | PERMISSION_DENIED
      READY               --CAPTURE-->            CAPTURING → CLASSIFYING → RESULT_SHOWN
      RESULT_SHOWN        --RETAKE-->             READY

    Triggers that do not apply to the current state are ignored.
    """

    def __init__(self, camera, vision, status_store):
        self.camera = camera
        self.vision = vision
        self.status = status_store
        self._state = CaptureState.AWAITING_PERMISSION
        self._image: CapturedImage | None = None
        self._result: ClassificationResult | None = None

    def current_state(self) -> CaptureState:
        return self._state

    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(state=self._state, busy=self.status.busy, image=self._image, result=self._result)

    def accepts(self, trigger: Trigger) -> bool:
        """True when the trigger applies to the current state."""
        trigger = Trigger(trigger)
        if trigger == Trigger.REQUEST_PERMISSION:
            return self._state in _PERMISSION_STATES and not self.status.busy
        if trigger == Trigger.CAPTURE:
            return self._state == CaptureState.READY and not self.status.busy and self.camera.ready
        return self._state == CaptureState.RESULT_SHOWN

    async def dispatch(self, trigger: Trigger) -> CaptureState:
        trigger = Trigger(trigger)
        if not self.accepts(trigger):
            self._ignore(trigger)
            return self._state
        if trigger == Trigger.REQUEST_PERMISSION:
            await self._request_permission()
        elif trigger == Trigger.CAPTURE:
            await self._capture()
        else:
            self._retake()
        return self._state

    def _ignore(self, trigger: Trigger):
        reason = ""
        if self.status.busy:
            reason = " (busy)"
        elif trigger == Trigger.CAPTURE and self._state == CaptureState.READY:
            reason = " (camera not initialized)"
        self.status.log(f"flow: ignored {trigger.value} in state={self._state.value}{reason}")

    def _set_state(self, state: CaptureState):
        self.status.log(f"flow: {self._state.value} -> {state.value}")
        self._state = state

    async def _request_permission(self):
        # busy also covers the permission query, so a second query or a capture
        # cannot start until this one has been applied
        self.status.set_busy(True)
        try:
            self.status.log("camera.request_permission")
            try:
                granted = await asyncio.to_thread(self.camera.request_permission)
            except Exception as e:
                self.status.log(f"camera.request_permission error {type(e).__name__}: {e}")
                granted = False
            if self._state in _PERMISSION_STATES:
                self._set_state(CaptureState.READY if granted else CaptureState.PERMISSION_DENIED)
        finally:
            self.status.set_busy(False)

    async def _capture(self):
        # accepts() ran synchronously in dispatch(), so busy is set before the
        # first await and a second CAPTURE mid-cycle is ignored
        self.status.set_busy(True)
        t0 = time.time()
        self._image = None
        self._result = None
        try:
            self._set_state(CaptureState.CAPTURING)

            # 1) capture
            self.status.log("camera.capture")
            try:
                image = await asyncio.to_thread(self.camera.capture)
            except Exception as e:
                self.status.log(f"camera.capture error {type(e).__name__}: {e}")
                self._fail(Failure(kind=errors.CAPTURE_FAILURE, detail=str(e)))
                return

            # 2) keep the image before the network call so the thumbnail renders while pending
            self._image = image
            self._set_state(CaptureState.CLASSIFYING)

            # 3) classify
            self.status.log(f"vision.classify bytes={len(image.data)}")
            try:
                answer = await self.vision.classify(image.data)
            except Exception as e:
                self.status.log(f"vision.classify error {type(e).__name__}: {e}")
                answer = Failure(kind=errors.TRANSPORT_ERROR, detail=str(e))

            if isinstance(answer, Failure):
                self.status.log(f"vision.failure kind={answer.kind} status={answer.status_code}")
                self._fail(answer)
            else:
                self._finish(ClassificationResult(text=answer))
        finally:
            # cancelled mid-cycle: land on a result so retake can recover
            if self._state == CaptureState.CAPTURING:
                self._fail(Failure(kind=errors.CAPTURE_FAILURE, detail="cancelled"))
            elif self._state == CaptureState.CLASSIFYING:
                self._fail(Failure(kind=errors.TRANSPORT_ERROR, detail="cancelled"))
            dt = int((time.time() - t0) * 1000)
            self.status.log(f"flow: cycle done dt={dt}ms")
            self.status.set_busy(False)

    def _finish(self, result: ClassificationResult):
        self._result = result
        self._set_state(CaptureState.RESULT_SHOWN)

    def _fail(self, failure: Failure):
        self._finish(ClassificationResult(text=failure.message, failure=failure))

    def _retake(self):
        # image and result always reset together
        self._image = None
        self._result = None
        self._set_state(CaptureState.READY)
