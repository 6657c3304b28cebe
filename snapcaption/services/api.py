from contextlib import asynccontextmanager
from fastapi import FastAPI
from dotenv import load_dotenv
from snapcaption.config import Settings
from snapcaption.services.models import ActionResponse, StatusResponse, render
from snapcaption.services.status_store import StatusStore
from snapcaption.orchestrator.contracts import Trigger
from snapcaption.orchestrator.state_machine import CaptureFlow
from snapcaption.adapters.vision.mock_vision import MockVision
from snapcaption.adapters.vision.openai_vision import OpenAIVision
from snapcaption.adapters.camera.mock_camera import MockCamera

load_dotenv(dotenv_path="snapcaption/.env", override=False)

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    status.log(f"shutdown: releasing {type(camera).__name__}")
    camera.release()


app = FastAPI(title="snapcaption", lifespan=lifespan)

status = StatusStore()

# Vision adapter: VISION_ADAPTER = openai | mock  (default: openai)
if settings.vision_adapter == "mock":
    vision = MockVision(status)
else:
    vision = OpenAIVision(
        status,
        api_key=settings.api_key,
        model=settings.vision_model,
        api_url=settings.vision_api_url,
        timeout=settings.vision_timeout_s,
    )
status.log(f"vision adapter: {type(vision).__name__}")

# Camera adapter: CAMERA_ADAPTER = cv2 | mock  (default: cv2, mock if opencv is missing)
if settings.camera_adapter == "mock":
    camera = MockCamera(status, images_dir=settings.mock_camera_dir)
else:
    try:
        from snapcaption.adapters.camera.cv2_camera import CV2Camera
        camera = CV2Camera(status, index=settings.camera_index)
    except ImportError:
        camera = MockCamera(status, images_dir=settings.mock_camera_dir)
        status.log("camera: opencv not installed, using MockCamera")
status.log(f"camera adapter: {type(camera).__name__}")

flow = CaptureFlow(camera=camera, vision=vision, status_store=status)


async def _dispatch(trigger: Trigger) -> ActionResponse:
    accepted = flow.accepts(trigger)
    state = await flow.dispatch(trigger)
    view = render(flow.snapshot())
    return ActionResponse(ok=accepted, state=state, message=view.message, failure=view.failure)


@app.get("/status", response_model=StatusResponse)
def get_status():
    return render(flow.snapshot(), logs=status.logs)


@app.post("/permission", response_model=ActionResponse)
async def request_permission():
    return await _dispatch(Trigger.REQUEST_PERMISSION)


@app.post("/capture", response_model=ActionResponse)
async def capture():
    """Runs one full capture cycle and returns once the result is shown."""
    return await _dispatch(Trigger.CAPTURE)


@app.post("/retake", response_model=ActionResponse)
async def retake():
    return await _dispatch(Trigger.RETAKE)


@app.get("/health")
def health():
    checks = {
        "api": True,
        "state": flow.current_state().value,
        "vision_adapter": type(vision).__name__,
        "camera_adapter": type(camera).__name__,
        "camera_ready": camera.ready,
        "credential_set": bool(settings.api_key) or settings.vision_adapter == "mock",
    }
    checks["all_ok"] = checks["api"] and checks["credential_set"]
    return checks
