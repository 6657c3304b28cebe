"""Failure kinds and the result text shown for each of them."""

MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
REMOTE_ERROR = "REMOTE_ERROR"
TRANSPORT_ERROR = "TRANSPORT_ERROR"
CAPTURE_FAILURE = "CAPTURE_FAILURE"

FAILURE_KINDS = (MISSING_CREDENTIAL, REMOTE_ERROR, TRANSPORT_ERROR, CAPTURE_FAILURE)

NO_DESCRIPTION = "No description found."


class CaptureError(RuntimeError):
    """Raised by camera adapters when a frame cannot be produced."""


def failure_text(failure) -> str:
    if failure.kind == MISSING_CREDENTIAL:
        return "Vision API key is missing. Please set OPENAI_API_KEY."
    if failure.kind == REMOTE_ERROR:
        return f"Vision API error: {failure.status_code}"
    if failure.kind == CAPTURE_FAILURE:
        return "Failed to capture photo."
    return "Failed to classify image."
