"""
OpenAI-compatible vision client (chat completions with an inline image).

One POST per image, no history, no streaming, no retry. The credential,
model and endpoint come from the constructor; nothing is read from the
environment here.
"""
import base64
import httpx
from snapcaption.adapters.vision.base import VisionClient
from snapcaption.orchestrator.contracts import Failure
from snapcaption.orchestrator import errors

DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o"

PROMPT = "Describe this image."


class OpenAIVision(VisionClient):
    def __init__(
        self,
        status_store,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        api_url: str = DEFAULT_API_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.status = status_store
        self._api_key = api_key or ""
        self.model = model
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport
        if self._api_key:
            self.status.log(f"openai_vision: ready (model={self.model})")
        else:
            self.status.log("openai_vision: OPENAI_API_KEY not set")

    @property
    def ready(self) -> bool:
        return bool(self._api_key)

    def _client_kwargs(self) -> dict:
        # timeout=None keeps the httpx default
        kwargs = {"transport": self._transport}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs

    def build_payload(self, image_bytes: bytes) -> dict:
        b64 = base64.standard_b64encode(image_bytes).decode("utf-8")
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": PROMPT},
                        {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{b64}"}},
                    ],
                }
            ],
        }

    async def classify(self, image_bytes: bytes) -> str | Failure:
        if not self._api_key:
            return Failure(kind=errors.MISSING_CREDENTIAL)

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                resp = await client.post(self.api_url, json=self.build_payload(image_bytes), headers=headers)
            if not resp.is_success:
                self.status.log(f"openai_vision: HTTP {resp.status_code}")
                return Failure(kind=errors.REMOTE_ERROR, status_code=resp.status_code)
            data = resp.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            self.status.log(f"openai_vision: transport error {type(e).__name__}: {e}")
            return Failure(kind=errors.TRANSPORT_ERROR, detail=str(e))

        text = extract_text(data)
        self.status.log(f"openai_vision: -> {text[:80]!r}")
        return text


def extract_text(data) -> str:
    """First answer at choices[0].message.content, or the fallback text."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return errors.NO_DESCRIPTION
    if isinstance(content, str) and content.strip():
        return content
    return errors.NO_DESCRIPTION
