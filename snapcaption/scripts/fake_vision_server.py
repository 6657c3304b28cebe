"""
Fake vision endpoint for running the service without an OpenAI account.

Speaks just enough of the chat-completions contract on port 9100.
FAKE_VISION_MODE picks the reply:
  ok       -> choices[0].message.content = FAKE_VISION_TEXT
  empty    -> 200 with no "choices" (client falls back to "No description found.")
  error    -> HTTP 500

Usage:
    python snapcaption/scripts/fake_vision_server.py                          (terminal 1)
    VISION_API_URL=http://127.0.0.1:9100/v1/chat/completions \
    OPENAI_API_KEY=dev uvicorn snapcaption.services.api:app --port 8000      (terminal 2)
"""

import os
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

MODE = os.getenv("FAKE_VISION_MODE", "ok")
TEXT = os.getenv("FAKE_VISION_TEXT", "A cat.")

app = FastAPI(title="fake-vision-server")


@app.post("/v1/chat/completions")
async def chat_completions(request: Request):
    body = await request.json()
    auth = request.headers.get("authorization", "")
    content = body.get("messages", [{}])[0].get("content", [])
    kinds = [part.get("type") for part in content]
    print(f"[vision] model={body.get('model')} parts={kinds} auth={'yes' if auth.startswith('Bearer ') else 'no'} mode={MODE}")

    if not auth.startswith("Bearer "):
        return JSONResponse(status_code=401, content={"error": {"message": "missing bearer token"}})
    if MODE == "error":
        return JSONResponse(status_code=500, content={"error": {"message": "simulated failure"}})
    if MODE == "empty":
        return {"id": "fake", "object": "chat.completion"}
    return {
        "id": "fake",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": TEXT}, "finish_reason": "stop"}],
    }


if __name__ == "__main__":
    print(f"Fake vision server starting on http://localhost:9100 (mode={MODE})")
    uvicorn.run(app, host="0.0.0.0", port=9100)
