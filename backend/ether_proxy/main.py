from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from ether_proxy.browser_pool import browser_pool
from ether_proxy.config import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: warm browser loads in the background, server binds right away
    settings = get_settings()
    if settings.warm_up_enabled:
        try:
            browser_pool.start_warm_up(settings.warm_up_delay)
        except Exception as e:
            print(f"[warm-up] Failed to schedule: {e}")
    else:
        print("[warm-up] Disabled, every request launches its own browser")
    yield
    await browser_pool.shutdown()


app = FastAPI(title="Ether0 Proxy", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class AskRequest(BaseModel):
    question: str | None = None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/")
def root():
    return {"message": "Ether0 Proxy is running"}


@app.get("/health")
async def health():
    return {"status": "ok", "browser": browser_pool.status()}


@app.post("/ask")
async def ask(request: AskRequest | None = None):
    """Ask Ether0 a chemistry question, streaming its reasoning via SSE."""
    from ether_proxy.pipeline import ask_streaming

    raw = request.question if request else None
    if not raw or not raw.strip():
        return JSONResponse(status_code=400, content={"error": "question required"})

    async def event_stream():
        # Ether0 gets the question exactly as typed
        async for event in ask_streaming(raw):
            yield event

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


def run():
    import uvicorn

    settings = get_settings()
    print(f"Ether0 Proxy running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
