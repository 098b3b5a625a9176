import json


def sse_event(event_type: str, data: dict | None = None) -> str:
    """Format a Server-Sent Event string."""
    payload = {"type": event_type, **(data or {})}
    return f"data: {json.dumps(payload)}\n\n"


def reasoning_event(delta: str) -> str:
    return sse_event("reasoning", {"content": delta})


def answer_event(content: str) -> str:
    return sse_event("answer", {"content": content})


def structure_event(smiles: str, html: str) -> str:
    return sse_event("structure", {"smiles": smiles, "html": html})


def error_event(message: str) -> str:
    return sse_event("error", {"message": message})


def done_event() -> str:
    """Terminal event. Sent last on success and failure alike."""
    return sse_event("done")
