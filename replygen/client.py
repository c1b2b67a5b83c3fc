import json
import logging
from typing import Any
import httpx
from . import config
from .schema import ReplyRequest

logger = logging.getLogger(__name__)

def normalize_reply(body: Any) -> str:
    """Text bodies pass through untouched; anything else becomes its JSON text."""
    if isinstance(body, str):
        return body
    return json.dumps(body, ensure_ascii=False, separators=(",", ":"))

def _decode(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "json" in content_type.lower():
        # Raises ValueError on a malformed body
        return response.json()
    return response.text

def generate_reply(payload: ReplyRequest) -> Any:
    """
    POSTs the draft to the reply endpoint and returns the decoded body.
    Non-2xx statuses raise httpx.HTTPStatusError, transport problems raise
    other httpx.HTTPError subclasses.
    """
    url = config.ENDPOINT_URL
    with httpx.Client(timeout=config.TIMEOUT_S) as client:
        r = client.post(url, json=payload.model_dump())
        r.raise_for_status()
        logger.debug("Reply endpoint answered %s (%d bytes)", r.status_code, len(r.content))
        return _decode(r)
