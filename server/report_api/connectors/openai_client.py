from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Callable, Dict, Tuple
from openai import OpenAI

from report_api.config import Settings

log = logging.getLogger("openai_client")

ClientFactory = Callable[[Settings], OpenAI]


def build_client(settings: Settings) -> OpenAI:
    """
    Create an SDK client for one invocation. Retries are disabled: a failed
    upstream call is relayed to the caller as-is.
    """
    if not settings.OPENAI_API_KEY:
        raise RuntimeError("OPENAI_API_KEY is not set")
    return OpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL or None,
        max_retries=0,
    )


def create_json_schema_response(
    client: OpenAI,
    model: str,
    input_text: str,
    *,
    schema_name: str,
    schema: Dict[str, Any],
    max_output_tokens: int,
) -> Dict[str, Any]:
    """
    Calls the OpenAI Responses API with a strict json_schema text format.
    Returns the response envelope as a plain dict. ``output_text`` is an SDK
    property, not a field, so it is copied in (None when the SDK found no text).
    """
    log.debug("OpenAI call: model=%s schema=%s max_output_tokens=%d", model, schema_name, max_output_tokens)
    resp = client.responses.create(
        model=model,
        input=input_text,
        max_output_tokens=max_output_tokens,
        text={
            "format": {
                "type": "json_schema",
                "name": schema_name,
                "strict": True,
                "schema": schema,
            }
        },
    )
    data = resp.model_dump()
    data["output_text"] = resp.output_text or None
    return data


# -----------------------------
# Envelope shapes
# -----------------------------
class ResponseShape(str, Enum):
    OUTPUT_TEXT = "output_text"                      # {"output_text": "..."}
    OUTPUT_CONTENT_TYPED = "output_content_typed"    # output[0].content[type=output_text].text
    OUTPUT_CONTENT_FIRST = "output_content_first"    # output[0].content[0].text
    CONTENT_FIRST = "content_first"                  # content[0].text
    UNRECOGNIZED = "unrecognized"


def _first(seq: Any) -> Any:
    if isinstance(seq, list) and seq:
        return seq[0]
    return None


def _text(item: Any) -> Any:
    return item.get("text") if isinstance(item, dict) else None


def _output_content(data: Dict[str, Any]) -> list:
    first = _first(data.get("output"))
    content = first.get("content") if isinstance(first, dict) else None
    return content if isinstance(content, list) else []


def _from_output_text(data):
    return data.get("output_text")


def _from_output_content_typed(data):
    for c in _output_content(data):
        if isinstance(c, dict) and c.get("type") == "output_text":
            return c.get("text")
    return None


def _from_output_content_first(data):
    return _text(_first(_output_content(data)))


def _from_content_first(data):
    return _text(_first(data.get("content")))


# priority order matters
_EXTRACTORS: Tuple[Tuple[ResponseShape, Callable[[Dict[str, Any]], Any]], ...] = (
    (ResponseShape.OUTPUT_TEXT, _from_output_text),
    (ResponseShape.OUTPUT_CONTENT_TYPED, _from_output_content_typed),
    (ResponseShape.OUTPUT_CONTENT_FIRST, _from_output_content_first),
    (ResponseShape.CONTENT_FIRST, _from_content_first),
)


def extract_output_text(data: Any) -> Tuple[ResponseShape, Any]:
    """
    Classify the envelope and return (shape, text). ``text`` is None for
    UNRECOGNIZED; it is not guaranteed to be a str for the other shapes.
    """
    if isinstance(data, dict):
        for shape, extractor in _EXTRACTORS:
            text = extractor(data)
            if text is not None:
                return shape, text
    return ResponseShape.UNRECOGNIZED, None
